# Import all configuration constants
from config import MAX_TEXT_LENGTH, SERVER_HOST, SERVER_PORT

# Import rules text processing
from card_text_pipeline import annotate_and_layout, get_default_ruleset, text_box_for_card
from rules_text_processor import annotate_rules_text
from text_layout.text_nodes import TextStyle, node_to_dict
from text_processing.markup import strip_markup, to_tagged

from flask import Flask, request, jsonify
from flask_cors import CORS
import traceback

app = Flask(__name__)
CORS(app,
     origins=["*"],
     methods=["GET", "POST", "OPTIONS"],
     allow_headers=["Content-Type", "Authorization", "Accept", "Cache-Control"],
     max_age=86400,  # Cache preflight for 24 hours
     supports_credentials=False)


def _read_text_payload():
    """
    Pull the JSON body and rules text out of the request.

    Returns:
        (data, text, error_response) where error_response is None on success
    """
    data = request.get_json(silent=True)
    if not data:
        print("ERROR: No JSON data provided")
        return None, None, (jsonify({'error': 'No JSON data provided'}), 400)

    text = data.get('text', data.get('description'))
    if text is None:
        return None, None, (jsonify({'error': 'No text provided'}), 400)
    if not isinstance(text, str):
        return None, None, (jsonify({'error': 'Text must be a string'}), 400)
    if len(text) > MAX_TEXT_LENGTH:
        return None, None, (jsonify({'error': f'Text longer than {MAX_TEXT_LENGTH} characters'}), 400)

    also_bold = data.get('alsoBold') or []
    if not isinstance(also_bold, list) or not all(isinstance(p, str) for p in also_bold):
        return None, None, (jsonify({'error': 'alsoBold must be a list of strings'}), 400)
    data['alsoBold'] = also_bold
    return data, text, None


@app.route('/api/v1/annotate_text', methods=['POST', 'OPTIONS'])
def annotate_text():
    """
    Annotate rules text with bold/italic markup without laying it out
    """
    # Handle OPTIONS request for CORS preflight
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'})

    try:
        data, text, error = _read_text_payload()
        if error:
            return error

        markup = annotate_rules_text(text, ruleset=get_default_ruleset(), bold_phrases=data['alsoBold'])
        return jsonify({
            'markup': markup,
            'tagged': to_tagged(markup),
            'plain': strip_markup(markup),
        })

    except Exception as e:
        print(f"❌ Error annotating rules text: {e}")
        traceback.print_exc()
        return jsonify({'error': f'Annotation failed: {str(e)}'}), 500


@app.route('/api/v1/layout_text', methods=['POST', 'OPTIONS'])
def layout_text():
    """
    Annotate, auto-fit and highlight rules text; returns the positioned text tree
    """
    # Handle OPTIONS request for CORS preflight
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'})

    try:
        data, text, error = _read_text_payload()
        if error:
            return error

        oversized = bool(data.get('oversized', False))
        box, collisions, card_width = text_box_for_card(oversized)
        for key in ('x', 'y', 'width', 'height'):
            if key in data:
                box[key] = data[key]
        if 'collisions' in data:
            collisions = data['collisions'] or []

        fill = data.get('fill') or '#000000'
        preferred = data.get('preferredTextSize') or 0

        print(f"📝 Layout request: {len(text)} chars, box {box['width']}x{box['height']}, "
              f"{len(collisions)} collision shape(s)")

        block = annotate_and_layout(
            text,
            style=TextStyle(font_size=0, fill=fill),
            box=box,
            collision_shapes=collisions,
            bold_phrases=data['alsoBold'],
            preferred_font_size=int(preferred),
            body_width=card_width,
            align=data.get('align', 'left'),
            oversized=oversized,
        )

        return jsonify({
            'fontSize': block.font_size,
            'fits': block.fits,
            'tagged': to_tagged(block.markup),
            'box': box,
            'tree': node_to_dict(block.tree),
            'highlights': [span.to_dict() for span in block.highlights],
        })

    except (ValueError, TypeError) as e:
        print(f"ERROR: Invalid layout request: {e}")
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        print(f"❌ Error laying out rules text: {e}")
        traceback.print_exc()
        return jsonify({'error': f'Layout failed: {str(e)}'}), 500


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint - always returns 200 to indicate server is running"""
    ruleset = get_default_ruleset()
    return jsonify({
        'status': 'healthy',
        'ruleset': {
            'keywords': len(ruleset.bold_keywords),
            'highlight_rules': len(ruleset.highlight_rules),
        },
        'message': 'Server is running'
    })


if __name__ == '__main__':
    print("[STARTUP] Starting Flask rules text server...")
    print("Available endpoints:")
    print("  POST /api/v1/annotate_text - Bold/italic markup for rules text")
    print("  POST /api/v1/layout_text - Annotated, auto-fitted and highlighted text tree")
    print("  GET  /health - Health check")
    app.run(debug=False, host=SERVER_HOST, port=SERVER_PORT)
