"""
Positioned text nodes produced by the layout engine.

A laid-out block is a tree of two node kinds: TextRun (a run of characters
sharing one style) and TextContainer (a positioned group of nodes). Node
positions are relative to the parent container. Nodes and styles are
immutable; restyling a run builds a new tree.
"""

from typing import Any, Callable, Dict, Iterator, NamedTuple, Tuple, Union


class TextStyle(NamedTuple):
    font_size: int
    bold: bool = False
    italic: bool = False
    fill: str = '#000000'


class TextRun(NamedTuple):
    text: str
    x: float
    y: float
    width: float
    height: float
    style: TextStyle


class TextContainer(NamedTuple):
    x: float
    y: float
    children: Tuple['TextNode', ...]


TextNode = Union[TextRun, TextContainer]
NodePath = Tuple[int, ...]


def iter_runs(node: TextNode, origin_x: float = 0.0, origin_y: float = 0.0,
              path: NodePath = ()) -> Iterator[Tuple[NodePath, TextRun, float, float]]:
    """
    Walk a node tree depth first.

    Yields:
        (path, run, absolute_x, absolute_y) for every TextRun
    """
    if isinstance(node, TextRun):
        yield path, node, origin_x + node.x, origin_y + node.y
    elif isinstance(node, TextContainer):
        for index, child in enumerate(node.children):
            yield from iter_runs(child, origin_x + node.x, origin_y + node.y, path + (index,))
    else:
        raise TypeError(f"Not a text node: {type(node).__name__}")


def map_runs(node: TextNode, transform: Callable[[NodePath, TextRun], TextRun],
             path: NodePath = ()) -> TextNode:
    """Rebuild the tree, passing every run through `transform`."""
    if isinstance(node, TextRun):
        return transform(path, node)
    if isinstance(node, TextContainer):
        return node._replace(children=tuple(
            map_runs(child, transform, path + (index,))
            for index, child in enumerate(node.children)
        ))
    raise TypeError(f"Not a text node: {type(node).__name__}")


def replace_run_styles(node: TextNode, styles: Dict[NodePath, TextStyle]) -> TextNode:
    """Return a new tree where each run at a path in `styles` carries the given style."""
    if not styles:
        return node
    return map_runs(node, lambda path, run: run._replace(style=styles[path]) if path in styles else run)


def node_to_dict(node: TextNode) -> Dict[str, Any]:
    """JSON-ready form of a node tree."""
    if isinstance(node, TextRun):
        return {
            'type': 'run',
            'text': node.text,
            'x': round(node.x, 2),
            'y': round(node.y, 2),
            'width': round(node.width, 2),
            'height': round(node.height, 2),
            'fontSize': node.style.font_size,
            'bold': node.style.bold,
            'italic': node.style.italic,
            'fill': node.style.fill,
        }
    if isinstance(node, TextContainer):
        return {
            'type': 'container',
            'x': round(node.x, 2),
            'y': round(node.y, 2),
            'children': [node_to_dict(child) for child in node.children],
        }
    raise TypeError(f"Not a text node: {type(node).__name__}")
