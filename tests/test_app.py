"""Tests for the Flask endpoints."""

import pytest

from app import app


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


def test_annotate_text(client):
    response = client.post('/api/v1/annotate_text', json={'text': 'Range: 3'})
    assert response.status_code == 200
    body = response.get_json()
    assert body['tagged'] == '[b]Range[/b][b]:[/b] [b]3[/b]'
    assert body['plain'] == 'Range: 3'


def test_annotate_text_with_extra_bold_phrases(client):
    response = client.post('/api/v1/annotate_text', json={'text': 'Teleport now', 'alsoBold': ['Teleport']})
    assert response.get_json()['tagged'] == '[b]Teleport[/b] now'


@pytest.mark.parametrize("payload", [
    None,
    {'other': 'field'},
    {'text': 42},
    {'text': 'ok', 'alsoBold': 'Teleport'},
    {'text': 'x' * 5001},
])
def test_annotate_text_rejects_bad_payloads(client, payload):
    response = client.post('/api/v1/annotate_text', json=payload)
    assert response.status_code == 400
    assert 'error' in response.get_json()


def test_layout_text(client):
    response = client.post('/api/v1/layout_text', json={
        'text': 'When you buy or gain this card, gain 1 VP.',
        'collisions': [],
    })
    assert response.status_code == 200
    body = response.get_json()
    assert body['fontSize'] > 0
    assert body['tree']['type'] == 'container'
    assert body['highlights'][0]['color'] == '#e1b327'
    assert body['highlights'][0]['width'] == 750


def test_layout_text_rejects_bad_collision(client):
    response = client.post('/api/v1/layout_text', json={
        'text': 'Draw a card.',
        'collisions': [{'shape': 'hexagon', 'x': 1, 'y': 1}],
    })
    assert response.status_code == 400


def test_options_preflight(client):
    assert client.open('/api/v1/layout_text', method='OPTIONS').status_code == 200


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    body = response.get_json()
    assert body['status'] == 'healthy'
    assert body['ruleset']['highlight_rules'] == 2
