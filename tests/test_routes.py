"""Tests for the JSON session API and app-level error handling."""
import random

import pytest

from services import session_service


def _start(client, **body):
    resp = client.post('/session/start', json=body or {'tenure_days': 10, 'aptitude': 5})
    assert resp.status_code == 201
    return resp.get_json()['session_id']


@pytest.fixture
def session_id(client):
    return _start(client)


# === app ===

def test_health(client):
    resp = client.get('/health')
    assert resp.status_code == 200
    assert resp.get_json() == {'status': 'ok'}


def test_unknown_route_is_json_404(client):
    resp = client.get('/nowhere')
    assert resp.status_code == 404
    assert 'error' in resp.get_json()


def test_error_handler_hides_details(app):
    """Unhandled errors return a generic body without exception details."""
    @app.route('/test-500')
    def crash():
        raise ValueError('secret token xyz123')

    with app.test_client() as c:
        resp = c.get('/test-500')
        assert resp.status_code == 500
        body = resp.data.decode()
        assert 'xyz123' not in body
        assert 'Internal Server Error' in body


# === start / generate ===

def test_start_registers_session(client):
    sid = _start(client, tenure_days=3, aptitude=7)
    live = session_service.get(sid)
    assert live.engine.tenure_days == 3
    assert live.engine.aptitude == 7


def test_start_rejects_non_integer(client):
    resp = client.post('/session/start', json={'tenure_days': 'ten'})
    assert resp.status_code == 400


def test_start_with_topic(client):
    sid = _start(client, tenure_days=1, aptitude=5, topic='Table of 4\n4 × 1 = 4')
    resp = client.post(f'/session/{sid}/generate', json={'count': 5})
    for problem in resp.get_json()['problems']:
        assert 'table_4' in problem['tags']


def test_generate_default_count(client, session_id):
    resp = client.post(f'/session/{session_id}/generate')
    assert resp.status_code == 200
    problems = resp.get_json()['problems']
    assert len(problems) == 20
    first = problems[0]
    for key in ('display', 'answer', 'difficulty', 'difficulty_score', 'tags',
                'time_allotted', 'is_fraction'):
        assert key in first


def test_generate_zero(client, session_id):
    resp = client.post(f'/session/{session_id}/generate', json={'count': 0})
    assert resp.get_json()['problems'] == []


def test_generate_bad_count(client, session_id):
    resp = client.post(f'/session/{session_id}/generate', json={'count': 'many'})
    assert resp.status_code == 400


def test_generate_unknown_session(client):
    resp = client.post('/session/nope/generate', json={'count': 3})
    assert resp.status_code == 404


# === answers ===

def test_answer_with_correct_flag(client, session_id):
    resp = client.post(f'/session/{session_id}/answer', json={
        'tags': ['Addition', 'multi_digit_addition_with_carry'], 'correct': True,
        'elapsed': 1.0, 'allotted': 4.0,
    })
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['is_correct'] is True
    assert data['session_accuracy'] == 1.0


def test_answer_graded_server_side(client, session_id):
    resp = client.post(f'/session/{session_id}/answer', json={
        'tags': ['Fractions'], 'answer': '3/4', 'expected': 0.75,
        'elapsed': 5.0, 'allotted': 6.0,
    })
    assert resp.get_json()['is_correct'] is True


def test_answer_close(client, session_id):
    resp = client.post(f'/session/{session_id}/answer', json={
        'tags': ['Multiplication'], 'answer': '199', 'expected': 200,
        'elapsed': 5.0, 'allotted': 6.0,
    })
    data = resp.get_json()
    assert data['is_correct'] is False
    assert data['is_close'] is True


def test_skip_counts_as_wrong_full_time(client, session_id):
    resp = client.post(f'/session/{session_id}/answer', json={
        'tags': ['Division'], 'skipped': True, 'allotted': 6.0,
    })
    assert resp.get_json()['is_correct'] is False
    live = session_service.get(session_id)
    assert live.tally.skipped == 1
    assert live.engine.tag_perf['Division'].avg_time_ratio == 1.0


def test_three_wrong_lowers_modifier(client, session_id):
    for _ in range(3):
        resp = client.post(f'/session/{session_id}/answer', json={
            'tags': ['Division'], 'correct': False,
            'elapsed': 6.0, 'allotted': 6.0,
        })
    assert resp.get_json()['tier_modifier'] == -1


@pytest.mark.parametrize('body', [
    {'correct': True, 'elapsed': 1.0, 'allotted': 4.0},
    {'tags': [], 'correct': True, 'elapsed': 1.0, 'allotted': 4.0},
    {'tags': 'Addition', 'correct': True, 'elapsed': 1.0, 'allotted': 4.0},
    {'tags': ['Addition'], 'correct': True, 'elapsed': 1.0},
    {'tags': ['Addition'], 'correct': True, 'elapsed': -1, 'allotted': 4.0},
    {'tags': ['Addition'], 'correct': 'yes', 'elapsed': 1.0, 'allotted': 4.0},
    {'tags': ['Addition'], 'elapsed': 1.0, 'allotted': 4.0},
])
def test_answer_validation(client, session_id, body):
    resp = client.post(f'/session/{session_id}/answer', json=body)
    assert resp.status_code == 400
    assert 'error' in resp.get_json()


def test_answer_unknown_session(client):
    resp = client.post('/session/nope/answer', json={
        'tags': ['Addition'], 'correct': True, 'elapsed': 1.0, 'allotted': 4.0,
    })
    assert resp.status_code == 404


# === topic ===

def test_set_and_clear_topic(client, session_id):
    resp = client.post(f'/session/{session_id}/topic',
                       json={'card': 'Squares 11–20\n11² = 121'})
    assert resp.get_json() == {'topic': 'SQUARES 11–20'}

    problems = client.post(f'/session/{session_id}/generate',
                           json={'count': 10}).get_json()['problems']
    assert all('squares' in p['tags'] for p in problems)

    resp = client.delete(f'/session/{session_id}/topic')
    assert resp.get_json() == {'topic': ''}
    assert session_service.get(session_id).engine.practice_topic == ''


def test_topic_requires_card(client, session_id):
    resp = client.post(f'/session/{session_id}/topic', json={'card': '  '})
    assert resp.status_code == 400


# === report / end ===

def test_report(client, session_id):
    client.post(f'/session/{session_id}/answer', json={
        'tags': ['Addition'], 'correct': True, 'elapsed': 1.0, 'allotted': 4.0,
    })
    client.post(f'/session/{session_id}/answer', json={
        'tags': ['Division', 'division_basic'], 'correct': False,
        'elapsed': 6.0, 'allotted': 6.0,
    })
    data = client.get(f'/session/{session_id}/report').get_json()
    assert data['weakest_tag'] == 'Division'
    assert data['most_missed_tag'] == 'Division'
    assert data['tally'] == {'correct': 1, 'wrong': 1, 'skipped': 0,
                             'missed_tags': {'Division': 1, 'division_basic': 1}}
    assert data['type_stats']['Addition']['attempts'] == 1
    assert data['aptitude_estimate'] == 5


def test_report_before_answers(client, session_id):
    data = client.get(f'/session/{session_id}/report').get_json()
    assert data['weakest_tag'] == ''
    assert data['type_stats'] == {}


def test_end_session(client, session_id):
    assert client.delete(f'/session/{session_id}').status_code == 204
    assert session_service.get(session_id) is None
    assert client.delete(f'/session/{session_id}').status_code == 404


def test_service_start_with_seeded_rng():
    a = session_service.start(10, 5, rng=random.Random(3))
    b = session_service.start(10, 5, rng=random.Random(3))
    first = session_service.generate(session_service.get(a), 10)
    second = session_service.generate(session_service.get(b), 10)
    assert [p['display'] for p in first] == [p['display'] for p in second]


@pytest.mark.parametrize('body', [
    {'tenure_days': 5, 'aptitude': 5, 'topic': 7},
    {'tenure_days': 5, 'aptitude': 5, 'topic': ['Table of 3']},
])
def test_start_rejects_non_string_topic(client, body):
    resp = client.post('/session/start', json=body)
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'topic must be a string'}


def test_start_rejects_huge_numbers(client):
    resp = client.post('/session/start', data='{"tenure_days": 1e400, "aptitude": 5}',
                       content_type='application/json')
    assert resp.status_code == 400
    assert 'error' in resp.get_json()


def test_generate_rejects_huge_count(client, session_id):
    resp = client.post(f'/session/{session_id}/generate', data='{"count": 1e400}',
                       content_type='application/json')
    assert resp.status_code == 400
