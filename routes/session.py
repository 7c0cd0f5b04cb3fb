"""Session routes — JSON API over the practice engine."""
import logging

from flask import Blueprint, jsonify, request

from config.settings import SESSION_DEFAULTS
from services import session_service

logger = logging.getLogger(__name__)
session_bp = Blueprint('session', __name__)


def _bad_request(message):
    return jsonify({'error': message}), 400


def _not_found(session_id):
    return jsonify({'error': f'Unknown session: {session_id}'}), 404


def _number(data, key, default=None):
    """Read a non-negative number from the body; None if invalid."""
    value = data.get(key, default)
    if isinstance(value, bool):
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return value if value >= 0 else None


@session_bp.route('/start', methods=['POST'])
def start():
    data = request.get_json(silent=True) or {}
    try:
        tenure_days = int(data.get('tenure_days', 0))
        aptitude = int(data.get('aptitude', 5))
    except (TypeError, ValueError, OverflowError):
        return _bad_request('tenure_days and aptitude must be integers')
    topic = data.get('topic')
    if topic is not None and not isinstance(topic, str):
        return _bad_request('topic must be a string')

    session_id = session_service.start(tenure_days, aptitude, topic=topic)
    return jsonify({'session_id': session_id}), 201


@session_bp.route('/<session_id>/generate', methods=['POST'])
def generate(session_id):
    live = session_service.get(session_id)
    if live is None:
        return _not_found(session_id)
    data = request.get_json(silent=True) or {}
    try:
        count = int(data.get('count', SESSION_DEFAULTS['question_count']))
    except (TypeError, ValueError, OverflowError):
        return _bad_request('count must be an integer')
    return jsonify({'problems': session_service.generate(live, count)})


@session_bp.route('/<session_id>/answer', methods=['POST'])
def answer(session_id):
    live = session_service.get(session_id)
    if live is None:
        return _not_found(session_id)
    data = request.get_json(silent=True) or {}

    tags = data.get('tags')
    if not isinstance(tags, list) or not tags or not all(isinstance(t, str) for t in tags):
        return _bad_request('tags must be a non-empty list of strings')

    allotted = _number(data, 'allotted')
    if allotted is None:
        return _bad_request('allotted must be a non-negative number')
    skipped = bool(data.get('skipped', False))
    elapsed = _number(data, 'elapsed', allotted if skipped else None)
    if elapsed is None:
        return _bad_request('elapsed must be a non-negative number')

    correct = data.get('correct')
    if not skipped and correct is None and 'answer' not in data:
        return _bad_request('provide correct, answer + expected, or skipped')
    if correct is not None and not isinstance(correct, bool):
        return _bad_request('correct must be a boolean')

    result = session_service.record(
        live, tags, elapsed, allotted, correct=correct,
        answer=data.get('answer'), expected=data.get('expected'),
        skipped=skipped,
    )
    return jsonify(result)


@session_bp.route('/<session_id>/topic', methods=['POST'])
def set_topic(session_id):
    live = session_service.get(session_id)
    if live is None:
        return _not_found(session_id)
    data = request.get_json(silent=True) or {}
    card = data.get('card')
    if not isinstance(card, str) or not card.strip():
        return _bad_request('card must be a non-empty string')
    with live.lock:
        live.engine.set_practice_topic(card)
        topic = live.engine.practice_topic
    return jsonify({'topic': topic})


@session_bp.route('/<session_id>/topic', methods=['DELETE'])
def clear_topic(session_id):
    live = session_service.get(session_id)
    if live is None:
        return _not_found(session_id)
    with live.lock:
        live.engine.clear_practice_topic()
    return jsonify({'topic': ''})


@session_bp.route('/<session_id>/report')
def report(session_id):
    live = session_service.get(session_id)
    if live is None:
        return _not_found(session_id)
    return jsonify(session_service.report(live))


@session_bp.route('/<session_id>', methods=['DELETE'])
def end(session_id):
    if not session_service.end(session_id):
        return _not_found(session_id)
    return '', 204
