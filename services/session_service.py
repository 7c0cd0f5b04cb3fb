"""In-memory registry of live practice sessions.

Sessions live only as long as the process; nothing is persisted.
"""
import logging
import threading
import uuid

from engine.answer_matching import check_answer
from engine.session import PracticeSession
from engine.tally import SessionTally

logger = logging.getLogger(__name__)

_sessions = {}
_sessions_lock = threading.Lock()


class LiveSession:
    """A PracticeSession plus its report tally and a per-session lock."""

    def __init__(self, engine):
        self.engine = engine
        self.tally = SessionTally()
        self.lock = threading.Lock()


def start(tenure_days, aptitude, topic=None, rng=None):
    """Create and register a session. Returns its id."""
    live = LiveSession(PracticeSession(tenure_days, aptitude, rng=rng))
    if topic:
        live.engine.set_practice_topic(topic)
    session_id = str(uuid.uuid4())
    with _sessions_lock:
        _sessions[session_id] = live
    logger.info('Started session %s (tenure=%d, aptitude=%d)', session_id,
                live.engine.tenure_days, live.engine.aptitude)
    return session_id


def get(session_id):
    with _sessions_lock:
        return _sessions.get(session_id)


def end(session_id):
    """Drop a session. Returns True if it existed."""
    with _sessions_lock:
        live = _sessions.pop(session_id, None)
    if live is not None:
        logger.info('Ended session %s after %d answers', session_id,
                    live.tally.total)
    return live is not None


def clear():
    with _sessions_lock:
        _sessions.clear()


def generate(live, count):
    with live.lock:
        return [p.to_dict() for p in live.engine.generate(count)]


def record(live, tags, elapsed, allotted, correct=None, answer=None,
           expected=None, skipped=False):
    """Grade (when needed) and record one answer.

    A skip is recorded as a wrong answer that used the whole allotment.
    Returns dict with is_correct, is_close and the updated pacing state.
    """
    is_close = False
    if skipped:
        is_correct = False
        elapsed = allotted
    elif correct is None:
        is_correct, is_close = check_answer(answer, expected)
    else:
        is_correct = bool(correct)

    with live.lock:
        live.engine.record_answer(tags, is_correct, elapsed, allotted)
        live.tally.record(is_correct, tags, skipped=skipped)
        return {
            'is_correct': is_correct,
            'is_close': is_close,
            'tier_modifier': live.engine.tier_modifier,
            'session_accuracy': round(live.engine.session_accuracy, 3),
        }


def report(live):
    with live.lock:
        return {
            'weakest_tag': live.engine.weakest_tag(),
            'most_missed_tag': live.tally.most_missed_tag(),
            'type_stats': live.engine.get_type_stats(),
            'tally': live.tally.to_dict(),
            'aptitude_estimate': live.tally.aptitude_estimate(),
        }
