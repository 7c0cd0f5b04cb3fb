"""Tests for engine/tally.py — end-of-session tally."""
from engine.tally import SessionTally


def test_empty_tally():
    tally = SessionTally()
    assert tally.total == 0
    assert tally.most_missed_tag() == ''
    assert tally.aptitude_estimate() == 5


def test_counts():
    tally = SessionTally()
    tally.record(True, ['Addition'])
    tally.record(False, ['Division', 'division_basic'])
    tally.record(False, ['Addition'], skipped=True)
    assert (tally.correct, tally.wrong, tally.skipped) == (1, 1, 1)
    assert tally.total == 3


def test_wrong_answers_tally_every_tag():
    tally = SessionTally()
    tally.record(False, ['Division', 'division_basic'])
    assert tally.missed_tags == {'Division': 1, 'division_basic': 1}


def test_skips_do_not_count_as_missed_tags():
    tally = SessionTally()
    tally.record(False, ['Fractions'], skipped=True)
    assert tally.missed_tags == {}


def test_most_missed_tag():
    tally = SessionTally()
    tally.record(False, ['Addition'])
    tally.record(False, ['Division'])
    tally.record(False, ['Division'])
    assert tally.most_missed_tag() == 'Division'


def test_most_missed_tie_keeps_first():
    tally = SessionTally()
    tally.record(False, ['Subtraction'])
    tally.record(False, ['Addition'])
    assert tally.most_missed_tag() == 'Subtraction'


def test_aptitude_estimate():
    tally = SessionTally()
    for _ in range(8):
        tally.record(True)
    for _ in range(2):
        tally.record(False)
    assert tally.aptitude_estimate() == 8


def test_aptitude_estimate_floor_and_ceiling():
    low = SessionTally()
    low.record(False)
    assert low.aptitude_estimate() == 1

    high = SessionTally()
    high.record(True)
    assert high.aptitude_estimate() == 10


def test_to_dict():
    tally = SessionTally()
    tally.record(False, ['Addition'])
    assert tally.to_dict() == {
        'correct': 0, 'wrong': 1, 'skipped': 0,
        'missed_tags': {'Addition': 1},
    }
