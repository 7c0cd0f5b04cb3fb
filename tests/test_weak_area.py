"""Tests for engine/weak_area.py — weak-tag reinforcement."""
import random

from engine.performance import TagPerformance
from engine.problem import Family, Tier
from engine.weak_area import (
    build_for_tag, injection_chance, select_weak_tag, should_inject,
    try_weak_problem,
)


def _perf(attempts, correct, ratio=0.5):
    perf = TagPerformance()
    perf.attempts = attempts
    perf.correct = correct
    perf.correct_count = correct
    perf.avg_time_ratio = ratio
    return perf


class _NeverCalled:
    def random(self):
        raise AssertionError('rng consumed before warm-up')


# === injection chance ===

def test_chance_ramp():
    assert injection_chance(0) == 0.0
    assert injection_chance(5) == 0.0
    assert abs(injection_chance(15) - 0.2) < 1e-9
    assert injection_chance(22) == 0.34
    assert injection_chance(30) == 0.35
    assert injection_chance(500) == 0.35


def test_no_roll_before_warmup():
    assert should_inject(4, _NeverCalled()) is False


def test_roll_after_warmup():
    r = random.Random(0)
    hits = sum(should_inject(60, r) for _ in range(2000))
    assert 550 < hits < 850  # ~35%


# === tag selection ===

def test_select_none_without_data():
    assert select_weak_tag({}) is None


def test_select_requires_three_attempts():
    assert select_weak_tag({'Division': _perf(2, 0)}) is None


def test_select_requires_threshold():
    # accuracy 0.6 -> 0.28 weakness, below 0.35
    assert select_weak_tag({'Division': _perf(5, 3)}) is None


def test_select_highest_weakness():
    tag_perf = {
        'Addition': _perf(5, 2),        # 0.42
        'Division': _perf(5, 0),        # 0.70
        'Subtraction': _perf(5, 1),     # 0.56
    }
    assert select_weak_tag(tag_perf) == 'Division'


# === building ===

def test_build_for_each_family(rng, static_allot):
    for family in (Family.ADDITION, Family.SUBTRACTION, Family.MULTIPLICATION,
                   Family.DIVISION, Family.INTEGERS, Family.DECIMALS,
                   Family.FRACTIONS):
        p = build_for_tag(family.value, Tier.MEDIUM, rng, static_allot, 10)
        assert p.primary_tag == family.value
        assert p.difficulty == Tier.MEDIUM


def test_fraction_falls_back_to_addition_early(rng, static_allot):
    p = build_for_tag(Family.FRACTIONS.value, Tier.EASY, rng, static_allot, 2)
    assert p.primary_tag == Family.ADDITION.value


def test_unmapped_tag_returns_none(rng, static_allot):
    assert build_for_tag('borrowing_required', Tier.EASY, rng, static_allot, 10) is None


def test_try_skips_fractions_when_capped(rng, static_allot):
    tag_perf = {Family.FRACTIONS.value: _perf(5, 0)}
    assert try_weak_problem(tag_perf, Tier.HARD, rng, static_allot, 10,
                            block_fractions=True) is None
    p = try_weak_problem(tag_perf, Tier.HARD, rng, static_allot, 10,
                         block_fractions=False)
    assert p.primary_tag == Family.FRACTIONS.value


def test_try_skips_when_nothing_qualifies(rng, static_allot):
    tag_perf = {'Addition': _perf(10, 10)}
    assert try_weak_problem(tag_perf, Tier.EASY, rng, static_allot, 10,
                            block_fractions=False) is None
