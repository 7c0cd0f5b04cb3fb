"""Weak-area reinforcement.

After a warm-up of five answered problems, each slot has a growing chance
(0% -> 35% over the next fifty answers) of being replaced with a problem
aimed at the tag carrying the worst weakness score.
"""
import logging

from config.settings import SESSION_DEFAULTS
from engine.factories import (
    frac_same_denom, integer_add, make_decimal, simple_add, simple_div,
    simple_mul, simple_sub,
)
from engine.performance import clamp
from engine.pools import fractions_unlocked
from engine.problem import Family

logger = logging.getLogger(__name__)


def injection_chance(session_attempts):
    warmup = SESSION_DEFAULTS['weak_warmup_attempts']
    ramp = SESSION_DEFAULTS['weak_ramp_attempts']
    return clamp((session_attempts - warmup) / ramp, 0.0,
                 SESSION_DEFAULTS['weak_max_chance'])


def should_inject(session_attempts, rng):
    """Roll for injection; consumes randomness only once warmed up."""
    if session_attempts < SESSION_DEFAULTS['weak_warmup_attempts']:
        return False
    return rng.random() < injection_chance(session_attempts)


def select_weak_tag(tag_perf):
    """Tag with the single highest weakness score among qualifying tags.

    A tag qualifies with at least three attempts and a weakness score above
    0.35. Returns None when nothing qualifies.
    """
    best_tag, best_score = None, -1.0
    for tag, perf in tag_perf.items():
        if perf.attempts < SESSION_DEFAULTS['weak_min_attempts']:
            continue
        score = perf.weakness_score
        if score <= SESSION_DEFAULTS['weak_threshold']:
            continue
        if score > best_score:
            best_tag, best_score = tag, score
    return best_tag


def build_for_tag(tag, tier, rng, allot, tenure_days):
    """One problem themed on `tag` at `tier`, or None for unmapped tags.

    Fractions fall back to plain addition until fractions unlock.
    """
    if tag == Family.ADDITION.value:
        return simple_add(rng, allot, tier, 10, 49, 1, 19)
    if tag == Family.SUBTRACTION.value:
        return simple_sub(rng, allot, tier, 15, 60, 1, 19)
    if tag == Family.MULTIPLICATION.value:
        return simple_mul(rng, allot, tier, 2, 12, 2, 9)
    if tag == Family.DIVISION.value:
        return simple_div(rng, allot, tier, 2, 10, 2, 9)
    if tag == Family.INTEGERS.value:
        return integer_add(rng, allot, tier)
    if tag == Family.DECIMALS.value:
        return make_decimal(rng, allot, tier)
    if tag == Family.FRACTIONS.value:
        if fractions_unlocked(tenure_days):
            return frac_same_denom(rng, allot, tier)
        return simple_add(rng, allot, tier, 10, 49, 1, 19)
    return None


def try_weak_problem(tag_perf, tier, rng, allot, tenure_days, block_fractions):
    """Build a reinforcement problem, or None to fall through to the pool."""
    tag = select_weak_tag(tag_perf)
    if tag is None:
        return None
    if tag == Family.FRACTIONS.value and block_fractions:
        logger.debug('Weak tag %s skipped: fraction cap active', tag)
        return None
    return build_for_tag(tag, tier, rng, allot, tenure_days)
