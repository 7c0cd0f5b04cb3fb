"""Weighted per-tier factory pools and the capped draw.

Weights are expressed by repetition: an entry listed three times is drawn
three times as often as one listed once. Fraction entries join the Easy,
Medium and Hard pools once the learner reaches the fraction unlock day.
"""
import logging

from config.settings import SESSION_DEFAULTS
from engine.factories import FRACTION_KINDS, FactoryKind as K, build, pool_entry
from engine.problem import Tier

logger = logging.getLogger(__name__)


def _repeat(n, entry):
    return [entry] * n


def _very_easy_pool(tenure_days):
    return (_repeat(3, pool_entry(K.ADD, 1, 9, 1, 9))
            + _repeat(2, pool_entry(K.SUB, 2, 9, 1, 8))
            + _repeat(2, pool_entry(K.MUL, 2, 5, 1, 5))
            + [pool_entry(K.DIV, 1, 4, 2, 5)])


def _easy_pool(tenure_days):
    pool = (_repeat(3, pool_entry(K.ADD, 10, 49, 1, 19))
            + _repeat(2, pool_entry(K.SUB, 15, 60, 1, 19))
            + _repeat(2, pool_entry(K.MUL, 2, 9, 2, 6))
            + [pool_entry(K.DIV, 2, 9, 2, 9)])
    if fractions_unlocked(tenure_days):
        pool += _repeat(2, pool_entry(K.FRAC_SAME))
    return pool


def _medium_pool(tenure_days):
    pool = (_repeat(2, pool_entry(K.ADD, 20, 79, 10, 49))
            + _repeat(2, pool_entry(K.SUB, 30, 89, 10, 39))
            + _repeat(2, pool_entry(K.MUL, 6, 15, 6, 9))
            + [pool_entry(K.DIV, 6, 15, 3, 9)])
    if fractions_unlocked(tenure_days):
        pool += _repeat(2, pool_entry(K.FRAC_SAME)) + [pool_entry(K.FRAC_DIFF)]
    return pool


def _hard_pool(tenure_days):
    pool = (_repeat(2, pool_entry(K.ADD, 25, 99, 25, 74))
            + _repeat(2, pool_entry(K.SUB, 35, 99, 15, 59))
            + _repeat(2, pool_entry(K.MUL, 12, 24, 6, 9))
            + [pool_entry(K.DIV, 8, 19, 6, 9),
               pool_entry(K.INT_ADD),
               pool_entry(K.INT_SUB),
               pool_entry(K.CROSSES_ZERO),
               pool_entry(K.NEGATIVE_OPERAND),
               pool_entry(K.DECIMAL)])
    if fractions_unlocked(tenure_days):
        pool += _repeat(2, pool_entry(K.FRAC_DIFF)) + [pool_entry(K.FRAC_MUL)]
    return pool


_POOL_BUILDERS = {
    Tier.VERY_EASY: _very_easy_pool,
    Tier.EASY: _easy_pool,
    Tier.MEDIUM: _medium_pool,
    Tier.HARD: _hard_pool,
}


def fractions_unlocked(tenure_days):
    return tenure_days >= SESSION_DEFAULTS['fraction_unlock_day']


def build_pools(tenure_days):
    """Return {Tier: tuple of PoolEntry} for a learner's tenure."""
    return {tier: tuple(builder(tenure_days))
            for tier, builder in _POOL_BUILDERS.items()}


def fraction_cap_active(fraction_count, total_generated,
                        cap=SESSION_DEFAULTS['fraction_cap']):
    """True once fractions make up `cap` or more of everything generated."""
    return total_generated > 0 and fraction_count / total_generated >= cap


def draw(pool, tier, rng, allot, block_fractions=False,
         max_draws=SESSION_DEFAULTS['fraction_retries']):
    """Draw uniformly from `pool`, redrawing fractions while they are capped.

    After `max_draws` picks the last one is accepted even if it is a
    fraction.
    """
    entry = rng.choice(pool)
    draws = 1
    while block_fractions and entry.kind in FRACTION_KINDS and draws < max_draws:
        entry = rng.choice(pool)
        draws += 1
    if block_fractions and entry.kind in FRACTION_KINDS:
        logger.debug('Fraction cap: accepting fraction after %d draws', draws)
    return build(entry, rng, allot, tier)
