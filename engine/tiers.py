"""Tier selection for a problem slot.

  effective = clamp01(index/total + 0.3 * (aptitude - 5)/10
                      + 0.4 * clamp01(tenure/30)
                      + 0.25 * (session_accuracy - 0.7)
                      + 0.15 * tier_modifier)

Thresholds: < 0.25 VeryEasy, < 0.50 Easy, < 0.78 Medium, else Hard.
Medium unlocks at day 3 and Hard at day 7; locked tiers fall back to the
highest unlocked one.
"""
import logging
from collections import deque

from config.settings import SESSION_DEFAULTS
from engine.performance import clamp01
from engine.problem import Tier

logger = logging.getLogger(__name__)

TIER_THRESHOLDS = (
    (0.25, Tier.VERY_EASY),
    (0.50, Tier.EASY),
    (0.78, Tier.MEDIUM),
)


def max_unlocked_tier(tenure_days):
    if tenure_days >= SESSION_DEFAULTS['hard_unlock_day']:
        return Tier.HARD
    if tenure_days >= SESSION_DEFAULTS['medium_unlock_day']:
        return Tier.MEDIUM
    return Tier.EASY


def effective_progress(index, total, tenure_days, aptitude,
                       session_accuracy, tier_modifier):
    progress = index / total if total > 0 else 0.0
    day_boost = clamp01(tenure_days / 30.0) * 0.4
    aptitude_boost = (aptitude - 5) / 10.0
    accuracy_delta = (session_accuracy - 0.7) * 0.25
    streak_delta = tier_modifier * 0.15
    return clamp01(progress + aptitude_boost * 0.3 + day_boost
                   + accuracy_delta + streak_delta)


def tier_for_progress(effective):
    for threshold, tier in TIER_THRESHOLDS:
        if effective < threshold:
            return tier
    return Tier.HARD


def choose_tier(index, total, tenure_days, aptitude,
                session_accuracy=1.0, tier_modifier=0):
    """Pick the tier for slot `index` of `total`, gated by tenure."""
    effective = effective_progress(index, total, tenure_days, aptitude,
                                   session_accuracy, tier_modifier)
    return min(tier_for_progress(effective), max_unlocked_tier(tenure_days))


class TierHistory:
    """Ring of the most recently chosen tiers, enforcing the Hard cap.

    The ring stores the tier as chosen, before any cap downgrade; the cap
    only changes the tier handed back for drawing.
    """

    def __init__(self, window=SESSION_DEFAULTS['history_window'],
                 hard_cap=SESSION_DEFAULTS['hard_cap']):
        self.hard_cap = hard_cap
        self._recent = deque(maxlen=window)

    def push(self, tier):
        self._recent.append(tier)
        if tier == Tier.HARD and self.count(Tier.HARD) >= self.hard_cap:
            logger.debug('Hard cap: %d of last %d were Hard, using Medium',
                         self.count(Tier.HARD), len(self._recent))
            return Tier.MEDIUM
        return tier

    def count(self, tier):
        return sum(1 for t in self._recent if t == tier)

    def clear(self):
        self._recent.clear()

    def __len__(self):
        return len(self._recent)
