"""Practice session — owns all session state and drives generation.

Per slot:
1. Practice topic active -> themed problem, nothing else applies
2. Choose tier from slot progress, tenure, aptitude, accuracy and streaks
3. Push the tier through the history ring (Hard cap may demote to Medium)
4. Maybe replace the draw with a weak-area reinforcement problem
5. Otherwise draw from the tier pool, redrawing capped fractions

record_answer() feeds per-tag statistics and the streak machine; it only
affects batches generated afterwards.
"""
import logging
import math
import random

from config.settings import DEV_DEFAULTS, SESSION_DEFAULTS
from engine import pools, themed, weak_area
from engine.performance import TagPerformance, TypeStats, clamp, lerp
from engine.problem import Family, TRACKED_FAMILIES
from engine.tiers import TierHistory, choose_tier
from engine.timing import TimeAllocator

logger = logging.getLogger(__name__)


def _as_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _as_seconds(value):
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


class PracticeSession:
    """Adaptive problem generator for one timed practice session."""

    def __init__(self, tenure_days=0, aptitude=5, rng=None,
                 user_timing_weight=None, solve_time_buffer=None,
                 dev_override=None):
        self.rng = rng if rng is not None else random.Random()
        self.dev_override = DEV_DEFAULTS if dev_override is None else dev_override
        self.tag_perf = {}
        self.type_stats = {}
        self.allocator = TimeAllocator(self.tag_perf, user_timing_weight,
                                       solve_time_buffer)
        self.practice_topic = ''
        self.initialize(tenure_days, aptitude)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def initialize(self, tenure_days, aptitude):
        """Reset all session state for a learner's tenure and aptitude."""
        if self.dev_override.get('enabled'):
            tenure_days = self.dev_override['tenure_days']
            aptitude = self.dev_override['aptitude']
        self.tenure_days = max(0, _as_int(tenure_days, 0))
        self.aptitude = int(clamp(_as_int(aptitude, 5), 1, 10))

        self.tag_perf.clear()
        self.type_stats.clear()
        self.history = TierHistory()

        self.consecutive_wrong = 0
        self.consecutive_fast = 0
        self.tier_modifier = 0
        self._reset_session_counters()

        self.pools = pools.build_pools(self.tenure_days)
        logger.info('Session initialized — tenure=%d days, aptitude=%d',
                    self.tenure_days, self.aptitude)

    def generate(self, count=SESSION_DEFAULTS['question_count']):
        """Produce `count` problems in slot order."""
        count = _as_int(count, 0)
        if count <= 0:
            return []
        return [self._generate_single(i, count) for i in range(count)]

    def record_answer(self, tags, correct, elapsed, allotted):
        """Fold one answered problem into streaks and statistics."""
        self.session_attempts += 1
        correct = bool(correct)
        elapsed = _as_seconds(elapsed)
        allotted = _as_seconds(allotted)

        if correct:
            self.consecutive_wrong = 0
            was_fast = (allotted > 0
                        and elapsed / allotted < SESSION_DEFAULTS['fast_ratio'])
            self.consecutive_fast = self.consecutive_fast + 1 if was_fast else 0
        else:
            self.consecutive_wrong += 1
            self.consecutive_fast = 0

        if (self.consecutive_fast >= SESSION_DEFAULTS['fast_streak']
                and self.tier_modifier < 1):
            self.tier_modifier += 1
            self.consecutive_fast = 0
            logger.info('Fast streak — tier modifier now %+d', self.tier_modifier)
        if (self.consecutive_wrong >= SESSION_DEFAULTS['wrong_streak']
                and self.tier_modifier > -1):
            self.tier_modifier -= 1
            self.consecutive_wrong = 0
            logger.info('Fail streak — tier modifier now %+d', self.tier_modifier)

        self.session_accuracy = lerp(self.session_accuracy,
                                     1.0 if correct else 0.0,
                                     SESSION_DEFAULTS['accuracy_smoothing'])

        tags = list(tags or [])
        for tag in tags:
            perf = self.tag_perf.get(tag)
            if perf is None:
                perf = self.tag_perf[tag] = TagPerformance()
            perf.record(correct, elapsed, allotted)

        if tags:
            stats = self.type_stats.get(tags[0])
            if stats is None:
                stats = self.type_stats[tags[0]] = TypeStats()
            stats.record(correct, elapsed)

    def weakest_tag(self):
        """Tag with the highest weakness score, or '' before any answers."""
        if not self.tag_perf:
            return ''
        return max(self.tag_perf, key=lambda t: self.tag_perf[t].weakness_score)

    def get_type_stats(self):
        """Report-only per-family counters, keyed by primary tag."""
        return {tag: stats.to_dict() for tag, stats in self.type_stats.items()}

    def set_practice_topic(self, card_content):
        """Theme generation on a reference card until cleared."""
        self.practice_topic = themed.topic_from_card(card_content)
        self._reset_session_counters()
        logger.info("Practice topic set: '%s'", self.practice_topic)

    def clear_practice_topic(self):
        self.practice_topic = ''
        logger.info('Practice topic cleared')

    @property
    def fraction_count(self):
        return self.family_counts[Family.FRACTIONS.value]

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _reset_session_counters(self):
        self.family_counts = {f.value: 0 for f in TRACKED_FAMILIES}
        self.total_generated = 0
        self.session_attempts = 0
        self.session_accuracy = 1.0

    def _generate_single(self, index, total):
        allot = self.allocator.allot

        if self.practice_topic:
            problem = themed.generate_for_topic(self.practice_topic, self.rng, allot)
            self._track(problem)
            logger.debug('slot=%d topic=%s tags=%s', index, self.practice_topic,
                         list(problem.tags))
            return problem

        chosen = choose_tier(index, total, self.tenure_days, self.aptitude,
                             self.session_accuracy, self.tier_modifier)
        tier = self.history.push(chosen)

        block_fractions = pools.fraction_cap_active(self.fraction_count,
                                                    self.total_generated)

        if weak_area.should_inject(self.session_attempts, self.rng):
            problem = weak_area.try_weak_problem(
                self.tag_perf, tier, self.rng, allot, self.tenure_days,
                block_fractions)
            if problem is not None:
                self._track(problem)
                logger.debug('slot=%d WEAK REINFORCEMENT tier=%s diff=%d '
                             'time=%.1fs tags=%s', index, tier.label,
                             problem.difficulty_score, problem.time_allotted,
                             list(problem.tags))
                return problem

        problem = pools.draw(self.pools[tier], tier, self.rng, allot,
                             block_fractions)
        self._track(problem)
        logger.debug('slot=%d tier=%s diff=%d time=%.1fs tags=%s', index,
                     tier.label, problem.difficulty_score,
                     problem.time_allotted, list(problem.tags))
        return problem

    def _track(self, problem):
        primary = problem.primary_tag
        if primary in self.family_counts:
            self.family_counts[primary] += 1
        self.total_generated += 1
