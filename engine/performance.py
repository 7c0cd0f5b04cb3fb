"""Per-tag online statistics.

TagPerformance feeds generation (weak-area targeting and dynamic timing).
TypeStats is report-only and never influences generation.

Smoothing:
  time-ratio EMA:    alpha = 1.0 on the first attempt, 0.3 after
  correct-time EMA:  alpha = 1.0 on the first correct sample, 0.35 after
  weakness = clamp01(0.7 * (1 - accuracy) + 0.3 * clamp01(ratio_avg - 0.5))
"""
from config.settings import TIMING_DEFAULTS

RATIO_CEILING = 1.5
RATIO_ALPHA = 0.3
SOLVE_TIME_ALPHA = 0.35


def clamp(value, low, high):
    return max(low, min(high, value))


def clamp01(value):
    return clamp(value, 0.0, 1.0)


def lerp(a, b, t):
    """Linear interpolation with t clamped to [0, 1]."""
    return a + (b - a) * clamp01(t)


class TagPerformance:
    """Running accuracy and speed for one operation tag."""

    def __init__(self):
        self.attempts = 0
        self.correct = 0
        self.correct_count = 0
        self.avg_correct_solve_time = 0.0
        self.avg_time_ratio = 0.0

    @property
    def accuracy(self):
        if self.attempts == 0:
            return 1.0
        return self.correct / self.attempts

    @property
    def has_trusted_time(self):
        return self.correct_count >= TIMING_DEFAULTS['trusted_samples']

    @property
    def weakness_score(self):
        if self.attempts == 0:
            return 0.0
        accuracy_penalty = 1.0 - self.accuracy
        speed_penalty = clamp01(self.avg_time_ratio - 0.5)
        return clamp01(accuracy_penalty * 0.7 + speed_penalty * 0.3)

    def record(self, was_correct, elapsed, allotted):
        self.attempts += 1
        if was_correct:
            self.correct += 1

        ratio = clamp(elapsed / allotted, 0.0, RATIO_CEILING) if allotted > 0 else 1.0
        alpha = 1.0 if self.attempts == 1 else RATIO_ALPHA
        self.avg_time_ratio = lerp(self.avg_time_ratio, ratio, alpha)

        if was_correct:
            self.correct_count += 1
            alpha = 1.0 if self.correct_count == 1 else SOLVE_TIME_ALPHA
            self.avg_correct_solve_time = lerp(
                self.avg_correct_solve_time, elapsed, alpha)

    def __repr__(self):
        return (f'TagPerformance(attempts={self.attempts}, correct={self.correct}, '
                f'ratio={self.avg_time_ratio:.2f}, '
                f'solve={self.avg_correct_solve_time:.2f})')


class TypeStats:
    """Additive per-family counters for the end-of-session report."""

    def __init__(self):
        self.attempts = 0
        self.correct = 0
        self.total_solve_time = 0.0

    @property
    def accuracy(self):
        return self.correct / self.attempts if self.attempts else 0.0

    @property
    def avg_solve_time(self):
        return self.total_solve_time / self.attempts if self.attempts else 0.0

    def record(self, was_correct, elapsed):
        self.attempts += 1
        if was_correct:
            self.correct += 1
        self.total_solve_time += elapsed

    def to_dict(self):
        return {
            'attempts': self.attempts,
            'correct': self.correct,
            'total_solve_time': round(self.total_solve_time, 3),
            'accuracy': round(self.accuracy, 3),
            'avg_solve_time': round(self.avg_solve_time, 3),
        }
