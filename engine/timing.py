"""Dynamic time allocation.

Blends the structural band midpoint for a difficulty score with the
learner's own buffered correct-solve time for the problem's primary tag:

  trust  = clamp01((correct_count - 3) / 7)      once correct_count >= 3
  result = lerp(mid, avg_solve * buffer, weight * trust)

then clamps to [band_min * 0.8, band_max * 1.2], then to [2, 12], and rounds
to the nearest half second.
"""
from config.settings import BASE_TIME_BANDS, TIMING_DEFAULTS, clamp_setting
from engine.performance import clamp, clamp01, lerp


def time_band(score):
    return BASE_TIME_BANDS[int(clamp(score, 1, 5))]


def quantize_half(seconds):
    return round(seconds * 2.0) / 2.0


def trust_level(perf):
    """0 until the tag has trusted timing, ramping to 1 by ten correct samples."""
    if perf is None or not perf.has_trusted_time:
        return 0.0
    floor = TIMING_DEFAULTS['trusted_samples']
    span = TIMING_DEFAULTS['full_trust_samples'] - floor
    return clamp01((perf.correct_count - floor) / span)


def compute_dynamic_time(score, perf=None,
                         user_timing_weight=TIMING_DEFAULTS['user_timing_weight'],
                         solve_time_buffer=TIMING_DEFAULTS['solve_time_buffer']):
    """Allotted seconds for a problem of `score` given the tag's TagPerformance."""
    band_min, band_max = time_band(score)
    static_mid = (band_min + band_max) * 0.5

    user_time = static_mid
    trust = trust_level(perf)
    if perf is not None and perf.has_trusted_time:
        user_time = perf.avg_correct_solve_time * solve_time_buffer

    blended = lerp(static_mid, user_time, user_timing_weight * trust)
    result = clamp(blended,
                   band_min * TIMING_DEFAULTS['band_escape_low'],
                   band_max * TIMING_DEFAULTS['band_escape_high'])
    result = clamp(result, TIMING_DEFAULTS['min_seconds'],
                   TIMING_DEFAULTS['max_seconds'])
    return quantize_half(result)


class TimeAllocator:
    """Binds the timing knobs to a session's per-tag statistics."""

    def __init__(self, tag_perf, user_timing_weight=None, solve_time_buffer=None):
        self.tag_perf = tag_perf
        if user_timing_weight is None:
            user_timing_weight = TIMING_DEFAULTS['user_timing_weight']
        if solve_time_buffer is None:
            solve_time_buffer = TIMING_DEFAULTS['solve_time_buffer']
        self.user_timing_weight = clamp_setting(user_timing_weight, 0.0, 1.0)
        self.solve_time_buffer = clamp_setting(solve_time_buffer, 1.1, 2.5)

    def allot(self, score, primary_tag):
        perf = self.tag_perf.get(primary_tag) if primary_tag else None
        return compute_dynamic_time(score, perf, self.user_timing_weight,
                                    self.solve_time_buffer)
