"""Numsprint — centralized configuration."""
import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LOG_FILE = os.path.join(BASE_DIR, 'numsprint_debug.log')


def _env_float(name, default):
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def clamp_setting(value, low, high):
    """Clamp a numeric setting into [low, high]."""
    return max(low, min(high, value))


# Dynamic timing
TIMING_DEFAULTS = {
    # 0 = fully static deadlines, 1 = fully user-driven
    'user_timing_weight': clamp_setting(
        _env_float('NUMSPRINT_USER_TIMING_WEIGHT', 0.6), 0.0, 1.0),
    # Multiplier on the average correct-solve time
    'solve_time_buffer': clamp_setting(
        _env_float('NUMSPRINT_SOLVE_TIME_BUFFER', 1.4), 1.1, 2.5),
    'min_seconds': 2.0,
    'max_seconds': 12.0,
    'band_escape_low': 0.8,
    'band_escape_high': 1.2,
    'trusted_samples': 3,
    'full_trust_samples': 10,
}

# Difficulty score -> (min, max) seconds
BASE_TIME_BANDS = {
    1: (2.0, 3.0),
    2: (3.0, 5.0),
    3: (5.0, 7.0),
    4: (7.0, 9.0),
    5: (9.0, 12.0),
}

# Session pacing
SESSION_DEFAULTS = {
    'question_count': 20,
    'history_window': 5,
    'hard_cap': 3,
    'fraction_cap': 0.25,
    'fraction_retries': 6,
    'fraction_unlock_day': 5,
    'medium_unlock_day': 3,
    'hard_unlock_day': 7,
    'weak_warmup_attempts': 5,
    'weak_ramp_attempts': 50,
    'weak_max_chance': 0.35,
    'weak_min_attempts': 3,
    'weak_threshold': 0.35,
    'fast_ratio': 0.6,
    'fast_streak': 5,
    'wrong_streak': 3,
    'accuracy_smoothing': 0.25,
}

# Developer override for tenure / aptitude
DEV_DEFAULTS = {
    'enabled': os.environ.get('NUMSPRINT_DEV_MODE', '').lower() in ('1', 'true', 'yes'),
    'tenure_days': _env_int('NUMSPRINT_DEV_TENURE_DAYS', 90),
    'aptitude': clamp_setting(_env_int('NUMSPRINT_DEV_APTITUDE', 8), 1, 10),
}
