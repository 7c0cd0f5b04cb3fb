"""Practice-topic generators — problems themed on a reference card.

The topic key is the upper-cased first line of the card, e.g.
"TABLE OF 7", "TABLES 1–30", "SQUARES 11–20", "CUBES", "LENGTH",
"TEMPERATURE" or any fraction card.
"""
import re

from engine.factories import (
    frac_diff_denom, frac_same_denom, make_problem,
)
from engine.problem import (
    Family, MUL_MULTI_DIGIT, MUL_SINGLE_DIGIT, Tier, TOPIC_CONVERSION,
    TOPIC_CUBES, TOPIC_SQUARES, TOPIC_TEMPERATURE, table_tag,
)

# topic -> (ratio, small unit, large unit)
CONVERSIONS = {
    'LENGTH': (1000, 'm', 'km'),
    'MASS': (1000, 'g', 'kg'),
    'VOLUME': (1000, 'mL', 'L'),
    'TIME': (60, 's', 'min'),
    'AREA': (10000, 'cm²', 'm²'),
    'SPEED': (36, 'km/h', 'm/s (×10)'),
    'PRESSURE': (1000, 'Pa', 'kPa'),
    'ENERGY': (1000, 'J', 'kJ'),
}

KELVIN_OFFSET = 273


def topic_from_card(card_content):
    """Topic key from a card: first line, trimmed and upper-cased."""
    if not isinstance(card_content, str) or not card_content:
        return ''
    return card_content.split('\n')[0].strip().upper()


def parse_range(text, default_lo, default_hi):
    """Parse '1–10' / '11-20' into (lo, hi); defaults on anything else."""
    if not text:
        return default_lo, default_hi
    normalized = text.replace('–', '-').replace('—', '-')
    parts = normalized.split('-')
    if len(parts) != 2:
        return default_lo, default_hi
    try:
        lo, hi = int(parts[0].strip()), int(parts[1].strip())
    except ValueError:
        return default_lo, default_hi
    if lo > hi:
        lo, hi = hi, lo
    return lo, hi


def table_question(rng, allot, n):
    """n × b, or with 40% chance the matching division n·q ÷ n."""
    if rng.random() < 0.4:
        quotient = rng.randint(1, 10)
        dividend = n * quotient
        tags = [Family.DIVISION.value, table_tag(n)]
        return make_problem(f'{dividend} ÷ {n}', quotient, Tier.EASY, 1, tags,
                            allot, (dividend, n))
    b = rng.randint(1, 10)
    hard_factor = n >= 7 or b >= 7
    tags = [Family.MULTIPLICATION.value, table_tag(n)]
    return make_problem(f'{n} × {b}', n * b, Tier.EASY, 1 if hard_factor else 0,
                        tags, allot, (n, b))


def square_question(rng, allot, lo, hi):
    n = rng.randint(lo, hi)
    tags = [Family.MULTIPLICATION.value, TOPIC_SQUARES]
    return make_problem(f'{n}² = ?', n * n, Tier.MEDIUM, 1 if n >= 10 else 0, tags,
                        allot, (n,))


def cube_question(rng, allot, lo, hi):
    n = rng.randint(lo, hi)
    tags = [Family.MULTIPLICATION.value, TOPIC_CUBES]
    return make_problem(f'{n}³ = ?', n ** 3, Tier.HARD, 2 if n >= 5 else 1, tags,
                        allot, (n,))


def conversion_question(rng, allot, ratio, small_unit, large_unit):
    """Unit conversion; multiplies up or divides down at random."""
    n = rng.randint(1, 10)
    if rng.random() < 0.5:
        tags = [Family.MULTIPLICATION.value, TOPIC_CONVERSION]
        return make_problem(f'{n} {large_unit} → {small_unit}?', n * ratio,
                            Tier.MEDIUM, 1, tags, allot, (n, ratio))
    value = n * ratio
    tags = [Family.DIVISION.value, TOPIC_CONVERSION]
    return make_problem(f'{value} {small_unit} → {large_unit}?', n, Tier.MEDIUM, 1,
                        tags, allot, (value, ratio))


def temperature_question(rng, allot):
    celsius = rng.randint(-50, 100)
    kelvin = celsius + KELVIN_OFFSET
    if rng.random() < 0.5:
        tags = [Family.ADDITION.value, TOPIC_TEMPERATURE]
        return make_problem(f'{celsius}°C → K?', kelvin, Tier.MEDIUM, 0, tags,
                            allot, (celsius, KELVIN_OFFSET))
    tags = [Family.SUBTRACTION.value, TOPIC_TEMPERATURE]
    return make_problem(f'{kelvin} K → °C?', celsius, Tier.MEDIUM, 0, tags,
                        allot, (kelvin, KELVIN_OFFSET))


def mixed_multiplication_question(rng, allot):
    a = rng.randint(2, 12)
    b = rng.randint(2, 12)
    skill = MUL_MULTI_DIGIT if a >= 10 or b >= 10 else MUL_SINGLE_DIGIT
    tags = [Family.MULTIPLICATION.value, skill]
    return make_problem(f'{a} × {b}', a * b, Tier.MEDIUM, 1 if a >= 7 or b >= 7 else 0,
                        tags, allot, (a, b))


def generate_for_topic(topic, rng, allot):
    """Build one problem for the active practice topic."""
    if topic.startswith('TABLE OF'):
        match = re.search(r'-?\d+', topic[len('TABLE OF'):])
        if match and int(match.group()) > 0:
            return table_question(rng, allot, int(match.group()))

    if topic.startswith('TABLES'):
        return table_question(rng, allot, rng.randint(1, 12))

    if topic.startswith('SQUARES'):
        lo, hi = parse_range(topic[len('SQUARES'):].strip(), 1, 30)
        return square_question(rng, allot, lo, hi)

    if topic.startswith('CUBES'):
        lo, hi = parse_range(topic[len('CUBES'):].strip(), 1, 20)
        return cube_question(rng, allot, lo, hi)

    if 'FRACTION' in topic:
        if rng.random() < 0.5:
            return frac_diff_denom(rng, allot, Tier.MEDIUM)
        return frac_same_denom(rng, allot, Tier.MEDIUM)

    if topic.startswith('VOLUME'):
        return conversion_question(rng, allot, *CONVERSIONS['VOLUME'])
    if topic in CONVERSIONS:
        return conversion_question(rng, allot, *CONVERSIONS[topic])

    if topic == 'TEMPERATURE':
        return temperature_question(rng, allot)

    return mixed_multiplication_question(rng, allot)
