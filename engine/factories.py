"""Arithmetic problem factories.

Every factory takes the session's random source, an `allot(score, tag)`
callable for the time budget, and the tier label to stamp on the problem.
Difficulty score is 1 + structural bonuses:

  addition        +1 when a column carries
  subtraction     +1 when a column borrows
  multiplication  +1 when either factor >= 7
  division        +1 always (built as divisor * quotient, so exact)
  signed ints     +1 when either operand is negative
  crosses zero    +1 always
  decimals        +1 always (quarter-unit operands)
  fractions       same denominator +1, cross-multiply +2, multiply +1

Fraction answers are rounded to three decimals and never simplified.
"""
from collections import namedtuple
from enum import Enum

from engine.problem import (
    Family, FractionOperand, Problem, Tier, difficulty_score,
    ADD_NO_CARRY, ADD_WITH_CARRY, DIV_BASIC, FRAC_CROSS_MULTIPLY,
    FRAC_MULTIPLY, FRAC_SAME_DENOM, INT_ADDITION, INT_SUBTRACTION,
    MUL_MULTI_DIGIT, MUL_SINGLE_DIGIT, SUB_BASIC, SUB_BORROW,
)


def has_carry(a, b):
    """True if adding a and b carries in any decimal column."""
    while a > 0 or b > 0:
        if a % 10 + b % 10 >= 10:
            return True
        a //= 10
        b //= 10
    return False


def needs_borrow(a, b):
    """True if a - b borrows in any decimal column."""
    while a > 0 or b > 0:
        if a % 10 < b % 10:
            return True
        a //= 10
        b //= 10
    return False


def format_number(value):
    """Render 3.0 as '3' and 3.25 as '3.25'."""
    if float(value).is_integer():
        return str(int(value))
    return f'{value:g}'


def make_problem(display, answer, tier, bonuses, tags, allot, operands, **extra):
    score = difficulty_score(bonuses)
    return Problem(
        display=display,
        answer=answer,
        difficulty=tier,
        difficulty_score=score,
        tags=tuple(tags),
        time_allotted=allot(score, tags[0]),
        operands=tuple(operands),
        **extra,
    )


# ---------------------------------------------------------------------------
# Whole-number arithmetic
# ---------------------------------------------------------------------------

def simple_add(rng, allot, tier, a_min, a_max, b_min, b_max):
    a = rng.randint(a_min, a_max)
    b = rng.randint(b_min, b_max)
    carry = has_carry(a, b)
    tags = [Family.ADDITION.value, ADD_WITH_CARRY if carry else ADD_NO_CARRY]
    return make_problem(f'{a} + {b}', a + b, tier, 1 if carry else 0, tags,
                        allot, (a, b))


def simple_sub(rng, allot, tier, a_min, a_max, b_min, b_max):
    b = rng.randint(b_min, b_max)
    a = rng.randint(min(max(a_min, b), a_max), a_max)
    borrow = needs_borrow(a, b)
    tags = [Family.SUBTRACTION.value, SUB_BORROW if borrow else SUB_BASIC]
    return make_problem(f'{a} - {b}', a - b, tier, 1 if borrow else 0, tags,
                        allot, (a, b))


def simple_mul(rng, allot, tier, a_min, a_max, b_min, b_max):
    # Second factor models a single-digit multiplier
    a = min(rng.randint(a_min, a_max), 99)
    b = max(min(rng.randint(b_min, b_max), 9), min(b_min, 9))
    hard_factor = a >= 7 or b >= 7
    skill = MUL_MULTI_DIGIT if a >= 10 or b >= 10 else MUL_SINGLE_DIGIT
    tags = [Family.MULTIPLICATION.value, skill]
    return make_problem(f'{a} × {b}', a * b, tier, 1 if hard_factor else 0, tags,
                        allot, (a, b))


def simple_div(rng, allot, tier, b_min, b_max, q_min, q_max):
    divisor = rng.randint(b_min, b_max)
    quotient = rng.randint(q_min, q_max)
    dividend = divisor * quotient
    tags = [Family.DIVISION.value, DIV_BASIC]
    return make_problem(f'{dividend} ÷ {divisor}', quotient, tier, 1, tags,
                        allot, (dividend, divisor))


# ---------------------------------------------------------------------------
# Signed integers and decimals
# ---------------------------------------------------------------------------

def integer_add(rng, allot, tier):
    a = rng.randint(-20, 29)
    b = rng.randint(-20, 19)
    negative = a < 0 or b < 0
    tags = [Family.INTEGERS.value, INT_ADDITION]
    return make_problem(f'({a}) + ({b})', a + b, tier, 1 if negative else 0, tags,
                        allot, (a, b))


def integer_sub(rng, allot, tier):
    a = rng.randint(-20, 39)
    b = rng.randint(-20, 29)
    negative = a < 0 or b < 0
    tags = [Family.INTEGERS.value, INT_SUBTRACTION]
    return make_problem(f'({a}) - ({b})', a - b, tier, 1 if negative else 0, tags,
                        allot, (a, b))


def crosses_zero(rng, allot, tier=Tier.HARD):
    """Small minus larger, so the answer lands below zero."""
    a = rng.randint(1, 19)
    b = rng.randint(a + 1, a + 14)
    tags = [Family.INTEGERS.value, INT_SUBTRACTION]
    return make_problem(f'{a} - {b}', a - b, Tier.HARD, 1, tags, allot, (a, b))


def negative_operand(rng, allot, tier=Tier.HARD):
    a = -rng.randint(1, 14)
    b = rng.randint(1, 14)
    add = rng.random() < 0.5
    symbol = '+' if add else '-'
    tags = [Family.INTEGERS.value]
    return make_problem(f'{a} {symbol} {b}', a + b if add else a - b, Tier.HARD, 1,
                        tags, allot, (a, b), operator=symbol)


def make_decimal(rng, allot, tier):
    a = round(rng.uniform(1.0, 15.0) * 4) / 4
    b = round(rng.uniform(1.0, 8.0) * 4) / 4
    add = rng.random() < 0.5
    symbol = '+' if add else '-'
    answer = round(a + b if add else a - b, 2)
    tags = [Family.DECIMALS.value]
    return make_problem(f'{format_number(a)} {symbol} {format_number(b)}', answer,
                        tier, 1, tags, allot, (a, b), operator=symbol)


# ---------------------------------------------------------------------------
# Fractions
# ---------------------------------------------------------------------------

def _fraction_problem(n_a, d_a, n_b, d_b, symbol, answer, tier, bonuses,
                      skill, allot):
    tags = [Family.FRACTIONS.value, skill]
    return make_problem(
        f'{n_a}/{d_a} {symbol} {n_b}/{d_b}', answer, tier, bonuses, tags,
        allot, (n_a, d_a, n_b, d_b),
        is_fraction=True,
        fractions=(FractionOperand(n_a, d_a), FractionOperand(n_b, d_b)),
        operator=symbol,
    )


def frac_same_denom(rng, allot, tier):
    denom = rng.randint(2, 8)
    n_a = rng.randint(1, denom - 1)
    n_b = rng.randint(1, denom - 1)
    add = tier == Tier.EASY or rng.random() < 0.6
    if not add and n_b > n_a:
        n_a, n_b = n_b, n_a
    answer = round((n_a + n_b if add else n_a - n_b) / denom, 3)
    return _fraction_problem(n_a, denom, n_b, denom, '+' if add else '-',
                             answer, tier, 1, FRAC_SAME_DENOM, allot)


def frac_diff_denom(rng, allot, tier):
    d_a = rng.randint(2, 6)
    d_b = rng.randint(2, 6)
    while d_b == d_a:
        d_b = rng.randint(2, 6)
    n_a = rng.randint(1, d_a - 1)
    n_b = rng.randint(1, d_b - 1)
    add = rng.random() < 0.6
    left, right = n_a / d_a, n_b / d_b
    answer = round(left + right if add else left - right, 3)
    return _fraction_problem(n_a, d_a, n_b, d_b, '+' if add else '-',
                             answer, tier, 2, FRAC_CROSS_MULTIPLY, allot)


def frac_multiply(rng, allot, tier):
    d_a = rng.randint(2, 7)
    d_b = rng.randint(2, 7)
    n_a = rng.randint(1, d_a)
    n_b = rng.randint(1, d_b)
    answer = round((n_a * n_b) / (d_a * d_b), 3)
    return _fraction_problem(n_a, d_a, n_b, d_b, '×', answer, tier, 1,
                             FRAC_MULTIPLY, allot)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class FactoryKind(Enum):
    ADD = 'add'
    SUB = 'sub'
    MUL = 'mul'
    DIV = 'div'
    INT_ADD = 'int_add'
    INT_SUB = 'int_sub'
    CROSSES_ZERO = 'crosses_zero'
    NEGATIVE_OPERAND = 'negative_operand'
    DECIMAL = 'decimal'
    FRAC_SAME = 'frac_same'
    FRAC_DIFF = 'frac_diff'
    FRAC_MUL = 'frac_mul'


FACTORIES = {
    FactoryKind.ADD: simple_add,
    FactoryKind.SUB: simple_sub,
    FactoryKind.MUL: simple_mul,
    FactoryKind.DIV: simple_div,
    FactoryKind.INT_ADD: integer_add,
    FactoryKind.INT_SUB: integer_sub,
    FactoryKind.CROSSES_ZERO: crosses_zero,
    FactoryKind.NEGATIVE_OPERAND: negative_operand,
    FactoryKind.DECIMAL: make_decimal,
    FactoryKind.FRAC_SAME: frac_same_denom,
    FactoryKind.FRAC_DIFF: frac_diff_denom,
    FactoryKind.FRAC_MUL: frac_multiply,
}

FRACTION_KINDS = frozenset({
    FactoryKind.FRAC_SAME, FactoryKind.FRAC_DIFF, FactoryKind.FRAC_MUL,
})

# A pool entry: a factory kind plus its fixed range arguments
PoolEntry = namedtuple('PoolEntry', ['kind', 'args'])


def pool_entry(kind, *args):
    return PoolEntry(kind, tuple(args))


def build(entry, rng, allot, tier):
    """Run the factory named by `entry` for one problem."""
    return FACTORIES[entry.kind](rng, allot, tier, *entry.args)
