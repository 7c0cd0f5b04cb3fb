"""Problem descriptors and the closed tag vocabulary.

Tiers are ordered (VeryEasy < Easy < Medium < Hard) and compare as ints.
Operation families are the primary tag of every problem; sub-skill and
topic tags ride along after it as plain strings.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum


class Tier(IntEnum):
    VERY_EASY = 0
    EASY = 1
    MEDIUM = 2
    HARD = 3

    @property
    def label(self):
        return TIER_LABELS[self]


TIER_LABELS = {
    Tier.VERY_EASY: 'VeryEasy',
    Tier.EASY: 'Easy',
    Tier.MEDIUM: 'Medium',
    Tier.HARD: 'Hard',
}


class Family(Enum):
    ADDITION = 'Addition'
    SUBTRACTION = 'Subtraction'
    MULTIPLICATION = 'Multiplication'
    DIVISION = 'Division'
    INTEGERS = 'Integers'
    DECIMALS = 'Decimals'
    FRACTIONS = 'Fractions'


# Families counted for the session mix report
TRACKED_FAMILIES = (
    Family.ADDITION, Family.SUBTRACTION, Family.MULTIPLICATION,
    Family.DIVISION, Family.FRACTIONS,
)

# Sub-skill tags
ADD_WITH_CARRY = 'multi_digit_addition_with_carry'
ADD_NO_CARRY = 'multi_digit_addition_no_carry'
SUB_BORROW = 'borrowing_required'
SUB_BASIC = 'basic_subtraction'
MUL_SINGLE_DIGIT = 'multiplication_single_digit'
MUL_MULTI_DIGIT = 'multiplication_multi_digit'
DIV_BASIC = 'division_basic'
INT_ADDITION = 'basic_addition'
INT_SUBTRACTION = 'basic_subtraction'
FRAC_SAME_DENOM = 'fraction_addition_same_denominator'
FRAC_CROSS_MULTIPLY = 'fraction_addition_cross_multiply'
FRAC_MULTIPLY = 'fraction_simplification'

# Topic tags
TOPIC_SQUARES = 'squares'
TOPIC_CUBES = 'cubes'
TOPIC_CONVERSION = 'conversion'
TOPIC_TEMPERATURE = 'temperature'


def table_tag(n):
    return f'table_{n}'


def difficulty_score(bonuses):
    """Difficulty score is 1 + structural bonuses, clamped to [1, 5]."""
    return max(1, min(5, 1 + bonuses))


@dataclass(frozen=True)
class FractionOperand:
    numerator: int
    denominator: int

    def to_dict(self):
        return {'numerator': self.numerator, 'denominator': self.denominator}


@dataclass(frozen=True)
class Problem:
    display: str
    answer: float
    difficulty: Tier
    difficulty_score: int
    tags: tuple
    time_allotted: float
    operands: tuple = ()
    is_fraction: bool = False
    fractions: tuple = None
    operator: str = ''

    @property
    def primary_tag(self):
        return self.tags[0]

    def to_dict(self):
        return {
            'display': self.display,
            'answer': self.answer,
            'difficulty': self.difficulty.label,
            'difficulty_score': self.difficulty_score,
            'tags': list(self.tags),
            'time_allotted': self.time_allotted,
            'is_fraction': self.is_fraction,
            'fractions': ([f.to_dict() for f in self.fractions]
                          if self.fractions else None),
            'operator': self.operator,
            'operands': list(self.operands),
        }
