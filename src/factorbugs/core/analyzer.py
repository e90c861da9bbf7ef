"""
Factor pair analysis and classification.
"""

import math
import random

from factorbugs.core.models import FactorPair, FactorStructure
from factorbugs.core.types import NumberType

MIN_NUMBER = 1
MAX_NUMBER = 100

# Use SystemRandom so security scans don't treat bug selection as weak PRNG usage.
RNG = random.SystemRandom()


def is_in_range(number: int) -> bool:
    return MIN_NUMBER <= number <= MAX_NUMBER


def find_factor_pairs(number: int) -> tuple[list[FactorPair], int | None]:
    """Scan divisors up to the square root, splitting off the square-root factor."""
    pairs: list[FactorPair] = []
    stinger = None
    for i in range(1, math.isqrt(number) + 1):
        if number % i == 0:
            if i * i == number:
                stinger = i
            else:
                pairs.append((i, number // i))
    pairs.sort(key=lambda pair: pair[0])
    return pairs, stinger


def analyze(number: int) -> FactorStructure:
    """Compute the factor structure of a number in 1-100.

    Numbers outside the range get an empty Composite structure so callers can
    still render something.
    """
    if not is_in_range(number):
        return FactorStructure(number=number, type=NumberType.COMPOSITE)

    if number == 1:
        # 1 pairs only with itself, which makes it a stinger and not a pair.
        return FactorStructure(number=1, type=NumberType.SQUARE, stinger=1)

    pairs, stinger = find_factor_pairs(number)

    if len(pairs) == 1 and stinger is None:
        number_type = NumberType.PRIME
    elif stinger is not None:
        number_type = NumberType.SQUARE
    else:
        number_type = NumberType.COMPOSITE

    return FactorStructure(number=number, type=number_type, pairs=tuple(pairs), stinger=stinger)


def random_number(rng: random.Random | None = None) -> int:
    """Draw a target number uniformly from 1-100."""
    return (rng or RNG).randint(MIN_NUMBER, MAX_NUMBER)
