"""
Number facts shown alongside the Watch-mode reveal.
"""

from sympy import factorint

from factorbugs.core.analyzer import is_in_range
from factorbugs.core.models import FactorStructure
from factorbugs.core.types import NumberType

EXPLANATIONS = {
    NumberType.PRIME: (
        "It's a Factor Slug!",
        "Prime numbers have only one factor pair: 1 and the number itself. "
        "That's why this is a 'Factor Slug' with just antennae and no legs!",
    ),
    NumberType.SQUARE: (
        "It's a Factor Bee!",
        "Square numbers have an odd number of total factors because one factor multiplies by itself. "
        "This special factor is shown on the stinger, making it a 'Factor Bee'!",
    ),
    NumberType.COMPOSITE: (
        "It's a Factor Bug!",
        "Composite numbers have more than two factors. Factors come in pairs, which is why this "
        "'Factor Bug' has antennae for its first factor pair and legs for any others.",
    ),
}


def format_prime_factors(prime_factors: dict[int, int]) -> str:
    """Render ``{2: 2, 3: 1}`` as ``2² × 3``."""
    superscripts = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")
    parts = []
    for prime, exponent in sorted(prime_factors.items()):
        parts.append(str(prime) if exponent == 1 else f"{prime}{str(exponent).translate(superscripts)}")
    return " × ".join(parts)


def build_number_facts(structure: FactorStructure) -> dict:
    """Build the explanation payload used by Watch mode and frontends."""
    equations = list(structure.pairs)
    if structure.stinger is not None:
        equations.append((structure.stinger, structure.stinger))
    equations.sort(key=lambda pair: pair[0])

    factors = sorted({value for pair in equations for value in pair})

    prime_factors: dict[int, int] = {}
    if is_in_range(structure.number) and structure.number > 1:
        prime_factors = {int(p): int(e) for p, e in factorint(structure.number).items()}

    title, explanation = EXPLANATIONS[structure.type]

    return {
        "number": structure.number,
        "type": structure.type.value,
        "creature": structure.type.creature,
        "title": title,
        "explanation": explanation,
        "equations": equations,
        "factors": factors,
        "prime_factors": prime_factors,
        "prime_factorization": format_prime_factors(prime_factors),
        "reveal_total": structure.reveal_total,
    }
