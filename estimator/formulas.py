"""
Formula registry for FORMULA lines.

A stored formula string is parsed once into one of two variants:

    PercentOfSum(section_types, rate)  — (A + B + ...) * rate
    PercentOfBase()                    — line.qty percent of line.base_section_type

Only two literal patterns are recognized. This is not an expression parser:
matching is substring based on the whitespace-stripped text, and anything
else is PercentOfBase.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .numeric import to_number


@dataclass(frozen=True)
class PercentOfSum:
    section_types: Tuple[str, ...]
    rate: float


@dataclass(frozen=True)
class PercentOfBase:
    pass


Formula = Union[PercentOfSum, PercentOfBase]


# (required substrings, variant) — first match wins
RECOGNIZED_FORMULAS = [
    (("MATERIAL+LABOR", "*0.06"), PercentOfSum(("MATERIAL", "LABOR"), 0.06)),
    (("LABOR+EXPENSE+OVERHEAD", "*0.15"), PercentOfSum(("LABOR", "EXPENSE", "OVERHEAD"), 0.15)),
]


def normalize_formula(text: Optional[str]) -> str:
    """Strip all whitespace. None becomes the empty string."""
    if not text:
        return ""
    return "".join(str(text).split())


def parse_formula(text: Optional[str]) -> Formula:
    compact = normalize_formula(text)
    for needles, formula in RECOGNIZED_FORMULAS:
        if all(needle in compact for needle in needles):
            return formula
    return PercentOfBase()


def is_recognized(text: Optional[str]) -> bool:
    return isinstance(parse_formula(text), PercentOfSum)


def percent_of(base: float, percent) -> float:
    """``percent`` of ``base``, unrounded. qty=3.7 means 3.7%."""
    return base * (to_number(percent) / 100.0)


def evaluate(formula: Formula, line: dict, subtotal_by_type: dict) -> float:
    """
    Unrounded value of a formula for one line.

    Section types missing from ``subtotal_by_type`` count as 0.
    """
    if isinstance(formula, PercentOfSum):
        total = sum(subtotal_by_type.get(t, 0) for t in formula.section_types)
        return total * formula.rate

    base_type = line.get("base_section_type")
    base = subtotal_by_type.get(base_type, 0) if base_type else 0
    return percent_of(base, line.get("qty"))
