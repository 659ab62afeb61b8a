import enum


# --- Enums ---

class SectionType(str, enum.Enum):
    MATERIAL = "MATERIAL"
    LABOR = "LABOR"
    EXPENSE = "EXPENSE"
    OVERHEAD = "OVERHEAD"
    PROFIT = "PROFIT"
    MANUAL = "MANUAL"


class CalcMode(str, enum.Enum):
    NORMAL = "NORMAL"
    PERCENT_OF_SUBTOTAL = "PERCENT_OF_SUBTOTAL"  # qty holds the percent (3.7 = 3.7%)
    FORMULA = "FORMULA"


class PriceType(str, enum.Enum):
    """Which catalog price column seeded a line's unit price."""
    DESIGN = "DESIGN"
    CONSUMER = "CONSUMER"
    SUPPLY = "SUPPLY"
    MANUAL = "MANUAL"


class SourceType(str, enum.Enum):
    PRODUCT = "PRODUCT"
    LABOR_ITEM = "LABOR_ITEM"
    NONE = "NONE"


# --- Section types — authoritative order ---
# Every subtotal map carries exactly these keys, in this order.

SECTION_TYPES = [t.value for t in SectionType]

SECTION_TITLES = {
    "MATERIAL": "Materials",
    "LABOR": "Labor",
    "EXPENSE": "Expenses",
    "OVERHEAD": "General overhead",
    "PROFIT": "Profit",
    "MANUAL": "Manual",
}


def section_title(section_type: str) -> str:
    """Default title for a section type. Unknown types get the manual title."""
    return SECTION_TITLES.get(section_type, SECTION_TITLES["MANUAL"])


def empty_subtotals() -> dict:
    """{section_type: 0} for all six types."""
    return {t: 0 for t in SECTION_TYPES}


def enum_value(value):
    """Plain string value of an enum member; anything else passes through."""
    if isinstance(value, enum.Enum):
        return value.value
    return value
