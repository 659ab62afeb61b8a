"""
Draft estimate editing — sections, lines, templates and numbering.

Every function returns new objects and leaves its arguments alone, so a
caller can keep the previous draft around and recompute cheaply.

Rules:
- At most one section per type. Adding a second raises DuplicateSectionError.
- section_order and line_order always run 1..n after an add or a remove.
- EXPENSE, OVERHEAD and PROFIT sections start with their standard lines.
"""

import copy
import logging
from typing import Optional

from .errors import DuplicateSectionError, EstimateError
from .models import CalcMode, SECTION_TYPES, SourceType, enum_value, section_title

logger = logging.getLogger(__name__)


def new_line(line_order: int = 1, **preset) -> dict:
    """A blank NORMAL line. Keyword arguments override any default."""
    line = {
        "line_order": line_order,
        "name": "",
        "spec": "",
        "unit": "EA",
        "qty": 1,
        "unit_price": 0,
        "amount": 0,
        "remark": "",
        "calc_mode": CalcMode.NORMAL.value,
        "base_section_type": None,
        "formula": None,
        "source_type": SourceType.NONE.value,
        "source_id": None,
        "price_type": None,
    }
    line.update({k: enum_value(v) for k, v in preset.items()})
    return line


def _percent_line(line_order: int, name: str, spec: str, pct: float, base: str) -> dict:
    return new_line(
        line_order,
        name=name,
        spec=spec,
        unit="%",
        qty=pct,
        unit_price=None,
        calc_mode=CalcMode.PERCENT_OF_SUBTOTAL,
        base_section_type=base,
    )


def _formula_line(line_order: int, name: str, spec: str, pct: float, formula: str) -> dict:
    return new_line(
        line_order,
        name=name,
        spec=spec,
        unit="%",
        qty=pct,
        unit_price=None,
        calc_mode=CalcMode.FORMULA,
        formula=formula,
    )


def template_lines(section_type: str) -> list:
    """Standard starting lines for a section type. Most types start empty."""
    section_type = enum_value(section_type)
    if section_type == "EXPENSE":
        return [
            _percent_line(1, "Industrial accident insurance", "of labor", 3.7, "LABOR"),
            _percent_line(2, "Employment insurance", "of labor", 1.01, "LABOR"),
            new_line(3, name="Public safety management fee",
                     spec="Public safety management fee", unit="LS"),
        ]
    if section_type == "OVERHEAD":
        return [
            _formula_line(1, "General overhead", "Materials + labor", 6,
                          "(MATERIAL+LABOR)*0.06"),
        ]
    if section_type == "PROFIT":
        return [
            _formula_line(1, "Profit", "Labor + expenses + overhead", 15,
                          "(LABOR+EXPENSE+OVERHEAD)*0.15"),
        ]
    return []


def new_section(section_type: str, section_order: int = 1,
                title: Optional[str] = None) -> dict:
    section_type = enum_value(section_type)
    if section_type not in SECTION_TYPES:
        raise EstimateError(f"Unknown section type: {section_type}")
    return {
        "section_order": section_order,
        "section_type": section_type,
        "title": title or section_title(section_type),
        "lines": template_lines(section_type),
    }


def has_section(sections: list, section_type: str) -> bool:
    section_type = enum_value(section_type)
    return any(s.get("section_type") == section_type for s in sections)


def renumber_sections(sections: list) -> list:
    return [dict(s, section_order=i) for i, s in enumerate(sections, start=1)]


def renumber_lines(lines: list) -> list:
    return [dict(l, line_order=i) for i, l in enumerate(lines, start=1)]


def add_section(sections: list, section_type: str) -> list:
    """Append a templated section. Raises DuplicateSectionError if the type exists."""
    if has_section(sections, section_type):
        raise DuplicateSectionError(enum_value(section_type))
    section = new_section(section_type, len(sections) + 1)
    logger.debug("Added %s section with %d template line(s)",
                 section["section_type"], len(section["lines"]))
    return renumber_sections(copy.deepcopy(list(sections)) + [section])


def remove_section(sections: list, index: int) -> list:
    if not 0 <= index < len(sections):
        raise EstimateError(f"No section at position {index}")
    remaining = [s for i, s in enumerate(copy.deepcopy(list(sections))) if i != index]
    return renumber_sections(remaining)


def add_line(section: dict, **preset) -> dict:
    """Copy of ``section`` with a new line appended at the next line_order."""
    section = copy.deepcopy(section)
    lines = section.get("lines") or []
    preset.pop("line_order", None)
    lines.append(new_line(len(lines) + 1, **preset))
    section["lines"] = lines
    return section


def remove_line(section: dict, index: int) -> dict:
    section = copy.deepcopy(section)
    lines = section.get("lines") or []
    if not 0 <= index < len(lines):
        raise EstimateError(f"No line at position {index}")
    section["lines"] = renumber_lines([l for i, l in enumerate(lines) if i != index])
    return section


def update_line(section: dict, index: int, **patch) -> dict:
    """Copy of ``section`` with the line at ``index`` patched."""
    section = copy.deepcopy(section)
    lines = section.get("lines") or []
    if not 0 <= index < len(lines):
        raise EstimateError(f"No line at position {index}")
    lines[index].update({k: enum_value(v) for k, v in patch.items()})
    section["lines"] = lines
    return section
