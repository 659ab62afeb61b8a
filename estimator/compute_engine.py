"""
Estimate computation engine.

Takes the draft sections of an estimate and resolves every line amount,
every section subtotal, the per-type subtotal map and the estimate totals.
Pure math — no I/O, no clock, no randomness. The input is never mutated.

Evaluation runs in three passes, each over every line of every section:

    1. NORMAL               amount = qty × unit_price
    2. PERCENT_OF_SUBTOTAL  amount = subtotal[base_section_type] × qty / 100
    3. FORMULA              amount = registry formula, else pass-2 rule

Within a pass, sections are visited in section_order. As soon as a section's
lines are done its entry in the subtotal map is updated, so a later section
in the same pass reads the new value and an earlier one does not. With the
stock templates that means PROFIT (after OVERHEAD) includes overhead.

Input: list of Section dicts (section_order, section_type, title, lines)
Output: ComputedEstimate dict
    {
        sections: [...],             # copies, amount/subtotal filled
        subtotal_by_type: {...},     # exactly the six section types
        subtotal: int,
        tax: int,
        total: int,
        warnings: [...],             # {section_order, line_order, code, message}
    }
"""

import copy
import logging
from typing import Optional

from .config import settings
from .formulas import PercentOfSum, evaluate, parse_formula, percent_of
from .models import CalcMode, SECTION_TYPES, empty_subtotals, enum_value
from .numeric import is_number, round_amount, to_number

logger = logging.getLogger(__name__)


class EstimateEngine:
    """
    Resolves amounts, subtotals and totals for a draft estimate.

    Stateless apart from the tax rate; one instance can serve any number of
    concurrent calls.
    """

    PASS_ORDER = [CalcMode.NORMAL, CalcMode.PERCENT_OF_SUBTOTAL, CalcMode.FORMULA]

    def __init__(self, tax_rate: Optional[float] = None):
        self.tax_rate = settings.TAX_RATE if tax_rate is None else tax_rate

    def compute(self, sections) -> dict:
        warnings = []
        resolved = self._copy_sections(sections)
        self._check_sections(resolved, warnings)

        subtotal_by_type = empty_subtotals()
        for mode in self.PASS_ORDER:
            self._run_pass(resolved, mode, subtotal_by_type, warnings)

        subtotal = sum(subtotal_by_type.values())
        tax = round_amount(subtotal * self.tax_rate)

        if warnings:
            codes = sorted({w["code"] for w in warnings})
            logger.warning(
                "Estimate computed with %d warning(s): %s", len(warnings), ", ".join(codes),
                extra={"warning_count": len(warnings), "warning_codes": codes},
            )
        logger.debug(
            "Computed %d section(s): subtotal=%s tax=%s", len(resolved), subtotal, tax,
            extra={"section_count": len(resolved), "subtotal": subtotal, "tax": tax},
        )

        return {
            "sections": resolved,
            "subtotal_by_type": dict(subtotal_by_type),
            "subtotal": subtotal,
            "tax": tax,
            "total": subtotal + tax,
            "warnings": warnings,
        }

    # --- Passes ---

    def _run_pass(self, sections: list, mode: CalcMode, subtotal_by_type: dict,
                  warnings: list):
        """Resolve every ``mode`` line, section by section, updating the map as it goes."""
        for section in self._processing_order(sections):
            for line in section["lines"]:
                if line["calc_mode"] != mode.value:
                    continue
                if mode == CalcMode.NORMAL:
                    self._resolve_normal(section, line, warnings)
                elif mode == CalcMode.PERCENT_OF_SUBTOTAL:
                    self._resolve_percent(sections, section, line, subtotal_by_type, warnings)
                else:
                    self._resolve_formula(sections, section, line, subtotal_by_type, warnings)
            self._store_subtotal(sections, section, subtotal_by_type)

    def _resolve_normal(self, section: dict, line: dict, warnings: list):
        qty = self._number_field(section, line, "qty", warnings)
        unit_price = self._number_field(section, line, "unit_price", warnings)
        line["amount"] = round_amount(qty * unit_price)

    def _resolve_percent(self, sections: list, section: dict, line: dict,
                         subtotal_by_type: dict, warnings: list):
        line["unit_price"] = None
        line["amount"] = round_amount(
            self._percent_of_base(sections, section, line, subtotal_by_type, warnings)
        )

    def _resolve_formula(self, sections: list, section: dict, line: dict,
                         subtotal_by_type: dict, warnings: list):
        formula = parse_formula(line.get("formula"))
        if isinstance(formula, PercentOfSum):
            value = evaluate(formula, line, subtotal_by_type)
        else:
            if line.get("formula"):
                self._warn(warnings, section, line, "unrecognized_formula",
                           f"Formula '{line.get('formula')}' is not recognized — "
                           f"computed as percent of base section")
            value = self._percent_of_base(sections, section, line, subtotal_by_type, warnings)
        line["unit_price"] = None
        line["amount"] = round_amount(value)

    # --- Helpers ---

    def _copy_sections(self, sections) -> list:
        """Deep copy of the input with every derived field cleared."""
        if not isinstance(sections, (list, tuple)):
            return []

        resolved = []
        for section in sections:
            if hasattr(section, "model_dump"):
                section = section.model_dump()
            if not isinstance(section, dict):
                continue
            section = copy.deepcopy(section)
            section["section_type"] = enum_value(section.get("section_type"))

            lines = []
            for line in section.get("lines") or []:
                if hasattr(line, "model_dump"):
                    line = line.model_dump()
                if not isinstance(line, dict):
                    continue
                line["calc_mode"] = enum_value(line.get("calc_mode"))
                line["base_section_type"] = enum_value(line.get("base_section_type"))
                # amount is always derived — stale values must not leak into pass 1 sums
                line["amount"] = None
                lines.append(line)
            section["lines"] = lines
            section["subtotal"] = 0
            resolved.append(section)
        return resolved

    def _check_sections(self, sections: list, warnings: list):
        seen = set()
        known_modes = {m.value for m in CalcMode}
        for section in sections:
            section_type = section["section_type"]
            if section_type not in SECTION_TYPES:
                self._warn(warnings, section, None, "unknown_section_type",
                           f"Section type '{section_type}' is not recognized — "
                           f"excluded from estimate totals")
            elif section_type in seen:
                self._warn(warnings, section, None, "duplicate_section_type",
                           f"More than one {section_type} section — subtotals are summed")
            seen.add(section_type)

            for line in section["lines"]:
                if line["calc_mode"] not in known_modes:
                    line["amount"] = 0
                    self._warn(warnings, section, line, "unknown_calc_mode",
                               f"Calculation mode '{line['calc_mode']}' is not recognized — "
                               f"amount set to 0")

    def _processing_order(self, sections: list) -> list:
        """Sections by section_order; ties and missing orders keep list position."""
        return sorted(sections, key=lambda s: to_number(s.get("section_order")))

    def _store_subtotal(self, sections: list, section: dict, subtotal_by_type: dict):
        """
        Re-sum ``section`` from its current line amounts and publish it.

        Unresolved lines count as 0. Sections sharing a type are summed into
        one entry; unknown types never reach the map.
        """
        section["subtotal"] = round_amount(
            sum(to_number(line.get("amount")) for line in section["lines"])
        )
        section_type = section["section_type"]
        if section_type in subtotal_by_type:
            subtotal_by_type[section_type] = sum(
                s["subtotal"] for s in sections if s["section_type"] == section_type
            )

    def _percent_of_base(self, sections: list, section: dict, line: dict,
                         subtotal_by_type: dict, warnings: list) -> float:
        base = self._base_subtotal(sections, section, line, subtotal_by_type, warnings)
        return percent_of(base, self._number_field(section, line, "qty", warnings))

    def _base_subtotal(self, sections: list, section: dict, line: dict,
                       subtotal_by_type: dict, warnings: list) -> float:
        base_type = line.get("base_section_type")
        if not base_type:
            self._warn(warnings, section, line, "missing_base_section",
                       "No base section type — amount is 0")
            return 0
        if base_type not in subtotal_by_type:
            self._warn(warnings, section, line, "unknown_section_type",
                       f"Base section type '{base_type}' is not recognized — amount is 0")
            return 0
        if not any(s["section_type"] == base_type for s in sections):
            self._warn(warnings, section, line, "base_section_absent",
                       f"No {base_type} section in this estimate — amount is 0")
        return subtotal_by_type[base_type]

    def _number_field(self, section: dict, line: dict, field: str, warnings: list) -> float:
        value = line.get(field)
        if value is not None and not is_number(value):
            self._warn(warnings, section, line, "non_numeric_value",
                       f"{field} value {value!r} is not a number — treated as 0")
        return to_number(value)

    def _warn(self, warnings: list, section: dict, line: Optional[dict], code: str, message: str):
        warnings.append({
            "section_order": section.get("section_order"),
            "line_order": line.get("line_order") if line is not None else None,
            "code": code,
            "message": message,
        })


def compute_estimate(sections, tax_rate: Optional[float] = None) -> dict:
    """Module-level shortcut: ``EstimateEngine(tax_rate).compute(sections)``."""
    return EstimateEngine(tax_rate=tax_rate).compute(sections)
