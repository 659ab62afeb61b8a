"""
Save payload for the estimate persistence API (create and update share a body).

The draft is run through the engine first so that every amount in the payload
is the resolved one. Text fields are trimmed and blank ones sent as None.
source_id is only sent for PRODUCT lines — a stray id on any other line
would be rejected by the products foreign key.
"""

import copy
import logging
from typing import Optional

from .compute_engine import compute_estimate
from .errors import PayloadError
from .models import SourceType, enum_value
from .numeric import to_number

logger = logging.getLogger(__name__)


def _blank_to_none(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _line_payload(line: dict) -> dict:
    source_type = enum_value(line.get("source_type")) or SourceType.NONE.value
    source_id = line.get("source_id") if source_type == SourceType.PRODUCT.value else None
    return {
        "line_order": line.get("line_order"),
        "name": line.get("name") or "",
        "spec": _blank_to_none(line.get("spec")),
        "unit": line.get("unit") or "",
        "qty": to_number(line.get("qty")),
        "unit_price": line.get("unit_price"),
        "amount": line.get("amount"),
        "remark": _blank_to_none(line.get("remark")),
        "calc_mode": line.get("calc_mode"),
        "base_section_type": line.get("base_section_type"),
        "formula": line.get("formula"),
        "source_type": source_type,
        "source_id": source_id,
        "price_type": enum_value(line.get("price_type")),
    }


def build_save_payload(project_id: Optional[int], sections: list,
                       title: Optional[str] = None,
                       receiver_name: Optional[str] = None,
                       memo: Optional[str] = None,
                       tax_rate: Optional[float] = None) -> dict:
    """
    Build the create/update body from a draft.

    Raises PayloadError when no project is selected or the draft has no
    sections.
    """
    if not project_id:
        raise PayloadError("Select a project before saving the estimate")
    if not sections:
        raise PayloadError("Add at least one section to the estimate")

    computed = compute_estimate(sections, tax_rate=tax_rate)
    payload = {
        "project_id": project_id,
        "title": _blank_to_none(title),
        "receiver_name": _blank_to_none(receiver_name),
        "memo": _blank_to_none(memo),
        "sections": [
            {
                "section_order": section.get("section_order"),
                "section_type": section.get("section_type"),
                "title": section.get("title"),
                "lines": [_line_payload(line) for line in section["lines"]],
            }
            for section in computed["sections"]
        ],
    }
    logger.info(
        "Built save payload for project %s: %d section(s), total %s",
        project_id, len(payload["sections"]), computed["total"],
    )
    return payload


_PRODUCT_ID_KEYS = ("product_id", "productId", "source_id", "sourceId")


def normalize_line(line: dict) -> dict:
    """Repair provenance keys on one payload line. Returns a copy."""
    line = dict(line)
    product_id = next((line[k] for k in _PRODUCT_ID_KEYS if line.get(k) is not None), None)
    if line.get("source_type") in (None, SourceType.NONE.value) and product_id is not None:
        line["source_type"] = SourceType.PRODUCT.value
        line["source_id"] = product_id

    # camelCase keys from older clients
    if line.get("sourceId") is not None and line.get("source_id") is None:
        line["source_id"] = line["sourceId"]
    if line.get("sourceType") is not None and line.get("source_type") is None:
        line["source_type"] = line["sourceType"]
    return line


def normalize_payload(payload: dict) -> dict:
    """
    Copy of a save payload with provenance keys repaired on every line.

    A line that carries a product id but no source type (or NONE) is a
    product line.
    """
    payload = copy.deepcopy(payload)
    sections = payload.get("sections")
    if not isinstance(sections, list):
        return payload

    normalized = []
    for section in sections:
        if isinstance(section, dict) and isinstance(section.get("lines"), list):
            section = dict(section, lines=[
                normalize_line(line) if isinstance(line, dict) else line
                for line in section["lines"]
            ])
        normalized.append(section)
    payload["sections"] = normalized
    return payload
