"""
Save payload tests — building the create/update body and repairing provenance keys.
"""

import copy

import pytest

from estimator.drafts import add_line, new_section
from estimator.errors import PayloadError
from estimator.payload import build_save_payload, normalize_payload


def _draft_sections():
    material = add_line(new_section("MATERIAL", 1), name="Pipe", spec="  ", qty=10,
                        unit_price=100, source_type="PRODUCT", source_id=7)
    material = add_line(material, name="Bracket", qty=4, unit_price=500,
                        source_type="NONE", source_id=12, remark=" rush ")
    return [material, new_section("OVERHEAD", 2)]


def test_payload_carries_resolved_amounts():
    payload = build_save_payload(11, _draft_sections(), title="  Pump room  ")
    assert payload["project_id"] == 11
    assert payload["title"] == "Pump room"
    assert payload["receiver_name"] is None
    assert payload["memo"] is None

    material, overhead = payload["sections"]
    assert [l["amount"] for l in material["lines"]] == [1000, 2000]
    # (3000 + 0) * 0.06
    assert overhead["lines"][0]["amount"] == 180
    assert overhead["lines"][0]["unit_price"] is None


def test_payload_text_fields():
    line = build_save_payload(1, _draft_sections())["sections"][0]["lines"]
    assert line[0]["spec"] is None
    assert line[1]["remark"] == "rush"


def test_source_id_only_for_product_lines():
    lines = build_save_payload(1, _draft_sections())["sections"][0]["lines"]
    assert lines[0]["source_type"] == "PRODUCT"
    assert lines[0]["source_id"] == 7
    assert lines[1]["source_type"] == "NONE"
    assert lines[1]["source_id"] is None


def test_payload_requires_project_and_sections():
    with pytest.raises(PayloadError):
        build_save_payload(None, _draft_sections())
    with pytest.raises(PayloadError):
        build_save_payload(3, [])


def test_normalize_product_id_aliases():
    payload = {"project_id": 1, "sections": [{"section_type": "MATERIAL", "lines": [
        {"name": "a", "product_id": 5, "source_type": "NONE"},
        {"name": "b", "productId": 6},
        {"name": "c", "sourceId": 9, "sourceType": "PRODUCT"},
        {"name": "d", "sourceType": "LABOR_ITEM"},
        {"name": "e", "source_type": "LABOR_ITEM", "source_id": 4},
    ]}]}
    before = copy.deepcopy(payload)
    lines = normalize_payload(payload)["sections"][0]["lines"]

    assert (lines[0]["source_type"], lines[0]["source_id"]) == ("PRODUCT", 5)
    assert (lines[1]["source_type"], lines[1]["source_id"]) == ("PRODUCT", 6)
    assert (lines[2]["source_type"], lines[2]["source_id"]) == ("PRODUCT", 9)
    assert lines[3]["source_type"] == "LABOR_ITEM"
    assert (lines[4]["source_type"], lines[4]["source_id"]) == ("LABOR_ITEM", 4)
    assert payload == before


def test_normalize_without_sections():
    assert normalize_payload({"project_id": 1}) == {"project_id": 1}
