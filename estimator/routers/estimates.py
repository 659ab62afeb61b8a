from fastapi import APIRouter, HTTPException
from typing import Any, Dict

from .. import schemas
from ..catalog import line_from_product
from ..compute_engine import EstimateEngine
from ..drafts import new_section
from ..errors import PayloadError
from ..models import SectionType
from ..payload import build_save_payload, normalize_payload

router = APIRouter(prefix="/estimates", tags=["estimates"])

engine = EstimateEngine()


def _sections_to_dicts(sections) -> list:
    return [s.model_dump(mode="json") for s in sections]


# --- Endpoints ---

@router.post("/compute", response_model=schemas.ComputedEstimate)
def compute(request: schemas.ComputeRequest):
    """Resolve amounts, subtotals, tax and total for a draft. Nothing is stored."""
    return engine.compute(_sections_to_dicts(request.sections))


@router.post("/payload", response_model=schemas.SavePayload)
def build_payload(draft: schemas.DraftEstimate):
    """Turn a draft into the create/update body for the persistence API."""
    try:
        return build_save_payload(
            project_id=draft.project_id,
            sections=_sections_to_dicts(draft.sections),
            title=draft.title,
            receiver_name=draft.receiver_name,
            memo=draft.memo,
            tax_rate=engine.tax_rate,
        )
    except PayloadError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/normalize")
def normalize(payload: Dict[str, Any]):
    """Repair product provenance keys on a raw save payload."""
    return normalize_payload(payload)


@router.get("/templates/{section_type}", response_model=schemas.EstimateSection)
def get_template(section_type: str, section_order: int = 1):
    """A new section of ``section_type`` with its standard lines."""
    try:
        section_type = SectionType(section_type.upper())
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown section type: {section_type}")
    return new_section(section_type, section_order)


@router.post("/lines/from-product", response_model=schemas.EstimateLine)
def line_for_product(request: schemas.ProductLineRequest):
    """Seed a NORMAL line from a catalog product record."""
    if not request.product:
        raise HTTPException(status_code=400, detail="Product record is empty")
    return line_from_product(request.product, request.price_type, request.line_order)
