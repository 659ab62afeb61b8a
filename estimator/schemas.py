from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from .models import SectionType, CalcMode, PriceType, SourceType


class EstimateLineBase(BaseModel):
    line_order: int = 1
    name: str = ""
    spec: Optional[str] = None
    unit: str = "EA"
    qty: float = 0.0
    unit_price: Optional[float] = None
    remark: Optional[str] = None
    calc_mode: CalcMode = CalcMode.NORMAL
    base_section_type: Optional[SectionType] = None
    formula: Optional[str] = None
    source_type: SourceType = SourceType.NONE
    source_id: Optional[int] = None
    price_type: Optional[PriceType] = None

class EstimateLineCreate(EstimateLineBase):
    amount: Optional[float] = None  # ignored — always recomputed

class EstimateLine(EstimateLineBase):
    amount: Optional[int] = None

class EstimateSectionBase(BaseModel):
    section_order: int = 1
    section_type: SectionType
    title: str = ""

class EstimateSectionCreate(EstimateSectionBase):
    lines: List[EstimateLineCreate] = []

class EstimateSection(EstimateSectionBase):
    lines: List[EstimateLine] = []
    subtotal: int = 0

class ComputeRequest(BaseModel):
    sections: List[EstimateSectionCreate] = []

class LineWarning(BaseModel):
    section_order: Optional[int] = None
    line_order: Optional[int] = None
    code: str
    message: str

class ComputedEstimate(BaseModel):
    sections: List[EstimateSection] = []
    subtotal_by_type: Dict[str, int]
    subtotal: int
    tax: int
    total: int
    warnings: List[LineWarning] = []

class DraftEstimate(BaseModel):
    project_id: Optional[int] = None
    title: Optional[str] = None
    receiver_name: Optional[str] = None
    memo: Optional[str] = None
    sections: List[EstimateSectionCreate] = []

class SaveSection(EstimateSectionBase):
    lines: List[EstimateLine] = []

class SavePayload(BaseModel):
    project_id: int
    title: Optional[str] = None
    receiver_name: Optional[str] = None
    memo: Optional[str] = None
    sections: List[SaveSection] = []

class ProductLineRequest(BaseModel):
    product: Dict[str, Any]
    price_type: Optional[PriceType] = None
    line_order: int = 1
