"""
Catalog price lookup — seeds a line's unit price from a product record.

Product records come from the product catalog API and do not agree on column
names, so each price type has an ordered list of candidate keys. The first
key that is present (not None) wins; a value that is not a finite number
prices at 0.
"""

import logging
from typing import Optional

from .config import settings
from .drafts import new_line
from .models import CalcMode, PriceType, SourceType, enum_value
from .numeric import to_number

logger = logging.getLogger(__name__)


PRICE_KEYS = {
    "DESIGN": ["price_design", "design_price", "price_plan", "plan_price", "price1"],
    "CONSUMER": ["price_small", "price_smal", "price_consumer", "price_repair", "price2"],
    "SUPPLY": ["price_supply", "supply_price", "price_delivery", "delivery_price", "price3"],
    "MANUAL": [],
}


def get_product_price(product: Optional[dict], price_type) -> float:
    """Unit price of ``product`` for ``price_type``. 0 when nothing usable is found."""
    if not product:
        return 0.0
    for key in PRICE_KEYS.get(enum_value(price_type), []):
        if product.get(key) is not None:
            return to_number(product.get(key))
    return 0.0


def _text(value) -> str:
    return str(value or "").strip()


def line_from_product(product: dict, price_type=None, line_order: int = 1) -> dict:
    """
    A NORMAL line priced from a catalog product.

    Falls back to the product's delivery price when the chosen price type
    yields 0.
    """
    price_type = enum_value(price_type or settings.DEFAULT_PRICE_TYPE)
    price = get_product_price(product, price_type) or to_number(product.get("price_delivery"))
    source_id = product.get("id")

    if not price:
        logger.info("Product %s has no %s price — seeded at 0", source_id, price_type)

    return new_line(
        line_order,
        name=_text(product.get("name")) or _text(product.get("item_name")),
        spec=_text(product.get("spec")),
        unit="EA",
        qty=1,
        unit_price=price,
        calc_mode=CalcMode.NORMAL,
        source_type=SourceType.PRODUCT,
        source_id=int(to_number(source_id)) if source_id is not None else None,
        price_type=price_type,
    )


def reprice_line(line: dict, product: dict, price_type) -> dict:
    """Copy of ``line`` switched to ``price_type``, unit price re-read from ``product``.

    MANUAL keeps whatever unit price the line already has.
    """
    price_type = enum_value(price_type)
    repriced = dict(line, price_type=price_type)
    if price_type != PriceType.MANUAL.value:
        repriced["unit_price"] = get_product_price(product, price_type)
    return repriced
