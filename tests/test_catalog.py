"""
Catalog pricing tests — price column lookup and line seeding from products.
"""

from estimator.catalog import get_product_price, line_from_product, reprice_line
from estimator.models import PriceType


PRODUCT = {
    "id": 7,
    "name": "  Steel pipe  ",
    "item_name": "Pipe",
    "spec": "50A",
    "price_design": 1200,
    "price_small": 1100,
    "price_supply": 900,
    "price_delivery": 950,
}


def test_price_by_type():
    assert get_product_price(PRODUCT, "DESIGN") == 1200
    assert get_product_price(PRODUCT, PriceType.CONSUMER) == 1100
    assert get_product_price(PRODUCT, "SUPPLY") == 900
    assert get_product_price(PRODUCT, "MANUAL") == 0


def test_price_falls_through_candidate_keys():
    assert get_product_price({"design_price": 100, "price1": 50}, "DESIGN") == 100
    assert get_product_price({"price_design": None, "plan_price": "250"}, "DESIGN") == 250
    assert get_product_price({"price_repair": 75}, "CONSUMER") == 75
    assert get_product_price({"delivery_price": 60}, "SUPPLY") == 60


def test_first_present_key_wins_even_if_unusable():
    assert get_product_price({"price_design": "n/a", "price1": 500}, "DESIGN") == 0


def test_price_of_nothing():
    assert get_product_price(None, "DESIGN") == 0
    assert get_product_price({}, "SUPPLY") == 0
    assert get_product_price(PRODUCT, "BOGUS") == 0


def test_line_from_product():
    line = line_from_product(PRODUCT)
    assert line["name"] == "Steel pipe"
    assert line["spec"] == "50A"
    assert line["unit"] == "EA"
    assert line["qty"] == 1
    assert line["unit_price"] == 1200
    assert line["calc_mode"] == "NORMAL"
    assert line["source_type"] == "PRODUCT"
    assert line["source_id"] == 7
    assert line["price_type"] == "DESIGN"


def test_line_from_product_falls_back_to_delivery_price():
    line = line_from_product({"id": 3, "item_name": "Valve", "price_delivery": 800}, "CONSUMER", 4)
    assert line["name"] == "Valve"
    assert line["unit_price"] == 800
    assert line["price_type"] == "CONSUMER"
    assert line["line_order"] == 4


def test_reprice_line():
    line = line_from_product(PRODUCT)
    supply = reprice_line(line, PRODUCT, "SUPPLY")
    assert supply["unit_price"] == 900
    assert supply["price_type"] == "SUPPLY"
    assert line["unit_price"] == 1200

    manual = reprice_line(dict(line, unit_price=1500), PRODUCT, PriceType.MANUAL)
    assert manual["unit_price"] == 1500
    assert manual["price_type"] == "MANUAL"
