from __future__ import annotations

import json

import pytest

from storefront.catalog import Catalog, CatalogError, CatalogLoader, Category, parse_product


def record(**overrides):
    base = {
        "id": "1",
        "name": "Test Dress",
        "price": "$1.00",
        "category": "Dresses",
        "image": "img",
        "description": "desc",
        "fabric": "Silk",
        "care": "Dry clean",
        "colors": ["Red"],
    }
    base.update(overrides)
    return base


def test_bundled_catalog_loads_in_order(catalog):
    assert [product.id for product in catalog] == [str(n) for n in range(1, 9)]
    assert catalog.get("2").name == "Aura Seamless Leggings"
    assert catalog.get("8").category is Category.JUMPSUITS
    assert catalog.get("1").colors == ("Midnight Blue", "Emerald Green", "Rose Gold")


def test_loader_reports_metadata(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([record()]), encoding="utf-8")

    loaded, meta = CatalogLoader(path).load()

    assert len(loaded) == 1
    assert meta.file_name == "catalog.json"
    assert len(meta.sha256) == 64


def test_find_by_name_is_case_insensitive(catalog):
    assert catalog.find_by_name("  zen FLOW yoga set ").id == "3"
    assert catalog.find_by_name("Zen Flow") is None


def test_membership_and_category_lookup(catalog):
    assert "5" in catalog
    assert "99" not in catalog
    assert [product.id for product in catalog.in_category(Category.LINGERIE)] == ["5", "6"]


def test_category_from_label_accepts_labels_and_names():
    assert Category.from_label("Gym Wear") is Category.GYM_WEAR
    assert Category.from_label("GYM_WEAR") is Category.GYM_WEAR
    with pytest.raises(CatalogError):
        Category.from_label("Shoes")


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"category": "Shoes"}, "Unknown category"),
        ({"colors": []}, "at least one color"),
        ({"colors": "Red"}, "at least one color"),
    ],
)
def test_parse_product_rejects_invalid_records(overrides, message):
    with pytest.raises(CatalogError, match=message):
        parse_product(record(**overrides))


def test_parse_product_reports_missing_fields():
    item = record()
    del item["care"]

    with pytest.raises(CatalogError, match="care"):
        parse_product(item)


def test_catalog_rejects_duplicate_ids_and_names():
    first = parse_product(record())
    with pytest.raises(CatalogError, match="Duplicate product id"):
        Catalog([first, parse_product(record(name="Other"))])
    with pytest.raises(CatalogError, match="Duplicate product name"):
        Catalog([first, parse_product(record(id="2", name="TEST DRESS"))])


def test_loader_rejects_scalar_root(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text("42", encoding="utf-8")

    with pytest.raises(CatalogError):
        CatalogLoader(path).load()
