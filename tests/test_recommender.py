from __future__ import annotations

import random

import pytest

from storefront.catalog import Category
from storefront.recommender import MAX_RECOMMENDATIONS, recommend


class FixedDraws(random.Random):
    """Random source that replays a fixed list of draws."""

    def __init__(self, draws):
        super().__init__()
        self._draws = list(draws)

    def random(self):
        return self._draws.pop(0)


@pytest.mark.parametrize("seed", range(25))
def test_never_more_than_three_and_never_the_focal_product(catalog, seed):
    rng = random.Random(seed)
    for focal in catalog:
        picked = recommend(catalog, focal, rng=rng)
        assert len(picked) <= MAX_RECOMMENDATIONS
        assert focal.id not in {product.id for product in picked}


def test_results_follow_catalog_order(catalog):
    order = [product.id for product in catalog]
    focal = catalog.get("1")

    picked = recommend(catalog, focal, rng=random.Random(7))

    positions = [order.index(product.id) for product in picked]
    assert positions == sorted(positions)


def test_same_category_always_admitted(catalog):
    focal = catalog.get("5")
    # Every out-of-category draw rejects.
    picked = recommend(catalog, focal, rng=FixedDraws([0.0] * 10))

    assert [product.id for product in picked] == ["6"]


def test_out_of_category_admitted_above_threshold(catalog):
    focal = catalog.get("7")
    picked = recommend(catalog, focal, rng=FixedDraws([0.9, 0.1, 0.6, 0.2, 0.3, 0.4]))

    assert [product.id for product in picked] == ["1", "3", "8"]


def test_seeded_sources_reproduce_results(catalog):
    focal = catalog.get("2")

    first = recommend(catalog, focal, rng=random.Random(42))
    second = recommend(catalog, focal, rng=random.Random(42))

    assert first == second


def test_deterministic_policy_prefers_same_category_then_catalog_order(catalog):
    focal = catalog.get("6")

    picked = recommend(catalog, focal, deterministic=True)

    assert [product.id for product in picked] == ["5", "1", "2"]


def test_deterministic_policy_is_stable(catalog):
    focal = catalog.get("8")

    assert recommend(catalog, focal, deterministic=True) == recommend(catalog, focal, deterministic=True)


def test_small_catalog(product_factory):
    only = product_factory("1", "Solo Dress", Category.DRESSES)

    assert recommend([only], only) == []
