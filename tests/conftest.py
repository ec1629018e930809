from __future__ import annotations

import threading
from pathlib import Path
from typing import List, Optional

import pytest

from storefront.catalog import Catalog, CatalogLoader, Category, Product
from storefront.config import BASE_DIR, Settings

CATALOG_PATH = BASE_DIR / "resources" / "catalog.json"
PROMPTS_DIR = BASE_DIR / "prompts"


def build_product(
    product_id: str,
    name: str,
    category: Category = Category.DRESSES,
    colors=("Black",),
) -> Product:
    return Product(
        id=product_id,
        name=name,
        price="$10.00",
        category=category,
        image=f"https://example.test/{product_id}.jpg",
        description=f"{name} description.",
        fabric="Cotton",
        care="Hand wash.",
        colors=tuple(colors),
    )


@pytest.fixture()
def product_factory():
    return build_product


@pytest.fixture(scope="session")
def catalog() -> Catalog:
    loaded, _ = CatalogLoader(CATALOG_PATH).load()
    return loaded


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        gemini_api_key="test-key",
        gemini_model="gemini-test",
        catalog_path=CATALOG_PATH,
        storage_path=tmp_path / "storage.json",
        prompts_dir=PROMPTS_DIR,
        brand_name="LUMINA STYLE",
        whatsapp_number="1234567890",
        google_form_url="https://forms.example.test/inquiry",
        recommendation_mode="deterministic",
        log_level="INFO",
    )


class FakeGenerator:
    """Records calls; returns a canned reply, raises, or blocks until released."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None, block: bool = False) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[dict] = []
        self.started = threading.Event()
        self.release = threading.Event()
        if not block:
            self.release.set()

    def generate_content(self, contents, model=None, system_instruction=None):
        self.calls.append({"contents": contents, "model": model, "system_instruction": system_instruction})
        self.started.set()
        self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture()
def fake_generator_cls():
    return FakeGenerator
