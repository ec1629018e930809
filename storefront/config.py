from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

DEFAULT_GOOGLE_FORM_URL = "https://docs.google.com/forms/d/e/1FAIpQLSfD_.../viewform"
RECOMMENDATION_MODES = ("random", "deterministic")


@dataclass(frozen=True)
class Settings:
    """Configuration container for the model, catalog, storage, and brand details."""
    gemini_api_key: str
    gemini_model: str
    catalog_path: Path
    storage_path: Path
    prompts_dir: Path
    brand_name: str
    whatsapp_number: str
    google_form_url: str
    recommendation_mode: str
    log_level: str


def load_settings() -> Settings:
    """Purpose: Load configuration from environment variables and defaults.
    Inputs/Outputs: No inputs; returns a Settings instance.
    Side Effects / State: Reads environment variables and filesystem paths.
    Dependencies: Uses os.getenv and BASE_DIR for default paths.
    Failure Modes: Unknown RECOMMENDATION_MODE values raise ValueError.
    If Removed: App cannot locate the catalog or storage file and fails at startup.
    Testing Notes: Verify defaults and overrides via environment variables.
    """
    # Resolve catalog and storage paths, then build Settings.
    catalog_path = os.getenv("CATALOG_PATH")
    if catalog_path:
        catalog_file = Path(catalog_path)
    else:
        catalog_file = (BASE_DIR / "resources" / "catalog.json").resolve()

    storage_path = os.getenv("WISHLIST_PATH")
    if storage_path:
        storage_file = Path(storage_path)
    else:
        storage_file = (BASE_DIR / "data" / "storage.json").resolve()

    mode = os.getenv("RECOMMENDATION_MODE", "random").strip().lower()
    if mode not in RECOMMENDATION_MODES:
        raise ValueError(f"RECOMMENDATION_MODE must be one of {RECOMMENDATION_MODES}, got {mode!r}")

    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        catalog_path=catalog_file,
        storage_path=storage_file,
        prompts_dir=(BASE_DIR / "prompts").resolve(),
        brand_name=os.getenv("BRAND_NAME", "LUMINA STYLE"),
        whatsapp_number=os.getenv("WHATSAPP_NUMBER", "1234567890"),
        google_form_url=os.getenv("GOOGLE_FORM_URL", DEFAULT_GOOGLE_FORM_URL),
        recommendation_mode=mode,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
