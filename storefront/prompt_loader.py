from __future__ import annotations

from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=8)
def load_prompt(prompt_path: Path) -> str:
    """Purpose: Load a prompt template as UTF-8 text, stripping a BOM if present.
    Inputs/Outputs: Input is a Path to the template; output is the decoded string.
    Side Effects / State: Caches the decoded template per path.
    Dependencies: Uses Path.read_text/read_bytes; used by the conversation session.
    Failure Modes: UnicodeDecodeError triggers a tolerant decode that drops invalid
        bytes; a missing file raises FileNotFoundError.
    If Removed: The stylist has no system instruction and generation loses context.
    Testing Notes: Validate BOM stripping with a temp file.
    """
    # Read as UTF-8 and fall back to a tolerant decode if needed.
    try:
        return prompt_path.read_text(encoding="utf-8").lstrip("\ufeff")
    except UnicodeDecodeError:
        text = prompt_path.read_bytes().decode("utf-8", errors="ignore")
        return text.lstrip("\ufeff")


def render_prompt(prompt_path: Path, **values: str) -> str:
    """Fill a template's {placeholders}; unknown placeholders raise KeyError."""
    return load_prompt(prompt_path).format(**values).strip()
