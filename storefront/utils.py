import re
from typing import Hashable, Iterable, List, TypeVar

T = TypeVar("T", bound=Hashable)


def normalize_text(text: str) -> str:
    """Purpose: Normalize free-form text for case-insensitive equality checks.
    Inputs/Outputs: Input is a raw string; output is a casefolded string with
        surrounding whitespace removed and inner whitespace collapsed.
    Side Effects / State: None; pure function.
    Dependencies: Uses regex; called by catalog name lookup and duplicate checks.
    Failure Modes: Returns an empty string when input is falsy.
    If Removed: Name lookups from assistant text become case-sensitive and miss.
    Testing Notes: "  Zen  FLOW yoga set " should equal "zen flow yoga set".
    """
    # Casefold and collapse whitespace; punctuation is significant in product names.
    if not text:
        return ""
    return re.sub(r"\s+", " ", text.casefold()).strip()


def unique_in_order(values: Iterable[T]) -> List[T]:
    """Return values without duplicates, keeping the first occurrence of each."""
    seen = set()
    result: List[T] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result
