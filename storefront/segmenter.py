from __future__ import annotations

"""Entity linking for assistant text.

Finds catalog product names inside free-form text and splits the text into an
ordered list of plain and product segments. Products are scanned in catalog
order; each occurrence claims a [start, end) span of the text and claimed spans
are never scanned again, so the first product to match a span keeps it and
matches never nest or overlap. Matching is a case-insensitive literal substring
search; segment text is always sliced from the input, so original casing is
kept and joining the segment texts reproduces the input exactly.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .catalog import Product

TEXT = "text"
PRODUCT = "product"

Claim = Tuple[int, int, Product]


@dataclass(frozen=True)
class TextSegment:
    kind: str
    text: str
    product_id: Optional[str] = None

    @property
    def is_product(self) -> bool:
        return self.kind == PRODUCT


def _free_spans(claims: List[Claim], length: int) -> List[Tuple[int, int]]:
    """Unclaimed [start, end) spans of a text, in order. claims must be sorted."""
    spans: List[Tuple[int, int]] = []
    cursor = 0
    for start, end, _ in claims:
        if start > cursor:
            spans.append((cursor, start))
        cursor = end
    if cursor < length:
        spans.append((cursor, length))
    return spans


def claim_spans(text: str, products: Iterable[Product]) -> List[Claim]:
    """Return the sorted, non-overlapping spans of text claimed by product names."""
    claims: List[Claim] = []
    for product in products:
        if not product.name:
            continue
        pattern = re.compile(re.escape(product.name), re.IGNORECASE)
        found: List[Claim] = []
        for span_start, span_end in _free_spans(claims, len(text)):
            position = span_start
            while position < span_end:
                match = pattern.search(text, position, span_end)
                if match is None:
                    break
                found.append((match.start(), match.end(), product))
                position = match.end()
        if found:
            claims = sorted(claims + found, key=lambda claim: claim[0])
    return claims


def segment(text: str, products: Iterable[Product]) -> List[TextSegment]:
    """Purpose: Split text into plain and product-reference segments.
    Inputs/Outputs: Inputs are the text and products in catalog order; output is
        the ordered segment list.
    Side Effects / State: None; pure function.
    Failure Modes: None; text without matches (including "") yields one plain
        segment equal to the input.
    Testing Notes: "".join(s.text for s in segment(t, c)) == t for any t.
    """
    claims = claim_spans(text, products)
    if not claims:
        return [TextSegment(TEXT, text)]

    segments: List[TextSegment] = []
    cursor = 0
    for start, end, product in claims:
        if start > cursor:
            segments.append(TextSegment(TEXT, text[cursor:start]))
        segments.append(TextSegment(PRODUCT, text[start:end], product.id))
        cursor = end
    if cursor < len(text):
        segments.append(TextSegment(TEXT, text[cursor:]))
    return segments
