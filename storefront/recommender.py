from __future__ import annotations

"""Cross-sell selection for the product detail view ("Complete The Look").

Two policies are available:

* random (default): every product in the focal product's category is admitted;
  every other product is admitted when a draw from ``rng`` exceeds 0.5. Repeated
  calls with identical inputs can therefore return different products. Pass a
  seeded ``random.Random`` to reproduce a sequence.
* deterministic: same-category products first, then the remaining products in
  catalog order. Results are stable for a given catalog.

Both policies exclude the focal product and return at most three products.
"""

import random
from typing import Iterable, List, Optional

from .catalog import Product

MAX_RECOMMENDATIONS = 3
ADMISSION_THRESHOLD = 0.5


def recommend(
    products: Iterable[Product],
    focal: Product,
    rng: Optional[random.Random] = None,
    deterministic: bool = False,
    limit: int = MAX_RECOMMENDATIONS,
) -> List[Product]:
    candidates = [product for product in products if product.id != focal.id]
    if deterministic:
        same = [product for product in candidates if product.category == focal.category]
        rest = [product for product in candidates if product.category != focal.category]
        return (same + rest)[:limit]

    draw = rng or random.Random()
    picked: List[Product] = []
    for product in candidates:
        if len(picked) >= limit:
            break
        if product.category == focal.category or draw.random() > ADMISSION_THRESHOLD:
            picked.append(product)
    return picked
