"""Product deduplication within a supplier's catalog using fuzzy matching."""

from typing import List, Optional, Tuple
from uuid import UUID

from fuzzywuzzy import fuzz

from ..models import Product


HIGH_SIMILARITY_THRESHOLD = 90


def find_similar_products(
    *,
    supplier_id: UUID,
    name: str,
    threshold: int = HIGH_SIMILARITY_THRESHOLD,
    exclude_id: Optional[UUID] = None
) -> List[Tuple[Product, int]]:
    """
    Find active products of one supplier whose names resemble ``name``.

    "Basmati Rice" and "basmati  rice!" are the same listing; "Basmati Rice
    5kg" scores just under the threshold and is allowed.

    Returns:
        List of (product, similarity_score) tuples, best match first
    """
    name_norm = Product._normalize_string(name)

    queryset = Product.objects.filter(supplier_id=supplier_id, is_active=True)
    if exclude_id:
        queryset = queryset.exclude(id=exclude_id)

    candidates = []
    for product in queryset.only('id', 'name', 'name_normalized'):
        score = fuzz.ratio(name_norm, product.name_normalized)
        if score >= threshold:
            candidates.append((product, score))

    candidates.sort(key=lambda pair: pair[1], reverse=True)
    return candidates
