"""
Product matching for marketplace CSV titles.

Titles are resolved in order: learned mapping, exact normalized name, product
name contained in the title, then fuzzy similarity (rapidfuzz).
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional
import uuid

from rapidfuzz import fuzz, process

from app.config import settings
from core.utils.helpers import normalize_title
from domain.enums import MatchType

# Fuzzy scores at or above this are reported as medium confidence
MEDIUM_SCORE = 80


@dataclass
class ProductMatch:
    product_id: uuid.UUID
    product_name: str
    match_type: MatchType
    confidence: int


def find_best_match(
    title: str,
    products: Iterable[Any],
    learned: Optional[Mapping[str, uuid.UUID]] = None,
    threshold: Optional[int] = None,
) -> Optional[ProductMatch]:
    """
    Resolve a CSV title to a product.

    Args:
        title: title as it appears in the CSV
        products: objects with `id` and `name` (ORM rows work)
        learned: {title: product_id} learned for the marketplace
        threshold: minimum fuzzy score, defaults to settings.match_threshold

    Returns:
        ProductMatch or None when nothing scores high enough
    """
    candidates = [p for p in products if p.name and p.name.strip()]
    if not title or not title.strip() or not candidates:
        return None

    by_id = {p.id: p for p in candidates}
    learned_id = (learned or {}).get(title)
    if learned_id is None and learned:
        learned_id = learned.get(title.strip())
    if learned_id in by_id:
        return ProductMatch(learned_id, by_id[learned_id].name, MatchType.LEARNED, 100)

    key = normalize_title(title)
    if not key:
        return None
    names = {p.id: normalize_title(p.name) for p in candidates}

    for p in candidates:
        if names[p.id] == key:
            return ProductMatch(p.id, p.name, MatchType.EXACT, 100)

    contained = [p for p in candidates if names[p.id] and names[p.id] in key]
    if contained:
        best = max(contained, key=lambda p: len(names[p.id]))
        return ProductMatch(best.id, best.name, MatchType.HIGH, 90)

    cutoff = settings.match_threshold if threshold is None else threshold
    result = process.extractOne(key, names, scorer=fuzz.ratio, score_cutoff=cutoff)
    if result is None:
        return None
    _, score, product_id = result
    match_type = MatchType.MEDIUM if score >= MEDIUM_SCORE else MatchType.LOW
    return ProductMatch(product_id, by_id[product_id].name, match_type, int(round(score)))
