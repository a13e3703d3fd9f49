# Fuzzy product name matching for Orderline
# Tiered catalog lookup: exact, word overlap, substring, edit distance

import logging
from typing import Optional, Sequence

from rapidfuzz.distance import Levenshtein

from .catalog import CatalogItem
from .text_normalizer import normalize_name, compact

logger = logging.getLogger(__name__)

# Minimum similarity for the edit-distance tier; longer names tolerate more edits
LONG_NAME_LENGTH = 8
LONG_NAME_THRESHOLD = 0.4
SHORT_NAME_THRESHOLD = 0.5

# Fallback substring tier only for searches longer than this
FALLBACK_MIN_LENGTH = 3


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance: insert, delete and substitute all cost 1."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """1 - distance / longer length; 0.0 when both strings are empty."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 0.0
    return (max_len - levenshtein_distance(a, b)) / max_len


def similarity_threshold(max_len: int) -> float:
    return LONG_NAME_THRESHOLD if max_len >= LONG_NAME_LENGTH else SHORT_NAME_THRESHOLD


def fuzzy_match(search_name: str, catalog: Sequence[CatalogItem]) -> Optional[CatalogItem]:
    """
    Find the catalog item best matching a free-text name.
    Tiers are tried in order and the first hit wins; ties inside a tier
    go to the earlier catalog entry. Returns None when nothing qualifies.

    A search that normalizes to "" returns None, and catalog items whose
    names normalize to "" ("Pack") are never candidates, so the word and
    substring tiers cannot match on an empty name.
    """
    search = normalize_name(search_name or '')
    if not search or not catalog:
        return None

    # Names that normalize to nothing ("Pack") would match everything
    candidates = []
    for item in catalog:
        normalized = normalize_name(item.name)
        if normalized:
            candidates.append((item, normalized))

    for item, normalized in candidates:
        if normalized == search:
            logger.debug("Exact match '%s' -> %s", search_name, item.name)
            return item

    search_words = set(search.split())
    for item, normalized in candidates:
        item_words = set(normalized.split())
        if search_words <= item_words or item_words <= search_words:
            logger.debug("Word match '%s' -> %s", search_name, item.name)
            return item

    search_compact = compact(search)
    for item, normalized in candidates:
        item_compact = compact(normalized)
        if search_compact in item_compact or item_compact in search_compact:
            logger.debug("Substring match '%s' -> %s", search_name, item.name)
            return item

    best_item, best_score = None, 0.0
    for item, normalized in candidates:
        item_compact = compact(normalized)
        max_len = max(len(search_compact), len(item_compact))
        if max_len == 0:
            continue
        score = similarity(search_compact, item_compact)
        if score > best_score and score >= similarity_threshold(max_len):
            best_item, best_score = item, score
    if best_item is not None:
        logger.debug("Edit-distance match '%s' -> %s (%.2f)", search_name, best_item.name, best_score)
        return best_item

    if len(search) > FALLBACK_MIN_LENGTH:
        for item, normalized in candidates:
            if search in normalized:
                return item

    logger.debug("No catalog match for '%s'", search_name)
    return None
