# Text Normalizer - canonical item names for Orderline
# Strips units, stopwords, punctuation and plural "s" before matching

import re
from typing import Iterable

UNITS = (
    'kg', 'g', 'l', 'ml', 'pc', 'pcs', 'can', 'cans', 'bt', 'bottle', 'bottles',
    'pk', 'pack', 'packs', 'jar', 'jars', 'bag', 'bags', 'small', 'big', 'lb', 'lbs', 'oz',
)

STOPWORDS = ('for', 'of', 'the', 'a', 'an', 'and', 'to')


def word_pattern(words: Iterable[str]) -> re.Pattern:
    """Compile a case-insensitive whole-word alternation for a vocabulary."""
    alternation = '|'.join(re.escape(w) for w in words)
    return re.compile(r'\b(?:' + alternation + r')\b', re.IGNORECASE)


UNIT_PATTERN = word_pattern(UNITS)
STOPWORD_PATTERN = word_pattern(STOPWORDS)

_PUNCTUATION = re.compile(r'[^\w\s-]')
_PLURAL_S = re.compile(r's\b')
_SEPARATORS = re.compile(r'[\s-]+')
_WHITESPACE = re.compile(r'\s+')


def strip_units(text: str) -> str:
    """Remove unit words and collapse the leftover whitespace."""
    return _WHITESPACE.sub(' ', UNIT_PATTERN.sub('', text)).strip()


def _normalize_once(name: str) -> str:
    s = name.lower().strip()
    s = UNIT_PATTERN.sub('', s)
    s = STOPWORD_PATTERN.sub('', s)
    s = _PUNCTUATION.sub('', s)
    s = _PLURAL_S.sub('', s)
    return _SEPARATORS.sub(' ', s).strip()


def normalize_name(name: str) -> str:
    """
    Canonical form of an item name used by every matching tier.

    "4 Cans of Coke" -> "4 coke", "Bell-Peppers (red)" -> "bell pepper red".
    Depluralization is naive: any word-final "s" goes ("gas" -> "ga").
    The pass is repeated until stable, so removing punctuation or a plural
    "s" that uncovers another unit or stopword ("k.g", "kgs") is handled
    in the same call and the result is always a fixed point.
    """
    if not name:
        return ''
    current = _normalize_once(name)
    while True:
        again = _normalize_once(current)
        if again == current:
            return current
        current = again


def compact(text: str) -> str:
    """Drop all whitespace; used by the substring and edit-distance tiers."""
    return _WHITESPACE.sub('', text)
