# Order Line Parser for Orderline
# Splits typed order lines like "Cucumber 4pcs" into name and quantity

import re
import logging
from typing import Callable, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass

from .catalog import CatalogItem
from .product_matcher import fuzzy_match
from .text_normalizer import UNITS, strip_units

logger = logging.getLogger(__name__)

DEFAULT_QUANTITY = 1

# Units accepted after the number in a quick order ("Egg 30 pcs")
QUICK_ORDER_UNITS = (
    'pcs', 'kg', 'g', 'L', 'l', 'bt', 'pk', 'jar', 'bag', 'small', 'big',
    'box', 'can', 'pack', 'piece', 'pieces',
)

_UNIT_SET = frozenset(UNITS)
_QUICK_UNIT_SET = frozenset(u.lower() for u in QUICK_ORDER_UNITS)

# One anchored pattern per unit, applied in vocabulary order
_TRAILING_QUICK_UNITS = tuple(
    re.compile(r'\b' + re.escape(u) + r'$', re.IGNORECASE) for u in QUICK_ORDER_UNITS
)

_QUICK_ORDER = re.compile(r'^(.*?)(?:\s+|\s*-\s*)([0-9]+)(?:\s*([a-zA-Z]+))?$')


@dataclass
class ParsedOrderLine:
    """Name and quantity split from one order line"""
    name: str
    quantity: int = DEFAULT_QUANTITY


@dataclass
class MatchResult:
    """Catalog item resolved from a quick order"""
    item: CatalogItem
    quantity: int


@dataclass
class OrderLineMatch:
    """One line of a pasted order, matched or not"""
    text: str
    name: str
    quantity: int
    item: Optional[CatalogItem] = None

    @property
    def matched(self) -> bool:
        return self.item is not None


def _to_quantity(digits: str) -> Optional[int]:
    try:
        return int(digits)
    except (TypeError, ValueError):
        return None


def _trailing_quantity(match) -> Tuple[str, str]:
    # <name><digits><letters>: letters after the number are dropped,
    # unless there is no name and they are not a unit ("6 eggs")
    name, digits, letters = match.groups()
    if not name.strip() and letters and letters.lower() not in _UNIT_SET:
        return letters, digits
    return name, digits


def _letters_then_quantity(match) -> Tuple[str, str]:
    return match.group(1) + match.group(2), match.group(3)


def _leading_quantity(match) -> Tuple[str, str]:
    unit, rest = match.group(2), match.group(3)
    if unit and unit.lower() not in _UNIT_SET:
        rest = f"{unit} {rest}"
    return rest, match.group(1)


def _spaced_quantity(match) -> Tuple[str, str]:
    return match.group(1), match.group(2)


# (pattern, extractor returning (raw name, quantity digits)); first match wins
SPLIT_PATTERNS: Tuple[Tuple[re.Pattern, Callable], ...] = (
    (re.compile(r'^(.*?)([0-9]+)\s*([a-zA-Z]*)$'), _trailing_quantity),
    (re.compile(r'^(.*?)([a-zA-Z]+)\s*([0-9]+)$'), _letters_then_quantity),
    (re.compile(r'^([0-9]+)\s*([a-zA-Z]*)\s+(.+)$'), _leading_quantity),
    (re.compile(r'^(.+?)\s+([0-9]+)$'), _spaced_quantity),
)


def split_quantity_and_name(text: str) -> ParsedOrderLine:
    """
    Split a free-text order line into item name and quantity.

    "Cucumber 4pcs" -> ("cucumber", 4), "Egg 30" -> ("egg", 30),
    "2 bags rice" -> ("rice", 2). On a match the name loses unit words
    and is lowercased; without any quantity the text comes back
    untouched with quantity 1.
    """
    text = text or ''
    for pattern, extract in SPLIT_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue
        raw_name, digits = extract(match)
        quantity = _to_quantity(digits)
        if quantity is None:
            continue
        return ParsedOrderLine(name=strip_units(raw_name).lower(), quantity=quantity)
    return ParsedOrderLine(name=text, quantity=DEFAULT_QUANTITY)


def _strip_quick_order_units(name: str, unit: Optional[str]) -> str:
    if unit and unit.lower() in _QUICK_UNIT_SET:
        name = re.sub(r'\b' + re.escape(unit) + r'$', '', name, flags=re.IGNORECASE).strip()
    for pattern in _TRAILING_QUICK_UNITS:
        name = pattern.sub('', name).strip()
    return name


def find_catalog_item(name: str, catalog: Sequence[CatalogItem]) -> Optional[CatalogItem]:
    """Case-insensitive exact name, else first name containing the search"""
    search = name.lower()
    if not search:
        return None
    for item in catalog:
        if item.name.lower() == search:
            return item
    for item in catalog:
        if search in item.name.lower():
            return item
    return None


def parse_quick_order(text: str, catalog: Sequence[CatalogItem]) -> Optional[MatchResult]:
    """
    Resolve a search-box entry like "Box pasta 2pcs" or "Egg - 30" to a
    catalog item and quantity. Needs a separator before the number.
    """
    match = _QUICK_ORDER.match((text or '').strip())
    if not match:
        return None

    raw_name, digits, unit = match.groups()
    quantity = _to_quantity(digits)
    if quantity is None:
        return None

    name = _strip_quick_order_units(raw_name.strip(), unit)
    item = find_catalog_item(name, catalog)
    if item is None:
        logger.debug("Quick order '%s' matched no catalog item", text)
        return None
    return MatchResult(item=item, quantity=quantity)


def match_order_lines(
    order: Union[str, Sequence[str]],
    catalog: Sequence[CatalogItem],
) -> List[OrderLineMatch]:
    """
    Split and match every non-blank line of a pasted order.
    Unmatched lines are kept with item=None so the caller can report them.
    """
    lines = order.splitlines() if isinstance(order, str) else list(order)
    results = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        parsed = split_quantity_and_name(line)
        item = fuzzy_match(parsed.name, catalog)
        results.append(OrderLineMatch(
            text=line, name=parsed.name, quantity=parsed.quantity, item=item
        ))

    unmatched = sum(1 for r in results if not r.matched)
    if unmatched:
        logger.info(f"Matched {len(results) - unmatched}/{len(results)} order lines")
    return results
