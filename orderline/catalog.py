# Catalog - items, categories and suppliers for Orderline
# Imports the ordering app's default-data JSON and plain item records

import re
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_EMOJI = '📦'
UNKNOWN_SUPPLIER = 'Unknown'

# Leading run of symbol characters (emoji) followed by the label text
_EMOJI_PREFIX = re.compile(r'^([^\w\s]+)\s*(.+)$')
# Label text followed by a trailing run of non-ASCII symbols ("Dairy 🥚")
_EMOJI_SUFFIX = re.compile(r'^(.+?)\s*([^\w\s\x00-\x7f]+)$')


class CatalogFormatError(ValueError):
    """Raised when catalog JSON has none of the supported shapes"""


def slugify(name: str) -> str:
    """Lowercase id with whitespace runs replaced by hyphens"""
    return re.sub(r'\s+', '-', name.strip().lower())


@dataclass(frozen=True)
class CatalogItem:
    """An orderable item; never mutated by the parser or matcher"""
    id: str
    name: str
    category: str = ''
    supplier: str = ''
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> 'CatalogItem':
        name = str(record.get('name') or '')
        return cls(
            id=str(record.get('id') or slugify(name)),
            name=name,
            category=str(record.get('category') or ''),
            supplier=str(record.get('supplier') or ''),
            tags=tuple(record.get('tags') or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'supplier': self.supplier,
            'tags': list(self.tags),
        }


@dataclass
class Category:
    id: str
    name: str
    emoji: str = DEFAULT_EMOJI

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'emoji': self.emoji}


@dataclass
class Supplier:
    id: str
    name: str
    default_payment_method: str = 'cash'
    default_order_type: str = 'pickup'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'defaultPaymentMethod': self.default_payment_method,
            'defaultOrderType': self.default_order_type,
        }


@dataclass
class Catalog:
    """Result of a catalog import"""
    items: List[CatalogItem] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    suppliers: List[Supplier] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Export shape read back by parse_catalog"""
        return {
            'items': [i.to_dict() for i in self.items],
            'categories': [c.to_dict() for c in self.categories],
            'suppliers': [s.to_dict() for s in self.suppliers],
        }


def split_emoji_and_name(label: str) -> Tuple[str, str]:
    """
    Split "🥦Vegetables" into ("🥦", "Vegetables"). A trailing emoji
    ("Vegetables 🥦") is recognised too; default emoji when absent.
    """
    label = label.strip()
    match = _EMOJI_PREFIX.match(label)
    if match:
        return match.group(1), match.group(2).strip()
    match = _EMOJI_SUFFIX.match(label)
    if match:
        return match.group(2), match.group(1).strip()
    return DEFAULT_EMOJI, label.strip()


def parse_default_data(data: List[Dict[str, str]]) -> Catalog:
    """
    Build a catalog from the app's default-data pair.

    data[0] maps item name -> category label (optionally emoji-prefixed),
    data[1] maps item name -> supplier name. The "item" key is the header row.
    Categories and suppliers keep first-seen order.
    """
    if not isinstance(data, list) or len(data) < 2:
        raise CatalogFormatError("default data must be a [categories, suppliers] pair")

    category_map, supplier_map = data[0], data[1]
    categories: Dict[str, Category] = {}
    suppliers: Dict[str, Supplier] = {}
    items: List[CatalogItem] = []

    for item_name, label in category_map.items():
        if item_name == 'item':
            continue

        emoji, category_name = split_emoji_and_name(str(label))
        supplier_name = supplier_map.get(item_name) or UNKNOWN_SUPPLIER

        if category_name not in categories:
            categories[category_name] = Category(
                id=slugify(category_name), name=category_name, emoji=emoji
            )
        if supplier_name not in suppliers:
            suppliers[supplier_name] = Supplier(id=slugify(supplier_name), name=supplier_name)

        items.append(CatalogItem(
            id=slugify(item_name),
            name=item_name,
            category=category_name,
            supplier=supplier_name,
        ))

    logger.debug(
        "Imported %d items, %d categories, %d suppliers",
        len(items), len(categories), len(suppliers),
    )
    return Catalog(
        items=items,
        categories=list(categories.values()),
        suppliers=list(suppliers.values()),
    )


def category_from_dict(record: Dict[str, Any]) -> Category:
    name = str(record.get('name') or '')
    return Category(
        id=str(record.get('id') or slugify(name)),
        name=name,
        emoji=record.get('emoji') or DEFAULT_EMOJI,
    )


def supplier_from_dict(record: Dict[str, Any]) -> Supplier:
    # API records use camelCase keys
    name = str(record.get('name') or '')
    return Supplier(
        id=str(record.get('id') or slugify(name)),
        name=name,
        default_payment_method=record.get('defaultPaymentMethod') or 'cash',
        default_order_type=record.get('defaultOrderType') or 'pickup',
    )


def catalog_from_records(records: List[Dict[str, Any]]) -> Catalog:
    """Catalog holding only items, from API-style item records"""
    return Catalog(items=[CatalogItem.from_dict(r) for r in records if r.get('name')])


def parse_catalog(data: Any) -> Catalog:
    """Dispatch on the JSON shape: default-data pair, item list, or {items, ...}"""
    if isinstance(data, dict) and isinstance(data.get('items'), list):
        catalog = catalog_from_records(data['items'])
        catalog.categories = [category_from_dict(c) for c in data.get('categories') or []]
        catalog.suppliers = [supplier_from_dict(s) for s in data.get('suppliers') or []]
        return catalog

    if isinstance(data, list):
        if len(data) >= 2 and all(isinstance(d, dict) and 'name' not in d for d in data[:2]):
            return parse_default_data(data)
        if all(isinstance(d, dict) for d in data):
            return catalog_from_records(data)

    raise CatalogFormatError("unrecognized catalog format")


def load_catalog(path: Union[str, Path]) -> Catalog:
    """Load a catalog JSON file"""
    path = Path(path)
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    catalog = parse_catalog(data)
    logger.info(f"Loaded {len(catalog.items)} catalog items from {path}")
    return catalog


def save_catalog(catalog: Catalog, path: Union[str, Path]):
    """Export a catalog as JSON that load_catalog reads back"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(catalog.to_dict(), f, ensure_ascii=False, indent=2)
    logger.info(f"Saved {len(catalog.items)} catalog items to {path}")
