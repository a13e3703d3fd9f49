# Orderline
# Free-text order line parsing and fuzzy catalog matching

__version__ = '0.1.0'

from .text_normalizer import normalize_name, UNITS, STOPWORDS
from .catalog import (
    CatalogItem,
    Category,
    Supplier,
    Catalog,
    CatalogFormatError,
    parse_default_data,
    load_catalog,
)
from .product_matcher import fuzzy_match, levenshtein_distance, similarity
from .order_parser import (
    ParsedOrderLine,
    MatchResult,
    OrderLineMatch,
    split_quantity_and_name,
    parse_quick_order,
    match_order_lines,
)
from .catalog_client import CatalogClient, StubCatalogClient

__all__ = [
    'normalize_name',
    'UNITS',
    'STOPWORDS',
    'CatalogItem',
    'Category',
    'Supplier',
    'Catalog',
    'CatalogFormatError',
    'parse_default_data',
    'load_catalog',
    'fuzzy_match',
    'levenshtein_distance',
    'similarity',
    'ParsedOrderLine',
    'MatchResult',
    'OrderLineMatch',
    'split_quantity_and_name',
    'parse_quick_order',
    'match_order_lines',
    'CatalogClient',
    'StubCatalogClient',
]
