"""
Catalog models for the store back-office.

Model Hierarchy:
- Product: Base product with its own SKU and pricing
- ProductOption: Configurable dimension of a product (Color, Size)
- OptionVariant: Value of an option with SKU, price and sale window (Red, Blue)
- ProductMedia: Ordered media of a product, at most one default
- Category: Hierarchical categories assigned to products
- PriceHistory: Audit trail of variant price changes
"""

from .product import Product
from .option import ProductOption
from .variant import OptionVariant
from .media import ProductMedia
from .category import Category
from .price_history import PriceHistory

__all__ = [
    'Product',
    'ProductOption',
    'OptionVariant',
    'ProductMedia',
    'Category',
    'PriceHistory',
]
