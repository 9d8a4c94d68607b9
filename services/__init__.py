"""
Services package for the sneaker storefront
Contains business logic services
"""

from .product_service import ProductService
from .cart_service import CartService, CartBadge, format_price
from .order_service import OrderService
from .catalog_cache import CatalogCache

__all__ = [
    'ProductService', 'CartService', 'CartBadge', 'format_price',
    'OrderService', 'CatalogCache'
]
