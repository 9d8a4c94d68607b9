"""
Models package for the sneaker storefront
Contains data models and the pure cart operations
"""

from .product import Product, CatalogResult, ProductLookup
from .cart import Cart, CartItem, LineItemKey
from .order import Order, OrderItem, OrderData, OrderResult, PersonalInfo, ShippingAddress

__all__ = [
    'Product', 'CatalogResult', 'ProductLookup',
    'Cart', 'CartItem', 'LineItemKey',
    'Order', 'OrderItem', 'OrderData', 'OrderResult', 'PersonalInfo', 'ShippingAddress'
]
