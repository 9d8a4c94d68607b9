"""
Database package for the sneaker storefront
Contains database connection, repository and slot storage classes
"""

from .connection import DatabaseConnection
from .repository import ProductRepository, CartRepository, OrderRepository
from .memory import MemoryStorage

__all__ = [
    'DatabaseConnection',
    'ProductRepository', 'CartRepository', 'OrderRepository',
    'MemoryStorage'
]
