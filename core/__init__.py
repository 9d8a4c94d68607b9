"""
Core package for the sneaker storefront
Contains main orchestration
"""

from .storefront import Storefront

__all__ = [
    'Storefront'
]
