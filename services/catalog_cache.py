"""
Time-based cache for the full product catalog
"""
import time
from typing import Callable, List, Optional

from models.product import Product

DEFAULT_TTL_SECONDS = 5 * 60


class CatalogCache:
    """Holds the last full product list and the time it was stored.

    Two concurrent refreshes may both miss and both store; they compute the
    same data so the last write simply wins.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._products: Optional[List[Product]] = None
        self._stored_at = 0.0

    def get(self) -> Optional[List[Product]]:
        if self._products is None:
            return None
        if self.clock() - self._stored_at >= self.ttl_seconds:
            return None
        return list(self._products)

    def store(self, products: List[Product]) -> None:
        self._products = list(products)
        self._stored_at = self.clock()

    def clear(self) -> None:
        self._products = None
        self._stored_at = 0.0

    @property
    def is_fresh(self) -> bool:
        return self.get() is not None
