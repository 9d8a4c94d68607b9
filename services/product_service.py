"""
Product service - handles catalog retrieval, caching and static fallback
"""
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Any, Optional

from models.product import Product, CatalogResult, ProductLookup
from database.repository import ProductRepository
from utils.logging import get_logger
from .catalog_cache import CatalogCache
from .static_catalog import get_static_products, matches_query

logger = get_logger(__name__)

SOURCE_DATABASE = "database"
SOURCE_CACHE = "cache"
SOURCE_FALLBACK = "fallback"


class ProductService:
    # 상품 카탈로그 관련 비즈니스 로직을 처리하는 서비스 클래스

    def __init__(self, product_repository: Optional[ProductRepository],
                 cache: Optional[CatalogCache] = None, max_workers: int = 8):
        # product_repository가 None이면 데이터베이스 미설정 상태 (정적 데이터만 사용)
        self.product_repo = product_repository
        self.cache = cache or CatalogCache()
        self.max_workers = max_workers

    @property
    def is_configured(self) -> bool:
        return self.product_repo is not None

    def _fallback(self, predicate: Optional[Callable[[Product], bool]] = None) -> CatalogResult:
        products = get_static_products()
        if predicate is not None:
            products = [p for p in products if predicate(p)]
        return CatalogResult(products=products, source=SOURCE_FALLBACK)

    def _lookup_values(self, lookup: Callable[[str], List[str]], product_id: str) -> List[str]:
        # 연결 테이블 조회 실패 시 빈 목록을 반환해 인라인 배열로 대체되게 한다
        try:
            return lookup(product_id)
        except sqlite3.Error as e:
            logger.warning("Attribute lookup failed", product_id=product_id, error=str(e))
            return []

    def _with_attributes(self, rows: List[Dict[str, Any]]) -> List[Product]:
        # 상품마다 사이즈/색상 조회를 병렬로 실행한 뒤 결과를 합친다
        if not rows:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            pending = [
                (
                    row,
                    executor.submit(self._lookup_values, self.product_repo.fetch_size_values, row["id"]),
                    executor.submit(self._lookup_values, self.product_repo.fetch_color_values, row["id"]),
                )
                for row in rows
            ]
            return [
                Product.from_row(row, sizes=sizes.result(), colors=colors.result())
                for row, sizes, colors in pending
            ]

    def _query(self, fetch: Callable[[], List[Dict[str, Any]]], description: str,
               predicate: Optional[Callable[[Product], bool]] = None) -> CatalogResult:
        # 필터 조회 공통 처리: 오류 시 정적 데이터, 빈 결과는 그대로 빈 목록
        if not self.is_configured:
            return self._fallback(predicate)

        try:
            rows = fetch()
            return CatalogResult(products=self._with_attributes(rows), source=SOURCE_DATABASE)
        except Exception as e:
            logger.error("Catalog query failed, using static products", query=description, error=str(e))
            return self._fallback(predicate)

    def get_products(self) -> CatalogResult:
        # 전체 상품 조회 (5분 캐시, 오류 또는 빈 결과 시 정적 데이터)
        if not self.is_configured:
            return self._fallback()

        cached = self.cache.get()
        if cached is not None:
            return CatalogResult(products=cached, source=SOURCE_CACHE)

        try:
            rows = self.product_repo.fetch_products()
            if not rows:
                logger.warning("No products found in database, using static products")
                return self._fallback()

            products = self._with_attributes(rows)
        except Exception as e:
            logger.error("Failed to load products, using static products", error=str(e))
            return self._fallback()

        self.cache.store(products)
        return CatalogResult(products=products, source=SOURCE_DATABASE)

    def get_product_by_id(self, product_id: str) -> ProductLookup:
        # 상품 ID로 단일 상품 조회 (캐시 없음)
        def static_lookup() -> ProductLookup:
            match = next((p for p in get_static_products() if p.id == product_id), None)
            return ProductLookup(product=match, source=SOURCE_FALLBACK)

        if not self.is_configured:
            return static_lookup()

        try:
            row = self.product_repo.fetch_product(product_id)
            if not row:
                logger.warning("Product not found in database, trying static products", product_id=product_id)
                return static_lookup()

            products = self._with_attributes([row])
            return ProductLookup(product=products[0], source=SOURCE_DATABASE)
        except Exception as e:
            logger.error("Failed to load product, trying static products", product_id=product_id, error=str(e))
            return static_lookup()

    def get_featured_products(self) -> CatalogResult:
        return self._query(
            lambda: self.product_repo.fetch_featured(),
            "featured",
            lambda p: p.featured,
        )

    def search_products(self, query: str) -> CatalogResult:
        # 이름/브랜드/설명에 대한 부분 일치 검색
        return self._query(
            lambda: self.product_repo.search(query),
            f"search:{query}",
            lambda p: matches_query(p, query),
        )

    def get_products_by_category(self, category: str) -> CatalogResult:
        return self._query(
            lambda: self.product_repo.fetch_by_category(category),
            f"category:{category}",
            lambda p: p.category == category,
        )
