"""
Main Storefront class - orchestrates all services
"""
from typing import List, Optional

from config import Config
from database.connection import DatabaseConnection
from database.memory import MemoryStorage
from database.repository import ProductRepository, CartRepository, OrderRepository
from models.order import Order, OrderData, OrderResult
from models.product import CatalogResult, ProductLookup
from services.cart_service import CartService
from services.catalog_cache import CatalogCache
from services.order_service import OrderService
from services.product_service import ProductService


class Storefront:
    # 메인 스토어 클래스 - 모든 서비스를 조율하는 중앙 관리자

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

        # 데이터베이스 경로가 없으면 미설정 상태로 동작 (정적 카탈로그, 주문 불가)
        if self.config.database_configured:
            self.db_connection = DatabaseConnection(self.config.database_path)
            self.product_repo = ProductRepository(self.db_connection)
            self.order_repo = OrderRepository(self.db_connection)
            self.cart_storage = CartRepository(self.db_connection)
        else:
            self.db_connection = None
            self.product_repo = None
            self.order_repo = None
            self.cart_storage = MemoryStorage()

        # 서비스 레이어 초기화 (비즈니스 로직 계층)
        self.product_service = ProductService(
            self.product_repo, cache=CatalogCache(ttl_seconds=self.config.catalog_cache_ttl)
        )
        self.order_service = OrderService(self.order_repo)

    # === 상품 관련 메서드들 ===
    def get_products(self) -> CatalogResult:
        return self.product_service.get_products()

    def get_product_by_id(self, product_id: str) -> ProductLookup:
        return self.product_service.get_product_by_id(product_id)

    def get_featured_products(self) -> CatalogResult:
        return self.product_service.get_featured_products()

    def search_products(self, query: str) -> CatalogResult:
        return self.product_service.search_products(query)

    def get_products_by_category(self, category: str) -> CatalogResult:
        return self.product_service.get_products_by_category(category)

    # === 장바구니 관련 메서드들 ===
    def cart_for(self, cart_id: str) -> CartService:
        # 클라이언트별 저장 슬롯에 연결된 장바구니 서비스 생성
        return CartService(self.cart_storage, storage_key=f"{self.config.cart_storage_key}:{cart_id}")

    # === 주문 관련 메서드들 ===
    def create_order(self, order_data: OrderData) -> Optional[OrderResult]:
        return self.order_service.create_order(order_data)

    def get_orders_by_email(self, email: str) -> List[Order]:
        return self.order_service.get_orders_by_email(email)

    def get_order_details(self, order_id: str) -> Optional[OrderResult]:
        return self.order_service.get_order_details(order_id)
