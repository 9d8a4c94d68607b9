"""
Order service - handles order submission and lookup
"""
from typing import List, Optional

from models.order import Order, OrderData, OrderItem, OrderResult
from database.repository import OrderRepository
from utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    # 주문 관련 비즈니스 로직을 처리하는 서비스 클래스

    def __init__(self, order_repository: Optional[OrderRepository]):
        # order_repository가 None이면 데이터베이스 미설정 상태
        self.order_repo = order_repository

    def create_order(self, order_data: OrderData) -> Optional[OrderResult]:
        # 주문을 저장한 뒤 주문 아이템들을 일괄 저장 (아이템 실패 시 주문은 유지)
        if self.order_repo is None:
            logger.error("Database is not configured, cannot create order")
            return None

        try:
            personal_info = order_data.personal_info
            shipping_address = order_data.shipping_address
            cart = order_data.cart

            # 고객 정보와 배송지를 하나의 주문 행으로 평탄화
            order_row = self.order_repo.insert_order({
                "nombre": personal_info.nombre,
                "apellidos": personal_info.apellidos,
                "email": personal_info.email,
                "telefono": personal_info.telefono,
                "direccion": shipping_address.direccion,
                "distrito": shipping_address.distrito,
                "ciudad": shipping_address.ciudad,
                "departamento": shipping_address.departamento,
                "codigo_postal": shipping_address.codigo_postal or None,
                "notas": order_data.notas or None,
                "total": cart.total or 0,
            })
        except Exception as e:
            logger.error("Failed to create order", error=str(e))
            return None

        if not order_row:
            logger.error("Order insert returned no row")
            return None

        try:
            order = Order.from_row(order_row)

            # 장바구니 항목마다 상품 정보 스냅샷을 주문 아이템으로 저장
            item_rows = [
                {
                    "order_id": order.id,
                    "product_id": item.product.id,
                    "product_name": item.product.name,
                    "price": item.product.price,
                    "quantity": item.quantity,
                }
                for item in cart.items
            ]
        except Exception as e:
            logger.error("Unexpected error while preparing order items", error=str(e))
            return None

        try:
            saved_items = self.order_repo.insert_order_items(item_rows)
        except Exception as e:
            logger.error("Failed to create order items, keeping order", order_id=order.id, error=str(e))
            return OrderResult(order=order, items=[])

        try:
            items = [OrderItem.from_row(row) for row in saved_items]
        except Exception as e:
            logger.error("Unexpected error while reading saved order items", order_id=order.id, error=str(e))
            return None

        logger.info("Order created", order_id=order.id, items_count=len(items), total=order.total)
        return OrderResult(order=order, items=items)

    def get_orders_by_email(self, email: str) -> List[Order]:
        # 이메일로 주문 목록을 최신순으로 조회
        if self.order_repo is None:
            logger.error("Database is not configured, cannot list orders")
            return []

        try:
            return [Order.from_row(row) for row in self.order_repo.find_orders_by_email(email)]
        except Exception as e:
            logger.error("Failed to load orders", error=str(e))
            return []

    def get_order_details(self, order_id: str) -> Optional[OrderResult]:
        # 특정 주문의 상세 정보 조회 (주문 + 주문 아이템)
        if self.order_repo is None:
            return None

        try:
            details = self.order_repo.get_order_details(order_id)
            if not details:
                return None

            return OrderResult(
                order=Order.from_row(details["order"]),
                items=[OrderItem.from_row(row) for row in details["items"]],
            )
        except Exception as e:
            logger.error("Failed to load order details", order_id=order_id, error=str(e))
            return None
