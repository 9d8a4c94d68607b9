"""
Cart service - durable cart storage with defensive re-validation
"""
import json
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from models import cart as cart_ops
from models.cart import Cart, CartItem, ItemId, calculate_total, create_cart
from models.product import Product
from utils.logging import get_logger

logger = get_logger(__name__)

CART_STORAGE_KEY = "sneakerstore_cart"

Listener = Callable[[], None]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _reject_constant(name: str) -> None:
    # NaN, Infinity, -Infinity 는 JSON 표준이 아니다
    raise ValueError(f"non-standard JSON constant: {name}")


def load_cart_json(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def invalid_item_reason(raw: Any) -> Optional[str]:
    """Return why a stored line item is unusable, or ``None`` if it is valid.

    The same policy applies when reading and when writing: the item must be
    an object holding a ``product`` object with an ``id`` and a positive
    numeric ``quantity``.
    """
    if not isinstance(raw, dict):
        return "not an object"
    product = raw.get("product")
    if not isinstance(product, dict):
        return "missing product"
    if not product.get("id"):
        return "product without id"
    quantity = raw.get("quantity")
    if not _is_number(quantity) or quantity <= 0:
        return "invalid quantity"
    return None


def parse_item(raw: Dict[str, Any]) -> CartItem:
    return CartItem(
        product=Product.from_dict(raw["product"]),
        quantity=raw["quantity"],
        size=str(raw.get("size") or ""),
        color=str(raw.get("color") or ""),
    )


def format_price(price: float) -> str:
    # 페루 솔(PEN) 표기, 소수점 두 자리와 천 단위 구분자
    return f"S/ {price:,.2f}"


@dataclass
class CartBadge:
    """Visible item-count indicator"""
    text: str = ""
    visible: bool = False

    def update(self, count: int) -> None:
        self.text = str(count) if count > 0 else ""
        self.visible = count > 0


class CartService:
    # 장바구니를 저장 슬롯에 보관하고 읽기/쓰기마다 내용을 다시 검증하는 서비스 클래스

    def __init__(self, storage=None, storage_key: str = CART_STORAGE_KEY,
                 badge: Optional[CartBadge] = None):
        # storage가 None이면 저장소가 없는 환경 (서버 렌더링): 항상 빈 장바구니
        self.storage = storage
        self.storage_key = storage_key
        self.badge = badge or CartBadge()
        self._listeners: List[Listener] = []

    # === 변경 알림 ===
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _dispatch_cart_update(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                logger.error("Cart listener failed", listener=repr(listener), error=str(e))

    # === 저장소 접근 ===
    def _serialize(self, cart: Cart) -> str:
        return json.dumps(cart.to_dict(), ensure_ascii=False, sort_keys=True)

    def _remove_slot(self) -> None:
        try:
            self.storage.remove_item(self.storage_key)
        except Exception as e:
            logger.error("Failed to clear corrupted cart slot", error=str(e))

    def get_cart(self) -> Cart:
        # 저장된 장바구니를 읽고 손상된 항목을 걸러낸다
        if self.storage is None:
            return create_cart()

        try:
            stored = self.storage.get_item(self.storage_key)
        except Exception as e:
            logger.error("Failed to read cart slot", error=str(e))
            return create_cart()

        if not stored:
            return create_cart()

        try:
            parsed = load_cart_json(stored)
        except ValueError as e:
            logger.error("Stored cart is not valid JSON, clearing", error=str(e))
            self._remove_slot()
            return create_cart()

        if not isinstance(parsed, dict):
            logger.warning("Stored cart is not an object")
            return create_cart()

        raw_items = parsed.get("items")
        if not isinstance(raw_items, list):
            logger.warning("Stored cart items is not a list")
            return create_cart()

        valid_items = []
        try:
            for raw in raw_items:
                reason = invalid_item_reason(raw)
                if reason:
                    logger.warning("Invalid cart item dropped", reason=reason)
                    continue
                valid_items.append(parse_item(raw))
        except Exception as e:
            logger.error("Stored cart items could not be parsed, clearing", error=str(e))
            self._remove_slot()
            return create_cart()

        # 항목이 있었는데 모두 손상된 경우 슬롯을 비운다
        if raw_items and not valid_items:
            logger.warning("All stored cart items were invalid, clearing")
            self._remove_slot()
            return create_cart()

        total = calculate_total(valid_items)

        # 일부만 걸러진 경우 정리된 장바구니를 즉시 다시 기록
        if len(valid_items) != len(raw_items):
            logger.warning("Filtered invalid cart items", dropped=len(raw_items) - len(valid_items))
            cleaned = Cart(items=tuple(valid_items), total=total)
            try:
                self.storage.set_item(self.storage_key, self._serialize(cleaned))
            except Exception as e:
                logger.error("Failed to save cleaned cart", error=str(e))
            return cleaned

        stored_total = parsed.get("total")
        if not (_is_number(stored_total) and stored_total == total):
            stored_total = total
        return Cart(items=tuple(valid_items), total=stored_total)

    def save_cart(self, cart: Union[Cart, Dict[str, Any]]) -> bool:
        """Validate and persist ``cart``; return whether it was written.

        The supplied total is kept only when it is within 0.01 of the
        recomputed total. A cart whose items are all invalid is never
        written. After a verified write the badge is refreshed and the
        listeners are notified.
        """
        if self.storage is None:
            return False

        raw = cart.to_dict() if isinstance(cart, Cart) else cart
        raw_items = raw.get("items") if isinstance(raw, dict) else None
        if not isinstance(raw_items, (list, tuple)):
            logger.error("Refusing to save cart without an item list")
            return False

        valid_items = []
        for item in raw_items:
            reason = invalid_item_reason(item)
            if reason:
                logger.warning("Invalid cart item not saved", reason=reason)
                continue
            valid_items.append(parse_item(item))

        if raw_items and not valid_items:
            logger.error("Refusing to save cart: every item is invalid")
            return False

        total = calculate_total(valid_items)
        supplied_total = raw.get("total")
        if not (_is_number(supplied_total) and abs(supplied_total - total) < 0.01):
            supplied_total = total

        cart_to_save = Cart(items=tuple(valid_items), total=supplied_total)
        payload = self._serialize(cart_to_save)

        try:
            self.storage.set_item(self.storage_key, payload)
            verification = self.storage.get_item(self.storage_key)
        except Exception as e:
            logger.error("Failed to save cart", error=str(e))
            try:
                self.storage.set_item(self.storage_key, self._serialize(create_cart()))
            except Exception as reset_error:
                logger.critical("Could not even save an empty cart", error=str(reset_error))
            return False

        if verification != payload:
            logger.error("Cart write verification failed")
            return False

        logger.info(
            "Cart saved",
            items_count=len(cart_to_save.items),
            total=cart_to_save.total,
        )
        self.badge.update(cart_ops.get_cart_item_count(cart_to_save))
        self._dispatch_cart_update()
        return True

    # === 장바구니 조작 ===
    def add_to_cart(self, product: Union[Product, Dict[str, Any], None], quantity: Any = 1,
                    size: str = "", color: str = "") -> Cart:
        # UI에서 호출하는 장바구니 추가 (상품 검증, 사이즈/색상 기본값, 저장 후 재조회)
        if isinstance(product, Product):
            product = product.to_dict()

        if not product or not isinstance(product, dict):
            logger.error("Cannot add to cart: product is not defined")
            return self.get_cart()

        if not product.get("id"):
            logger.error("Cannot add to cart: product without id")
            return self.get_cart()

        if not product.get("name"):
            logger.error("Cannot add to cart: product without name", product_id=product.get("id"))
            return self.get_cart()

        price = product.get("price")
        if not _is_number(price) or price <= 0:
            logger.error("Cannot add to cart: product without a valid price", product_id=product.get("id"))
            return self.get_cart()

        valid_quantity = quantity if _is_number(quantity) and quantity > 0 else 1

        cart = self.get_cart()
        complete_product = Product.from_dict(product)

        final_size = size or (complete_product.sizes[0] if complete_product.sizes else "")
        final_color = color or (complete_product.colors[0] if complete_product.colors else "")

        merged = cart_ops.add_to_cart(cart, complete_product, valid_quantity, final_size, final_color)

        validated_items = [
            item for item in merged.items
            if item.product.id and _is_number(item.quantity) and item.quantity > 0
        ]
        if len(validated_items) != len(merged.items):
            logger.warning(
                "Filtered invalid items while adding product",
                dropped=len(merged.items) - len(validated_items),
            )

        new_cart = Cart(items=tuple(validated_items), total=calculate_total(validated_items))
        logger.info(
            "Adding product to cart",
            product_id=complete_product.id,
            quantity=valid_quantity,
            size=final_size,
            color=final_color,
            items_count=len(new_cart.items),
            total=new_cart.total,
        )

        self.save_cart(new_cart)

        saved_cart = self.get_cart()
        if len(saved_cart.items) != len(new_cart.items):
            logger.error(
                "Cart was not saved correctly",
                expected_items=len(new_cart.items),
                saved_items=len(saved_cart.items),
            )
        return saved_cart

    def remove_from_cart(self, item_id: ItemId) -> Cart:
        new_cart = cart_ops.remove_from_cart(self.get_cart(), item_id)
        self.save_cart(new_cart)
        return new_cart

    def update_cart_item_quantity(self, item_id: ItemId, quantity: int) -> Cart:
        new_cart = cart_ops.update_cart_item_quantity(self.get_cart(), item_id, quantity)
        self.save_cart(new_cart)
        return new_cart

    def get_cart_item_count(self) -> int:
        return cart_ops.get_cart_item_count(self.get_cart())

    def clear_cart(self) -> None:
        self.save_cart(create_cart())
