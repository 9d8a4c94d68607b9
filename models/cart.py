"""
Cart related data models and the pure cart operations
"""
from dataclasses import dataclass, replace
from typing import List, NamedTuple, Tuple, Dict, Any, Union

from .product import Product


class LineItemKey(NamedTuple):
    """Identity of a cart line item"""
    product_id: str
    size: str
    color: str

    def __str__(self) -> str:
        return f"{self.product_id}-{self.size}-{self.color}"


ItemId = Union[LineItemKey, str]


@dataclass(frozen=True)
class CartItem:
    """Cart item data model"""
    product: Product
    quantity: int
    size: str = ""
    color: str = ""

    @property
    def key(self) -> LineItemKey:
        return LineItemKey(self.product.id, self.size, self.color)

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity

    def matches(self, item_id: ItemId) -> bool:
        # 튜플 키는 정확히 비교하고, 문자열은 "{id}-{size}-{color}" 형식과 비교
        if isinstance(item_id, tuple):
            return self.key == tuple(item_id)
        return str(self.key) == item_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "product": self.product.to_dict(),
            "quantity": self.quantity,
            "size": self.size,
            "color": self.color,
        }


@dataclass(frozen=True)
class Cart:
    """Cart data model; total is always derived from the items"""
    items: Tuple[CartItem, ...] = ()
    total: float = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
        }


def calculate_total(items) -> float:
    return sum(item.product.price * item.quantity for item in items)


def create_cart() -> Cart:
    return Cart(items=(), total=0)


def add_to_cart(cart: Cart, product: Product, quantity: int = 1,
                size: str = "", color: str = "") -> Cart:
    """Merge ``quantity`` into the line item for (product, size, color).

    An existing line item keeps its position; otherwise the new item is
    appended. Quantities are not validated here.
    """
    key = LineItemKey(product.id, size, color)
    items: List[CartItem] = list(cart.items)

    for index, item in enumerate(items):
        if item.key == key:
            items[index] = replace(item, quantity=item.quantity + quantity)
            break
    else:
        items.append(CartItem(product=product, quantity=quantity, size=size, color=color))

    return Cart(items=tuple(items), total=calculate_total(items))


def remove_from_cart(cart: Cart, item_id: ItemId) -> Cart:
    items = [item for item in cart.items if not item.matches(item_id)]
    return Cart(items=tuple(items), total=calculate_total(items))


def update_cart_item_quantity(cart: Cart, item_id: ItemId, quantity: int) -> Cart:
    # 대상 수량을 max(0, quantity)로 설정하고, 수량이 0 이하인 항목은 모두 제거
    items = [
        replace(item, quantity=max(0, quantity)) if item.matches(item_id) else item
        for item in cart.items
    ]
    items = [item for item in items if item.quantity > 0]
    return Cart(items=tuple(items), total=calculate_total(items))


def get_cart_item_count(cart: Cart) -> int:
    return sum(item.quantity for item in cart.items)
