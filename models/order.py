"""
Order related data models
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from .cart import Cart


@dataclass
class PersonalInfo:
    """Customer contact information"""
    nombre: str
    apellidos: str
    email: str
    telefono: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nombre": self.nombre,
            "apellidos": self.apellidos,
            "email": self.email,
            "telefono": self.telefono,
        }


@dataclass
class ShippingAddress:
    """Shipping address"""
    direccion: str
    distrito: str
    ciudad: str
    departamento: str
    codigo_postal: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direccion": self.direccion,
            "distrito": self.distrito,
            "ciudad": self.ciudad,
            "departamento": self.departamento,
            "codigoPostal": self.codigo_postal,
        }


@dataclass
class OrderData:
    """Checkout payload accepted by the order service"""
    personal_info: PersonalInfo
    shipping_address: ShippingAddress
    cart: Cart
    notas: Optional[str] = None


@dataclass
class OrderItem:
    """Order item data model; a snapshot of the product at checkout time"""
    id: str
    order_id: str
    product_id: str
    product_name: str
    price: float
    quantity: int

    @classmethod
    def from_row(cls, row) -> "OrderItem":
        row = dict(row)
        return cls(
            id=row["id"],
            order_id=row["order_id"],
            product_id=row["product_id"],
            product_name=row["product_name"],
            price=float(row["price"]),
            quantity=row["quantity"],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "price": self.price,
            "quantity": self.quantity,
        }


@dataclass
class Order:
    """Order data model"""
    id: str
    nombre: str
    apellidos: str
    email: str
    telefono: str
    direccion: str
    distrito: str
    ciudad: str
    departamento: str
    total: float
    created_at: str
    codigo_postal: Optional[str] = None
    notas: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Order":
        row = dict(row)
        return cls(
            id=row["id"],
            nombre=row["nombre"],
            apellidos=row["apellidos"],
            email=row["email"],
            telefono=row["telefono"],
            direccion=row["direccion"],
            distrito=row["distrito"],
            ciudad=row["ciudad"],
            departamento=row["departamento"],
            codigo_postal=row.get("codigo_postal"),
            notas=row.get("notas"),
            total=float(row["total"]),
            created_at=row["created_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "nombre": self.nombre,
            "apellidos": self.apellidos,
            "email": self.email,
            "telefono": self.telefono,
            "direccion": self.direccion,
            "distrito": self.distrito,
            "ciudad": self.ciudad,
            "departamento": self.departamento,
            "codigo_postal": self.codigo_postal,
            "notas": self.notas,
            "total": self.total,
            "created_at": self.created_at,
        }


@dataclass
class OrderResult:
    """An order together with its persisted items"""
    order: Order
    items: List[OrderItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }
