"""
Checkout payload validation
"""
import re
from typing import Any, Dict, List, Optional

from models.cart import Cart
from models.order import OrderData, PersonalInfo, ShippingAddress
from .cart_service import invalid_item_reason, parse_item

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9\s+\-()]{8,20}$")

ERROR_INCOMPLETE = "Datos incompletos"
ERROR_EMPTY_CART = "El carrito está vacío"


class ValidationError(Exception):
    """Raised when a checkout payload is rejected"""

    def __init__(self, message: str, details: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self) -> Dict[str, Any]:
        result = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def validate_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(re.sub(r"\s", "", phone)))


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _min_length(value: Any, length: int) -> bool:
    text = _text(value)
    return text is not None and len(text.strip()) >= length


def field_errors(personal_info: Dict[str, Any], shipping_address: Dict[str, Any]) -> List[str]:
    # 모든 필드 오류를 모아서 반환 (첫 오류에서 멈추지 않음)
    errors = []

    if not _min_length(personal_info.get("nombre"), 2):
        errors.append("El nombre debe tener al menos 2 caracteres")

    if not _min_length(personal_info.get("apellidos"), 2):
        errors.append("Los apellidos deben tener al menos 2 caracteres")

    email = _text(personal_info.get("email"))
    if not email or not validate_email(email.strip()):
        errors.append("El correo electrónico no es válido")

    telefono = _text(personal_info.get("telefono"))
    if not telefono or not validate_phone(telefono.strip()):
        errors.append("El teléfono debe tener entre 8 y 20 dígitos")

    if not _min_length(shipping_address.get("direccion"), 5):
        errors.append("La dirección debe tener al menos 5 caracteres")

    if not _min_length(shipping_address.get("distrito"), 2):
        errors.append("El distrito es obligatorio")

    if not _min_length(shipping_address.get("ciudad"), 2):
        errors.append("La ciudad es obligatoria")

    if not _min_length(shipping_address.get("departamento"), 2):
        errors.append("El departamento/región es obligatorio")

    return errors


def _build_cart(raw_cart: Dict[str, Any]) -> Cart:
    items = tuple(
        parse_item(raw) for raw in raw_cart["items"]
        if invalid_item_reason(raw) is None
    )
    total = raw_cart.get("total")
    if not isinstance(total, (int, float)) or isinstance(total, bool):
        total = 0
    return Cart(items=items, total=total)


def validate_order_payload(payload: Any) -> OrderData:
    """Check a checkout payload and build the ``OrderData`` it describes.

    Raises ``ValidationError`` for structural problems (missing sections,
    empty cart) and for field errors; the latter carry every failing field
    in ``details``.
    """
    if not isinstance(payload, dict):
        raise ValidationError(ERROR_INCOMPLETE)

    personal_info = payload.get("personalInfo")
    shipping_address = payload.get("shippingAddress")
    raw_cart = payload.get("cart")
    if not personal_info or not shipping_address or not raw_cart:
        raise ValidationError(ERROR_INCOMPLETE)
    if not isinstance(personal_info, dict) or not isinstance(shipping_address, dict) \
            or not isinstance(raw_cart, dict):
        raise ValidationError(ERROR_INCOMPLETE)

    if not isinstance(raw_cart.get("items"), list) or not raw_cart["items"]:
        raise ValidationError(ERROR_EMPTY_CART)

    errors = field_errors(personal_info, shipping_address)
    if errors:
        raise ValidationError("Errores de validación", errors)

    cart = _build_cart(raw_cart)
    if not cart.items:
        raise ValidationError(ERROR_EMPTY_CART)

    notas = payload.get("notas")
    order_data = OrderData(
        personal_info=PersonalInfo(
            nombre=personal_info["nombre"],
            apellidos=personal_info["apellidos"],
            email=personal_info["email"],
            telefono=personal_info["telefono"],
        ),
        shipping_address=ShippingAddress(
            direccion=shipping_address["direccion"],
            distrito=shipping_address["distrito"],
            ciudad=shipping_address["ciudad"],
            departamento=shipping_address["departamento"],
            codigo_postal=_text(shipping_address.get("codigoPostal")) or None,
        ),
        cart=cart,
        notas=_text(notas) or None,
    )
    return order_data
