"""
Product related data models
"""
import json
import math
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Tuple


def _as_tuple(value: Any) -> Tuple[str, ...]:
    # 인라인 사이즈/색상 컬럼은 JSON 텍스트 또는 리스트로 들어온다
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value if v)
    return ()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


@dataclass(frozen=True)
class Product:
    """Product data model"""
    id: str
    name: str
    brand: str
    price: float
    image: str = ""
    description: str = ""
    category: str = ""
    sizes: Tuple[str, ...] = ()
    colors: Tuple[str, ...] = ()
    stock: int = 0
    original_price: Optional[float] = None
    images: Optional[Tuple[str, ...]] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    featured: bool = False

    def __post_init__(self):
        # 목록 필드는 항상 튜플로 보관
        object.__setattr__(self, "sizes", tuple(self.sizes))
        object.__setattr__(self, "colors", tuple(self.colors))
        if self.images is not None:
            object.__setattr__(self, "images", tuple(self.images))

    @classmethod
    def from_row(cls, row: Dict[str, Any], sizes: Optional[List[str]] = None,
                 colors: Optional[List[str]] = None) -> "Product":
        """Map a snake_case store row into the canonical product shape.

        Nullable numeric columns become ``None`` (or 0 for counts), and the
        resolved ``sizes``/``colors`` win over the inline row arrays when they
        are not empty.
        """
        row = dict(row)
        images = _as_tuple(row.get("images"))
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            brand=row.get("brand") or "",
            price=float(row.get("price") or 0),
            original_price=float(row["original_price"]) if row.get("original_price") else None,
            image=row.get("image") or "",
            images=images or None,
            description=row.get("description") or "",
            category=row.get("category") or "",
            sizes=sizes or _as_tuple(row.get("sizes")),
            colors=colors or _as_tuple(row.get("colors")),
            stock=int(row.get("stock") or 0),
            rating=float(row["rating"]) if row.get("rating") else None,
            reviews=int(row.get("reviews") or 0),
            featured=bool(row.get("featured")),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """Canonicalize an untrusted camelCase product payload."""
        price = data.get("price")
        stock = data.get("stock")
        images = data.get("images")
        return cls(
            id=str(data.get("id")),
            name=str(data.get("name") or ""),
            brand=str(data.get("brand") or ""),
            price=float(price) if _is_number(price) else 0.0,
            image=str(data.get("image") or ""),
            images=tuple(str(i) for i in images) if isinstance(images, list) else None,
            description=str(data.get("description") or ""),
            category=str(data.get("category") or ""),
            sizes=tuple(str(s) for s in data["sizes"]) if isinstance(data.get("sizes"), list) else (),
            colors=tuple(str(c) for c in data["colors"]) if isinstance(data.get("colors"), list) else (),
            stock=int(stock) if _is_number(stock) else 0,
            original_price=data["originalPrice"] if _is_number(data.get("originalPrice")) else None,
            rating=data["rating"] if _is_number(data.get("rating")) else None,
            reviews=data["reviews"] if _is_number(data.get("reviews")) else None,
            featured=bool(data.get("featured")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        result = {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "price": self.price,
            "image": self.image,
            "description": self.description,
            "category": self.category,
            "sizes": list(self.sizes),
            "colors": list(self.colors),
            "stock": self.stock,
            "featured": self.featured,
        }
        # 선택 필드는 값이 있을 때만 포함
        if self.original_price is not None:
            result["originalPrice"] = self.original_price
        if self.images:
            result["images"] = list(self.images)
        if self.rating is not None:
            result["rating"] = self.rating
        if self.reviews is not None:
            result["reviews"] = self.reviews
        return result


@dataclass
class CatalogResult:
    """Products plus where they came from (database, cache or fallback)"""
    products: List[Product]
    source: str

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "products": [p.to_dict() for p in self.products],
            "source": self.source,
        }


@dataclass
class ProductLookup:
    """Single product lookup result"""
    product: Optional[Product]
    source: str
