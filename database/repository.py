"""
Database repository classes
"""
import json
import sqlite3
import uuid
from typing import List, Optional, Dict, Any

from models.product import Product
from .connection import DatabaseConnection


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProductRepository:
    # 상품 데이터 접근 계층 (snake_case 원본 행을 그대로 반환)

    def __init__(self, db_connection: DatabaseConnection):
        # DatabaseConnection 인스턴스 주입
        self.db = db_connection

    def _fetch_all(self, sql: str, params=()) -> List[Dict[str, Any]]:
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(sql, params)
            return [dict(row) for row in cursor.fetchall()]

    def fetch_products(self) -> List[Dict[str, Any]]:
        # 전체 상품을 이름순으로 조회
        return self._fetch_all("SELECT * FROM products ORDER BY name ASC")

    def fetch_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        # 상품 ID로 단일 상품 조회
        rows = self._fetch_all("SELECT * FROM products WHERE id = ?", (product_id,))
        return rows[0] if rows else None

    def fetch_featured(self) -> List[Dict[str, Any]]:
        # 추천 상품을 최신순으로 조회
        return self._fetch_all("""
        SELECT * FROM products WHERE featured = 1
        ORDER BY created_at DESC, rowid DESC
        """)

    def search(self, query: str) -> List[Dict[str, Any]]:
        # 이름/브랜드/설명에 대해 대소문자 구분 없는 부분 일치 검색
        pattern = f"%{_escape_like(query.lower())}%"
        return self._fetch_all("""
        SELECT * FROM products
        WHERE unicode_lower(name) LIKE ? ESCAPE '\\'
           OR unicode_lower(brand) LIKE ? ESCAPE '\\'
           OR unicode_lower(coalesce(description, '')) LIKE ? ESCAPE '\\'
        ORDER BY name ASC
        """, (pattern, pattern, pattern))

    def fetch_by_category(self, category: str) -> List[Dict[str, Any]]:
        # 카테고리별 상품을 최신순으로 조회
        return self._fetch_all("""
        SELECT * FROM products WHERE category = ?
        ORDER BY created_at DESC, rowid DESC
        """, (category,))

    def _fetch_linked_values(self, link_table: str, link_column: str,
                             value_table: str, value_column: str,
                             product_id: str) -> List[str]:
        # 연결 테이블에서 ID 목록을 가져온 뒤 IN 조건으로 값을 조회 (연결 순서 유지)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {link_column} FROM {link_table} WHERE product_id = ? ORDER BY rowid",
                (product_id,)
            )
            ids = [row[0] for row in cursor.fetchall()]
            if not ids:
                return []

            placeholders = ", ".join("?" for _ in ids)
            cursor.execute(
                f"SELECT id, {value_column} FROM {value_table} WHERE id IN ({placeholders})",
                ids
            )
            values = {row[0]: row[1] for row in cursor.fetchall()}
            return [values[i] for i in ids if values.get(i)]

    def fetch_size_values(self, product_id: str) -> List[str]:
        return self._fetch_linked_values("product_sizes", "size_id", "sizes", "value", product_id)

    def fetch_color_values(self, product_id: str) -> List[str]:
        return self._fetch_linked_values("product_colors", "color_id", "colors", "name", product_id)

    def _lookup_or_create(self, cursor: sqlite3.Cursor, table: str, column: str, value: str) -> str:
        cursor.execute(f"SELECT id FROM {table} WHERE {column} = ?", (value,))
        row = cursor.fetchone()
        if row:
            return row[0]
        new_id = str(uuid.uuid4())
        cursor.execute(f"INSERT INTO {table} (id, {column}) VALUES (?, ?)", (new_id, value))
        return new_id

    def add_product(self, product: Product, link_attributes: bool = True) -> None:
        # 상품과 사이즈/색상 연결 행을 저장 (초기 데이터 적재용)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                INSERT INTO products (
                    id, name, brand, price, original_price, image, images, description,
                    category, sizes, colors, stock, rating, reviews, featured
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    product.id, product.name, product.brand, product.price,
                    product.original_price, product.image,
                    json.dumps(product.images) if product.images else None,
                    product.description, product.category,
                    json.dumps(list(product.sizes)), json.dumps(list(product.colors)),
                    product.stock, product.rating, product.reviews or 0,
                    1 if product.featured else 0
                ))

                if link_attributes:
                    for size in product.sizes:
                        size_id = self._lookup_or_create(cursor, "sizes", "value", size)
                        cursor.execute(
                            "INSERT OR IGNORE INTO product_sizes (product_id, size_id) VALUES (?, ?)",
                            (product.id, size_id)
                        )
                    for color in product.colors:
                        color_id = self._lookup_or_create(cursor, "colors", "name", color)
                        cursor.execute(
                            "INSERT OR IGNORE INTO product_colors (product_id, color_id) VALUES (?, ?)",
                            (product.id, color_id)
                        )

                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise


class CartRepository:
    # 장바구니 저장 슬롯 데이터 접근 계층 (슬롯 키별 JSON 문자열 하나)

    def __init__(self, db_connection: DatabaseConnection):
        # DatabaseConnection 인스턴스 주입
        self.db = db_connection

    def get_item(self, key: str) -> Optional[str]:
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM cart_slots WHERE slot_key = ?", (key,))
            row = cursor.fetchone()
            return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute("""
            INSERT INTO cart_slots (slot_key, value) VALUES (?, ?)
            ON CONFLICT(slot_key) DO UPDATE SET
                value = excluded.value,
                updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')
            """, (key, value))
            conn.commit()

    def remove_item(self, key: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM cart_slots WHERE slot_key = ?", (key,))
            conn.commit()


class OrderRepository:
    # 주문 데이터 접근 계층 (주문 생성 및 조회)

    ORDER_COLUMNS = (
        "nombre", "apellidos", "email", "telefono", "direccion", "distrito",
        "ciudad", "departamento", "codigo_postal", "notas", "total",
    )
    ITEM_COLUMNS = ("order_id", "product_id", "product_name", "price", "quantity")

    def __init__(self, db_connection: DatabaseConnection):
        # DatabaseConnection 인스턴스 주입
        self.db = db_connection

    def insert_order(self, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        # 주문 한 건을 삽입하고 저장된 행을 그대로 반환
        order_id = str(uuid.uuid4())
        columns = ("id",) + self.ORDER_COLUMNS
        values = [order_id] + [record.get(column) for column in self.ORDER_COLUMNS]

        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"INSERT INTO orders ({', '.join(columns)}) "
                    f"VALUES ({', '.join('?' for _ in columns)})",
                    values
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

            cursor.execute("SELECT * FROM orders WHERE id = ?", (order_id,))
            row = cursor.fetchone()
            return dict(row) if row else None

    def insert_order_items(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        # 주문 아이템들을 한 트랜잭션으로 일괄 삽입 (전부 성공 또는 전부 실패)
        rows = [
            [str(uuid.uuid4())] + [record.get(column) for column in self.ITEM_COLUMNS]
            for record in records
        ]
        columns = ("id",) + self.ITEM_COLUMNS

        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.executemany(
                    f"INSERT INTO order_items ({', '.join(columns)}) "
                    f"VALUES ({', '.join('?' for _ in columns)})",
                    rows
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

            if not rows:
                return []
            ids = [row[0] for row in rows]
            cursor.execute(
                f"SELECT * FROM order_items WHERE id IN ({', '.join('?' for _ in ids)})",
                ids
            )
            by_id = {row["id"]: dict(row) for row in cursor.fetchall()}
            return [by_id[i] for i in ids if i in by_id]

    def find_orders_by_email(self, email: str) -> List[Dict[str, Any]]:
        # 이메일로 주문 목록을 최신순으로 조회
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
            SELECT * FROM orders WHERE email = ?
            ORDER BY created_at DESC, rowid DESC
            """, (email,))
            return [dict(row) for row in cursor.fetchall()]

    def get_order_details(self, order_id: str) -> Optional[Dict[str, Any]]:
        # 주문 상세 정보 조회 (주문정보 + 주문아이템들)
        with self.db.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT * FROM orders WHERE id = ?", (order_id,))
            order_row = cursor.fetchone()
            if not order_row:
                return None

            cursor.execute(
                "SELECT * FROM order_items WHERE order_id = ? ORDER BY rowid",
                (order_id,)
            )
            return {
                "order": dict(order_row),
                "items": [dict(row) for row in cursor.fetchall()],
            }
