"""
Database connection management
"""
import sqlite3
from contextlib import contextmanager
from typing import Any, Generator


def _unicode_lower(value: Any) -> Any:
    # SQLite의 lower()는 ASCII만 변환하므로 파이썬 규칙으로 소문자화
    return value.lower() if isinstance(value, str) else value


class DatabaseConnection:
    # 데이터베이스 연결을 관리하는 클래스

    def __init__(self, db_path: str):
        # 데이터베이스 파일 경로 설정 및 초기화
        self.db_path = db_path
        self.init_database()

    def init_database(self):
        # 데이터베이스 연결 초기화 및 필요한 테이블 생성
        with self.get_connection() as conn:
            cursor = conn.cursor()

            # 상품 카탈로그 테이블 (사이즈/색상 인라인 배열은 JSON 텍스트)
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS products (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                brand TEXT NOT NULL,
                price REAL NOT NULL,
                original_price REAL,
                image TEXT,
                images TEXT,
                description TEXT,
                category TEXT,
                sizes TEXT,
                colors TEXT,
                stock INTEGER NOT NULL DEFAULT 0,
                rating REAL,
                reviews INTEGER DEFAULT 0,
                featured INTEGER DEFAULT 0,
                created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
            )
            ''')

            # 사이즈/색상 마스터 테이블과 상품 연결 테이블
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS sizes (
                id TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            ''')
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS colors (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL
            )
            ''')
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS product_sizes (
                product_id TEXT NOT NULL,
                size_id TEXT NOT NULL,
                PRIMARY KEY (product_id, size_id),
                FOREIGN KEY(product_id) REFERENCES products(id),
                FOREIGN KEY(size_id) REFERENCES sizes(id)
            )
            ''')
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS product_colors (
                product_id TEXT NOT NULL,
                color_id TEXT NOT NULL,
                PRIMARY KEY (product_id, color_id),
                FOREIGN KEY(product_id) REFERENCES products(id),
                FOREIGN KEY(color_id) REFERENCES colors(id)
            )
            ''')

            # 주문 정보를 저장하는 테이블 생성
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS orders (
                id TEXT PRIMARY KEY,
                nombre TEXT NOT NULL,
                apellidos TEXT NOT NULL,
                email TEXT NOT NULL,
                telefono TEXT NOT NULL,
                direccion TEXT NOT NULL,
                distrito TEXT NOT NULL,
                ciudad TEXT NOT NULL,
                departamento TEXT NOT NULL,
                codigo_postal TEXT,
                notas TEXT,
                total REAL NOT NULL,
                created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
            )
            ''')

            # 주문 아이템 스냅샷 테이블 생성
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS order_items (
                id TEXT PRIMARY KEY,
                order_id TEXT NOT NULL,
                product_id TEXT NOT NULL,
                product_name TEXT NOT NULL,
                price REAL NOT NULL,
                quantity INTEGER NOT NULL,
                FOREIGN KEY(order_id) REFERENCES orders(id)
            )
            ''')

            # 클라이언트별 장바구니 저장 슬롯 (JSON 문자열)
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS cart_slots (
                slot_key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
            )
            ''')

            conn.commit()

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        # 컨텍스트 매니저를 사용하여 데이터베이스 연결 자동 관리
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.create_function("unicode_lower", 1, _unicode_lower, deterministic=True)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()
