#!/usr/bin/env python3
"""
데이터베이스 초기화 스크립트
스키마를 만들고 정적 카탈로그(사이즈/색상 연결 포함)를 적재합니다.
"""
import sqlite3
import sys

from config import Config
from database.connection import DatabaseConnection
from database.repository import ProductRepository
from services.static_catalog import get_static_products


def init_database(db_path: str) -> bool:
    """Create the schema and seed the static catalog into ``db_path``"""
    try:
        repo = ProductRepository(DatabaseConnection(db_path))

        if repo.fetch_products():
            print("ℹ️  products 테이블에 이미 데이터가 있습니다. 적재를 건너뜁니다.")
            return True

        for product in get_static_products():
            repo.add_product(product)

        print("✅ 데이터베이스 초기화 완료!")
        print(f"📊 products 테이블: {len(repo.fetch_products())}개 상품")
        return True

    except sqlite3.Error as e:
        print(f"❌ 데이터베이스 초기화 실패: {str(e)}")
        return False


if __name__ == "__main__":
    print("=== Sneaker Storefront 데이터베이스 초기화 ===")
    config = Config.from_env()
    db_path = sys.argv[1] if len(sys.argv) > 1 else config.database_path

    if not db_path:
        print("❌ DATABASE_PATH 환경 변수 또는 경로 인자가 필요합니다.")
        sys.exit(1)

    if init_database(db_path):
        print("\n이제 app.py를 실행할 수 있습니다!")
    else:
        print("\n초기화에 실패했습니다.")
        sys.exit(1)
