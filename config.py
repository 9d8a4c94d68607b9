"""
Application configuration loaded from the environment (.env supported)
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from services.cart_service import CART_STORAGE_KEY
from services.catalog_cache import DEFAULT_TTL_SECONDS

load_dotenv()


@dataclass
class Config:
    """Runtime settings"""
    database_path: Optional[str] = None
    secret_key: str = "your-secret-key-here"
    port: int = 5000
    debug: bool = False
    catalog_cache_ttl: float = DEFAULT_TTL_SECONDS
    cart_storage_key: str = CART_STORAGE_KEY
    log_level: str = "INFO"

    @property
    def database_configured(self) -> bool:
        return bool(self.database_path)

    @classmethod
    def from_env(cls) -> "Config":
        # DATABASE_PATH가 비어 있으면 데이터베이스 미설정 (정적 카탈로그 사용)
        return cls(
            database_path=os.getenv('DATABASE_PATH') or None,
            secret_key=os.getenv('SECRET_KEY', 'your-secret-key-here'),
            port=int(os.getenv('PORT', 5000)),
            debug=os.getenv('DEBUG', 'False').lower() == 'true',
            catalog_cache_ttl=float(os.getenv('CATALOG_CACHE_TTL', DEFAULT_TTL_SECONDS)),
            cart_storage_key=os.getenv('CART_STORAGE_KEY', CART_STORAGE_KEY),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
        )
