"""
In-memory cart slot storage
"""
from typing import Dict, Optional


class MemoryStorage:
    # 프로세스 메모리에 슬롯을 보관하는 저장소 (테스트 및 임시 클라이언트용)

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._slots: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._slots[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._slots.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._slots
