# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Group/member registry data access.
Encapsulates all read/write operations on the groups in-memory store.
Pure CRUD; membership rules live in GroupService.
"""

from typing import Any, Optional


class GroupRepository:
    """In-memory group storage."""

    def __init__(self) -> None:
        self._store: dict[str, dict[str, Any]] = {}

    # ── Read ──

    def get_all(self) -> list[dict[str, Any]]:
        return list(self._store.values())

    def get_by_id(self, group_id: str) -> Optional[dict[str, Any]]:
        return self._store.get(group_id)

    def exists(self, group_id: str) -> bool:
        return group_id in self._store

    def count(self) -> int:
        return len(self._store)

    # ── Write ──

    def save(self, group_id: str, group: dict[str, Any]) -> None:
        self._store[group_id] = group

    def delete(self, group_id: str) -> Optional[dict[str, Any]]:
        return self._store.pop(group_id, None)

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._store.clear()
