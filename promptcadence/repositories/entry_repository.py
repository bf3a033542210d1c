# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Entries store.
Append-only per-group list of posted responses.
"""

from typing import Any, Optional


class EntryRepository:
    """In-memory entry storage, grouped by group id."""

    def __init__(self) -> None:
        self._entries: dict[str, list[dict[str, Any]]] = {}

    # ── Read ──

    def latest(self, group_id: str, user_id: Optional[str] = None) -> Optional[dict[str, Any]]:
        """Newest entry of the group, optionally restricted to one author."""
        entries = [
            e for e in self._entries.get(group_id, [])
            if user_id is None or e["user_id"] == user_id
        ]
        if not entries:
            return None
        return max(entries, key=lambda e: e["timestamp"])

    def count(self, group_id: Optional[str] = None) -> int:
        if group_id is not None:
            return len(self._entries.get(group_id, []))
        return sum(len(v) for v in self._entries.values())

    # ── Write ──

    def append(self, group_id: str, entry: dict[str, Any]) -> None:
        self._entries.setdefault(group_id, []).append(entry)

    def delete_group(self, group_id: str) -> None:
        self._entries.pop(group_id, None)

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._entries.clear()
