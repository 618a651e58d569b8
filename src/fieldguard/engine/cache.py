"""Process-wide schema cache.

Keys are ``(record_type, compile_key)`` where *compile_key* is the subset of
options that changes compiled output (tag names, label qualification,
private-field handling, auto-trim). Entries are never evicted: record types are assumed
immutable for the process lifetime.

Plain dict reads and writes are atomic under the GIL. Two threads compiling
the same type at once both store a valid Schema; the last writer wins and
every later reader sees one of them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fieldguard.engine.compiler import Schema

CacheKey = tuple[type, tuple[object, ...]]


class SchemaCache:
    """Mapping from type identity to compiled Schema."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, Schema] = {}

    def get(self, key: CacheKey) -> Schema | None:
        return self._entries.get(key)

    def store(self, key: CacheKey, schema: Schema) -> None:
        self._entries[key] = schema

    def clear(self) -> None:
        """Drop every entry. Intended for tests and interactive sessions."""
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
