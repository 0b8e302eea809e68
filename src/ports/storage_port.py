"""Storage port — abstract string key/value storage for local state.

Mirrors the browser's localStorage: values are JSON strings stored under
named keys. Only LocalStore talks to this port.
"""

from __future__ import annotations

from typing import Protocol


class StoragePort(Protocol):
    """Abstract key/value storage used by LocalStore."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...
