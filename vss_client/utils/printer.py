"""Diagnostics helpers: render item keys for logs without touching values."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..types import KeyValue

__all__ = ["KeyPrinter", "format_keys"]


def format_keys(items: Iterable[KeyValue]) -> str:
    """'[k1, k2, ...]' for the given items; values are never included."""
    return "[" + ", ".join(kv.key for kv in items) + "]"


class KeyPrinter:
    """
    Lazy `%s` argument for log calls, e.g.

        log.debug("put %s", KeyPrinter(request.transaction_items))

    The key list is only built if the record is actually emitted.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Sequence[KeyValue]) -> None:
        self._items = items

    def __str__(self) -> str:
        return format_keys(self._items)

    __repr__ = __str__
