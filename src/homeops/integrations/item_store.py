"""JSON file adapter standing in for the item storage collaborator."""

import fcntl
import hashlib
import os
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import BinaryIO

from pydantic import TypeAdapter, ValidationError

from homeops.models import Item, ItemSnapshot
from homeops.utils.logging import get_logger

logger = get_logger(__name__)

_ITEMS = TypeAdapter(list[Item])


class ItemStoreError(ValueError):
    """Raised when the item file cannot be read, parsed or written."""


def _version(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()[:16]


class ItemStore:
    """Reads and writes the item collection as a JSON array.

    Reads take a shared lock. Every write, including the read-modify-write
    of ``add`` and ``remove``, happens under one exclusive lock, so
    concurrent writers never drop each other's items and a snapshot is
    never taken from a half-written file. Each snapshot carries a version
    stamp derived from the file content.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _parse(self, content: bytes) -> list[Item]:
        if not content.strip():
            return []
        try:
            return _ITEMS.validate_json(content)
        except ValidationError as e:
            raise ItemStoreError(f"Invalid item file {self.path}: {e}") from e

    def _write(self, f: BinaryIO, items: list[Item]) -> ItemSnapshot:
        # Caller holds the exclusive lock
        content = _ITEMS.dump_json(items, indent=2)
        f.seek(0)
        f.truncate()
        f.write(content)
        f.flush()
        os.fsync(f.fileno())
        logger.info("Saved %d items to %s", len(items), self.path)
        return ItemSnapshot(items=tuple(items), version=_version(content))

    def _update(
        self, change: Callable[[list[Item]], list[Item]], read_current: bool = True
    ) -> ItemSnapshot:
        """Apply ``change`` to the stored items under one exclusive lock."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, mode="a+b") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    f.seek(0)
                    current = self._parse(f.read()) if read_current else []
                    items = change(current)
                    return self._write(f, items)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except OSError as e:
            raise ItemStoreError(f"Cannot write item file {self.path}: {e}") from e

    def snapshot(self) -> ItemSnapshot:
        """Load one consistent version of the collection.

        A missing file is an empty collection.

        Raises:
            ItemStoreError: If the file cannot be read or is not a valid
                item list.
        """
        if not self.path.exists():
            return ItemSnapshot(items=(), version=_version(b""))

        try:
            with open(self.path, mode="rb") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    content = f.read()
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except OSError as e:
            raise ItemStoreError(f"Cannot read item file {self.path}: {e}") from e

        items = self._parse(content)
        logger.info("Loaded %d items from %s", len(items), self.path)
        return ItemSnapshot(items=tuple(items), version=_version(content))

    def save(self, items: Iterable[Item]) -> ItemSnapshot:
        """Replace the stored collection and return the new snapshot."""
        replacement = list(items)
        return self._update(lambda current: replacement, read_current=False)

    def add(self, item: Item) -> ItemSnapshot:
        return self._update(lambda current: [*current, item])

    def remove(self, item_id: str) -> ItemSnapshot:
        """Delete one item.

        Raises:
            ItemStoreError: If no stored item has ``item_id``.
        """

        def without(current: list[Item]) -> list[Item]:
            kept = [item for item in current if str(item.id) != str(item_id)]
            if len(kept) == len(current):
                raise ItemStoreError(f"No item with id {item_id}")
            return kept

        return self._update(without)
