"""homeops integrations module."""

from homeops.integrations.item_store import ItemStore, ItemStoreError

__all__ = [
    "ItemStore",
    "ItemStoreError",
]
