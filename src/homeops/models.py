"""Data models for tracked items, receipt drafts and warranty analytics."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """A purchased item with warranty coverage."""

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1)
    category: str
    purchase_date: date
    warranty_duration_months: int = Field(..., ge=1)
    purchase_price: Decimal | None = Field(None, ge=0)
    store_name: str | None = None
    location: str | None = None
    notes: str | None = None
    serial_number: str | None = None
    tags: set[str] = Field(default_factory=set)
    is_favorite: bool = False
    receipt_image_ref: str | None = None  # owned by the image store

    @property
    def display_tags(self) -> list[str]:
        return sorted(self.tags)


class PurchaseDraft(BaseModel):
    """Fields proposed from a scanned receipt, pending user review."""

    model_config = ConfigDict(frozen=True)

    product_name: str | None = None
    purchase_date: date | None = None
    price: Decimal | None = None
    store_name: str | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.product_name,
                self.purchase_date,
                self.price,
                self.store_name,
            )
        )

    def to_item(
        self, category: str, warranty_duration_months: int, **overrides: Any
    ) -> Item:
        """Merge the draft into a new Item on explicit save.

        Explicit overrides win over drafted values; ``None`` overrides are
        ignored so the drafted value is kept. Raises
        ``pydantic.ValidationError`` when a required field is still missing.
        """
        values: dict[str, Any] = {
            "name": self.product_name,
            "purchase_date": self.purchase_date,
            "purchase_price": self.price,
            "store_name": self.store_name,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        values["category"] = category
        values["warranty_duration_months"] = warranty_duration_months
        return Item.model_validate(values)


class WarrantyBucket(str, Enum):
    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"


class WarrantyEmphasis(str, Enum):
    """Progress highlight level; finer grained than the bucket."""

    CRITICAL = "critical"
    CAUTION = "caution"
    NORMAL = "normal"


class WarrantyState(BaseModel):
    """Warranty status derived from an item at a point in time."""

    model_config = ConfigDict(frozen=True)

    expiration_date: date
    days_remaining: int
    bucket: WarrantyBucket
    progress: float = Field(..., ge=0.0, le=1.0)
    emphasis: WarrantyEmphasis
    status_label: str


class AnnotatedItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    item: Item
    state: WarrantyState


class CollectionKind(str, Enum):
    FAVORITES = "favorites"
    RECENT = "recent"
    HIGH_VALUE = "high_value"
    CATEGORY = "category"
    LOCATION = "location"
    TAG = "tag"


class CollectionBucket(BaseModel):
    """A named group of items sharing one grouping key."""

    model_config = ConfigDict(frozen=True)

    kind: CollectionKind
    title: str
    items: tuple[Item, ...] = ()

    @property
    def count(self) -> int:
        return len(self.items)


class CategoryCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    count: int


class MonthlyCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: date  # first day of the month
    count: int


class InsightKind(str, Enum):
    EXPIRING_SOON = "expiring_soon"
    TOP_CATEGORY = "top_category"
    SHORT_WARRANTY = "short_warranty"
    MISSING_PRICE = "missing_price"


class InsightSeverity(str, Enum):
    WARNING = "warning"
    INFO = "info"
    SUGGESTION = "suggestion"
    PROMPT = "prompt"


class Insight(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: InsightKind
    severity: InsightSeverity
    title: str
    message: str


class AnalyticsSnapshot(BaseModel):
    """Point-in-time summary recomputed from the whole item collection."""

    model_config = ConfigDict(frozen=True)

    total_items: int = 0
    total_value: Decimal = Decimal("0")
    average_value: Decimal = Decimal("0")
    highest_value: Decimal = Decimal("0")
    average_warranty_months: int = 0
    added_this_month: int = 0
    added_in_window: int = 0
    active_count: int = 0
    expiring_soon_count: int = 0
    expired_count: int = 0
    items_without_price: int = 0
    most_common_category: str | None = None
    categories: tuple[CategoryCount, ...] = ()
    monthly_purchases: tuple[MonthlyCount, ...] = ()
    top_value_items: tuple[Item, ...] = ()

    def category_count(self, category: str) -> int:
        for entry in self.categories:
            if entry.category == category:
                return entry.count
        return 0


class AlertTrigger(BaseModel):
    """A reminder handed to the notification scheduler."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    item_id: UUID
    days_before: int
    fire_at: date
    title: str
    body: str


class ItemSnapshot(BaseModel):
    """One consistent version of the item collection."""

    model_config = ConfigDict(frozen=True)

    items: tuple[Item, ...] = ()
    version: str = Field(..., description="Content hash of the stored collection")

    def find(self, item_id: UUID | str) -> Item | None:
        wanted = str(item_id)
        for item in self.items:
            if str(item.id) == wanted:
                return item
        return None
