"""Grouping, sorting, statistics and insights over an item collection.

Every call recomputes from the collection it is given. The incoming
sequence is copied to a tuple first, so one call always works on a single
consistent view even if the caller's list changes underneath it.
"""

from collections import Counter, defaultdict
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum

from dateutil.relativedelta import relativedelta

from homeops.config import Settings
from homeops.models import (
    AnalyticsSnapshot,
    CategoryCount,
    CollectionBucket,
    CollectionKind,
    Insight,
    InsightKind,
    InsightSeverity,
    Item,
    MonthlyCount,
    WarrantyBucket,
)
from homeops.utils.logging import get_logger
from homeops.warranty.clock import WarrantyClock

logger = get_logger(__name__)

ZERO = Decimal("0")


class SortOrder(str, Enum):
    PURCHASE_DATE_DESC = "purchase_date_desc"
    PURCHASE_DATE_ASC = "purchase_date_asc"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    EXPIRING_FIRST = "expiring_first"
    PRICE_DESC = "price_desc"
    PRICE_ASC = "price_asc"


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _name_key(item: Item) -> str:
    return item.name.casefold()


def _price_key(item: Item) -> Decimal:
    return item.purchase_price if item.purchase_price is not None else ZERO


def _grouped(
    items: Iterable[Item],
    keys: Callable[[Item], Iterable[str]],
    kind: CollectionKind,
) -> list[CollectionBucket]:
    groups: dict[str, list[Item]] = defaultdict(list)
    for item in items:
        for key in keys(item):
            groups[key].append(item)
    return [
        CollectionBucket(kind=kind, title=key, items=tuple(groups[key]))
        for key in sorted(groups)
    ]


class ItemAggregator:
    """Derived views over the item collection for dashboards and analytics."""

    def __init__(
        self,
        clock: WarrantyClock | None = None,
        settings: Settings | None = None,
    ) -> None:
        """
        Args:
            clock: Warranty clock used for days remaining and buckets.
            settings: Thresholds; defaults to the clock's settings.
        """
        self.settings = settings or (clock.settings if clock else Settings())
        self.clock = clock or WarrantyClock(self.settings)

    # Filtering and sorting

    def filter(
        self,
        items: Iterable[Item],
        search: str | None = None,
        category: str | None = None,
    ) -> list[Item]:
        """Items matching every given filter.

        Args:
            items: The collection to filter.
            search: Case-insensitive substring of the name or category.
            category: Exact category name.
        """
        results = list(items)
        if search:
            needle = search.casefold()
            results = [
                item
                for item in results
                if needle in item.name.casefold() or needle in item.category.casefold()
            ]
        if category:
            results = [item for item in results if item.category == category]
        return results

    def sort(
        self, items: Iterable[Item], order: SortOrder, now: date | datetime
    ) -> list[Item]:
        """Stable sort; equal keys keep their input order."""
        collection = tuple(items)
        if order is SortOrder.PURCHASE_DATE_ASC:
            return sorted(collection, key=lambda item: item.purchase_date)
        if order is SortOrder.PURCHASE_DATE_DESC:
            return sorted(collection, key=lambda item: item.purchase_date, reverse=True)
        if order is SortOrder.NAME_ASC:
            return sorted(collection, key=_name_key)
        if order is SortOrder.NAME_DESC:
            return sorted(collection, key=_name_key, reverse=True)
        if order is SortOrder.EXPIRING_FIRST:
            return sorted(
                collection,
                key=lambda item: (
                    self.clock.state(item, now).days_remaining,
                    _name_key(item),
                ),
            )
        if order is SortOrder.PRICE_DESC:
            return sorted(collection, key=_price_key, reverse=True)
        if order is SortOrder.PRICE_ASC:
            return sorted(collection, key=_price_key)
        raise ValueError(f"Unsupported sort order: {order}")

    def top_value(self, items: Iterable[Item], limit: int | None = None) -> list[Item]:
        """Most valuable priced items, highest first."""
        limit = self.settings.top_value_limit if limit is None else limit
        priced = [item for item in items if item.purchase_price is not None]
        return sorted(priced, key=_price_key, reverse=True)[:limit]

    # Grouping

    def by_category(self, items: Iterable[Item]) -> list[CollectionBucket]:
        return _grouped(items, lambda item: [item.category], CollectionKind.CATEGORY)

    def by_location(self, items: Iterable[Item]) -> list[CollectionBucket]:
        """Location groups; items without a location are left out."""
        return _grouped(
            items,
            lambda item: [item.location] if item.location else [],
            CollectionKind.LOCATION,
        )

    def by_tag(self, items: Iterable[Item]) -> list[CollectionBucket]:
        """One group per tag; an item appears under each of its tags."""
        return _grouped(items, lambda item: item.display_tags, CollectionKind.TAG)

    def favorites(self, items: Iterable[Item]) -> CollectionBucket:
        return CollectionBucket(
            kind=CollectionKind.FAVORITES,
            title="Favorites",
            items=tuple(item for item in items if item.is_favorite),
        )

    def recent(self, items: Iterable[Item], now: date | datetime) -> CollectionBucket:
        """Items purchased within the recent window, newest first."""
        cutoff = _as_date(now) - timedelta(days=self.settings.recent_days)
        recent = [item for item in items if item.purchase_date >= cutoff]
        return CollectionBucket(
            kind=CollectionKind.RECENT,
            title="Recently Added",
            items=tuple(sorted(recent, key=lambda item: item.purchase_date, reverse=True)),
        )

    def high_value(self, items: Iterable[Item]) -> CollectionBucket:
        """Items priced at or above the threshold, highest first."""
        threshold = Decimal(str(self.settings.high_value_threshold))
        valuable = [
            item
            for item in items
            if item.purchase_price is not None and item.purchase_price >= threshold
        ]
        return CollectionBucket(
            kind=CollectionKind.HIGH_VALUE,
            title="High Value",
            items=tuple(sorted(valuable, key=_price_key, reverse=True)),
        )

    def smart_collections(
        self, items: Iterable[Item], now: date | datetime
    ) -> list[CollectionBucket]:
        """Favorites, recent and high value first, then category, location
        and tag groups. Empty smart collections are omitted.
        """
        collection = tuple(items)
        smart = [
            self.favorites(collection),
            self.recent(collection, now),
            self.high_value(collection),
        ]
        buckets = [bucket for bucket in smart if bucket.items]
        buckets.extend(self.by_category(collection))
        buckets.extend(self.by_location(collection))
        buckets.extend(self.by_tag(collection))
        return buckets

    # Statistics

    def category_histogram(self, items: Iterable[Item]) -> list[CategoryCount]:
        """Category counts, most common first, ties by name."""
        counts = Counter(item.category for item in items)
        ranked = sorted(counts.items(), key=lambda entry: (-entry[1], entry[0]))
        return [CategoryCount(category=name, count=count) for name, count in ranked]

    def monthly_histogram(
        self, items: Iterable[Item], now: date | datetime, months: int | None = None
    ) -> list[MonthlyCount]:
        """Purchases per calendar month over the trailing window, oldest first."""
        months = self.settings.trend_months if months is None else months
        current = _as_date(now).replace(day=1)
        counts = Counter(item.purchase_date.replace(day=1) for item in items)
        window = [current - relativedelta(months=offset) for offset in range(months)]
        return [MonthlyCount(month=month, count=counts[month]) for month in reversed(window)]

    def snapshot(self, items: Iterable[Item], now: date | datetime) -> AnalyticsSnapshot:
        """Recompute every statistic from the current collection."""
        collection = tuple(items)
        if not collection:
            return AnalyticsSnapshot(
                monthly_purchases=tuple(self.monthly_histogram(collection, now))
            )

        today = _as_date(now)
        prices = [item.purchase_price for item in collection if item.purchase_price is not None]
        total_value = sum(prices, ZERO)

        buckets = Counter(self.clock.state(item, now).bucket for item in collection)
        categories = self.category_histogram(collection)
        monthly = self.monthly_histogram(collection, now)

        result = AnalyticsSnapshot(
            total_items=len(collection),
            total_value=total_value,
            average_value=total_value / len(prices) if prices else ZERO,
            highest_value=max(prices) if prices else ZERO,
            average_warranty_months=(
                sum(item.warranty_duration_months for item in collection) // len(collection)
            ),
            added_this_month=sum(
                1
                for item in collection
                if (item.purchase_date.year, item.purchase_date.month)
                == (today.year, today.month)
            ),
            added_in_window=sum(entry.count for entry in monthly),
            active_count=buckets[WarrantyBucket.ACTIVE],
            expiring_soon_count=buckets[WarrantyBucket.EXPIRING_SOON],
            expired_count=buckets[WarrantyBucket.EXPIRED],
            items_without_price=len(collection) - len(prices),
            most_common_category=categories[0].category if categories else None,
            categories=tuple(categories),
            monthly_purchases=tuple(monthly),
            top_value_items=tuple(self.top_value(collection)),
        )
        logger.debug(
            "Snapshot over %d items: %d active, %d expiring soon, %d expired",
            result.total_items,
            result.active_count,
            result.expiring_soon_count,
            result.expired_count,
        )
        return result

    # Insights

    def insights(self, snapshot: AnalyticsSnapshot) -> list[Insight]:
        """Threshold rules over a snapshot; any subset may fire."""
        insights = []

        if snapshot.expiring_soon_count > 0:
            insights.append(
                Insight(
                    kind=InsightKind.EXPIRING_SOON,
                    severity=InsightSeverity.WARNING,
                    title="Action Needed",
                    message=(
                        f"{snapshot.expiring_soon_count} item(s) have warranties "
                        "expiring soon. Review them now."
                    ),
                )
            )

        if snapshot.most_common_category is not None:
            category = snapshot.most_common_category
            insights.append(
                Insight(
                    kind=InsightKind.TOP_CATEGORY,
                    severity=InsightSeverity.INFO,
                    title="Top Category",
                    message=(
                        f"{category} is your most tracked category with "
                        f"{snapshot.category_count(category)} items."
                    ),
                )
            )

        if (
            snapshot.total_items > 0
            and snapshot.average_warranty_months < self.settings.short_warranty_months
        ):
            insights.append(
                Insight(
                    kind=InsightKind.SHORT_WARRANTY,
                    severity=InsightSeverity.SUGGESTION,
                    title="Tip",
                    message=(
                        "Consider extended warranties for high-value electronics "
                        "to increase protection."
                    ),
                )
            )

        if snapshot.items_without_price > 0:
            insights.append(
                Insight(
                    kind=InsightKind.MISSING_PRICE,
                    severity=InsightSeverity.PROMPT,
                    title="Complete Your Data",
                    message=(
                        f"{snapshot.items_without_price} item(s) don't have purchase "
                        "prices. Add them for better value tracking."
                    ),
                )
            )

        return insights
