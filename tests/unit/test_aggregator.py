"""Unit tests for grouping, sorting, statistics and insights."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from homeops.config import Settings
from homeops.models import AnalyticsSnapshot, CollectionKind, InsightKind, InsightSeverity
from homeops.warranty.aggregator import ItemAggregator, SortOrder
from homeops.warranty.clock import WarrantyClock

pytestmark = pytest.mark.unit

NOW = date(2024, 6, 15)


@pytest.fixture
def aggregator() -> ItemAggregator:
    return ItemAggregator()


@pytest.fixture
def abc_items(make_item):
    """A(600, Electronics), B(no price, Electronics), C(50, Furniture)."""
    return [
        make_item(name="A", category="Electronics", price="600"),
        make_item(name="B", category="Electronics"),
        make_item(name="C", category="Furniture", price="50"),
    ]


class TestFilter:
    def test_search_matches_name_or_category(self, aggregator, make_item):
        items = [
            make_item(name="Coffee Maker", category="Kitchen"),
            make_item(name="Desk", category="Office"),
            make_item(name="Kettle", category="kitchen appliances"),
        ]

        assert [i.name for i in aggregator.filter(items, search="KITCHEN")] == [
            "Coffee Maker",
            "Kettle",
        ]
        assert [i.name for i in aggregator.filter(items, search="des")] == ["Desk"]

    def test_filters_compose(self, aggregator, make_item):
        items = [
            make_item(name="Coffee Maker", category="Kitchen"),
            make_item(name="Coffee Table", category="Furniture"),
        ]
        result = aggregator.filter(items, search="coffee", category="Furniture")
        assert [i.name for i in result] == ["Coffee Table"]

    def test_category_is_exact(self, aggregator, make_item):
        items = [make_item(category="Kitchen"), make_item(category="kitchen")]
        assert len(aggregator.filter(items, category="Kitchen")) == 1

    def test_no_filters(self, aggregator, abc_items):
        assert aggregator.filter(abc_items) == abc_items


class TestSort:
    def test_name_sort_is_stable(self, aggregator, make_item):
        first = make_item(name="Lamp", price="10")
        second = make_item(name="lamp", price="20")
        other = make_item(name="Chair")

        result = aggregator.sort([first, other, second], SortOrder.NAME_ASC, NOW)
        assert result == [other, first, second]

    def test_name_desc(self, aggregator, make_item):
        items = [make_item(name=n) for n in ["b", "C", "a"]]
        result = aggregator.sort(items, SortOrder.NAME_DESC, NOW)
        assert [i.name for i in result] == ["C", "b", "a"]

    def test_purchase_date(self, aggregator, make_item):
        old = make_item(purchase_date=date(2023, 1, 1))
        new = make_item(purchase_date=date(2024, 1, 1))

        assert aggregator.sort([new, old], SortOrder.PURCHASE_DATE_ASC, NOW) == [old, new]
        assert aggregator.sort([old, new], SortOrder.PURCHASE_DATE_DESC, NOW) == [new, old]

    def test_expiring_first_ties_by_name(self, aggregator, make_item):
        soon_b = make_item(name="b", purchase_date=date(2023, 7, 1), months=12)
        soon_a = make_item(name="A", purchase_date=date(2023, 7, 1), months=12)
        later = make_item(name="0", purchase_date=date(2024, 1, 1), months=24)
        expired = make_item(name="z", purchase_date=date(2020, 1, 1), months=12)

        result = aggregator.sort(
            [later, soon_b, expired, soon_a], SortOrder.EXPIRING_FIRST, NOW
        )
        assert result == [expired, soon_a, soon_b, later]

    def test_price_treats_missing_as_zero(self, aggregator, abc_items):
        a, b, c = abc_items

        assert aggregator.sort(abc_items, SortOrder.PRICE_DESC, NOW) == [a, c, b]
        assert aggregator.sort(abc_items, SortOrder.PRICE_ASC, NOW) == [b, c, a]

    def test_price_desc_is_stable(self, aggregator, make_item):
        first = make_item(name="first")
        second = make_item(name="second", price="0")
        assert aggregator.sort([first, second], SortOrder.PRICE_DESC, NOW) == [
            first,
            second,
        ]

    def test_does_not_mutate_input(self, aggregator, abc_items):
        before = list(abc_items)
        aggregator.sort(abc_items, SortOrder.PRICE_ASC, NOW)
        assert abc_items == before


class TestGrouping:
    def test_categories_partition_items(self, aggregator, make_item):
        items = [
            make_item(name=str(n), category=category)
            for n, category in enumerate(["Tools", "Garden", "Tools", "Office", "Garden"])
        ]
        buckets = aggregator.by_category(items)

        assert [b.title for b in buckets] == ["Garden", "Office", "Tools"]
        assert all(b.kind is CollectionKind.CATEGORY for b in buckets)
        grouped_ids = [item.id for b in buckets for item in b.items]
        assert sorted(grouped_ids) == sorted(item.id for item in items)
        assert len(grouped_ids) == len(set(grouped_ids))

    def test_location_excludes_unset(self, aggregator, make_item):
        items = [
            make_item(name="TV", location="Living Room"),
            make_item(name="Fridge", location="Kitchen"),
            make_item(name="Phone"),
            make_item(name="Blank", location=""),
        ]
        buckets = aggregator.by_location(items)

        assert [(b.title, [i.name for i in b.items]) for b in buckets] == [
            ("Kitchen", ["Fridge"]),
            ("Living Room", ["TV"]),
        ]

    def test_tags_include_item_in_each_tag(self, aggregator, make_item):
        items = [
            make_item(name="Watch", tags={"Gift", "High Value"}),
            make_item(name="Ring", tags={"Gift"}),
            make_item(name="Mug"),
        ]
        buckets = aggregator.by_tag(items)

        assert [(b.title, b.count) for b in buckets] == [("Gift", 2), ("High Value", 1)]
        assert "Mug" not in {i.name for b in buckets for i in b.items}

    def test_favorites(self, aggregator, make_item):
        items = [make_item(name="A", is_favorite=True), make_item(name="B")]
        assert [i.name for i in aggregator.favorites(items).items] == ["A"]

    def test_recent_window_newest_first(self, aggregator, make_item):
        items = [
            make_item(name="edge", purchase_date=date(2024, 5, 16)),
            make_item(name="old", purchase_date=date(2024, 5, 15)),
            make_item(name="new", purchase_date=date(2024, 6, 10)),
        ]
        bucket = aggregator.recent(items, datetime(2024, 6, 15, 9, 30))
        assert [i.name for i in bucket.items] == ["new", "edge"]

    def test_high_value(self, aggregator, abc_items, make_item):
        exact = make_item(name="D", price="500")
        bucket = aggregator.high_value([*abc_items, exact])
        assert [i.name for i in bucket.items] == ["A", "D"]

    def test_smart_collections_order(self, aggregator, make_item):
        items = [
            make_item(
                name="TV",
                category="Electronics",
                price="900",
                location="Den",
                tags={"Gift"},
                purchase_date=date(2024, 6, 1),
            ),
            make_item(name="Chair", category="Furniture", is_favorite=True),
        ]
        buckets = aggregator.smart_collections(items, NOW)

        assert [(b.kind, b.title) for b in buckets] == [
            (CollectionKind.FAVORITES, "Favorites"),
            (CollectionKind.RECENT, "Recently Added"),
            (CollectionKind.HIGH_VALUE, "High Value"),
            (CollectionKind.CATEGORY, "Electronics"),
            (CollectionKind.CATEGORY, "Furniture"),
            (CollectionKind.LOCATION, "Den"),
            (CollectionKind.TAG, "Gift"),
        ]

    def test_smart_collections_skip_empty(self, aggregator, make_item):
        items = [make_item(name="Old", purchase_date=date(2020, 1, 1))]
        buckets = aggregator.smart_collections(items, NOW)
        assert [b.kind for b in buckets] == [CollectionKind.CATEGORY]

    def test_empty_collection(self, aggregator):
        assert aggregator.smart_collections([], NOW) == []
        assert aggregator.by_category([]) == []


class TestSnapshot:
    def test_value_statistics(self, aggregator, abc_items):
        snapshot = aggregator.snapshot(abc_items, NOW)

        assert aggregator.high_value(abc_items).items == (abc_items[0],)
        assert snapshot.total_items == 3
        assert snapshot.total_value == Decimal("650")
        assert snapshot.average_value == Decimal("325")
        assert snapshot.highest_value == Decimal("600")
        assert snapshot.most_common_category == "Electronics"
        assert snapshot.items_without_price == 1
        assert [i.name for i in snapshot.top_value_items] == ["A", "C"]

    def test_empty_collection_is_zeroed(self, aggregator):
        snapshot = aggregator.snapshot([], NOW)

        assert snapshot.total_items == 0
        assert snapshot.total_value == 0
        assert snapshot.average_value == 0
        assert snapshot.highest_value == 0
        assert snapshot.average_warranty_months == 0
        assert snapshot.most_common_category is None
        assert snapshot.categories == ()
        assert [m.count for m in snapshot.monthly_purchases] == [0] * 6

    def test_no_prices(self, aggregator, make_item):
        snapshot = aggregator.snapshot([make_item(), make_item()], NOW)
        assert snapshot.average_value == 0
        assert snapshot.highest_value == 0
        assert snapshot.items_without_price == 2

    def test_average_warranty_truncates(self, aggregator, make_item):
        items = [make_item(months=12), make_item(months=12), make_item(months=13)]
        assert aggregator.snapshot(items, NOW).average_warranty_months == 12

    def test_bucket_counts(self, aggregator, make_item):
        items = [
            make_item(purchase_date=date(2023, 6, 15), months=12),  # expires today
            make_item(purchase_date=date(2023, 7, 15), months=12),  # 30 days
            make_item(purchase_date=date(2023, 7, 16), months=12),  # 31 days
            make_item(purchase_date=date(2024, 6, 1), months=24),
        ]
        snapshot = aggregator.snapshot(items, NOW)

        assert snapshot.expired_count == 1
        assert snapshot.expiring_soon_count == 1
        assert snapshot.active_count == 2

    def test_most_common_category_tie_is_lexical(self, aggregator, make_item):
        items = [
            make_item(category="Tools"),
            make_item(category="Garden"),
            make_item(category="Tools"),
            make_item(category="Garden"),
            make_item(category="Office"),
        ]
        snapshot = aggregator.snapshot(items, NOW)

        assert snapshot.most_common_category == "Garden"
        assert [(c.category, c.count) for c in snapshot.categories] == [
            ("Garden", 2),
            ("Tools", 2),
            ("Office", 1),
        ]

    def test_monthly_window(self, aggregator, make_item):
        items = [
            make_item(purchase_date=date(2024, 6, 1)),
            make_item(purchase_date=date(2024, 6, 14)),
            make_item(purchase_date=date(2024, 1, 31)),
            make_item(purchase_date=date(2023, 12, 31)),
            make_item(purchase_date=date(2024, 7, 1)),
        ]
        snapshot = aggregator.snapshot(items, NOW)

        assert [(m.month, m.count) for m in snapshot.monthly_purchases] == [
            (date(2024, 1, 1), 1),
            (date(2024, 2, 1), 0),
            (date(2024, 3, 1), 0),
            (date(2024, 4, 1), 0),
            (date(2024, 5, 1), 0),
            (date(2024, 6, 1), 2),
        ]
        assert snapshot.added_in_window == 3
        assert snapshot.added_this_month == 2

    def test_top_value_limit(self, make_item):
        aggregator = ItemAggregator(settings=Settings(top_value_limit=2))
        items = [make_item(name=str(p), price=str(p)) for p in (10, 30, 20)]
        snapshot = aggregator.snapshot(items, NOW)
        assert [i.name for i in snapshot.top_value_items] == ["30", "20"]

    def test_reads_a_copy_of_the_collection(self, aggregator, make_item):
        items = [make_item(price="10")]

        def growing():
            for item in items:
                yield item

        snapshot = aggregator.snapshot(growing(), NOW)
        assert snapshot.total_items == 1
        assert snapshot.total_value == Decimal("10")


class TestInsights:
    def test_all_rules_fire(self, aggregator, make_item):
        items = [
            make_item(category="Tools", purchase_date=date(2023, 7, 1), months=12),
            make_item(category="Tools", purchase_date=date(2024, 6, 1), months=6),
        ]
        insights = aggregator.insights(aggregator.snapshot(items, NOW))

        assert [i.kind for i in insights] == [
            InsightKind.EXPIRING_SOON,
            InsightKind.TOP_CATEGORY,
            InsightKind.SHORT_WARRANTY,
            InsightKind.MISSING_PRICE,
        ]
        assert insights[0].severity is InsightSeverity.WARNING
        assert insights[0].message.startswith("1 item(s)")
        assert "Tools is your most tracked category with 2 items." == insights[1].message

    def test_only_top_category(self, aggregator, make_item):
        items = [make_item(price="10", months=24, purchase_date=date(2024, 1, 1))]
        insights = aggregator.insights(aggregator.snapshot(items, NOW))
        assert [i.kind for i in insights] == [InsightKind.TOP_CATEGORY]

    def test_empty_collection_has_no_insights(self, aggregator):
        assert aggregator.insights(AnalyticsSnapshot()) == []

    def test_uses_clock_threshold(self, make_item):
        settings = Settings(expiring_soon_days=400)
        aggregator = ItemAggregator(WarrantyClock(settings), settings)
        items = [make_item(price="10", months=12, purchase_date=date(2024, 1, 1))]

        insights = aggregator.insights(aggregator.snapshot(items, NOW))
        assert insights[0].kind is InsightKind.EXPIRING_SOON
