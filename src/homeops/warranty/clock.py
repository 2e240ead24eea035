"""Warranty expiration and lifecycle state.

Everything here is derived on demand from an item's purchase date and
warranty duration; nothing is cached on the item.
"""

import math
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta

from homeops.config import Settings
from homeops.models import (
    AnnotatedItem,
    Item,
    WarrantyBucket,
    WarrantyEmphasis,
    WarrantyState,
)

EXPIRING_SOON_DAYS = 30
ATTENTION_DAYS = 90
FINAL_NOTICE_DAYS = 7


def _as_datetime(value: date | datetime, like: datetime | None = None) -> datetime:
    """Midnight of ``value`` if it is a plain date, in ``like``'s timezone."""
    if isinstance(value, datetime):
        return value
    tzinfo = like.tzinfo if like is not None else None
    return datetime.combine(value, time.min, tzinfo=tzinfo)


def expiration_date(purchase_date: date, months: int) -> date:
    """Add ``months`` calendar months, clamping to the end of shorter months.

    >>> expiration_date(date(2024, 1, 31), 1)
    datetime.date(2024, 2, 29)
    """
    return purchase_date + relativedelta(months=months)


def days_remaining(expiration: date, now: date | datetime) -> int:
    """Whole days from ``now`` until ``expiration``, truncated toward zero."""
    now_dt = _as_datetime(now)
    delta = _as_datetime(expiration, like=now_dt) - now_dt
    return math.trunc(delta / timedelta(days=1))


def bucket_for(days: int, expiring_soon_days: int = EXPIRING_SOON_DAYS) -> WarrantyBucket:
    if days <= 0:
        return WarrantyBucket.EXPIRED
    if days <= expiring_soon_days:
        return WarrantyBucket.EXPIRING_SOON
    return WarrantyBucket.ACTIVE


def emphasis_for(
    days: int,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
    attention_days: int = ATTENTION_DAYS,
) -> WarrantyEmphasis:
    if days <= expiring_soon_days:
        return WarrantyEmphasis.CRITICAL
    if days <= attention_days:
        return WarrantyEmphasis.CAUTION
    return WarrantyEmphasis.NORMAL


def status_label(
    days: int,
    expiring_soon_days: int = EXPIRING_SOON_DAYS,
    final_notice_days: int = FINAL_NOTICE_DAYS,
) -> str:
    if days <= 0:
        return "Expired"
    if days <= final_notice_days:
        return "Expiring Soon"
    if days <= expiring_soon_days:
        return "Expiring This Month"
    return "Active"


def progress(purchase_date: date, expiration: date, now: date | datetime) -> float:
    """Elapsed share of the warranty span, clamped to [0, 1].

    A span of zero or less counts as fully elapsed.
    """
    now_dt = _as_datetime(now)
    start = _as_datetime(purchase_date, like=now_dt)
    span = _as_datetime(expiration, like=now_dt) - start
    if span <= timedelta(0):
        return 1.0
    ratio = (now_dt - start) / span
    return min(max(ratio, 0.0), 1.0)


class WarrantyClock:
    """Computes WarrantyState for items using the configured thresholds."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def bucket_for(self, days: int) -> WarrantyBucket:
        return bucket_for(days, self.settings.expiring_soon_days)

    def state(self, item: Item, now: date | datetime) -> WarrantyState:
        """Derive the warranty state of ``item`` at ``now``."""
        expires = expiration_date(item.purchase_date, item.warranty_duration_months)
        days = days_remaining(expires, now)
        return WarrantyState(
            expiration_date=expires,
            days_remaining=days,
            bucket=self.bucket_for(days),
            progress=progress(item.purchase_date, expires, now),
            emphasis=emphasis_for(
                days, self.settings.expiring_soon_days, self.settings.attention_days
            ),
            status_label=status_label(
                days, self.settings.expiring_soon_days, self.settings.final_notice_days
            ),
        )

    def annotate(
        self, items: Iterable[Item], now: date | datetime
    ) -> list[AnnotatedItem]:
        return [AnnotatedItem(item=item, state=self.state(item, now)) for item in items]
