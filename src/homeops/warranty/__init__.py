"""Warranty lifecycle: expiration, aggregation, reminders and claims."""

from homeops.warranty.aggregator import ItemAggregator, SortOrder
from homeops.warranty.alerts import alert_schedule, schedule_for
from homeops.warranty.claims import ClaimLetter, ClaimReason, compose_claim
from homeops.warranty.clock import (
    WarrantyClock,
    bucket_for,
    days_remaining,
    expiration_date,
    progress,
)

__all__ = [
    "ClaimLetter",
    "ClaimReason",
    "ItemAggregator",
    "SortOrder",
    "WarrantyClock",
    "alert_schedule",
    "bucket_for",
    "compose_claim",
    "days_remaining",
    "expiration_date",
    "progress",
    "schedule_for",
]
