"""Reminder schedule handed to the notification scheduler.

Delivery and deduplication belong to the scheduler; identifiers are stable
per item and offset so rescheduling an item replaces its reminders.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from homeops.config import Settings
from homeops.models import AlertTrigger, Item
from homeops.warranty.clock import expiration_date

ONE_WEEK = 7


def alert_identifier(item: Item, days_before: int) -> str:
    return f"{item.id}-{days_before}days"


def _message(item: Item, days_before: int, final: bool) -> tuple[str, str]:
    if days_before == ONE_WEEK:
        when = "in just one week"
    else:
        when = f"in {days_before} days"
    body = f"The warranty for {item.name} expires {when}."
    if final:
        return "Final Warranty Notice!", body
    return "Warranty Expiring Soon!", body


def alert_schedule(item: Item, settings: Settings | None = None) -> list[AlertTrigger]:
    """Reminders for one item, earliest first.

    The reminder with the smallest offset is the final notice.
    """
    settings = settings or Settings()
    expires = expiration_date(item.purchase_date, item.warranty_duration_months)

    offsets = sorted(set(settings.alert_days_before), reverse=True)
    triggers = []
    for days_before in offsets:
        title, body = _message(item, days_before, final=days_before == offsets[-1])
        triggers.append(
            AlertTrigger(
                identifier=alert_identifier(item, days_before),
                item_id=item.id,
                days_before=days_before,
                fire_at=expires - timedelta(days=days_before),
                title=title,
                body=body,
            )
        )
    return triggers


def schedule_for(
    items: Iterable[Item],
    now: date | datetime | None = None,
    settings: Settings | None = None,
) -> list[AlertTrigger]:
    """Reminders for every item, ordered by fire date.

    Args:
        items: The item collection.
        now: If given, reminders whose fire date is already past are dropped.
        settings: Reminder offsets; defaults to 30 and 7 days.
    """
    today = now.date() if isinstance(now, datetime) else now

    triggers = []
    for item in items:
        for trigger in alert_schedule(item, settings):
            if today is None or trigger.fire_at >= today:
                triggers.append(trigger)
    return sorted(triggers, key=lambda trigger: trigger.fire_at)
