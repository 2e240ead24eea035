"""Warranty claim letters addressed to the store an item was bought from."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from homeops.models import Item
from homeops.warranty.clock import days_remaining, expiration_date

DEFAULT_RECIPIENT = "Customer Service"


class ClaimReason(str, Enum):
    DEFECTIVE_PRODUCT = "Defective Product"
    STOPPED_WORKING = "Stopped Working"
    DAMAGED_IN_TRANSIT = "Damaged in Transit"
    MISSING_PARTS = "Missing Parts"
    OTHER_ISSUE = "Other Issue"


class ClaimLetter(BaseModel):
    model_config = ConfigDict(frozen=True)

    recipient: str
    subject: str
    body: str
    under_warranty: bool


def _long_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def compose_claim(
    item: Item,
    reason: ClaimReason,
    description: str,
    now: date | datetime,
) -> ClaimLetter:
    """Draft a claim letter for ``item``.

    The letter is composed even when the warranty has lapsed;
    ``under_warranty`` tells the caller whether to send it.
    """
    expires = expiration_date(item.purchase_date, item.warranty_duration_months)
    recipient = item.store_name or DEFAULT_RECIPIENT

    details = [
        f"Product: {item.name}",
        f"Purchase Date: {_long_date(item.purchase_date)}",
    ]
    if item.purchase_price is not None:
        details.append(f"Purchase Price: ${item.purchase_price:,.2f}")
    if item.serial_number:
        details.append(f"Serial Number: {item.serial_number}")

    body = "\n".join(
        [
            f"Dear {recipient},",
            "",
            "I am writing to file a warranty claim for the following product:",
            "",
            *details,
            "",
            f"Reason for Claim: {reason.value}",
            "",
            "Issue Description:",
            description.strip(),
            "",
            f"The product is still under warranty (expires {_long_date(expires)}). "
            "I have attached proof of purchase and photos documenting the issue.",
            "",
            "Please advise on the next steps for processing this warranty claim.",
            "",
            "Thank you for your assistance.",
            "",
            "Best regards",
        ]
    )

    return ClaimLetter(
        recipient=recipient,
        subject=f"Warranty Claim: {item.name}",
        body=body,
        under_warranty=days_remaining(expires, now) > 0,
    )
