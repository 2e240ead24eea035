from datetime import date
from decimal import Decimal

import pytest

from homeops.models import Item


@pytest.fixture
def make_item():
    """Factory for items with sensible defaults."""

    def _make(
        name: str = "Laptop",
        category: str = "Electronics",
        purchase_date: date = date(2024, 1, 15),
        months: int = 12,
        price: str | None = None,
        **fields,
    ) -> Item:
        return Item(
            name=name,
            category=category,
            purchase_date=purchase_date,
            warranty_duration_months=months,
            purchase_price=Decimal(price) if price is not None else None,
            **fields,
        )

    return _make


@pytest.fixture
def sample_receipt_text() -> str:
    return "\n".join(
        [
            "TECH STORE #42",
            "",
            "  Sony WH-1000XM5 Headphones  ",
            "03/15/2024  14:22",
            "SUBTOTAL $329.99",
            "TAX $26.40",
            "TOTAL: $356.39",
            "CREDIT CARD",
        ]
    )
