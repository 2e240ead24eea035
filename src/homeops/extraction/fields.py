"""Heuristic field extractors for scanned receipt text.

Each extractor is a stateless strategy exposing the ``PurchaseDraft`` field
it fills and an ``extract(lines, text)`` method returning the value or None.
Ambiguity is always resolved by taking the first acceptable candidate in
pattern order, then document order.
"""

import re
from collections.abc import Sequence
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

from homeops.utils.date_parser import contains_date, find_date_candidate, parse_date

CURRENCY_SYMBOLS = "$€£¥"

_AMOUNT = r"(\d+(?:,\d{3})*\.\d{2})(?!\d)"
_SYMBOL = f"[{re.escape(CURRENCY_SYMBOLS)}]"


class FieldExtractor(Protocol):
    """Common interface of the receipt field heuristics."""

    field: str

    def extract(self, lines: Sequence[str], text: str) -> Any | None: ...


class ProductNameExtractor:
    """First line that does not look like a total, price, date or header."""

    field = "product_name"

    EXCLUDED_WORDS = ("total", "subtotal", "tax", "cash", "credit", "receipt", "store")
    MIN_LENGTH = 3
    MAX_LENGTH = 99

    def is_candidate(self, line: str) -> bool:
        if not line:
            return False
        lowered = line.lower()
        if any(word in lowered for word in self.EXCLUDED_WORDS):
            return False
        if any(symbol in line for symbol in CURRENCY_SYMBOLS):
            return False
        if contains_date(line):
            return False
        return self.MIN_LENGTH < len(line) < self.MAX_LENGTH

    def extract(self, lines: Sequence[str], text: str) -> str | None:
        for line in lines:
            if self.is_candidate(line):
                return line
        return None


class DateExtractor:
    """Purchase date from the first date-shaped substring of the receipt."""

    field = "purchase_date"

    def extract(self, lines: Sequence[str], text: str) -> date | None:
        candidate = find_date_candidate(text)
        if candidate is None:
            return None
        return parse_date(candidate)


class PriceExtractor:
    """Purchase price, preferring labeled totals over bare amounts."""

    field = "price"

    # Most specific first
    PATTERNS = [
        # TOTAL: $45.67, Amount 12.00, price: €9.99
        re.compile(rf"\b(?:total|amount|price)\b\s*:?\s*{_SYMBOL}?\s*{_AMOUNT}", re.I),
        # $45.67
        re.compile(rf"{_SYMBOL}\s*{_AMOUNT}"),
        # 45.67 USD, 45.67 dollars
        re.compile(rf"{_AMOUNT}\s*(?:USD|dollars)\b", re.I),
    ]
    MAX_PRICE = Decimal("100000")

    def accept(self, value: Decimal) -> bool:
        return Decimal("0") < value < self.MAX_PRICE

    def extract(self, lines: Sequence[str], text: str) -> Decimal | None:
        for pattern in self.PATTERNS:
            for match in pattern.finditer(text):
                try:
                    value = Decimal(match.group(1).replace(",", ""))
                except InvalidOperation:
                    continue
                if self.accept(value):
                    return value
        return None


class StoreNameExtractor:
    """Store name from the receipt header, falling back to any short line."""

    field = "store_name"

    HEADER_LINES = 5
    STORE_WORDS = ("store", "shop", "market", "retail", "inc", "llc", "ltd", "co")

    def extract(self, lines: Sequence[str], text: str) -> str | None:
        header = lines[: self.HEADER_LINES]

        for line in header:
            lowered = line.lower()
            if any(word in lowered for word in self.STORE_WORDS):
                return line

        # Store names are often printed in capitals
        for line in header:
            if line.isupper() and 4 <= len(line) <= 49:
                return line

        for line in lines:
            if line and 3 <= len(line) <= 49:
                return line

        return None


DEFAULT_EXTRACTORS: tuple[FieldExtractor, ...] = (
    ProductNameExtractor(),
    DateExtractor(),
    PriceExtractor(),
    StoreNameExtractor(),
)
