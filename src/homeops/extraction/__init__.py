"""Receipt text extraction."""

from homeops.extraction.coordinator import ExtractionCoordinator
from homeops.extraction.fields import (
    DateExtractor,
    FieldExtractor,
    PriceExtractor,
    ProductNameExtractor,
    StoreNameExtractor,
)
from homeops.extraction.text import normalize_lines

__all__ = [
    "DateExtractor",
    "ExtractionCoordinator",
    "FieldExtractor",
    "PriceExtractor",
    "ProductNameExtractor",
    "StoreNameExtractor",
    "normalize_lines",
]
