"""Runs the field extractors over one scan and assembles a purchase draft."""

from collections.abc import Iterable

from homeops.extraction.fields import DEFAULT_EXTRACTORS, FieldExtractor
from homeops.extraction.text import normalize_lines
from homeops.models import PurchaseDraft
from homeops.utils.logging import get_logger

logger = get_logger(__name__)


class ExtractionCoordinator:
    """
    Turns raw receipt text into a PurchaseDraft.

    The coordinator owns no heuristics: each extractor sees the same
    normalized lines and raw text, and its result lands in the draft field
    it names. A field no extractor can derive stays None.
    """

    def __init__(self, extractors: Iterable[FieldExtractor] | None = None) -> None:
        """
        Initialize the coordinator.

        Args:
            extractors: Extraction strategies to run. Defaults to the product
                        name, date, price and store name extractors.
        """
        self.extractors: tuple[FieldExtractor, ...] = (
            tuple(extractors) if extractors is not None else DEFAULT_EXTRACTORS
        )
        unknown = [
            e.field for e in self.extractors if e.field not in PurchaseDraft.model_fields
        ]
        if unknown:
            raise ValueError(f"Extractors target unknown draft fields: {unknown}")

    def extract(self, text: str | None) -> PurchaseDraft:
        """
        Extract a purchase draft from OCR text.

        Args:
            text: Raw text delivered by the capture step; may be empty.

        Returns:
            PurchaseDraft with every field that could be derived.
        """
        raw_text = text or ""
        lines = normalize_lines(raw_text)

        values = {}
        for extractor in self.extractors:
            value = extractor.extract(lines, raw_text)
            if value is not None and extractor.field not in values:
                values[extractor.field] = value

        draft = PurchaseDraft(**values)
        logger.debug(
            "Extracted %d of %d fields from %d lines: %s",
            len(values),
            len(self.extractors),
            len(lines),
            sorted(values),
        )
        return draft
