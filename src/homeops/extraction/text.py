"""Line splitting for raw OCR text."""


def normalize_lines(text: str | None) -> list[str]:
    """Split raw scanned text into trimmed, non-empty lines.

    Order is preserved and no line is dropped for its content.

    Args:
        text: Raw OCR text, possibly empty.

    Returns:
        The candidate lines, or an empty list for blank input.
    """
    if not text:
        return []
    lines = (line.strip() for line in text.splitlines())
    return [line for line in lines if line]
