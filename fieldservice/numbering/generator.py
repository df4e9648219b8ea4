"""Sequential document numbers (WO-2024-0001 and friends).

The next sequence is one past the highest number already used by the
company's documents of that type, whatever format those numbers were
written in. Formats understand these placeholders:

    {YYYY} / {YY}          current year, four or two digits
    {####} / {###} / {##}  zero-padded sequence, wrapping at 10^n

Only the first occurrence of each placeholder is substituted.

A format with no sequence placeholder gets "-<sequence>" appended.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Iterable, Optional

from .models import DocumentType, NumberingSettings

logger = logging.getLogger(__name__)

# Last run of digits in the string (WO-250014, WO-2024-0001, WO-0001)
_TRAILING_NUMBER = re.compile(r"(\d+)(?!.*\d)")

_SEQUENCE_PLACEHOLDERS = ("{####}", "{###}", "{##}")


def highest_existing_number(numbers: Iterable[Optional[str]]) -> int:
    """Highest trailing number across existing document numbers, 0 if none."""
    highest = 0
    for value in numbers:
        if not value:
            continue
        match = _TRAILING_NUMBER.search(value)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest


def format_document_number(fmt: str, sequence: int, year: int) -> str:
    """Render a numbering format for one sequence value."""
    result = fmt
    if "{YYYY}" in fmt:
        result = result.replace("{YYYY}", str(year), 1)
    elif "{YY}" in fmt:
        result = result.replace("{YY}", str(year)[-2:], 1)

    for placeholder in _SEQUENCE_PLACEHOLDERS:
        if placeholder in fmt:
            width = len(placeholder) - 2
            wrap = 10 ** width
            value = sequence % wrap if sequence >= wrap else sequence
            return result.replace(placeholder, str(value).zfill(width), 1)

    return f"{result}-{sequence}"


def next_document_number(
    doc_type: DocumentType,
    existing_numbers: Iterable[Optional[str]],
    settings: Optional[NumberingSettings] = None,
    today: Optional[date] = None,
) -> tuple[str, int]:
    """Next formatted number and its sequence for a document type.

    Args:
        doc_type: Kind of document being created.
        existing_numbers: Numbers already used by this company for doc_type.
        settings: Company numbering settings (defaults when None).
        today: Date used for the year placeholders.

    Returns:
        (formatted_number, next_sequence)
    """
    settings = settings or NumberingSettings()
    today = today or date.today()
    sequence = highest_existing_number(existing_numbers) + 1
    formatted = format_document_number(settings.format_for(doc_type), sequence, today.year)
    logger.debug("Next %s number: %s (sequence %d)", doc_type.value, formatted, sequence)
    return formatted, sequence


def advance_settings(
    settings: NumberingSettings,
    doc_type: DocumentType,
    used_sequence: int,
) -> NumberingSettings:
    """Settings with the type's next counter moved past used_sequence."""
    return settings.model_copy(
        update={f"{doc_type.value}_next": str(used_sequence + 1)}
    )
