"""Document numbering for work orders, estimates, invoices, projects and POs."""

from .generator import (
    advance_settings,
    format_document_number,
    highest_existing_number,
    next_document_number,
)
from .models import DocumentType, NumberingSettings

__all__ = [
    "advance_settings",
    "format_document_number",
    "highest_existing_number",
    "next_document_number",
    "DocumentType",
    "NumberingSettings",
]
