"""Tests for document numbering."""

from __future__ import annotations

from datetime import date

import pytest

from fieldservice.numbering import (
    DocumentType,
    NumberingSettings,
    advance_settings,
    format_document_number,
    highest_existing_number,
    next_document_number,
)


class TestHighestExistingNumber:
    def test_mixed_formats(self):
        numbers = ["WO-2024-0001", "WO-0003", "WO-250014"]
        assert highest_existing_number(numbers) == 250014

    def test_uses_last_digit_run(self):
        assert highest_existing_number(["WO-2024-0007"]) == 7

    def test_empty_and_missing(self):
        assert highest_existing_number([]) == 0
        assert highest_existing_number([None, "", "DRAFT"]) == 0


class TestFormatDocumentNumber:
    @pytest.mark.parametrize("fmt, sequence, expected", [
        ("WO-{YYYY}-{####}", 1, "WO-2024-0001"),
        ("WO-{YY}{####}", 12, "WO-240012"),
        ("INV-{###}", 7, "INV-007"),
        ("PO-{##}", 5, "PO-05"),
    ])
    def test_placeholders(self, fmt, sequence, expected):
        assert format_document_number(fmt, sequence, 2024) == expected

    @pytest.mark.parametrize("fmt, sequence, expected", [
        ("WO-{####}", 10000, "WO-0000"),
        ("WO-{####}", 12345, "WO-2345"),
        ("WO-{###}", 1001, "WO-001"),
        ("WO-{##}", 100, "WO-00"),
    ])
    def test_sequence_wraps(self, fmt, sequence, expected):
        assert format_document_number(fmt, sequence, 2024) == expected

    @pytest.mark.parametrize("fmt, expected", [
        ("WO-{YYYY}-{YYYY}-{####}", "WO-2024-{YYYY}-0003"),
        ("WO-{YY}{YY}-{##}", "WO-24{YY}-03"),
        ("WO-{####}-{####}", "WO-0003-{####}"),
    ])
    def test_only_first_placeholder_replaced(self, fmt, expected):
        assert format_document_number(fmt, 3, 2024) == expected

    def test_no_sequence_placeholder_appends(self):
        assert format_document_number("JOB", 5, 2024) == "JOB-5"
        assert format_document_number("JOB-{YYYY}", 5, 2024) == "JOB-2024-5"


class TestNextDocumentNumber:
    def test_default_format(self):
        formatted, sequence = next_document_number(
            DocumentType.WORK_ORDER, ["WO-2024-0009"], today=date(2024, 5, 1),
        )
        assert (formatted, sequence) == ("WO-2024-0010", 10)

    def test_first_document(self):
        formatted, sequence = next_document_number(
            DocumentType.INVOICE, [], today=date(2025, 1, 2),
        )
        assert (formatted, sequence) == ("INV-2025-0001", 1)

    def test_company_override(self):
        settings = NumberingSettings.from_company_settings(
            {"numbering": {"estimateFormat": "Q-{YY}-{###}"}}
        )
        formatted, _ = next_document_number(
            DocumentType.ESTIMATE, ["Q-24-041"], settings, today=date(2024, 8, 1),
        )
        assert formatted == "Q-24-042"
        assert settings.format_for(DocumentType.PROJECT) == "PROJ-{YYYY}-{####}"


class TestNumberingSettings:
    def test_missing_numbering_block(self):
        assert NumberingSettings.from_company_settings(None) == NumberingSettings()
        assert NumberingSettings.from_company_settings({"theme": "dark"}) == NumberingSettings()

    def test_advance_settings(self):
        settings = advance_settings(NumberingSettings(), DocumentType.PURCHASE_ORDER, 41)
        assert settings.purchase_order_next == "42"
        assert settings.work_order_next == "1"

    def test_company_settings_use_camel_case(self):
        stored = NumberingSettings(work_order_next="7").to_company_settings()
        assert stored["workOrderNext"] == "7"
        assert "work_order_next" not in stored
