"""Data models for document numbering."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentType(str, Enum):
    """Documents that carry a sequential number."""
    WORK_ORDER = "work_order"
    ESTIMATE = "estimate"
    INVOICE = "invoice"
    PROJECT = "project"
    PURCHASE_ORDER = "purchase_order"


class NumberingSettings(BaseModel):
    """Per-company numbering formats.

    Stored under ``settings.numbering`` of the company row with camelCase
    keys (``workOrderFormat``, ``workOrderNext``...). Missing keys take the
    defaults below.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    work_order_prefix: str = "WO"
    work_order_format: str = "WO-{YYYY}-{####}"
    work_order_next: str = "1"
    estimate_prefix: str = "EST"
    estimate_format: str = "EST-{YYYY}-{####}"
    estimate_next: str = "1"
    invoice_prefix: str = "INV"
    invoice_format: str = "INV-{YYYY}-{####}"
    invoice_next: str = "1"
    project_prefix: str = "PROJ"
    project_format: str = "PROJ-{YYYY}-{####}"
    project_next: str = "1"
    purchase_order_prefix: str = "PO"
    purchase_order_format: str = "PO-{YYYY}-{####}"
    purchase_order_next: str = "1"

    @classmethod
    def from_company_settings(cls, company_settings: dict | None) -> NumberingSettings:
        """Merge a company's stored numbering block over the defaults."""
        return cls(**((company_settings or {}).get("numbering") or {}))

    def format_for(self, doc_type: DocumentType) -> str:
        return getattr(self, f"{doc_type.value}_format")

    def to_company_settings(self) -> dict:
        return self.model_dump(by_alias=True)
