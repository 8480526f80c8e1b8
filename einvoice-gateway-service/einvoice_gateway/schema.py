"""
Data models for validator responses, normalized reports and rendered output.

The raw models mirror the third-party validator's JSON (camelCase on the
wire). The normalized models are the stable report contract returned to
callers; field order here is the key order of every serialized report.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FiredAssertion(BaseModel):
    """
    A single rule violation reported by the remote validator.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Identifier of the breached rule.")
    text: str = Field(default="", description="Human-readable rule description.")
    location: Optional[str] = Field(
        default=None, description="XPath of the offending element."
    )


class RulesetReport(BaseModel):
    """
    Per-ruleset block of a raw validator response.
    """

    model_config = ConfigDict(populate_by_name=True)

    successful: bool
    summary: str = ""
    fired_assertion_error_codes: List[str] = Field(
        default_factory=list, alias="firedAssertionErrorCodes"
    )
    fired_assertion_errors: List[FiredAssertion] = Field(
        default_factory=list, alias="firedAssertionErrors"
    )


class ValidationReportBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    fired_assertion_errors_count: int = Field(..., alias="firedAssertionErrorsCount")
    reports: Dict[str, RulesetReport] = Field(default_factory=dict)


class RawValidationResult(BaseModel):
    """
    Response body of the remote validator, as received.
    """

    model_config = ConfigDict(populate_by_name=True)

    successful: bool
    message: str = ""
    report: ValidationReportBody


class ReportError(BaseModel):
    id: str
    breached_rule: str
    location: Optional[str] = None


class CategoryResult(BaseModel):
    """
    Results for one report category (e.g. `EN16931_Syntax`).
    """

    model_config = ConfigDict(populate_by_name=True)

    successful: bool
    summary: str
    error_codes: List[str] = Field(default_factory=list, alias="errorCodes")
    errors: List[ReportError] = Field(default_factory=list)


class NormalizedReport(BaseModel):
    """
    Stable, versioned validation report returned to callers.

    Aggregate fields are copied from the validator as given; they are never
    recomputed from the per-category results.
    """

    model_config = ConfigDict(populate_by_name=True)

    issue_date: date = Field(..., alias="issueDate")
    successful: bool
    summary: str
    total_error_count: int = Field(..., alias="totalErrorCount")
    results: Dict[str, CategoryResult] = Field(default_factory=dict)

    def to_wire(self) -> dict:
        """
        JSON-compatible dict using the camelCase wire names. Unset error
        locations are left out rather than sent as null.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ReportFormat(str, Enum):
    JSON = "json"
    HTML = "html"
    PDF = "pdf"
    DOCX = "docx"

    @property
    def media_type(self) -> str:
        return MEDIA_TYPES[self]

    @property
    def is_file(self) -> bool:
        """
        True for formats materialized on scratch storage.
        """
        return self in (ReportFormat.PDF, ReportFormat.DOCX)


MEDIA_TYPES = {
    ReportFormat.JSON: "application/json",
    ReportFormat.HTML: "text/html",
    ReportFormat.PDF: "application/pdf",
    ReportFormat.DOCX: (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    ),
}


class RenderedArtifact(BaseModel):
    """
    A rendered report: inline `body` for json/html, a scratch `path` for
    pdf/docx.
    """

    format: ReportFormat
    body: Optional[str] = None
    path: Optional[Path] = None

    @model_validator(mode="after")
    def check_payload(self) -> "RenderedArtifact":
        if self.format.is_file and self.path is None:
            raise ValueError(f"{self.format.value} artifacts need a file path")
        if not self.format.is_file and self.body is None:
            raise ValueError(f"{self.format.value} artifacts need an inline body")
        return self

    @property
    def media_type(self) -> str:
        return self.format.media_type

    @property
    def filename(self) -> str:
        return f"report.{self.format.value}"

    @property
    def is_file(self) -> bool:
        return self.format.is_file
