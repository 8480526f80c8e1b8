"""Shared fixtures for gateway tests."""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict

import pytest

from einvoice_gateway.config import get_settings
from einvoice_gateway.scratch import ScratchSpace

ISSUE_DATE = date(2024, 3, 14)

VALID_INVOICE = b"""<?xml version="1.0" encoding="UTF-8"?>
<Invoice xmlns="urn:oasis:names:specification:ubl:schema:xsd:Invoice-2">
  <ID>INV-1001</ID>
  <IssueDate>2024-03-14</IssueDate>
</Invoice>
"""


def ruleset_report(
    successful: bool = True,
    summary: str = "clean",
    errors: Any = (),
) -> Dict[str, Any]:
    fired = [
        {"id": code, "text": text, "location": location, "flag": "fatal"}
        for code, text, location in errors
    ]
    return {
        "successful": successful,
        "summary": summary,
        "firedAssertionErrorCodes": [code for code, _, _ in errors],
        "firedAssertionErrors": fired,
    }


def raw_result(
    reports: Dict[str, Dict[str, Any]],
    successful: bool = True,
    message: str = "ok",
    count: int = 0,
) -> Dict[str, Any]:
    return {
        "successful": successful,
        "message": message,
        "report": {
            "firedAssertionErrorsCount": count,
            "reports": reports,
            "customerName": "ignored",
        },
    }


@pytest.fixture
def make_raw() -> Callable[..., Dict[str, Any]]:
    return raw_result


@pytest.fixture
def make_ruleset_report() -> Callable[..., Dict[str, Any]]:
    return ruleset_report


@pytest.fixture
def mixed_raw() -> Dict[str, Any]:
    """Response for the default rulesets with one PEPPOL failure."""
    return raw_result(
        {
            "AUNZ_PEPPOL_1_0_10": ruleset_report(
                successful=False,
                summary="1 error",
                errors=[
                    (
                        "PEPPOL-EN16931-R003",
                        "A buyer reference or purchase order reference MUST be provided.",
                        "/Invoice",
                    )
                ],
            ),
            "AUNZ_UBL_1_0_10": ruleset_report(),
        },
        successful=False,
        message="Validation failed",
        count=1,
    )


@pytest.fixture
def scratch(tmp_path) -> ScratchSpace:
    space = ScratchSpace(tmp_path / "scratch")
    space.ensure()
    return space


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
