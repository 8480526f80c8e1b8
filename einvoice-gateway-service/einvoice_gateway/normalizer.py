"""
Projection of raw validator responses onto the normalized report schema.

The main entrypoint is `normalize`, which:
- copies the aggregate fields (success, message, error count) verbatim
- walks the requested rulesets in order and files each one's results under
  its report category
- renames fired-assertion `text` to `breached_rule`
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from .errors import InvalidValidationResult, UnknownRuleset
from .rulesets import RulesetSpec, category_label, parse_rulesets
from .schema import (
    CategoryResult,
    NormalizedReport,
    RawValidationResult,
    ReportError,
    RulesetReport,
)

Today = Union[date, Callable[[], date], None]


def _resolve_today(today: Today) -> date:
    if today is None:
        return date.today()
    value = today if isinstance(today, date) else today()
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_raw_result(
    raw: Union[RawValidationResult, Mapping[str, Any]],
) -> RawValidationResult:
    """
    Validate a decoded validator response into `RawValidationResult`.
    """
    if isinstance(raw, RawValidationResult):
        return raw
    try:
        return RawValidationResult.model_validate(raw)
    except ValidationError as exc:
        raise InvalidValidationResult(
            f"Validator response does not match the expected format: {exc}"
        ) from exc


def _category_result(ruleset_report: RulesetReport) -> CategoryResult:
    errors = [
        ReportError(id=fired.id, breached_rule=fired.text, location=fired.location)
        for fired in ruleset_report.fired_assertion_errors
    ]
    return CategoryResult(
        successful=ruleset_report.successful,
        summary=ruleset_report.summary,
        error_codes=list(ruleset_report.fired_assertion_error_codes),
        errors=errors,
    )


def normalize(
    raw: Union[RawValidationResult, Mapping[str, Any]],
    rulesets: RulesetSpec,
    *,
    today: Today = None,
) -> NormalizedReport:
    """
    Build a `NormalizedReport` from a raw validator response.

    Parameters
    ----------
    raw:
        Validator response, either decoded JSON or an already parsed model.
    rulesets:
        The rulesets that were requested, as a comma-separated string or a
        sequence. Every one of them must be present in the response.
    today:
        Issue date of the report, or a callable returning it. Defaults to
        the current date.

    Returns
    -------
    NormalizedReport
        Report with one `results` entry per category. Rulesets sharing a
        category overwrite each other in request order.
    """
    result = parse_raw_result(raw)
    available = result.report.reports

    results: Dict[str, CategoryResult] = {}
    for ruleset in parse_rulesets(rulesets):
        ruleset_report: Optional[RulesetReport] = available.get(ruleset)
        if ruleset_report is None:
            raise UnknownRuleset(ruleset)
        results[category_label(ruleset).value] = _category_result(ruleset_report)

    return NormalizedReport(
        issue_date=_resolve_today(today),
        successful=result.successful,
        summary=result.message,
        total_error_count=result.report.fired_assertion_errors_count,
        results=results,
    )
