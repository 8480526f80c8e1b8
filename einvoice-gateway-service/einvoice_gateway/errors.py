"""
Error taxonomy for the e-invoice gateway.

Every failure the gateway can report is a `GatewayError` subclass with a
stable machine-readable `code` and the HTTP status it maps to, so client
integrations can branch on the kind of failure rather than on message text.
"""

from __future__ import annotations

from typing import Any, Dict


class GatewayError(Exception):
    """
    Base class for all gateway failures.
    """

    status_code: int = 500
    code: str = "GATEWAY_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_envelope(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


class EmptyInput(GatewayError):
    status_code = 400
    code = "EMPTY_INPUT"


class MalformedMarkup(GatewayError):
    status_code = 400
    code = "MALFORMED_MARKUP"


class MissingInvoice(GatewayError):
    status_code = 400
    code = "MISSING_INVOICE"


class UnsupportedMediaType(GatewayError):
    status_code = 400
    code = "UNSUPPORTED_MEDIA_TYPE"


class MissingRuleset(GatewayError):
    status_code = 400
    code = "MISSING_RULESET"


class UnsupportedFormat(GatewayError):
    status_code = 400
    code = "UNSUPPORTED_FORMAT"


class UnknownRuleset(GatewayError):
    """
    The validator response has no entry for a requested ruleset.

    This is an upstream contract violation (the response does not match the
    request), so it maps to 502 rather than a client error.
    """

    status_code = 502
    code = "UNKNOWN_RULESET"

    def __init__(self, ruleset: str) -> None:
        super().__init__(f"Validator response has no result for ruleset '{ruleset}'.")
        self.ruleset = ruleset


class InvalidValidationResult(GatewayError):
    status_code = 502
    code = "INVALID_VALIDATION_RESULT"


class ValidatorUnavailable(GatewayError):
    status_code = 502
    code = "VALIDATOR_UNAVAILABLE"


class RenderIOError(GatewayError):
    status_code = 500
    code = "RENDER_IO_ERROR"
