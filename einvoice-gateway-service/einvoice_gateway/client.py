"""Async HTTP client for the remote e-invoice schematron validator."""

from __future__ import annotations

import base64
import hashlib
import logging
from types import TracebackType
from typing import Any, Dict, Optional, Type, Union

import httpx

from .config import Settings, get_settings
from .errors import ValidatorUnavailable

logger = logging.getLogger(__name__)


class ValidatorClient:
    """Async client for the validator API.

    Every call fetches a fresh client-credentials token; nothing is retried.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.request_timeout),
            transport=transport,
        )

    async def __aenter__(self) -> "ValidatorClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def get_token(self) -> str:
        """Obtain an access token with the OAuth2 client-credentials grant."""
        form = {
            "grant_type": "client_credentials",
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "scope": self._settings.auth_scope,
        }
        body = await self._post_json(self._settings.auth_url, data=form)
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            raise ValidatorUnavailable("Validator authentication returned no access token.")
        return token

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def build_payload(invoice: Union[str, bytes], filename: str) -> Dict[str, str]:
        """Request body: base64 invoice plus the md5 of that base64 text."""
        raw = invoice.encode("utf-8") if isinstance(invoice, str) else invoice
        encoded = base64.b64encode(raw).decode("ascii")
        checksum = hashlib.md5(encoded.encode("ascii")).hexdigest()
        return {"filename": filename, "content": encoded, "checksum": checksum}

    async def validate(
        self, invoice: Union[str, bytes], filename: str, rules: str
    ) -> Dict[str, Any]:
        """Send an invoice for validation against `rules`.

        Returns the decoded validator response, untouched.
        """
        token = await self.get_token()
        body = await self._post_json(
            self._settings.validator_url,
            json=self.build_payload(invoice, filename),
            params={"rules": rules},
            headers={
                "Authorization": f"Bearer {token}",
                "Accept-Language": self._settings.accept_language,
            },
        )
        logger.info("Validated %s against %s", filename, rules)
        return body

    # ------------------------------------------------------------------
    # Internal request helpers
    # ------------------------------------------------------------------

    async def _post_json(self, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.post(url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Request to %s failed: %s", url, exc)
            raise ValidatorUnavailable(f"Could not reach the validator: {exc}") from exc

        if response.is_error:
            logger.error("Validator returned %s for %s", response.status_code, url)
            raise ValidatorUnavailable(
                f"Validator request failed with status {response.status_code}."
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ValidatorUnavailable("Validator returned a non-JSON response.") from exc
