"""
API Service — the HTTP boundary to the persistence/validation service.

Wraps one ``httpx.AsyncClient``. Sends JSON, attaches a bearer token
when one is held, and turns every failure (non-2xx status or transport
error) into ``APIError`` with a human-readable message.
"""

from __future__ import annotations

from logging import getLogger
from typing import Any, Dict, Optional

import httpx

from flowbuilder.config.client_config import ClientConfig, get_client_config
from flowbuilder.errors import APIError

logger = getLogger(__name__)


class APIService:
    """Thin JSON-over-HTTP transport shared by the auth and workflow APIs."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        token: Optional[str] = None,
    ) -> None:
        self._config = config or get_client_config()
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=self._config.api_url,
            timeout=self._config.timeout,
            transport=transport,
        )

    # ── Token ──

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    def clear_token(self) -> None:
        self._token = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    # ── Requests ──

    async def request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Any] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (``None`` if empty).

        Raises:
            APIError: On a non-2xx status or a transport failure.
        """
        try:
            response = await self._client.request(
                method, endpoint, json=json, headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            raise APIError(str(e) or type(e).__name__) from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning(f"{method} {endpoint} → {response.status_code}: {message}")
            raise APIError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON from {endpoint}", status_code=response.status_code) from e

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
    """Prefer the service's ``message`` field, else the status text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"API Error: {response.reason_phrase}"
