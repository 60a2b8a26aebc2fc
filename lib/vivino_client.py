# =============================================================================
# lib/vivino_client.py - Vivino HTTP Clients
# =============================================================================
# Two thin async clients built on httpx:
# - VivinoApiClient: talks to Vivino's public API directly (server-to-server,
#   so there is no CORS in the way)
# - VivinoFunctionClient: calls the fetch-vivino-data function by wine id;
#   this is the collaborator the batch sweep uses
#
# Neither client retries. Rate limiting belongs to the caller.
#
# Usage:
#   async with VivinoFunctionClient() as vivino:
#       payload = await vivino.fetch("1234567")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class VivinoClientError(Exception):
    """
    Error talking to Vivino.

    `status_code` is the upstream HTTP status when there was a response,
    None for transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class _BaseClient:
    """Owns an httpx.AsyncClient and closes it on exit."""

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class VivinoApiClient(_BaseClient):
    """Direct client for https://www.vivino.com/api."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.base_url = (base_url or settings.VIVINO_API_BASE_URL).rstrip("/")

    async def get_wine(self, wine_id: str) -> dict[str, Any]:
        """
        Fetch the raw Vivino payload for one wine.

        Raises:
            VivinoClientError: On transport errors, non-2xx responses or
                a body that is not a JSON object
        """
        url = f"{self.base_url}/wines/{wine_id}"
        headers = {
            "Accept": "application/json",
            "User-Agent": settings.VIVINO_USER_AGENT,
        }

        try:
            response = await self._client.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise VivinoClientError(f"Vivino request failed: {e}")

        if response.is_error:
            logger.warning(f"Vivino API error for wine {wine_id}: {response.status_code}")
            raise VivinoClientError(
                f"Vivino API returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError:
            raise VivinoClientError("Vivino API returned invalid JSON", status_code=response.status_code)

        if not isinstance(payload, dict):
            raise VivinoClientError("Vivino API returned an unexpected payload", status_code=response.status_code)

        return payload


class VivinoFunctionClient(_BaseClient):
    """
    Client for the fetch-vivino-data function.

    `fetch()` never raises for upstream problems: it returns None for
    anything that is not a successful lookup, and the sweep counts that
    candidate as skipped.
    """

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.url = url or settings.vivino_fetch_url
        self.api_key = api_key or settings.SUPABASE_ANON_KEY

    async def fetch(self, vivino_id: str) -> dict[str, Any] | None:
        """
        Look up one Vivino wine by id.

        Accepts both the enveloped response ({"success": true, "data": {...}})
        and a bare data object.

        Returns:
            The wine data dict, or None if the lookup did not succeed
        """
        try:
            response = await self._client.post(
                self.url,
                json={"wine_id": vivino_id},
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Vivino fetch for {vivino_id} failed: {e}")
            return None

        if not response.is_success:
            logger.info(f"Vivino fetch for {vivino_id} returned {response.status_code}")
            return None

        try:
            body = response.json()
        except ValueError:
            logger.warning(f"Vivino fetch for {vivino_id} returned invalid JSON")
            return None

        if not isinstance(body, dict):
            return None

        if "success" in body:
            if not body.get("success"):
                logger.info(f"Vivino fetch for {vivino_id} unsuccessful: {body.get('error')}")
                return None
            data = body.get("data")
            return data if isinstance(data, dict) else None

        return body
