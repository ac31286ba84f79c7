"""Zammad REST client — thin async wrapper over httpx with retry."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from support_desk.config import settings
from support_desk.domain.exceptions import BackendError
from support_desk.domain.value_objects.enums import BackendRole

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class ZammadError(BackendError):
    """Zammad answered with an error or could not be reached."""


class ZammadConfigError(ZammadError):
    """ZAMMAD_URL / ZAMMAD_API_TOKEN are not set."""


class ZammadClient:
    """Async Zammad API client.

    Configuration is validated at request time, so the client can be built
    (and health checks can report the problem) without a configured backend.
    Server errors and transport errors are retried with exponential backoff.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        page_size: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        backoff_base: float = 1.0,
    ):
        self._base_url = (base_url if base_url is not None else settings.zammad_url).rstrip("/")
        self._token = api_token if api_token is not None else settings.zammad_api_token
        self._timeout = timeout if timeout is not None else settings.zammad_timeout
        self._max_retries = max_retries if max_retries is not None else settings.zammad_max_retries
        self._page_size = page_size or settings.zammad_page_size
        self._transport = transport
        self._backoff_base = backoff_base

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url and self._token)

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        json: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        if not self.is_configured:
            raise ZammadConfigError(
                "Zammad is not configured. Please set ZAMMAD_URL and "
                "ZAMMAD_API_TOKEN environment variables."
            )

        headers = {
            "Authorization": f"Token token={self._token}",
            "Accept": "application/json",
        }

        url = f"{self._base_url}{API_PREFIX}{endpoint}"
        attempt = 0
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            while True:
                try:
                    response = await client.request(
                        method, url, json=json, params=params, headers=headers
                    )
                except httpx.TimeoutException as e:
                    if attempt < self._max_retries:
                        attempt = await self._backoff(attempt, endpoint, "timeout")
                        continue
                    raise ZammadError("Request timeout") from e
                except httpx.TransportError as e:
                    if attempt < self._max_retries:
                        attempt = await self._backoff(attempt, endpoint, str(e))
                        continue
                    raise ZammadError(f"Zammad unreachable: {e}") from e

                if response.status_code >= 500 and attempt < self._max_retries:
                    attempt = await self._backoff(
                        attempt, endpoint, f"HTTP {response.status_code}"
                    )
                    continue

                if response.is_error:
                    raise ZammadError(
                        self._error_message(response), status_code=response.status_code
                    )

                if not response.content:
                    return None
                return response.json()

    async def _backoff(self, attempt: int, endpoint: str, cause: str) -> int:
        delay = self._backoff_base * (2 ** attempt)
        logger.warning(
            "Zammad %s failed (%s), retry %d in %.1fs",
            endpoint, cause, attempt + 1, delay,
        )
        await asyncio.sleep(delay)
        return attempt + 1

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        fallback = f"HTTP {response.status_code}: {response.reason_phrase}"
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            return body.get("error_human") or body.get("error") or fallback
        return fallback

    # ─── Tickets ────────────────────────────────────────────────────

    async def get_tickets(self, page: int = 1, per_page: int | None = None) -> list[dict]:
        return await self._request(
            "GET", "/tickets",
            params={"page": page, "per_page": per_page or self._page_size},
        )

    async def get_all_tickets(self, max_pages: int | None = None) -> list[dict]:
        """Walk the paginated ticket list, stopping at the first short page."""
        max_pages = max_pages or settings.zammad_max_pages
        tickets: list[dict] = []
        page = 1
        while page <= max_pages:
            batch = await self.get_tickets(page, self._page_size) or []
            tickets.extend(batch)
            if len(batch) < self._page_size:
                break
            page += 1

        logger.info("Fetched %d tickets across %d pages", len(tickets), min(page, max_pages))
        return tickets

    async def get_ticket(self, ticket_id: int) -> dict:
        return await self._request("GET", f"/tickets/{ticket_id}")

    async def update_ticket(self, ticket_id: int, data: dict) -> dict:
        return await self._request("PUT", f"/tickets/{ticket_id}", json=data)

    async def delete_ticket(self, ticket_id: int) -> None:
        await self._request("DELETE", f"/tickets/{ticket_id}")

    # ─── Users ──────────────────────────────────────────────────────

    async def get_users(self) -> list[dict]:
        return await self._request("GET", "/users")

    async def get_agents(self, active_only: bool = True) -> list[dict]:
        users = await self.get_users()
        agents = [u for u in users if BackendRole.AGENT in (u.get("role_ids") or [])]
        if active_only:
            agents = [u for u in agents if u.get("active")]
        return agents

    async def get_admins(self) -> list[dict]:
        users = await self.get_users()
        return [
            u for u in users
            if BackendRole.ADMIN in (u.get("role_ids") or []) and u.get("active")
        ]

    async def health_check(self) -> dict:
        """Report configuration and connectivity without raising."""
        if not self.is_configured:
            return {"status": "not_configured"}
        try:
            me = await self._request("GET", "/users/me")
            return {"status": "connected", "user": (me or {}).get("login")}
        except ZammadError as e:
            return {"status": "error", "error": str(e)}
