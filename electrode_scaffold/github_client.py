"""Async client for the GitHub user search API.

Only one question is ever asked: "which GitHub login owns this e-mail
address?".  The answer is used as the default of the GitHub account prompt,
so every failure mode (offline, rate limited, no match) collapses into an
empty string instead of an exception.

Typical usage::

    client = GitHubClient()
    login = await client.username_for_email("jane@example.com")
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class GitHubClient:
    """Thin ``httpx.AsyncClient`` wrapper around ``/search/users``."""

    def __init__(self, base_url: str = "https://api.github.com", timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"Accept": "application/vnd.github+json"},
        )

    @staticmethod
    def _extract_login(data: Any) -> str:
        """Pull the first login out of a search response body."""
        if not isinstance(data, dict):
            return ""
        items = data.get("items") or []
        if not isinstance(items, list) or not items or not isinstance(items[0], dict):
            return ""
        return str(items[0].get("login") or "")

    async def username_for_email(self, email: str | None) -> str:
        """Look up the GitHub login registered with *email*.

        Returns:
            The login, or ``""`` when the e-mail is empty, nothing matches or
            the request fails for any reason.
        """
        if not email:
            return ""

        try:
            async with self._client() as client:
                response = await client.get(
                    "/search/users", params={"q": f"{email} in:email"}
                )
                response.raise_for_status()
                return self._extract_login(response.json())
        except httpx.HTTPStatusError as exc:
            logger.debug(
                "GitHub lookup for %s returned HTTP %s", email, exc.response.status_code
            )
        except httpx.HTTPError as exc:
            logger.debug("GitHub lookup for %s failed: %s", email, exc)
        except ValueError as exc:
            logger.debug("GitHub lookup for %s returned invalid JSON: %s", email, exc)
        return ""
