"""Minimal asynchronous GitHub REST client."""
from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

import aiohttp

logger = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubAPIError(RuntimeError):
    """Raised when GitHub answers a request with an error status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"GitHub API returned {status}: {message}")
        self.status = status
        self.message = message


class GitHubClient:
    """Issue authenticated JSON requests against the GitHub API.

    The client does not own ``session``; callers open and close it.
    """

    def __init__(self, session, token: str, base_url: str = API_ROOT, timeout: float = 20) -> None:
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": API_VERSION,
        }

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, object]] = None,
        payload: Optional[Dict[str, object]] = None,
    ) -> object:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)
        async with self.session.request(
            method,
            url,
            params=params,
            json=payload,
            headers=self._headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        ) as response:
            if response.status >= 400:
                raise GitHubAPIError(response.status, await _error_message(response))
            return await response.json()

    async def get(self, path: str, **params: object) -> object:
        return await self.request("GET", path, params=params or None)

    async def put(self, path: str, payload: Dict[str, object]) -> object:
        return await self.request("PUT", path, payload=payload)


async def _error_message(response) -> str:
    text = await response.text()
    try:
        body = await response.json()
    except (aiohttp.ContentTypeError, ValueError):
        return text
    if isinstance(body, Mapping) and body.get("message"):
        return str(body["message"])
    return text
