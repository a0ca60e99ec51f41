"""High-level orchestration of a release feed refresh."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Dict, Optional, Tuple

import aiohttp

from .config import ConfigurationError, Settings
from .fetcher import fetch_live_releases
from .github import GitHubAPIError, GitHubClient
from .models import ReleaseData
from .reconciler import reconcile
from .storage import GitHubContentStore, StorageError

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def _now_ms() -> int:
    return int(time.time() * 1000)


async def refresh(settings: Settings, client: GitHubClient, clock: Clock = _now_ms) -> ReleaseData:
    """Merge live releases into the stored database and return the feed payload.

    Args:
        settings: Target login and storage location.
        client: Authenticated GitHub client used for both events and storage.
        clock: Returns the current time in epoch milliseconds.

    Returns:
        The canonical set truncated to the display limit.

    Raises:
        StorageError: if the stored database cannot be read or updated.
    """

    store = GitHubContentStore(
        client,
        owner=settings.storage_owner,
        repo=settings.storage_repo,
        path=settings.storage_path,
        committer=settings.committer,
    )
    snapshot = await store.read()
    live = await fetch_live_releases(client, settings.login)
    result = reconcile(live, snapshot.infos)
    if result.should_write:
        await store.write(result.infos, snapshot.sha)
    else:
        logger.info("Release database unchanged")
    return ReleaseData.from_canonical(result.infos, clock())


async def run_pipeline(
    settings: Settings,
    client: Optional[GitHubClient] = None,
    clock: Clock = _now_ms,
) -> ReleaseData:
    """Execute one refresh, opening an HTTP session unless ``client`` is given.

    Raises:
        ConfigurationError: if no GitHub token is configured.
        StorageError: if the stored database cannot be read or updated.
    """

    token = settings.require_token()
    if client is not None:
        return await refresh(settings, client, clock)
    async with aiohttp.ClientSession() as session:
        return await refresh(settings, GitHubClient(session, token), clock)


async def build_response(
    settings: Settings,
    client: Optional[GitHubClient] = None,
    clock: Clock = _now_ms,
) -> Tuple[int, Dict[str, object]]:
    """Run the pipeline and map the outcome onto an HTTP status and JSON body."""

    try:
        data = await run_pipeline(settings, client=client, clock=clock)
    except (ConfigurationError, StorageError, GitHubAPIError, aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.error("Release refresh failed: %s", exc)
        return 500, {"error": str(exc)}
    return 200, data.to_dict()
