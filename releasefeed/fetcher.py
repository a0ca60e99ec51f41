"""Retrieval of a user's recent public activity."""
from __future__ import annotations

import asyncio
import logging
from typing import List

import aiohttp

from .extractor import extract_releases, is_public_push
from .github import GitHubAPIError, GitHubClient
from .models import ReleaseInfo

logger = logging.getLogger(__name__)

PAGES = 3
PER_PAGE = 100


async def fetch_events_page(client: GitHubClient, username: str, page: int) -> List[dict]:
    """Download one page of ``username``'s public events."""

    data = await client.get(f"/users/{username}/events", per_page=PER_PAGE, page=page)
    if not isinstance(data, list):
        raise GitHubAPIError(200, f"unexpected events payload of type {type(data).__name__}")
    return data


def releases_from_events(events: List[dict]) -> List[ReleaseInfo]:
    releases: List[ReleaseInfo] = []
    for event in events:
        if isinstance(event, dict) and is_public_push(event):
            releases.extend(extract_releases(event))
    return releases


async def fetch_live_releases(client: GitHubClient, username: str) -> List[ReleaseInfo]:
    """Collect release records from the newest ``PAGES`` pages of activity.

    Pages are requested one after another. A failure on any page discards
    everything gathered so far and yields an empty list, so the caller
    carries on with its persisted data only.
    """

    gathered: List[ReleaseInfo] = []
    logger.info("Fetching live events for %s", username)
    try:
        for page in range(1, PAGES + 1):
            events = await fetch_events_page(client, username, page)
            if not events:
                break
            page_releases = releases_from_events(events)
            logger.debug("Page %d: %d events, %d releases", page, len(events), len(page_releases))
            gathered.extend(page_releases)
    except (GitHubAPIError, aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.warning("Failed to fetch live events for %s: %s", username, exc)
        return []
    logger.info("Found %d live releases", len(gathered))
    return gathered
