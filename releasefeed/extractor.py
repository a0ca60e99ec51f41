"""Heuristics that turn push events into release records."""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import List, Mapping, Optional

from .models import ReleaseInfo

logger = logging.getLogger(__name__)

RELEASE_REFS = frozenset(
    {
        "refs/heads/main",
        "refs/heads/master",
        "refs/heads/latest",
        "refs/heads/stable",
        "refs/heads/release",
        "refs/heads/dev",
    }
)

_VERSION_PATTERN = re.compile(r"v?(\d+\.\d+\.\d+(?:-[\w.]+)?)")
# Tried in order: "pkg 1.2.3" / "@scope/pkg@1.2.3" first, then "release pkg".
_PACKAGE_PATTERNS = (
    re.compile(r"(@?[\w-]+/[\w-]+)[\s@]v?\d+\.\d+\.\d+"),
    re.compile(r"release\s+(?!v?\d+\.)(@?[\w-]+)"),
)


def extract_version(title: str) -> str:
    match = _VERSION_PATTERN.search(title)
    return match.group(1) if match else ""


def extract_package(title: str) -> str:
    for pattern in _PACKAGE_PATTERNS:
        match = pattern.search(title)
        if match:
            return match.group(1)
    return ""


def is_release_title(title: str) -> bool:
    return "release" in title.lower()


def parse_timestamp(timestamp: Optional[str]) -> int:
    """Convert a GitHub ISO8601 timestamp into epoch milliseconds."""

    if not timestamp:
        return 0
    text = timestamp.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparseable event timestamp %r", timestamp)
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def extract_releases(event: Mapping[str, object]) -> List[ReleaseInfo]:
    """Return the release records carried by a public push event.

    Events pushed to a branch outside :data:`RELEASE_REFS` produce nothing.
    Every commit whose first message line mentions "release" and contains a
    version number yields one record; the other commits are ignored.
    """

    payload = event.get("payload") or {}
    if not isinstance(payload, Mapping) or payload.get("ref") not in RELEASE_REFS:
        return []

    repo_info = event.get("repo") or {}
    repo = str(repo_info.get("name", "")) if isinstance(repo_info, Mapping) else ""
    created_at = parse_timestamp(event.get("created_at"))  # type: ignore[arg-type]

    releases: List[ReleaseInfo] = []
    for commit in payload.get("commits") or []:
        if not isinstance(commit, Mapping):
            continue
        message = commit.get("message") or ""
        title = message.split("\n")[0]
        version = extract_version(title)
        if not is_release_title(title) or not version:
            continue
        sha = str(commit.get("sha") or "")
        releases.append(
            ReleaseInfo(
                title=title,
                sha=sha,
                commit=f"https://github.com/{repo}/commit/{sha}",
                created_at=created_at,
                version=version,
                package=extract_package(title),
                id=str(event.get("id") or ""),
                event_type=str(event.get("type") or ""),
                repo=repo,
                is_org=bool(event.get("org")),
            )
        )
    return releases


def is_public_push(event: Mapping[str, object]) -> bool:
    return event.get("type") == "PushEvent" and bool(event.get("public"))
