"""Persistence of the canonical release set as a JSON file in a GitHub repository."""
from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence

from .github import GitHubAPIError, GitHubClient
from .models import ReleaseInfo, releases_from_json, releases_to_json

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the release database cannot be read or written."""


@dataclass
class StoredSnapshot:
    """Releases read from storage plus the blob sha required to update them."""

    infos: List[ReleaseInfo] = field(default_factory=list)
    sha: Optional[str] = None


def decode_content(content: str) -> List[ReleaseInfo]:
    """Decode the base64 JSON body returned by the contents API."""

    try:
        text = base64.b64decode(content).decode("utf-8")
        return releases_from_json(json.loads(text))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise StorageError(f"Stored release database is malformed: {exc}") from exc


def encode_content(infos: Sequence[ReleaseInfo]) -> str:
    text = json.dumps(releases_to_json(infos), indent=2, ensure_ascii=False)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class GitHubContentStore:
    """Read and write a single JSON file through the repository contents API."""

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repo: str,
        path: str,
        committer: Optional[Dict[str, str]] = None,
    ) -> None:
        self.client = client
        self.owner = owner
        self.repo = repo
        self.path = path
        self.committer = committer

    @property
    def contents_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{self.path}"

    async def read(self) -> StoredSnapshot:
        """Load the persisted releases.

        A missing file is an empty database. Any other API failure and any
        undecodable content raise :class:`StorageError`.
        """

        logger.info("Reading release database %s/%s:%s", self.owner, self.repo, self.path)
        try:
            data = await self.client.get(self.contents_path)
        except GitHubAPIError as exc:
            if exc.status == 404:
                logger.info("No release database found, starting fresh")
                return StoredSnapshot()
            raise StorageError(exc.message) from exc

        if not isinstance(data, Mapping) or not data.get("content"):
            logger.warning("%s is not a file with content; treating it as empty", self.path)
            return StoredSnapshot()
        infos = decode_content(str(data["content"]))
        logger.info("Loaded %d stored releases", len(infos))
        return StoredSnapshot(infos=infos, sha=data.get("sha"))

    async def write(
        self,
        infos: Sequence[ReleaseInfo],
        sha: Optional[str],
        message: Optional[str] = None,
    ) -> None:
        """Replace the stored file; ``sha`` must match the blob that was read."""

        if message is None:
            message = f"chore: update releases database [{datetime.now(timezone.utc).isoformat()}]"
        payload: Dict[str, object] = {
            "message": message,
            "content": encode_content(infos),
        }
        if sha:
            payload["sha"] = sha
        if self.committer:
            payload["committer"] = dict(self.committer)

        logger.info("Saving %d releases to %s/%s", len(infos), self.owner, self.repo)
        try:
            await self.client.put(self.contents_path, payload)
        except GitHubAPIError as exc:
            raise StorageError(exc.message) from exc
        logger.info("Release database updated")
