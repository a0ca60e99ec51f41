"""Release records and the response shape served to feed consumers."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence

DISPLAY_LIMIT = 300

_COMMIT_PREFIX = "https://github.com/"


@dataclass(frozen=True)
class ReleaseInfo:
    """A single release detected in a commit message."""

    title: str
    sha: str
    commit: str
    created_at: int
    version: str
    package: str = ""
    id: str = ""
    event_type: str = ""
    repo: str = ""
    is_org: bool = False

    @property
    def identity(self) -> str:
        """Deduplication key: the commit hash, or the event id without one."""

        return self.sha or self.id

    @property
    def is_valid(self) -> bool:
        return bool(self.version) and bool(self.identity)

    @property
    def repo_name(self) -> str:
        """Repository ``owner/name``, recovered from the commit URL for slim records."""

        if self.repo:
            return self.repo
        if self.commit.startswith(_COMMIT_PREFIX):
            parts = self.commit[len(_COMMIT_PREFIX):].split("/")
            if len(parts) >= 2:
                return f"{parts[0]}/{parts[1]}"
        return ""

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "type": self.event_type,
            "repo": self.repo,
            "isOrg": self.is_org,
            "title": self.title,
            "sha": self.sha,
            "commit": self.commit,
            "created_at": self.created_at,
            "version": self.version,
            "package": self.package,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "ReleaseInfo":
        """Build a record from its persisted JSON form.

        Older snapshots only carry ``title``, ``sha``, ``commit``,
        ``created_at``, ``version`` and ``package``; the provenance keys
        default to empty values.

        Raises:
            ValueError: if ``data`` is not a mapping or ``created_at`` is not a finite number.
        """

        if not isinstance(data, Mapping):
            raise ValueError(f"release entry must be an object, got {type(data).__name__}")
        created_at = data.get("created_at", 0)
        if (
            isinstance(created_at, bool)
            or not isinstance(created_at, (int, float))
            or not math.isfinite(created_at)
        ):
            raise ValueError(f"release entry has invalid created_at: {created_at!r}")
        return cls(
            title=str(data.get("title") or ""),
            sha=str(data.get("sha") or ""),
            commit=str(data.get("commit") or ""),
            created_at=int(created_at),
            version=str(data.get("version") or ""),
            package=str(data.get("package") or ""),
            id=str(data.get("id") or ""),
            event_type=str(data.get("type") or ""),
            repo=str(data.get("repo") or ""),
            is_org=bool(data.get("isOrg", False)),
        )


def releases_to_json(infos: Iterable[ReleaseInfo]) -> List[Dict[str, object]]:
    return [info.to_dict() for info in infos]


def releases_from_json(raw: object) -> List[ReleaseInfo]:
    """Parse a persisted list of releases.

    Raises:
        ValueError: if ``raw`` is not a list of release objects.
    """

    if not isinstance(raw, list):
        raise ValueError(f"expected a list of releases, got {type(raw).__name__}")
    return [ReleaseInfo.from_dict(entry) for entry in raw]


@dataclass
class ReleaseData:
    """The payload served as ``releases.json`` and rendered into the RSS feed."""

    infos: List[ReleaseInfo] = field(default_factory=list)
    last_updated: int = 0
    last_fetched: int = 0

    @classmethod
    def from_canonical(cls, infos: Sequence[ReleaseInfo], fetched_at: int) -> "ReleaseData":
        """Truncate the canonical set to the display limit."""

        return cls(
            infos=list(infos[:DISPLAY_LIMIT]),
            last_updated=infos[0].created_at if infos else 0,
            last_fetched=fetched_at,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "infos": releases_to_json(self.infos),
            "lastUpdated": self.last_updated,
            "lastFetched": self.last_fetched,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "ReleaseData":
        return cls(
            infos=releases_from_json(data.get("infos", [])),
            last_updated=int(data.get("lastUpdated", 0) or 0),
            last_fetched=int(data.get("lastFetched", 0) or 0),
        )
