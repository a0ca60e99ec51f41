"""Configuration helpers for the release feed."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing or invalid."""


_ENVIRONMENT = {
    "github_token": "GITHUB_TOKEN",
    "login": "PUBLIC_LOGIN",
    "name": "PUBLIC_NAME",
    "site_url": "SITE_URL",
    "storage_owner": "STORAGE_OWNER",
    "storage_repo": "STORAGE_REPO",
    "storage_path": "STORAGE_PATH",
    "committer_name": "COMMITTER_NAME",
    "committer_email": "COMMITTER_EMAIL",
}


@dataclass
class Settings:
    """Everything a pipeline run and the feed renderer need to know."""

    github_token: Optional[str] = None
    login: str = "trueberryless"
    name: str = "YourName"
    site_url: str = "https://example.com/"
    storage_owner: str = "trueberryless-org"
    storage_repo: str = "recent-releases"
    storage_path: str = "src/data/releases.json"
    committer_name: str = "Release-Bot"
    committer_email: str = "bot@trueberryless.org"
    logo_overrides: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.site_url.endswith("/"):
            self.site_url += "/"

    def require_token(self) -> str:
        if not self.github_token:
            raise ConfigurationError("GITHUB_TOKEN missing")
        return self.github_token

    @property
    def committer(self) -> Dict[str, str]:
        return {"name": self.committer_name, "email": self.committer_email}


def _load_file(path: Path) -> Dict[str, object]:
    raw = yaml.safe_load(path.read_text())
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a mapping of settings")
    known = {item.name for item in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(f"Unknown settings in {path}: {', '.join(unknown)}")
    overrides = raw.get("logo_overrides")
    if overrides is not None and not isinstance(overrides, dict):
        raise ConfigurationError("logo_overrides must map repositories to image URLs")
    for key, value in raw.items():
        if key == "logo_overrides" or (key == "github_token" and value is None):
            continue
        if not isinstance(value, str):
            raise ConfigurationError(f"{key} in {path} must be a string, got {type(value).__name__}")
    return raw


def load_settings(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build :class:`Settings` from an optional YAML file and the environment.

    Environment variables take precedence over values from the file. Empty
    variables are ignored.
    """

    values: Dict[str, object] = _load_file(path) if path is not None else {}
    env = os.environ if environ is None else environ
    for attribute, variable in _ENVIRONMENT.items():
        value = env.get(variable)
        if value:
            values[attribute] = value
    return Settings(**values)  # type: ignore[arg-type]
