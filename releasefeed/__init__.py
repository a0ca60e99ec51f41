"""Release feed built from GitHub push events."""

from .config import ConfigurationError, Settings, load_settings
from .extractor import extract_package, extract_releases, extract_version
from .feed import render_feed
from .fetcher import fetch_live_releases
from .github import GitHubAPIError, GitHubClient
from .models import DISPLAY_LIMIT, ReleaseData, ReleaseInfo
from .pipeline import build_response, run_pipeline
from .reconciler import Reconciliation, reconcile
from .storage import GitHubContentStore, StorageError, StoredSnapshot

__all__ = [
    "ConfigurationError",
    "Settings",
    "load_settings",
    "extract_releases",
    "extract_version",
    "extract_package",
    "render_feed",
    "fetch_live_releases",
    "GitHubAPIError",
    "GitHubClient",
    "DISPLAY_LIMIT",
    "ReleaseData",
    "ReleaseInfo",
    "build_response",
    "run_pipeline",
    "Reconciliation",
    "reconcile",
    "GitHubContentStore",
    "StorageError",
    "StoredSnapshot",
]
