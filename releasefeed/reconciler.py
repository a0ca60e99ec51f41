"""Merging of live releases into the persisted canonical set."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from .models import ReleaseInfo

logger = logging.getLogger(__name__)


@dataclass
class Reconciliation:
    """Outcome of :func:`reconcile`."""

    infos: List[ReleaseInfo]
    should_write: bool
    added: int


def deduplicate(infos: Iterable[ReleaseInfo]) -> List[ReleaseInfo]:
    """Keep the first valid record for each identity, preserving order."""

    unique: Dict[str, ReleaseInfo] = {}
    for info in infos:
        if not info.is_valid:
            logger.debug("Dropping invalid release %r", info.title)
            continue
        if info.identity not in unique:
            unique[info.identity] = info
    return list(unique.values())


def reconcile(live: Sequence[ReleaseInfo], stored: Sequence[ReleaseInfo]) -> Reconciliation:
    """Merge ``live`` into ``stored``.

    Live records are seen first, so they win identity collisions. The result
    is sorted newest first; ``sorted`` is stable, so equal timestamps keep
    their encounter order. A write-back is requested when the merged set grew,
    when it holds an identity the stored set lacked, or when its newest record
    is not the stored newest record.
    """

    merged = deduplicate([*live, *stored])
    merged.sort(key=lambda info: info.created_at, reverse=True)

    stored_identities = {info.identity for info in stored}
    added = sum(1 for info in merged if info.identity not in stored_identities)

    should_write = len(merged) > len(stored) or added > 0
    if not should_write and merged and stored:
        should_write = merged[0].identity != stored[0].identity

    logger.info(
        "Reconciled %d live and %d stored releases into %d (%d new)",
        len(live),
        len(stored),
        len(merged),
        added,
    )
    return Reconciliation(infos=merged, should_write=should_write, added=added)
