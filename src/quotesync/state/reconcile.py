"""Deterministic local/remote merge.

This module performs no I/O and never mutates its inputs.  Given the same
local and remote collections it always produces the same result.

Policy:
- The remote wins when a quote with the same id differs in text or category.
- The remote is never a deletion source: local quotes it does not return
  (never pushed, or deleted remotely) are kept.
- Remote quotes unknown locally are appended after the local ones.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from quotesync.models.quote import Quote

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MergeResult:
    merged: list[Quote] = field(default_factory=list)
    conflicts_resolved: int = 0
    new_from_server: int = 0


def _index_remote(remote: Sequence[Quote]) -> dict[int, Quote]:
    lookup: dict[int, Quote] = {}
    for quote in remote:
        if quote.id is None:
            _logger.debug("Ignoring remote quote without id: %r", quote.text[:40])
            continue
        if quote.id in lookup:
            _logger.debug("Ignoring duplicate remote id %d", quote.id)
            continue
        lookup[quote.id] = quote
    return lookup


def merge(local: Sequence[Quote], remote: Sequence[Quote]) -> MergeResult:
    """Merge a remote snapshot into the local collection."""
    pending = _index_remote(remote)
    merged: list[Quote] = []
    conflicts = 0

    for quote in local:
        match = pending.pop(quote.id, None) if quote.id is not None else None
        if match is None:
            merged.append(quote)
        elif match.same_content(quote):
            merged.append(quote)
        else:
            merged.append(match)
            conflicts += 1

    # dict preserves the remote order of whatever was not consumed
    merged.extend(pending.values())

    return MergeResult(
        merged=merged,
        conflicts_resolved=conflicts,
        new_from_server=len(pending),
    )
