"""Sync cycle state and report models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from quotesync.models.quote import Quote


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SyncState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"


class ErrorKind(StrEnum):
    REMOTE_UNAVAILABLE = "remote_unavailable"
    PUSH_FAILED = "push_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    IDENTITY_CONFLICT = "identity_conflict"
    UNEXPECTED = "unexpected"


ALREADY_RUNNING = "already running"


class SyncErrorInfo(BaseModel):
    """A failure recorded during a sync cycle."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    quote: Quote | None = None

    @classmethod
    def from_exception(cls, kind: ErrorKind, exc: BaseException, *, quote: Quote | None = None) -> SyncErrorInfo:
        message = str(exc) or type(exc).__name__
        return cls(kind=kind, message=message, quote=quote)


class SyncReport(BaseModel):
    """Outcome of one :meth:`quotesync.sync.SyncOrchestrator.run_cycle` call.

    A skipped report (``skipped=True``) means another cycle was already
    running; nothing was fetched, merged or pushed.
    """

    model_config = ConfigDict(frozen=True)

    conflicts_resolved: int = 0
    new_from_server: int = 0
    pushed: int = 0
    errors: list[SyncErrorInfo] = Field(default_factory=list)
    skipped: bool = False
    reason: str | None = None
    remote_available: bool = True
    started_at: datetime = Field(default_factory=_utcnow)
    finished_at: datetime | None = None

    @classmethod
    def already_running(cls) -> SyncReport:
        now = _utcnow()
        return cls(skipped=True, reason=ALREADY_RUNNING, started_at=now, finished_at=now)

    @property
    def ok(self) -> bool:
        return not self.skipped and not self.errors

    def summary(self) -> str:
        if self.skipped:
            return f"sync skipped: {self.reason}"
        parts = [
            f"conflicts_resolved={self.conflicts_resolved}",
            f"new_from_server={self.new_from_server}",
            f"pushed={self.pushed}",
        ]
        if self.errors:
            parts.append(f"errors={len(self.errors)}")
        return "sync finished: " + " ".join(parts)
