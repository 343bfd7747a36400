"""Sync cycle orchestration.

One cycle is: fetch remote -> merge -> persist -> push unsynced -> report.
At most one cycle runs at a time; the state check-and-set in
:meth:`SyncOrchestrator.run_cycle` happens before its first ``await``, which
makes it the only mutual exclusion needed on a single event loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Protocol

from quotesync.exceptions import (
    IdentityConflict,
    PersistenceFailed,
    PushFailed,
    RemoteUnavailable,
)
from quotesync.models.quote import Quote
from quotesync.models.report import ErrorKind, SyncErrorInfo, SyncReport, SyncState
from quotesync.state.reconcile import merge
from quotesync.state.store import LocalStore

_logger = logging.getLogger(__name__)


class RemoteSource(Protocol):
    """The parts of :class:`quotesync.remote.RemoteClient` a cycle needs."""

    @property
    def last_error(self) -> RemoteUnavailable | None:
        ...

    async def fetch_all(self) -> list[Quote]:
        ...

    async def push(self, quote: Quote) -> Quote:
        ...


class SyncOrchestrator:
    """Drive sync cycles, manually or on a periodic schedule.

    Usage::

        async with SyncOrchestrator(store, remote) as orchestrator:
            report = await orchestrator.run_cycle()
            orchestrator.start(interval=60)
    """

    def __init__(
        self,
        store: LocalStore,
        remote: RemoteSource,
        *,
        on_report: Callable[[SyncReport], None] | None = None,
    ) -> None:
        self._store = store
        self._remote = remote
        self._on_report = on_report
        self._state = SyncState.IDLE
        self._last_report: SyncReport | None = None
        # Posted to the remote, but the assigned id clashed locally.
        self._held_back: list[Quote] = []
        self._periodic_task: asyncio.Task[None] | None = None
        self._stop_event: asyncio.Event | None = None

    async def __aenter__(self) -> SyncOrchestrator:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SyncState.RUNNING

    @property
    def last_report(self) -> SyncReport | None:
        return self._last_report

    @property
    def held_back(self) -> list[Quote]:
        """Unsynced quotes that already have a remote copy and are not pushed again.

        A quote lands here when the remote accepted it but answered with an
        id another local quote already holds.  Use :meth:`release` to retry.
        """
        return list(self._held_back)

    def release(self, quote: Quote | None = None) -> None:
        """Allow *quote* (or every held-back quote) to be pushed again."""
        if quote is None:
            self._held_back.clear()
        else:
            self._held_back = [held for held in self._held_back if held is not quote]

    def _is_held_back(self, quote: Quote) -> bool:
        return any(held is quote for held in self._held_back)

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    async def run_cycle(self) -> SyncReport:
        """Run one sync cycle, or report "already running" if one is in flight."""
        if self._state is SyncState.RUNNING:
            _logger.info("Sync requested while a cycle is running; skipping")
            return SyncReport.already_running()

        self._state = SyncState.RUNNING
        started_at = datetime.now(UTC)
        errors: list[SyncErrorInfo] = []
        conflicts_resolved = 0
        new_from_server = 0
        pushed = 0
        remote_available = True

        try:
            remote_quotes = await self._remote.fetch_all()
            fetch_error = self._remote.last_error
            if fetch_error is not None:
                remote_available = False
                errors.append(SyncErrorInfo.from_exception(ErrorKind.REMOTE_UNAVAILABLE, fetch_error))

            local = self._store.current()
            self._held_back = [held for held in self._held_back if any(held is quote for quote in local)]
            to_push = [quote for quote in local if quote.id is None and not self._is_held_back(quote)]

            result = merge(local, remote_quotes)
            conflicts_resolved = result.conflicts_resolved
            new_from_server = result.new_from_server

            try:
                self._store.replace(result.merged)
            except PersistenceFailed as exc:
                _logger.warning("%s; continuing with in-memory collection", exc)
                errors.append(SyncErrorInfo.from_exception(ErrorKind.PERSISTENCE_FAILED, exc))

            pushed = await self._push_unsynced(to_push, errors)
        except Exception as exc:
            _logger.error("Sync cycle failed unexpectedly", exc_info=True)
            errors.append(SyncErrorInfo.from_exception(ErrorKind.UNEXPECTED, exc))
        finally:
            self._state = SyncState.IDLE

        report = SyncReport(
            conflicts_resolved=conflicts_resolved,
            new_from_server=new_from_server,
            pushed=pushed,
            errors=errors,
            remote_available=remote_available,
            started_at=started_at,
            finished_at=datetime.now(UTC),
        )
        self._last_report = report
        _logger.info("%s", report.summary())
        self._notify(report)
        return report

    async def _push_unsynced(self, to_push: list[Quote], errors: list[SyncErrorInfo]) -> int:
        pushed = 0
        for position, quote in enumerate(to_push):
            remaining = len(to_push) - position - 1
            try:
                synced = await self._remote.push(quote)
            except PushFailed as exc:
                _logger.warning("%s; abandoning %d remaining push(es)", exc, remaining)
                errors.append(SyncErrorInfo.from_exception(ErrorKind.PUSH_FAILED, exc, quote=quote))
                break

            assert synced.id is not None  # noqa: S101
            try:
                self._store.promote(quote, synced.id)
            except IdentityConflict as exc:
                _logger.warning("%s; abandoning %d remaining push(es)", exc, remaining)
                self._held_back.append(quote)
                errors.append(
                    SyncErrorInfo(
                        kind=ErrorKind.IDENTITY_CONFLICT,
                        message=f"{exc}; the remote copy was created and the quote will not be pushed again",
                        quote=quote,
                    )
                )
                break
            except PersistenceFailed as exc:
                _logger.warning("%s; id %d kept in memory", exc, synced.id)
                errors.append(SyncErrorInfo.from_exception(ErrorKind.PERSISTENCE_FAILED, exc, quote=synced))
            except LookupError:
                # Removed locally (e.g. by an import) while the push was in flight.
                _logger.warning("Pushed quote %r vanished from the collection", quote.text[:40])
            pushed += 1
        return pushed

    def _notify(self, report: SyncReport) -> None:
        if self._on_report is None:
            return
        try:
            self._on_report(report)
        except Exception:
            _logger.warning("on_report callback raised", exc_info=True)

    # ------------------------------------------------------------------
    # Periodic trigger
    # ------------------------------------------------------------------

    @property
    def periodic_running(self) -> bool:
        return self._periodic_task is not None and not self._periodic_task.done()

    def start(self, interval: float) -> None:
        """Run :meth:`run_cycle` every *interval* seconds until :meth:`stop`."""
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        if self.periodic_running:
            raise RuntimeError("periodic sync already started")
        self._stop_event = asyncio.Event()
        self._periodic_task = asyncio.create_task(self._periodic(interval, self._stop_event))

    async def stop(self) -> None:
        """Stop the periodic trigger, letting an in-flight cycle finish."""
        task = self._periodic_task
        stop_event = self._stop_event
        self._periodic_task = None
        self._stop_event = None
        if task is None:
            return
        if stop_event is not None:
            stop_event.set()
        await task

    async def _periodic(self, interval: float, stop_event: asyncio.Event) -> None:
        _logger.debug("Periodic sync every %.1fs", interval)
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except TimeoutError:
                await self.run_cycle()
        _logger.debug("Periodic sync stopped")
