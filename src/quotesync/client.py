"""High-level async client wiring store, remote and orchestrator together."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from quotesync._transport import HttpTransport, Transport
from quotesync.config import SyncConfig
from quotesync.exceptions import QuoteSyncError
from quotesync.models.quote import Quote
from quotesync.models.report import SyncReport
from quotesync.remote import RemoteClient
from quotesync.state.backends import JsonFileBackend, KeyValueBackend
from quotesync.state.store import LocalStore
from quotesync.sync import SyncOrchestrator
from quotesync.transfer import export_quotes, import_quotes

_logger = logging.getLogger(__name__)


class QuoteSyncClient:
    """Async facade over the quote sync engine.

    Usage::

        async with QuoteSyncClient(SyncConfig.from_env()) as client:
            client.add_quote("Stay hungry.", "motivation")
            report = await client.run_cycle()
    """

    def __init__(
        self,
        config: SyncConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        backend: KeyValueBackend | None = None,
        on_report: Callable[[SyncReport], None] | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._store = LocalStore(
            backend if backend is not None else JsonFileBackend(config.storage_path),
            key=config.storage_key,
        )
        self._on_report = on_report
        self._orchestrator: SyncOrchestrator | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> QuoteSyncClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        remote = RemoteClient(self._config, self._transport)
        self._orchestrator = SyncOrchestrator(self._store, remote, on_report=self._on_report)
        try:
            loaded = self._store.load()
            _logger.debug("Loaded %d quote(s) from storage key %r", len(loaded), self._store.key)
            if self._config.periodic_enabled:
                self._orchestrator.start(self._config.poll_interval)
        except BaseException:
            await self.__aexit__(None, None, None)
            raise
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._orchestrator is not None:
            await self._orchestrator.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None
        self._orchestrator = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> SyncConfig:
        return self._config

    @property
    def store(self) -> LocalStore:
        return self._store

    @property
    def orchestrator(self) -> SyncOrchestrator:
        if self._orchestrator is None:
            raise QuoteSyncError("Client not initialized. Use 'async with QuoteSyncClient(...) as client:'")
        return self._orchestrator

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def run_cycle(self) -> SyncReport:
        return await self.orchestrator.run_cycle()

    def quotes(self, category: str | None = None) -> list[Quote]:
        if category is None:
            return self._store.current()
        return self._store.by_category(category)

    def add_quote(self, text: str, category: str) -> Quote:
        return self._store.add(text, category)

    def import_quotes(self, payload: Any) -> list[Quote]:
        return import_quotes(self._store, payload)

    def export_quotes(self) -> str:
        return export_quotes(self._store)
