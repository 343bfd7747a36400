"""Remote quote service client."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from quotesync._api.quotes import create_remote_quote, fetch_remote_quotes
from quotesync._transport import Transport
from quotesync.config import SyncConfig
from quotesync.exceptions import PushFailed, QuoteTransportError, RemoteUnavailable
from quotesync.models.quote import Quote

_logger = logging.getLogger(__name__)


class RemoteClient:
    """Fetch-all and create-one against the remote collection.

    ``fetch_all`` never raises on remote failure: it records a
    :class:`RemoteUnavailable` in :attr:`last_error` and returns an empty
    list, so "remote returned nothing" and "remote unreachable" merge the
    same way while the failure stays observable.
    """

    def __init__(self, config: SyncConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport
        self._last_error: RemoteUnavailable | None = None

    @property
    def last_error(self) -> RemoteUnavailable | None:
        """Failure of the most recent :meth:`fetch_all`, if any."""
        return self._last_error

    @property
    def available(self) -> bool:
        return self._last_error is None

    async def fetch_all(self) -> list[Quote]:
        try:
            quotes = await fetch_remote_quotes(self._config, self._transport)
        except QuoteTransportError as exc:
            self._last_error = RemoteUnavailable(f"Remote unavailable: {exc}", cause=exc)
            _logger.warning("Fetching remote quotes failed: %s", exc)
            return []
        self._last_error = None
        _logger.debug("Fetched %d remote quote(s)", len(quotes))
        return quotes

    async def push(self, quote: Quote) -> Quote:
        """Create *quote* remotely and return a copy carrying the assigned id."""
        if quote.id is not None:
            raise ValueError(f"quote {quote.id} is already synced")
        try:
            assigned_id = await create_remote_quote(self._config, self._transport, quote)
        except (QuoteTransportError, ValidationError) as exc:
            raise PushFailed(quote, exc) from exc
        _logger.debug("Remote assigned id %d to quote %r", assigned_id, quote.text[:40])
        return quote.with_id(assigned_id)
