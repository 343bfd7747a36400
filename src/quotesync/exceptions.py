"""Custom exception hierarchy for quotesync."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quotesync.models.quote import Quote


class QuoteSyncError(Exception):
    """Base exception for all quotesync errors."""


class QuoteSyncConfigError(QuoteSyncError):
    """Invalid or missing configuration."""


class QuoteTransportError(QuoteSyncError):
    """HTTP-level failure (network, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class RemoteUnavailable(QuoteSyncError):
    """Fetching the remote collection failed.

    This is never raised out of :meth:`quotesync.remote.RemoteClient.fetch_all`;
    the client records it as ``last_error`` and returns an empty collection
    so a sync cycle can continue with local data only.
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class PushFailed(QuoteSyncError):
    """Creating a single quote on the remote failed."""

    def __init__(self, quote: Quote, cause: BaseException | str) -> None:
        self.quote = quote
        self.cause = cause
        super().__init__(f"Push of quote {quote.text[:40]!r} failed: {cause}")


class PersistenceFailed(QuoteSyncError):
    """Writing the collection to the durable backend failed.

    The in-memory collection has already been updated when this is raised.
    """

    def __init__(self, key: str, cause: BaseException) -> None:
        self.key = key
        self.cause = cause
        super().__init__(f"Persisting {key!r} failed: {cause}")


class MalformedImport(QuoteSyncError):
    """An import payload is not an array of quote-shaped records."""


class IdentityConflict(QuoteSyncError):
    """A remote-assigned id is already held by another local quote."""

    def __init__(self, quote_id: int) -> None:
        self.quote_id = quote_id
        super().__init__(f"Quote id {quote_id} is already present in the local collection")
