"""quotesync - Async engine keeping a local quote collection in sync with a remote service."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("quotesync")
except PackageNotFoundError:
    __version__ = "0+local"
from quotesync.client import QuoteSyncClient
from quotesync.config import SyncConfig
from quotesync.exceptions import (
    IdentityConflict,
    MalformedImport,
    PersistenceFailed,
    PushFailed,
    QuoteSyncConfigError,
    QuoteSyncError,
    QuoteTransportError,
    RemoteUnavailable,
)
from quotesync.models import ErrorKind, Quote, SyncErrorInfo, SyncReport, SyncState
from quotesync.remote import RemoteClient
from quotesync.state.backends import JsonFileBackend, KeyValueBackend, MemoryBackend
from quotesync.state.reconcile import MergeResult, merge
from quotesync.state.store import LocalStore
from quotesync.sync import SyncOrchestrator
from quotesync.transfer import export_file, export_quotes, import_file, import_quotes

__all__ = [
    "__version__",
    "ErrorKind",
    "IdentityConflict",
    "JsonFileBackend",
    "KeyValueBackend",
    "LocalStore",
    "MalformedImport",
    "MemoryBackend",
    "MergeResult",
    "PersistenceFailed",
    "PushFailed",
    "Quote",
    "QuoteSyncClient",
    "QuoteSyncConfigError",
    "QuoteSyncError",
    "QuoteTransportError",
    "RemoteClient",
    "RemoteUnavailable",
    "SyncConfig",
    "SyncErrorInfo",
    "SyncOrchestrator",
    "SyncReport",
    "SyncState",
    "export_file",
    "export_quotes",
    "import_file",
    "import_quotes",
    "merge",
]
