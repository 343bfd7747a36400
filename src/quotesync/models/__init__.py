"""Data models for quotes, remote records and sync reports."""

from quotesync.models.quote import Quote
from quotesync.models.report import ALREADY_RUNNING, ErrorKind, SyncErrorInfo, SyncReport, SyncState
from quotesync.models.wire import CreateRecordRequest, RemoteRecord

__all__ = [
    "ALREADY_RUNNING",
    "CreateRecordRequest",
    "ErrorKind",
    "Quote",
    "RemoteRecord",
    "SyncErrorInfo",
    "SyncReport",
    "SyncState",
]
