"""Import and export of quote collections as JSON documents."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from quotesync.exceptions import MalformedImport
from quotesync.models.quote import Quote
from quotesync.state.store import LocalStore, dump_collection

_logger = logging.getLogger(__name__)


def parse_import(payload: Any) -> list[Quote]:
    """Validate an import payload into unsynced quotes.

    *payload* is either already-decoded JSON or JSON text/bytes.  Every
    imported quote gets ``id=None``: ids from another source mean nothing
    to the remote.
    """
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedImport(f"import payload is not valid JSON: {exc}") from exc

    if not isinstance(payload, list):
        raise MalformedImport(f"import payload must be an array, got {type(payload).__name__}")

    quotes: list[Quote] = []
    for position, item in enumerate(payload):
        if not isinstance(item, dict):
            raise MalformedImport(f"import item {position} is not an object")
        try:
            quote = Quote.model_validate({**item, "id": None})
        except ValidationError as exc:
            raise MalformedImport(f"import item {position} is not a quote: {exc}") from exc
        quotes.append(quote)
    return quotes


def import_quotes(store: LocalStore, payload: Any) -> list[Quote]:
    """Append the quotes in *payload* to *store* as unsynced quotes.

    The payload is fully validated first; on :class:`MalformedImport` the
    collection is untouched.  Persistence failures propagate as
    :class:`quotesync.exceptions.PersistenceFailed`.
    """
    quotes = parse_import(payload)
    store.extend(quotes)
    _logger.info("Imported %d quote(s)", len(quotes))
    return quotes


def import_file(store: LocalStore, path: str | os.PathLike[str]) -> list[Quote]:
    return import_quotes(store, Path(path).read_bytes())


def export_quotes(store: LocalStore, *, indent: int | None = 2) -> str:
    return dump_collection(store.current(), indent=indent)


def export_file(store: LocalStore, path: str | os.PathLike[str]) -> Path:
    target = Path(path)
    target.write_text(export_quotes(store), encoding="utf-8")
    _logger.info("Exported %d quote(s) to %s", len(store), target)
    return target
