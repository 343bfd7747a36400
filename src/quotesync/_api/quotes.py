"""Quote collection endpoints.

Endpoints:
  - GET  <collection_path> (list every record)
  - POST <collection_path> (create one record, returns it with its id)
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from quotesync._transport import Transport
from quotesync.config import SyncConfig
from quotesync.exceptions import QuoteTransportError
from quotesync.models.quote import Quote
from quotesync.models.wire import CreateRecordRequest, RemoteRecord

_logger = logging.getLogger(__name__)


def _parse_record(item: Any) -> Quote | None:
    if not isinstance(item, dict):
        _logger.debug("Skipping non-object remote record: %r", item)
        return None
    try:
        record = RemoteRecord.model_validate(item)
    except ValidationError:
        _logger.debug("Skipping unparseable remote record: %r", item, exc_info=True)
        return None
    quote = record.to_quote()
    if quote is None:
        _logger.debug("Skipping remote record without id or text: %r", record.raw)
    return quote


async def fetch_remote_quotes(config: SyncConfig, transport: Transport) -> list[Quote]:
    """Fetch the remote collection mapped to domain quotes."""
    endpoint = config.collection_path
    decoded = await transport.get_json(endpoint)
    if not isinstance(decoded, list):
        raise QuoteTransportError(
            f"Expected a JSON array from GET {endpoint}, got {type(decoded).__name__}",
            endpoint=endpoint,
        )

    quotes: list[Quote] = []
    for item in decoded:
        if config.fetch_limit is not None and len(quotes) >= config.fetch_limit:
            break
        quote = _parse_record(item)
        if quote is not None:
            quotes.append(quote)
    return quotes


async def create_remote_quote(config: SyncConfig, transport: Transport, quote: Quote) -> int:
    """Create *quote* remotely and return the id the remote assigned."""
    endpoint = config.collection_path
    request = CreateRecordRequest.from_quote(quote, user_id=config.user_id)
    decoded = await transport.post_json(endpoint, request.to_payload())
    if not isinstance(decoded, dict):
        raise QuoteTransportError(
            f"Expected a JSON object from POST {endpoint}, got {type(decoded).__name__}",
            endpoint=endpoint,
        )
    record = RemoteRecord.model_validate(decoded)
    if record.id is None:
        raise QuoteTransportError(
            f"POST {endpoint} response carries no usable id: {decoded!r}",
            endpoint=endpoint,
        )
    return record.id
