from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from quotesync.config import SyncConfig
from quotesync.exceptions import QuoteTransportError
from quotesync.state.backends import MemoryBackend


@dataclass
class FakeQuoteService:
    """In-process stand-in for the remote collection, speaking the Transport protocol."""

    records: list[dict[str, Any]] = field(default_factory=list)
    next_id: int = 101
    fail_get: bool = False
    fail_post_on: set[str] = field(default_factory=set)
    fixed_post_id: int | None = None
    gate: asyncio.Event | None = None
    calls: list[tuple[str, str]] = field(default_factory=list)
    posted: list[dict[str, Any]] = field(default_factory=list)

    async def get_json(self, endpoint: str) -> Any:
        self.calls.append(("GET", endpoint))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_get:
            raise QuoteTransportError("HTTP 503 from GET /posts: unavailable", status_code=503, endpoint=endpoint)
        return [dict(record) if isinstance(record, dict) else record for record in self.records]

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        self.calls.append(("POST", endpoint))
        if payload.get("title") in self.fail_post_on:
            raise QuoteTransportError("HTTP 500 from POST /posts: boom", status_code=500, endpoint=endpoint)
        if self.fixed_post_id is not None:
            assigned = self.fixed_post_id
        else:
            assigned = self.next_id
            self.next_id += 1
        record = {**payload, "id": assigned}
        self.posted.append(dict(payload))
        self.records.append(record)
        return record

    def get_count(self) -> int:
        return sum(1 for method, _ in self.calls if method == "GET")


class CountingBackend(MemoryBackend):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.writes = 0

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        super().set(key, value)


@pytest.fixture
def config() -> SyncConfig:
    return SyncConfig(base_url="http://quotes.test", periodic_enabled=False)


@pytest.fixture
def service() -> FakeQuoteService:
    return FakeQuoteService()


@pytest.fixture
def backend() -> CountingBackend:
    return CountingBackend()
