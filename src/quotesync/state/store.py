"""Local quote collection with durable persistence.

This is the only component allowed to mutate the collection.  Quotes are
immutable, and every collection handed out is a fresh list, so callers
can never change the store's state behind its back.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence

from pydantic import TypeAdapter, ValidationError

from quotesync._constants import ALL_CATEGORIES, SEED_QUOTES, STORAGE_KEY
from quotesync.exceptions import IdentityConflict, PersistenceFailed
from quotesync.models.quote import Quote
from quotesync.state.backends import KeyValueBackend

_logger = logging.getLogger(__name__)

_QUOTE_LIST = TypeAdapter(list[Quote])


def seed_quotes() -> list[Quote]:
    return [Quote.model_validate(item) for item in SEED_QUOTES]


def _duplicate_ids(quotes: Iterable[Quote]) -> set[int]:
    seen: set[int] = set()
    duplicates: set[int] = set()
    for quote in quotes:
        if quote.id is None:
            continue
        if quote.id in seen:
            duplicates.add(quote.id)
        seen.add(quote.id)
    return duplicates


def parse_collection(payload: str) -> list[Quote]:
    """Parse a persisted collection.

    Raises :class:`ValueError` (including pydantic's ``ValidationError``)
    when the payload is not a JSON array of quote-shaped records with
    unique ids.
    """
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    quotes = _QUOTE_LIST.validate_python(data)
    duplicates = _duplicate_ids(quotes)
    if duplicates:
        raise ValueError(f"duplicate quote ids: {sorted(duplicates)}")
    return quotes


def dump_collection(quotes: Sequence[Quote], *, indent: int | None = None) -> str:
    return _QUOTE_LIST.dump_json(list(quotes), indent=indent).decode("utf-8")


class LocalStore:
    """Owner of the canonical local quote collection.

    Usage::

        store = LocalStore(JsonFileBackend("quotes.json"))
        store.load()
        store.add("Stay hungry.", "motivation")
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        key: str = STORAGE_KEY,
        seed: Sequence[Quote] | None = None,
    ) -> None:
        self._backend = backend
        self._key = key
        self._seed: list[Quote] = list(seed) if seed is not None else seed_quotes()
        self._quotes: list[Quote] = list(self._seed)

    @property
    def key(self) -> str:
        return self._key

    # ------------------------------------------------------------------
    # Loading / persisting
    # ------------------------------------------------------------------

    def load(self) -> list[Quote]:
        """Load the persisted collection, falling back to the seed collection.

        Never raises: an unreadable backend or a malformed payload is logged
        and replaced by the seed.
        """
        try:
            payload = self._backend.get(self._key)
        except OSError:
            _logger.warning("Could not read %r from storage; using seed quotes", self._key, exc_info=True)
            payload = None

        if payload is None:
            self._quotes = list(self._seed)
            return self.current()

        try:
            self._quotes = parse_collection(payload)
        except (ValueError, ValidationError) as exc:
            _logger.warning("Discarding malformed persisted %r (%s); using seed quotes", self._key, exc)
            self._quotes = list(self._seed)
        return self.current()

    def _persist(self) -> None:
        try:
            self._backend.set(self._key, dump_collection(self._quotes))
        except OSError as exc:
            raise PersistenceFailed(self._key, exc) from exc

    def replace(self, quotes: Sequence[Quote]) -> None:
        """Set the collection and persist it.

        The in-memory collection is updated even when persisting fails;
        :class:`PersistenceFailed` is raised afterwards.
        """
        new_quotes = list(quotes)
        duplicates = _duplicate_ids(new_quotes)
        if duplicates:
            raise ValueError(f"duplicate quote ids: {sorted(duplicates)}")
        self._quotes = new_quotes
        self._persist()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def current(self) -> list[Quote]:
        return list(self._quotes)

    def __len__(self) -> int:
        return len(self._quotes)

    def unsynced(self) -> list[Quote]:
        return [quote for quote in self._quotes if quote.id is None]

    def categories(self) -> list[str]:
        """Distinct categories, lowercased and sorted."""
        return sorted({quote.category.lower() for quote in self._quotes})

    def by_category(self, category: str) -> list[Quote]:
        wanted = category.strip().lower()
        if wanted == ALL_CATEGORIES:
            return self.current()
        return [quote for quote in self._quotes if quote.category.lower() == wanted]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, text: str, category: str) -> Quote:
        """Create an unsynced quote and persist the collection.

        Raises pydantic's ``ValidationError`` when *text* or *category*
        is blank.
        """
        quote = Quote(text=text, category=category)
        self._quotes.append(quote)
        self._persist()
        return quote

    def extend(self, quotes: Iterable[Quote]) -> None:
        incoming = list(quotes)
        combined = [*self._quotes, *incoming]
        duplicates = _duplicate_ids(combined)
        if duplicates:
            raise ValueError(f"duplicate quote ids: {sorted(duplicates)}")
        self._quotes = combined
        self._persist()

    def promote(self, quote: Quote, assigned_id: int) -> Quote:
        """Give the collection element that *is* ``quote`` its remote id.

        Unsynced quotes are only distinguishable by identity, so the lookup
        compares objects, not content.
        """
        for existing in self._quotes:
            if existing.id == assigned_id and existing is not quote:
                raise IdentityConflict(assigned_id)

        for index, existing in enumerate(self._quotes):
            if existing is quote:
                promoted = quote.with_id(assigned_id)
                self._quotes[index] = promoted
                self._persist()
                return promoted
        raise LookupError(f"quote {quote.text[:40]!r} is no longer in the collection")
