from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import CountingBackend

from quotesync.exceptions import MalformedImport
from quotesync.models.quote import Quote
from quotesync.state.store import LocalStore
from quotesync.transfer import export_file, export_quotes, import_file, import_quotes, parse_import


def _store(backend: CountingBackend) -> LocalStore:
    return LocalStore(backend, seed=[Quote(id=1, text="Existing", category="old")])


def test_import_appends_quotes_as_unsynced(backend: CountingBackend) -> None:
    store = _store(backend)

    imported = import_quotes(
        store,
        [
            {"id": 1, "text": "Clashing id", "category": "a"},
            {"text": " Spaced ", "category": "b", "extra": True},
        ],
    )

    assert imported == [Quote(text="Clashing id", category="a"), Quote(text="Spaced", category="b")]
    assert store.current() == [Quote(id=1, text="Existing", category="old"), *imported]
    assert backend.writes == 1


def test_import_accepts_json_text(backend: CountingBackend) -> None:
    store = _store(backend)

    import_quotes(store, json.dumps([{"text": "From text", "category": "c"}]))

    assert store.current()[-1] == Quote(text="From text", category="c")


@pytest.mark.parametrize(
    "payload",
    [
        {"text": "not", "category": "an array"},
        "not json at all",
        b"[\xff\xfe\xfa]",
        json.dumps({"quotes": []}),
        [{"text": "ok", "category": "fine"}, "oops"],
        [{"text": "ok", "category": "fine"}, {"text": "", "category": "blank"}],
        [{"category": "missing text"}],
    ],
)
def test_malformed_import_leaves_collection_untouched(backend: CountingBackend, payload: object) -> None:
    store = _store(backend)
    before = store.current()

    with pytest.raises(MalformedImport):
        import_quotes(store, payload)

    assert store.current() == before
    assert backend.writes == 0


def test_parse_import_empty_array() -> None:
    assert parse_import([]) == []


def test_export_serializes_current_collection(backend: CountingBackend) -> None:
    store = _store(backend)
    store.add("Draft", "new")

    exported = json.loads(export_quotes(store))

    assert exported == [
        {"id": 1, "text": "Existing", "category": "old"},
        {"id": None, "text": "Draft", "category": "new"},
    ]


def test_file_export_then_import(tmp_path: Path, backend: CountingBackend) -> None:
    source = _store(backend)
    path = export_file(source, tmp_path / "quotes-export.json")

    target = LocalStore(CountingBackend(), seed=[])
    imported = import_file(target, path)

    assert imported == [Quote(text="Existing", category="old")]
