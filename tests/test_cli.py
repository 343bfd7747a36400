from __future__ import annotations

import json
from pathlib import Path

import pytest

from quotesync.cli import main


@pytest.fixture(autouse=True)
def _no_env_storage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("QUOTESYNC_STORAGE_PATH", raising=False)
    monkeypatch.delenv("QUOTESYNC_STORAGE_KEY", raising=False)


def test_add_then_list(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    storage = str(tmp_path / "quotes.json")

    assert main(["--storage", storage, "add", "Carpe diem", "Latin"]) == 0
    assert main(["--storage", storage, "list", "--category", "latin"]) == 0

    out = capsys.readouterr().out
    assert "Added 'Carpe diem' (Latin)" in out
    assert "[*] Carpe diem (Latin)" in out


def test_list_uses_seed_when_storage_is_empty(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--storage", str(tmp_path / "none.json"), "list"]) == 0

    assert "Love is patient." in capsys.readouterr().out


def test_export_and_import(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    storage = str(tmp_path / "quotes.json")
    export_path = tmp_path / "export.json"

    assert main(["--storage", storage, "export", str(export_path)]) == 0
    assert len(json.loads(export_path.read_text(encoding="utf-8"))) == 3

    assert main(["--storage", storage, "import", str(export_path)]) == 0
    assert "Imported 3 quote(s)" in capsys.readouterr().out


def test_malformed_import_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text('{"not": "an array"}', encoding="utf-8")

    assert main(["--storage", str(tmp_path / "quotes.json"), "import", str(bad)]) == 1
    assert "must be an array" in capsys.readouterr().err


def test_undecodable_import_file_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bad = tmp_path / "bad.json"
    bad.write_bytes(b"[\xff\xfe\xfa]")

    assert main(["--storage", str(tmp_path / "quotes.json"), "import", str(bad)]) == 1
    assert "not valid JSON" in capsys.readouterr().err


def test_blank_add_exits_with_error(tmp_path: Path) -> None:
    assert main(["--storage", str(tmp_path / "quotes.json"), "add", "text", "  "]) == 1
