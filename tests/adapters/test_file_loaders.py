from __future__ import annotations

import json
from pathlib import Path

import pytest

from config_server.adapters.file_loaders.structured import JSONFileLoader
from config_server.domain.errors import InvalidFormat, NotFound, ReadFailure


def test_json_loader_valid(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    json.dump({"message": "hello", "port": 8080}, path.open("w", encoding="utf-8"))
    data = JSONFileLoader().load(str(path))
    assert data == {"message": "hello", "port": 8080}


def test_json_loader_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "config.json"
    with pytest.raises(NotFound, match="not found"):
        JSONFileLoader().load(str(missing))


def test_json_loader_directory_is_read_failure(tmp_path: Path) -> None:
    directory = tmp_path / "config.json"
    directory.mkdir()
    with pytest.raises(ReadFailure) as excinfo:
        JSONFileLoader().load(str(directory))
    assert str(excinfo.value).startswith(f"{directory}: ")


def test_json_loader_invalid_utf8_is_read_failure(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_bytes(b'{"message": "\xff\xfe", "port": 1}')
    with pytest.raises(ReadFailure):
        JSONFileLoader().load(str(path))


def test_json_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{invalid}", encoding="utf-8")
    with pytest.raises(InvalidFormat, match="Invalid JSON"):
        JSONFileLoader().load(str(path))


@pytest.mark.parametrize("body", ["[]", '"text"', "42", "null"])
def test_json_loader_requires_object(tmp_path: Path, body: str) -> None:
    path = tmp_path / "config.json"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(InvalidFormat, match="expected a JSON object"):
        JSONFileLoader().load(str(path))


def test_json_loader_deep_nesting_is_invalid(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
    with pytest.raises(InvalidFormat, match="Invalid JSON"):
        JSONFileLoader().load(str(path))


@pytest.mark.parametrize(
    ("body", "key"),
    [
        ('{"message": "a", "message": "b", "port": 1}', "message"),
        ('{"message": "a", "port": 1, "port": 2}', "port"),
        ('{"message": "a", "port": 1, "extra": {"x": 1, "x": 2}}', "x"),
    ],
)
def test_json_loader_rejects_duplicate_keys(tmp_path: Path, body: str, key: str) -> None:
    path = tmp_path / "config.json"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(InvalidFormat, match=f"duplicate field `{key}`"):
        JSONFileLoader().load(str(path))


def test_json_loader_unsearchable_parent_is_not_found(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A ``stat`` denied by a parent directory counts as a missing candidate."""

    def _denied(self: Path, *_args, **_kwargs) -> bool:
        raise PermissionError(13, "Permission denied", str(self))

    target = tmp_path / "locked" / "config.json"
    monkeypatch.setattr(Path, "exists", _denied)
    with pytest.raises(NotFound) as excinfo:
        JSONFileLoader().load(str(target))
    assert str(excinfo.value) == f"{target}: not found"
