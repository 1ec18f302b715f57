"""Structured configuration file loader.

Purpose
-------
Convert an on-disk JSON document into a Python mapping while classifying every
failure into one of the three adapter outcomes the resolver distinguishes:
missing, unreadable, malformed.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`JSONFileLoader` – loader for the service's JSON config format.

System Role
-----------
Invoked by :func:`config_server.core.load_config_from` for each candidate path.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from ...domain.errors import InvalidFormat, NotFound, ReadFailure
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by structured file loaders."""

    def read(self, path: str) -> str:
        """Read *path* as UTF-8 text.

        Why
        ----
        Centralise the existence check and the read so "not found" and "found
        but unreadable" stay distinguishable for the resolver.

        Parameters
        ----------
        path:
            File path; relative paths resolve against the process working
            directory.

        Returns
        -------
        str
            Decoded file contents.

        Raises
        ------
        NotFound
            When nothing exists at *path*, or its existence cannot be checked
            because a parent directory is not searchable.
        ReadFailure
            When *path* exists but cannot be read or is not valid UTF-8.

        Side Effects
        ------------
        Emits ``config_file_read`` debug events.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> BaseFileLoader().read(tmp.name)
        Traceback (most recent call last):
        ...
        config_server.domain.errors.ReadFailure: ...
        >>> tmp.cleanup()
        """

        file_path = Path(path)
        if not _exists(file_path):
            raise NotFound(f"{path}: not found")
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadFailure(f"{path}: {exc}") from exc
        log_debug("config_file_read", layer="file", path=path, size=len(text))
        return text

    @staticmethod
    def _ensure_mapping(data: object) -> Mapping[str, object]:
        """Ensure *data* is a mapping, otherwise raise :class:`InvalidFormat`.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"key": 1})
        {'key': 1}
        >>> BaseFileLoader._ensure_mapping([1, 2])
        Traceback (most recent call last):
        ...
        config_server.domain.errors.InvalidFormat: expected a JSON object, got list
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"expected a JSON object, got {type(data).__name__}")
        return data


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    def load(self, path: str) -> Mapping[str, object]:
        """Return the mapping stored in the JSON file at *path*.

        Raises
        ------
        NotFound / ReadFailure
            Propagated from :meth:`read`.
        InvalidFormat
            When the document is not valid JSON, nests too deeply, repeats a
            key within one object, or is not a JSON object.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', suffix='.json', delete=False, encoding='utf-8')
        >>> _ = tmp.write('{"message": "hi", "port": 80}')
        >>> tmp.close()
        >>> JSONFileLoader().load(tmp.name)["port"]
        80
        >>> Path(tmp.name).unlink()
        """

        text = self.read(path)
        try:
            data = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
        except (json.JSONDecodeError, RecursionError) as exc:
            log_error("config_file_invalid", layer="file", path=path, format="json", error=str(exc))
            raise InvalidFormat(f"Invalid JSON: {exc}") from exc
        except InvalidFormat as exc:
            log_error("config_file_invalid", layer="file", path=path, format="json", error=str(exc))
            raise
        result = self._ensure_mapping(data)
        log_debug("config_file_loaded", layer="file", path=path, format="json")
        return result


def _exists(path: Path) -> bool:
    """Return whether *path* exists, treating any ``stat`` failure as absent.

    ``Path.exists`` re-raises ``PermissionError`` on Python < 3.12 when a
    parent directory cannot be searched.
    """

    try:
        return path.exists()
    except OSError:
        return False


def _reject_duplicate_keys(pairs: list[tuple[str, object]]) -> dict[str, object]:
    """Build a JSON object, raising :class:`InvalidFormat` on a repeated key.

    Examples
    --------
    >>> _reject_duplicate_keys([("port", 1), ("message", "hi")])
    {'port': 1, 'message': 'hi'}
    >>> _reject_duplicate_keys([("port", 1), ("port", 2)])
    Traceback (most recent call last):
    ...
    config_server.domain.errors.InvalidFormat: duplicate field `port`
    """

    result: dict[str, object] = {}
    for key, value in pairs:
        if key in result:
            raise InvalidFormat(f"duplicate field `{key}`")
        result[key] = value
    return result
