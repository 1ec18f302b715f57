"""Configuration resolver for ``config_server``.

Purpose
-------
Provide the single entry point that turns the candidate path list into a
:class:`ServerConfig`, or into one descriptive failure.

Contents
--------
* :func:`load_config` – resolve candidates from the running process and load.
* :func:`load_config_from` – lower-level API over an explicit candidate list,
  returning the config together with the path it came from.

System Role
-----------
Connects the path resolver and file loader adapters with the domain value
object. It is the canonical place for the search policy: missing and unreadable
candidates fall through, a malformed candidate stops the search.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .adapters.file_loaders.structured import JSONFileLoader
from .adapters.path_resolvers.default import DefaultPathResolver
from .application.ports import FileLoader, PathResolver
from .domain.config import ServerConfig
from .domain.errors import (
    ConfigError,
    ConfigNotFound,
    ConfigParseError,
    InvalidFormat,
    NotFound,
    ReadFailure,
)
from .observability import log_debug, log_info, make_event


def load_config(
    *,
    resolver: PathResolver | None = None,
    loader: FileLoader | None = None,
) -> ServerConfig:
    """Return the first configuration found among the resolver's candidates.

    Why
    ----
    Bootstrap needs a ready-to-serve configuration or a single error it can
    print before exiting.

    Parameters
    ----------
    resolver:
        Candidate source; defaults to :class:`DefaultPathResolver` anchored at
        the running executable and the current working directory.
    loader:
        File loader; defaults to :class:`JSONFileLoader`.

    Raises
    ------
    ConfigParseError
        A candidate existed but did not parse.
    ConfigNotFound
        No candidate existed or was readable.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> root = Path(tmp.name)
    >>> _ = (root / "config.json").write_text('{"message": "hello", "port": 8080}', encoding="utf-8")
    >>> resolver = DefaultPathResolver(executable=root / "bin" / "server", cwd=root)
    >>> load_config(resolver=resolver)
    ServerConfig(message='hello', port=8080)
    >>> tmp.cleanup()
    """

    active = resolver if resolver is not None else DefaultPathResolver()
    config, _ = load_config_from(active.candidates(), loader=loader)
    return config


def load_config_from(
    paths: Sequence[Path],
    *,
    loader: FileLoader | None = None,
) -> tuple[ServerConfig, Path]:
    """Try *paths* in order and return ``(config, path)`` for the first success.

    What
    ----
    * missing candidate → remember ``"<path>: not found"`` and continue;
    * unreadable candidate → remember the read error and continue;
    * malformed candidate → raise :class:`ConfigParseError` at once;
    * nothing usable → raise :class:`ConfigNotFound` carrying the last reason.

    Side Effects
    ------------
    Emits ``config_candidate_skipped`` debug events and one ``config_loaded``
    info event naming the chosen path.

    Examples
    --------
    >>> load_config_from([Path("/nonexistent/config.json")])
    Traceback (most recent call last):
    ...
    config_server.domain.errors.ConfigNotFound: Failed to load config from any path. Last error: /nonexistent/config.json: not found
    """

    active = loader if loader is not None else JSONFileLoader()
    last_error = ""
    for path in paths:
        try:
            data = active.load(str(path))
        except (NotFound, ReadFailure) as exc:
            last_error = str(exc)
            log_debug("config_candidate_skipped", **make_event("resolver", str(path), {"reason": last_error}))
            continue
        except InvalidFormat as exc:
            raise ConfigParseError(path, str(exc)) from exc
        try:
            config = ServerConfig.from_mapping(data)
        except InvalidFormat as exc:
            raise ConfigParseError(path, str(exc)) from exc
        log_info("config_loaded", **make_event("resolver", str(path)))
        return config, path
    raise ConfigNotFound(last_error, attempted=paths)


__all__ = [
    "ServerConfig",
    "ConfigError",
    "ConfigNotFound",
    "ConfigParseError",
    "InvalidFormat",
    "NotFound",
    "ReadFailure",
    "load_config",
    "load_config_from",
]
