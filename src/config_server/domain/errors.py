"""Domain-level exception hierarchy.

Purpose
-------
Expose the error taxonomy shared by adapters, the resolver, the server runtime
and the CLI. The hierarchy lives in the domain layer so outer layers may depend
on it without the domain depending on them.

Contents
--------
* :class:`ConfigError` – umbrella base class for configuration failures.
* :class:`NotFound` – a single candidate file does not exist.
* :class:`ReadFailure` – a single candidate exists but cannot be read.
* :class:`InvalidFormat` – a candidate's content cannot be parsed.
* :class:`ConfigNotFound` – no candidate produced a configuration.
* :class:`ConfigParseError` – a candidate was found but is malformed.
* :class:`ServerError` – umbrella base class for runtime failures.
* :class:`BindError` / :class:`ServeError` – listener and serving failures.

System Role
-----------
Adapters raise :class:`NotFound`, :class:`ReadFailure` and
:class:`InvalidFormat` per candidate. The resolver in :mod:`config_server.core`
turns those into the two fatal outcomes (:class:`ConfigNotFound`,
:class:`ConfigParseError`). The CLI maps every fatal error to exit code 1.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class ConfigError(Exception):
    """Base type for all configuration errors emitted by ``config_server``.

    Why
    ----
    Give the CLI a single type to catch when configuration loading fails.
    """


class NotFound(ConfigError):
    """Raised when a candidate configuration file does not exist.

    The resolver treats this as non-fatal and moves to the next candidate.
    """


class ReadFailure(ConfigError):
    """Raised when a candidate exists but its contents cannot be read.

    Typical Sources
    ---------------
    Directories named like the config file, permission problems, and files that
    are not valid UTF-8.
    """


class InvalidFormat(ConfigError):
    """Raised when a file's contents cannot be parsed into a configuration.

    Why
    ----
    Distinguish between missing files and malformed content. Covers JSON syntax
    errors, non-object documents, and missing or mistyped fields.
    """


class ConfigNotFound(ConfigError):
    """No candidate path existed or was readable.

    Attributes
    ----------
    last_error:
        Failure reason recorded for the last candidate that was attempted.
    attempted:
        The candidate paths in the order they were tried.
    """

    def __init__(self, last_error: str, attempted: Sequence[Path] = ()) -> None:
        super().__init__(f"Failed to load config from any path. Last error: {last_error}")
        self.last_error = last_error
        self.attempted = tuple(attempted)


class ConfigParseError(ConfigError):
    """A candidate existed and was read but did not parse as a configuration.

    Terminates the search; lower-priority candidates are never consulted.
    """

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"Failed to parse {path}: {detail}")
        self.path = path
        self.detail = detail


class ServerError(Exception):
    """Base type for failures while opening or running the HTTP listener."""


class BindError(ServerError):
    """The listening socket could not be bound to the requested address."""


class ServeError(ServerError):
    """A fatal I/O failure escaped the running server."""
