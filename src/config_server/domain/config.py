"""Domain-level configuration value object.

Purpose
-------
Anchor the immutable :class:`ServerConfig` that the resolver produces and every
request handler reads. This module belongs to the domain layer and performs no
I/O.

Contents
--------
* :data:`PORT_MIN` / :data:`PORT_MAX` – bounds of a 16-bit unsigned port.
* :class:`ServerConfig` – frozen record with ``message`` and ``port``.
* :func:`_require_message` / :func:`_require_port` – structural field checks
  used by :meth:`ServerConfig.from_mapping`.

System Role
-----------
Constructed exactly once at process start by
:func:`config_server.core.load_config` and shared by reference afterwards. The
frozen dataclass guarantees that no handler can mutate it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Final, Mapping

from .errors import InvalidFormat

PORT_MIN: Final[int] = 0
PORT_MAX: Final[int] = 65535


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Immutable service configuration.

    Why
    ----
    Request handlers run concurrently and read the configuration without
    locking; freezing the value after load makes that safe.

    Attributes
    ----------
    message:
        Text returned verbatim by ``GET /``.
    port:
        TCP port bound on ``0.0.0.0``.

    Examples
    --------
    >>> cfg = ServerConfig(message="hello", port=8080)
    >>> cfg.port
    8080
    >>> cfg.port = 9090
    Traceback (most recent call last):
    ...
    dataclasses.FrozenInstanceError: cannot assign to field 'port'
    """

    message: str
    port: int

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ServerConfig:
        """Build a :class:`ServerConfig` from a parsed JSON object.

        Why
        ----
        Keep the structural rules of the config file in the domain so loaders
        only deal with syntax.

        What
        ----
        Requires ``message`` (string) and ``port`` (integer within 0–65535).
        Extra keys are ignored. No semantic validation is performed.

        Parameters
        ----------
        data:
            Mapping produced by a file loader.

        Raises
        ------
        InvalidFormat
            When a required field is missing or has the wrong type.

        Examples
        --------
        >>> ServerConfig.from_mapping({"message": "hi", "port": 80, "extra": True})
        ServerConfig(message='hi', port=80)
        >>> ServerConfig.from_mapping({"message": "hi"})
        Traceback (most recent call last):
        ...
        config_server.domain.errors.InvalidFormat: missing field `port`
        """

        message = _require_message(data)
        port = _require_port(data)
        return cls(message=message, port=port)

    def as_dict(self) -> dict[str, Any]:
        """Return a mutable ``dict`` copy suitable for serialisation."""

        return {"message": self.message, "port": self.port}

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the configuration to JSON.

        Examples
        --------
        >>> ServerConfig(message="hello", port=8080).to_json()
        '{"message":"hello","port":8080}'
        """

        return json.dumps(self.as_dict(), indent=indent, separators=(",", ":"), ensure_ascii=False)


def _require_message(data: Mapping[str, Any]) -> str:
    """Return the ``message`` field or raise :class:`InvalidFormat`.

    ``json`` decodes a lone surrogate escape such as ``"\\ud800"`` into a
    ``str`` that cannot be encoded for the response body, so it is rejected
    here.

    Examples
    --------
    >>> _require_message({"message": "hello"})
    'hello'
    >>> _require_message({"message": "\\ud800"})
    Traceback (most recent call last):
    ...
    config_server.domain.errors.InvalidFormat: field `message` is not valid UTF-8: surrogates not allowed at index 0
    """

    if "message" not in data:
        raise InvalidFormat("missing field `message`")
    message = data["message"]
    if not isinstance(message, str):
        raise InvalidFormat(f"field `message` must be a string, got {type(message).__name__}")
    try:
        message.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidFormat(f"field `message` is not valid UTF-8: {exc.reason} at index {exc.start}") from exc
    return message


def _require_port(data: Mapping[str, Any]) -> int:
    """Return the ``port`` field or raise :class:`InvalidFormat`.

    ``bool`` is a subclass of ``int`` in Python; it is rejected explicitly so
    ``true`` in the JSON document does not become port 1.
    """

    if "port" not in data:
        raise InvalidFormat("missing field `port`")
    port = data["port"]
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidFormat(f"field `port` must be an integer, got {type(port).__name__}")
    if not PORT_MIN <= port <= PORT_MAX:
        raise InvalidFormat(f"field `port` out of range {PORT_MIN}-{PORT_MAX}: {port}")
    return port
