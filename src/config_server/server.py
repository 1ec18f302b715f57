"""Listener runtime for the greeting service.

Purpose
-------
Open the single listening socket and hand it to uvicorn, translating socket and
server failures into the domain error taxonomy.

Contents
--------
* :data:`BIND_HOST` – the fixed bind address.
* :func:`bind_socket` – open and bind the listening socket or raise
  :class:`BindError`.
* :func:`serve` – run the application until shutdown or raise
  :class:`ServeError`.

System Role
-----------
Called by the CLI ``serve`` command after the configuration resolved. Binding
happens before uvicorn starts so a taken port is reported as a bind failure
instead of a generic server crash.
"""

from __future__ import annotations

import socket
from typing import Final

import uvicorn
from fastapi import FastAPI

from .app import create_app
from .domain.config import ServerConfig
from .domain.errors import BindError, ServeError
from .observability import log_info, make_event

BIND_HOST: Final[str] = "0.0.0.0"
_BACKLOG: Final[int] = 2048


def bind_address(port: int) -> str:
    """Render the ``host:port`` string used in messages and logs.

    Examples
    --------
    >>> bind_address(8080)
    '0.0.0.0:8080'
    """

    return f"{BIND_HOST}:{port}"


def bind_socket(port: int) -> socket.socket:
    """Return a listening TCP socket bound to ``0.0.0.0:<port>``.

    Raises
    ------
    BindError
        When the operating system refuses the address (port in use, missing
        privileges). The socket is closed before raising.
    """

    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((BIND_HOST, port))
        sock.listen(_BACKLOG)
    except OSError as exc:
        sock.close()
        raise BindError(f"Failed to bind to {bind_address(port)}: {exc}") from exc
    sock.set_inheritable(True)
    return sock


def serve(config: ServerConfig, *, app: FastAPI | None = None) -> None:
    """Serve *config* on ``0.0.0.0:<config.port>`` until the process is stopped.

    What
    ----
    Builds the application (unless *app* is supplied), binds exactly one
    socket, logs ``server_listening``, and runs uvicorn on that socket. uvicorn
    handles SIGINT/SIGTERM itself; an orderly shutdown returns normally.

    Raises
    ------
    BindError
        Propagated from :func:`bind_socket`; uvicorn is never started.
    ServeError
        When uvicorn fails while running or never finishes its startup.
    """

    application = app if app is not None else create_app(config)
    sock = bind_socket(config.port)
    log_info("server_listening", **make_event("http", None, {"address": bind_address(config.port)}))
    server = uvicorn.Server(uvicorn.Config(application, log_config=None, access_log=False))
    try:
        server.run(sockets=[sock])
    except (KeyboardInterrupt, SystemExit):
        raise
    except Exception as exc:
        raise ServeError(f"Server error: {exc}") from exc
    finally:
        sock.close()
    if not server.started:
        raise ServeError("Server error: server failed to start")
