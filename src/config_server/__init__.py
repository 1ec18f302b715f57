"""Public package surface for ``config_server``.

Exports the resolver entry points, the configuration value object, the error
taxonomy, and the app factory so both ``import config_server`` and
``python -m config_server`` flows reach the same functions.
"""

from __future__ import annotations

from .app import create_app
from .core import load_config, load_config_from
from .domain.config import ServerConfig
from .domain.errors import (
    BindError,
    ConfigError,
    ConfigNotFound,
    ConfigParseError,
    InvalidFormat,
    NotFound,
    ReadFailure,
    ServeError,
    ServerError,
)
from .observability import bind_trace_id, configure_logging, get_logger

__all__ = [
    "BindError",
    "ConfigError",
    "ConfigNotFound",
    "ConfigParseError",
    "InvalidFormat",
    "NotFound",
    "ReadFailure",
    "ServeError",
    "ServerConfig",
    "ServerError",
    "bind_trace_id",
    "configure_logging",
    "create_app",
    "get_logger",
    "load_config",
    "load_config_from",
]
