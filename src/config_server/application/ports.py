"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts the resolver depends on so tests can swap in
deterministic adapters without touching the filesystem layout of the host.

Contents
--------
* :class:`PathResolver` – yields candidate config paths in priority order.
* :class:`FileLoader` – reads and parses a single candidate file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class PathResolver(Protocol):
    """Compute the ordered candidate list for the configuration file.

    Why
    ----
    Keep knowledge of executable and working-directory conventions out of the
    resolution loop.
    """

    def candidates(self) -> Sequence[Path]:
        """Return candidate paths, highest priority first."""


@runtime_checkable
class FileLoader(Protocol):
    """Parse a configuration file into a mapping.

    Implementations raise ``NotFound`` for missing files, ``ReadFailure`` for
    unreadable ones, and ``InvalidFormat`` for malformed content.
    """

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return its mapping representation."""
