"""Filesystem path resolution for the service configuration file.

Purpose
-------
Implement the :class:`config_server.application.ports.PathResolver` protocol by
encapsulating where the service looks for ``config.json``: next to the launched
executable, in the working directory, and in ``config/`` folders around both.

Contents
--------
* :data:`CONFIG_FILENAME` / :data:`CONFIG_DIRNAME` – canonical names.
* :class:`DefaultPathResolver` – computes the ordered candidate list.
* :func:`default_executable` – locates the launched program.
* :func:`_dedupe` – drops repeated locations while keeping priority order.

System Role
-----------
Feeds a deterministic path list into :func:`config_server.core.load_config`.
Both the executable and the working directory can be injected so tests never
depend on where the interpreter lives.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Final, Iterable

from ...observability import log_debug

CONFIG_FILENAME: Final[str] = "config.json"
CONFIG_DIRNAME: Final[str] = "config"


class DefaultPathResolver:
    """Resolve candidate configuration paths in priority order.

    Why
    ----
    The service is started from build trees, installed virtualenvs, containers
    and source checkouts; the file may sit beside the program or beside the
    caller.

    Examples
    --------
    >>> resolver = DefaultPathResolver(executable=Path("/opt/app/bin/server"), cwd=Path("/srv"))
    >>> [str(p) for p in resolver.candidates()]  # doctest: +NORMALIZE_WHITESPACE
    ['/opt/app/bin/config/config.json', '/opt/app/bin/../config/config.json',
     '/opt/app/bin/../../config/config.json', '/srv/config/config.json',
     '/srv/../config/config.json', '/srv/config.json', '/opt/app/bin/config.json']
    """

    def __init__(self, *, executable: Path | None = None, cwd: Path | None = None) -> None:
        """Store the two anchors candidates are derived from.

        Parameters
        ----------
        executable:
            Path of the running program. Defaults to :func:`default_executable`.
        cwd:
            Working directory. Defaults to :meth:`Path.cwd`.
        """

        self.executable = executable if executable is not None else default_executable()
        self.cwd = cwd if cwd is not None else Path.cwd()

    @property
    def executable_dir(self) -> Path:
        """Directory containing the running program."""

        return self.executable.parent

    def candidates(self) -> list[Path]:
        """Return the ordered, deduplicated candidate list.

        Order
        -----
        1. ``<exe_dir>/config/config.json``
        2. ``<exe_dir>/../config/config.json``
        3. ``<exe_dir>/../../config/config.json``
        4. ``<cwd>/config/config.json``
        5. ``<cwd>/../config/config.json``
        6. ``<cwd>/config.json``
        7. ``<exe_dir>/config.json``
        8. ``config.json`` relative to the working directory

        Side Effects
        ------------
        Emits a ``path_candidates`` debug event.
        """

        paths = _dedupe(self._raw_candidates(), self.cwd)
        log_debug("path_candidates", layer="resolver", path=None, count=len(paths))
        return paths

    def _raw_candidates(self) -> Iterable[Path]:
        exe_dir = self.executable_dir
        nested = Path(CONFIG_DIRNAME) / CONFIG_FILENAME
        yield exe_dir / nested
        yield exe_dir / ".." / nested
        yield exe_dir / ".." / ".." / nested
        yield self.cwd / nested
        yield self.cwd / ".." / nested
        yield self.cwd / CONFIG_FILENAME
        yield exe_dir / CONFIG_FILENAME
        yield Path(CONFIG_FILENAME)


def default_executable() -> Path:
    """Return the path of the program that launched this process.

    Why
    ----
    For a console script or ``python -m`` run, ``sys.argv[0]`` names the
    launcher or ``__main__.py``; interactive and ``-c`` sessions have no script,
    so the interpreter binary stands in.
    """

    script = sys.argv[0] if sys.argv else ""
    if script and script != "-c":
        return Path(script).resolve()
    return Path(sys.executable).resolve()


def _dedupe(paths: Iterable[Path], cwd: Path) -> list[Path]:
    """Drop entries that point at an already listed location.

    Relative entries are compared after anchoring them at *cwd*; ``..`` is
    collapsed lexically without touching the filesystem. The first occurrence
    wins and keeps its original spelling.

    Examples
    --------
    >>> [str(p) for p in _dedupe([Path("/a/config.json"), Path("/a/b/../config.json"), Path("config.json")], Path("/a"))]
    ['/a/config.json']
    """

    seen: set[str] = set()
    unique: list[Path] = []
    for path in paths:
        key = os.path.normcase(os.path.normpath(cwd / path))
        if key in seen:
            continue
        seen.add(key)
        unique.append(path)
    return unique
