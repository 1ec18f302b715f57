"""Shared sandbox for resolver, CLI, and end-to-end tests.

The sandbox lays out a fake install tree under ``tmp_path``::

    <root>/install/bin/config-server   (the "executable")
    <root>/work/project                (the working directory)

and names every candidate location by its slot letter (``a`` … ``h``) so tests
can write a config into a specific priority slot without spelling out paths.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from config_server.adapters.path_resolvers.default import DefaultPathResolver

SLOTS: tuple[str, ...] = ("a", "b", "c", "d", "e", "f", "g")


@dataclass(frozen=True)
class ConfigSandbox:
    root: Path
    executable: Path
    cwd: Path

    @property
    def exe_dir(self) -> Path:
        return self.executable.parent

    def slot(self, name: str) -> Path:
        """Return the normalised location of candidate slot *name*."""

        exe_dir = self.exe_dir
        locations = {
            "a": exe_dir / "config" / "config.json",
            "b": exe_dir.parent / "config" / "config.json",
            "c": exe_dir.parent.parent / "config" / "config.json",
            "d": self.cwd / "config" / "config.json",
            "e": self.cwd.parent / "config" / "config.json",
            "f": self.cwd / "config.json",
            "g": exe_dir / "config.json",
        }
        return locations[name]

    def write(self, slot: str, payload: Mapping[str, Any] | str) -> Path:
        """Write *payload* (a mapping serialised as JSON, or raw text) into *slot*."""

        target = self.slot(slot)
        target.parent.mkdir(parents=True, exist_ok=True)
        body = payload if isinstance(payload, str) else json.dumps(payload)
        target.write_text(body, encoding="utf-8")
        return target

    def resolver(self) -> DefaultPathResolver:
        return DefaultPathResolver(executable=self.executable, cwd=self.cwd)


def create_config_sandbox(tmp_path: Path) -> ConfigSandbox:
    """Create the directory skeleton; no config files are written."""

    root = tmp_path / "sandbox"
    executable = root / "install" / "bin" / "config-server"
    cwd = root / "work" / "project"
    executable.parent.mkdir(parents=True)
    executable.write_text("#!/bin/sh\n", encoding="utf-8")
    cwd.mkdir(parents=True)
    return ConfigSandbox(root=root, executable=executable, cwd=cwd)
