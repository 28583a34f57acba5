"""
Layered ``SHOWCASE_*`` settings for the showcase client.

Settings are collected from three layers: the process environment, an
optional ``.env`` file and explicit overrides. Only keys carrying the
``SHOWCASE_`` prefix are kept, and every key remembers which layer supplied
it so configuration errors can point at the right place.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

__all__ = [
    "ENV_PREFIX",
    "ClientEnvironment",
    "build_environment",
    "read_env_file",
]

ENV_PREFIX = "SHOWCASE_"

SOURCE_ENVIRON = "environment"
SOURCE_OVERRIDE = "override"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def read_env_file(path: str, *, prefix: str = ENV_PREFIX) -> Dict[str, str]:
    """
    Read the ``prefix``-ed assignments of a ``.env`` file.

    Blank lines, comments and lines without ``=`` are skipped. A leading
    ``export`` is allowed and matching quotes around the value are removed.
    A missing file yields an empty mapping.
    """
    try:
        data = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logging.debug("No settings file at %s", path)
        return {}

    values: Dict[str, str] = {}
    for raw_line in data.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        key, value = line.split("=", 1)
        key = key.strip()
        if key.startswith(prefix):
            values[key] = _unquote(value.strip())
    return values


@dataclass(frozen=True)
class ClientEnvironment:
    """Resolved showcase settings and the layer each one came from."""

    variables: Mapping[str, str]
    sources: Mapping[str, str] = field(default_factory=dict)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)

    def source_of(self, key: str) -> Optional[str]:
        return self.sources.get(key)

    def describe(self, key: str) -> str:
        source = self.source_of(key)
        return f"{key} (from {source})" if source else key


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
    prefix: str = ENV_PREFIX,
) -> ClientEnvironment:
    """
    Assemble the showcase settings from the process environment and a file.

    ``base`` defaults to :data:`os.environ`. Values from ``env_file`` fill in
    keys the base does not set; pass ``None`` to skip the file. ``overrides``
    always win. Keys without ``prefix`` are dropped from every layer.
    """
    variables: Dict[str, str] = {}
    sources: Dict[str, str] = {}

    for key, value in (os.environ if base is None else base).items():
        if key.startswith(prefix):
            variables[key] = value
            sources[key] = SOURCE_ENVIRON

    if env_file is not None:
        for key, value in read_env_file(env_file, prefix=prefix).items():
            if key not in variables:
                variables[key] = value
                sources[key] = env_file

    for key, value in (overrides or {}).items():
        if key.startswith(prefix):
            variables[key] = value
            sources[key] = SOURCE_OVERRIDE

    logging.debug(
        "Showcase settings: %s",
        ", ".join(f"{key} from {sources[key]}" for key in sorted(sources)) or "defaults only",
    )
    return ClientEnvironment(variables=variables, sources=sources)
