# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Configuration sources consulted when an option with `env` is absent from argv.

- `EnvironmentSource`: Reads `os.environ`, optionally under a prefix.
- `MappingSource`: Wraps a plain mapping, for tests and embedding.
- `ChainedSource`: Returns the first value found across several sources.
"""
from __future__ import annotations

import os
from typing import Mapping

from bindery.protocols import ConfigurationSource


class EnvironmentSource:
    """Looks up values in the process environment."""

    def __init__(self, prefix: str = "", environ: Mapping[str, str] | None = None):
        self.prefix = prefix
        self._environ = environ

    def get(self, name: str) -> str | None:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(f"{self.prefix}{name}")

    def __repr__(self) -> str:
        return f"EnvironmentSource(prefix={self.prefix!r})"


class MappingSource:
    """Looks up values in a fixed mapping."""

    def __init__(self, values: Mapping[str, str] | None = None):
        self.values = dict(values or {})

    def get(self, name: str) -> str | None:
        value = self.values.get(name)
        return None if value is None else str(value)

    def __repr__(self) -> str:
        return f"MappingSource({sorted(self.values)})"


class ChainedSource:
    """Returns the first non-empty value from a list of sources."""

    def __init__(self, *sources: ConfigurationSource):
        self.sources = sources

    def get(self, name: str) -> str | None:
        for source in self.sources:
            value = source.get(name)
            if value is not None and value != "":
                return value
        return None
