# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines structural protocols for the pluggable seams of Bindery.

These runtime-checkable `Protocol` classes specify the expected interfaces for:
- Configuration sources consulted for option fallback values
- Factories that create command instances during binding

Protocols:
- ConfigurationSource: `get(name)` returning text or `None` when unset.
- CommandFactory: `create(command_type)` returning a fresh command instance.
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConfigurationSource(Protocol):
    def get(self, name: str) -> str | None: ...


@runtime_checkable
class CommandFactory(Protocol):
    def create(self, command_type: Any) -> Any: ...
