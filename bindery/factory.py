# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `DefaultCommandFactory`, the stock `CommandFactory`.

The factory calls `command_type()`. When services are supplied, the constructor
signature is inspected and every parameter whose name matches a service is
passed as a keyword argument, so commands can receive their collaborators:

    class Deploy(Command):
        def __init__(self, client: ApiClient):
            self.client = client

    factory = DefaultCommandFactory(client=ApiClient())
"""
from __future__ import annotations

import inspect
from typing import Any

from bindery.logger import logger


class DefaultCommandFactory:
    """Creates command instances, injecting named services into constructors."""

    def __init__(self, **services: Any) -> None:
        self.services = services

    def create(self, command_type: Any) -> Any:
        if not callable(command_type):
            raise TypeError(f"{command_type!r} is not callable")
        if not self.services:
            return command_type()
        try:
            signature = inspect.signature(command_type)
        except (TypeError, ValueError):
            logger.debug("No signature available for %r", command_type)
            return command_type()
        kwargs = {
            name: self.services[name]
            for name, param in signature.parameters.items()
            if name in self.services
            and param.kind
            in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
        }
        return command_type(**kwargs)
