"""
Bindery CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import os
import sys
from pathlib import Path
from typing import Any

from rich.markup import escape

from bindery.application import Application
from bindery.builder import CommandBuilder
from bindery.config import loader
from bindery.console import err_console
from bindery.exceptions import BinderyError
from bindery.init import InitCommand
from bindery.result import ExitCode
from bindery.utils import setup_logging


def find_bindery_config() -> Path | None:
    candidates = [
        Path(os.environ["BINDERY_CONFIG"]) if os.environ.get("BINDERY_CONFIG") else None,
        Path.cwd() / "bindery.yaml",
        Path.cwd() / "bindery.yml",
        Path.cwd() / "bindery.toml",
        Path.cwd() / ".bindery.yaml",
        Path.cwd() / ".bindery.toml",
    ]
    return next((p for p in candidates if p is not None and p.is_file()), None)


def bootstrap() -> Path | None:
    config_path = find_bindery_config()
    if config_path and str(config_path.parent) not in sys.path:
        sys.path.insert(0, str(config_path.parent))
    return config_path


def default_application() -> Application:
    app = Application(
        program="bindery",
        description="No bindery.yaml found. Create one with 'bindery init'.",
    )
    app.add_command(
        CommandBuilder(
            "init",
            InitCommand,
            description="Initialize a new Bindery project",
            help_epilog="If no name is provided, the current directory will be used.",
        ).argument("name", default=".", description="Directory of the new project")
    )
    return app


def main(argv: list[str] | None = None) -> Any:
    setup_logging()
    config_path = bootstrap()
    if config_path is None:
        app = default_application()
    else:
        try:
            app = loader(config_path)
        except (BinderyError, ValueError, OSError) as error:
            err_console.print(
                f"[error]Error:[/error] Could not load {config_path}: {escape(str(error))}"
            )
            sys.exit(ExitCode.USAGE)
    app.run(argv)


if __name__ == "__main__":
    main()
