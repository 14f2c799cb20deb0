# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instances for Bindery CLI applications."""
from rich.console import Console

from bindery.themes import get_nord_theme

console = Console(color_system="truecolor", theme=get_nord_theme())
err_console = Console(color_system="truecolor", theme=get_nord_theme(), stderr=True)
