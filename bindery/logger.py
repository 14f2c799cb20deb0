# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global logger instance for Bindery."""
import logging

logger: logging.Logger = logging.getLogger("bindery")
