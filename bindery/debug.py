# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""debug.py"""
from bindery.context import ExecutionContext
from bindery.hook_manager import HookManager, HookType
from bindery.logger import logger


def log_before(context: ExecutionContext):
    """Log the start of a command."""
    logger.info("[%s] Starting -> %r", context.name, context.command)


def log_success(context: ExecutionContext):
    logger.debug("[%s] Success -> %s", context.name, context.result)


def log_after(context: ExecutionContext):
    """Log the completion of a command, regardless of success or failure."""
    logger.debug("[%s] Finished in %.3fs", context.name, context.duration or 0.0)


def log_error(context: ExecutionContext):
    """Log a failure outcome or an exception raised by the command."""
    if context.exception is None:
        logger.error("[%s] Failed -> %s", context.name, context.result)
        return
    logger.error(
        "[%s] Error (%s): %s",
        context.name,
        type(context.exception).__name__,
        context.exception,
        exc_info=context.exception,
    )


def register_debug_hooks(hooks: HookManager):
    hooks.register(HookType.BEFORE, log_before)
    hooks.register(HookType.AFTER, log_after)
    hooks.register(HookType.ON_SUCCESS, log_success)
    hooks.register(HookType.ON_ERROR, log_error)
