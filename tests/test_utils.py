import logging

import pytest
from rich.logging import RichHandler

from bindery.utils import callable_name, ensure_async, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.asyncio
async def test_ensure_async_wraps_sync_function():
    def add(a, b):
        return a + b

    wrapped = ensure_async(add)
    assert await wrapped(2, 3) == 5
    assert wrapped.__name__ == "add"


@pytest.mark.asyncio
async def test_ensure_async_returns_coroutine_function_unchanged():
    async def ping():
        return "pong"

    assert ensure_async(ping) is ping
    assert await ensure_async(ping)() == "pong"


def test_ensure_async_rejects_non_callable():
    with pytest.raises(TypeError):
        ensure_async(42)


def test_callable_name_prefers_qualname():
    class Holder:
        def method(self):
            pass

    assert callable_name(Holder.method).endswith("Holder.method")
    assert callable_name(print) == "print"


def test_setup_logging_cli_mode(restore_root_logger):
    setup_logging(mode="cli", console_log_level=logging.INFO)
    handlers = restore_root_logger.handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], RichHandler)
    assert handlers[0].level == logging.INFO


def test_setup_logging_env_override_and_file(
    restore_root_logger, monkeypatch, tmp_path
):
    monkeypatch.setenv("BINDERY_LOG_MODE", "json")
    log_file = tmp_path / "bindery.log"
    setup_logging(log_filename=str(log_file), json_log_to_file=True)
    handlers = restore_root_logger.handlers
    assert len(handlers) == 2
    assert not isinstance(handlers[0], RichHandler)
    assert isinstance(handlers[1], logging.FileHandler)
    logging.getLogger("bindery.test").warning("written")
    handlers[1].flush()
    assert '"message": "written"' in log_file.read_text(encoding="UTF-8")
    handlers[1].close()


def test_setup_logging_rejects_unknown_mode(restore_root_logger):
    with pytest.raises(ValueError):
        setup_logging(mode="xml")
