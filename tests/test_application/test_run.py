import asyncio
import signal as os_signal
from io import StringIO

import pytest
from rich.console import Console

from bindery import (
    Application,
    Command,
    CommandBuilder,
    CommandError,
    ExitCode,
    ExitOutcome,
    MappingSource,
)
from bindery.exceptions import DuplicateCommandError, UnsupportedTypeError
from bindery.themes import get_nord_theme

RUNS = []


class Deploy(Command):
    async def run(self, signal):
        RUNS.append((self.name, self.count))


class Fail(Command):
    async def run(self, signal):
        raise CommandError("deployment rejected", exit_code=4)


class Crash(Command):
    async def run(self, signal):
        raise RuntimeError("unexpected")


class Outcome(Command):
    async def run(self, signal):
        return ExitOutcome.failure("soft failure", 3)


class Cleanup(Command):
    async def run(self, signal):
        def broken():
            raise RuntimeError("cleanup failed")

        self.lifecycle.on_exiting(broken)
        self.lifecycle.on_exited(lambda: RUNS.append("post"))


class Interrupted(Command):
    async def run(self, signal):
        self.lifecycle._on_os_signal(os_signal.SIGTERM)
        await signal.wait()


def make_console():
    return Console(file=StringIO(), width=120, theme=get_nord_theme())


@pytest.fixture(autouse=True)
def reset_runs():
    RUNS.clear()


@pytest.fixture
def app():
    app = Application(
        program="deploytool",
        description="Deploy things",
        version="1.2.3",
        configuration=MappingSource({"DEPLOY_NAME": "from-env"}),
        install_signal_handlers=False,
        console=make_console(),
        err_console=make_console(),
    )
    app.add_command(
        CommandBuilder("deploy", Deploy, description="Deploy a service", aliases=["d"])
        .option("-n", "--name", required=True, description="Service name")
        .argument("count", type=int, default=0, description="Instances")
    )
    app.add_command(
        CommandBuilder("deploy-env", Deploy)
        .option("--name", required=True, env="DEPLOY_NAME")
        .argument("count", type=int)
    )
    app.add_command(CommandBuilder("fail", Fail))
    app.add_command(CommandBuilder("crash", Crash))
    app.add_command(CommandBuilder("outcome", Outcome))
    app.add_command(CommandBuilder("cleanup", Cleanup))
    app.add_command(CommandBuilder("interrupted", Interrupted))
    return app


def stdout(app):
    return app.console.file.getvalue()


def stderr(app):
    return app.err_console.file.getvalue()


@pytest.mark.asyncio
async def test_deploy_end_to_end(app):
    assert await app.run_async(["deploy", "--name", "svc"]) == ExitCode.SUCCESS
    assert RUNS == [("svc", 0)]


@pytest.mark.asyncio
async def test_deploy_missing_required_option(app):
    assert await app.run_async(["deploy"]) == ExitCode.USAGE
    assert RUNS == []
    assert "Missing required option: --name" in stderr(app)
    assert "deploytool deploy --help" in stderr(app)


@pytest.mark.asyncio
async def test_deploy_with_count(app):
    assert await app.run_async(["deploy", "--name", "svc", "7"]) == 0
    assert RUNS == [("svc", 7)]


@pytest.mark.asyncio
async def test_deploy_invalid_count(app):
    assert await app.run_async(["deploy", "--name", "svc", "x"]) == ExitCode.USAGE
    assert RUNS == []
    assert "position 0" in stderr(app)


@pytest.mark.asyncio
async def test_alias_dispatch(app):
    assert await app.run_async(["d", "-n", "svc"]) == 0
    assert RUNS == [("svc", 0)]


@pytest.mark.asyncio
async def test_env_fallback(app):
    assert await app.run_async(["deploy-env", "2"]) == 0
    assert RUNS == [("from-env", 2)]


@pytest.mark.asyncio
async def test_unknown_command(app):
    assert await app.run_async(["deplyo"]) == ExitCode.COMMAND_NOT_FOUND
    assert "Did you mean" in stderr(app)
    assert "deploytool --help" in stderr(app)


@pytest.mark.asyncio
async def test_unknown_option(app):
    assert await app.run_async(["deploy", "--colour"]) == ExitCode.USAGE
    assert "Unknown option: --colour" in stderr(app)


@pytest.mark.asyncio
async def test_command_error_exit_code(app):
    assert await app.run_async(["fail"]) == 4
    assert "deployment rejected" in stderr(app)


@pytest.mark.asyncio
async def test_outcome_exit_code(app):
    assert await app.run_async(["outcome"]) == 3
    assert "soft failure" in stderr(app)


@pytest.mark.asyncio
async def test_unexpected_exception(app):
    assert await app.run_async(["crash"]) == ExitCode.UNEXPECTED
    assert "Unexpected error: unexpected" in stderr(app)


@pytest.mark.asyncio
async def test_failing_lifecycle_callback_keeps_exit_code(app):
    assert await app.run_async(["cleanup"]) == ExitCode.SUCCESS
    assert "cleanup failed" in stderr(app)
    assert RUNS == ["post"]


@pytest.mark.asyncio
async def test_os_signal_exit_code(app):
    code = await asyncio.wait_for(app.run_async(["interrupted"]), timeout=5)
    assert code == ExitCode.INTERRUPTED


@pytest.mark.asyncio
async def test_global_help(app):
    assert await app.run_async(["--help"]) == ExitCode.SUCCESS
    output = stdout(app)
    assert "usage:" in output
    assert "deploytool <command> [options]" in output
    assert "Deploy a service" in output
    assert "deploy (d)" in output


@pytest.mark.asyncio
async def test_empty_argv_without_root_prints_help(app):
    assert await app.run_async([]) == ExitCode.USAGE
    assert "deploytool <command> [options]" in stdout(app)


@pytest.mark.asyncio
async def test_command_help(app):
    assert await app.run_async(["deploy", "--help"]) == ExitCode.SUCCESS
    output = stdout(app)
    assert "deploytool deploy -n NAME [COUNT]" in output
    assert "-n, --name NAME" in output
    assert "[required]" in output
    assert "(default: 0)" in output
    assert RUNS == []


@pytest.mark.asyncio
async def test_help_wins_over_binding_errors(app):
    assert await app.run_async(["deploy", "-h", "--unknown"]) == ExitCode.SUCCESS


@pytest.mark.asyncio
@pytest.mark.parametrize("flag", ["-V", "--version"])
async def test_version(app, flag):
    assert await app.run_async([flag]) == ExitCode.SUCCESS
    assert "deploytool 1.2.3" in stdout(app)


@pytest.mark.asyncio
async def test_root_command_runs_without_name():
    app = Application(
        program="tool",
        install_signal_handlers=False,
        console=make_console(),
        err_console=make_console(),
    )
    app.add_command(CommandBuilder("", Deploy).option("--name").argument("count", type=int))
    assert await app.run_async(["--name", "x", "5"]) == 0
    assert RUNS == [("x", 5)]
    assert await app.run_async([]) == 0
    assert RUNS[-1] == ("", 0)


def test_duplicate_registration_rejected(app):
    with pytest.raises(DuplicateCommandError):
        app.add_command(CommandBuilder("deploy", Deploy))


def test_unsupported_type_rejected_at_registration(app):
    class Opaque:
        pass

    with pytest.raises(UnsupportedTypeError):
        app.add_command(CommandBuilder("opaque", Deploy).option("--thing", type=Opaque))
    assert "opaque" not in app.commands


def test_run_exits_with_code(app):
    with pytest.raises(SystemExit) as excinfo:
        app.run(["deploy", "--name", "svc", "3"])
    assert excinfo.value.code == 0
    assert RUNS == [("svc", 3)]
