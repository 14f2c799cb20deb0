import pytest

from bindery import Binder, Command, CommandBuilder, MappingSource
from bindery.binder import is_negative_number
from bindery.exceptions import InvalidValueError, UnknownOptionError


class Tool(Command):
    async def run(self, signal):
        return None


@pytest.fixture
def binder():
    return Binder(configuration=MappingSource())


@pytest.fixture
def tool():
    return (
        CommandBuilder("tool", Tool)
        .option("-n", "--name")
        .option("-o", "--offset", type=float)
        .option("-v", "--verbose", type=bool)
        .option("-q", "--quiet", type=bool)
        .option("-a", "--all", type=bool)
        .argument("value", type=int)
        .build()
    )


@pytest.mark.parametrize(
    "argv",
    [
        ["--name", "svc"],
        ["--name=svc"],
        ["-n", "svc"],
        ["-n=svc"],
        ["-nsvc"],
    ],
)
def test_option_value_forms(binder, tool, argv):
    assert binder.bind(tool, argv).name == "svc"


def test_inline_value_may_contain_equals(binder, tool):
    assert binder.bind(tool, ["--name=a=b"]).name == "a=b"


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["--verbose"], True),
        (["-v"], True),
        (["--verbose", "false"], False),
        (["--verbose", "TRUE"], True),
        (["--verbose=false"], False),
        ([], False),
    ],
)
def test_boolean_flag_forms(binder, tool, argv, expected):
    assert binder.bind(tool, argv).verbose is expected


def test_boolean_flag_does_not_consume_other_tokens(binder, tool):
    command = binder.bind(tool, ["--verbose", "5"])
    assert command.verbose is True
    assert command.value == 5


def test_bundled_short_flags(binder, tool):
    command = binder.bind(tool, ["-vqa"])
    assert command.verbose is True
    assert command.quiet is True
    assert command.all is True


def test_bundle_with_non_flag_is_unknown(binder, tool):
    with pytest.raises(UnknownOptionError) as excinfo:
        binder.bind(tool, ["-vx"])
    assert excinfo.value.name == "-x"


@pytest.mark.parametrize("token", ["-5", "-1.5", "-.5", "-2e3"])
def test_negative_numbers_are_not_flags(token):
    assert is_negative_number(token)


@pytest.mark.parametrize("token", ["-n", "--name", "-", "-5x"])
def test_flags_are_not_negative_numbers(token):
    assert not is_negative_number(token)


def test_negative_number_as_option_value(binder, tool):
    assert binder.bind(tool, ["--offset", "-1.5"]).offset == -1.5


def test_negative_number_as_positional(binder, tool):
    assert binder.bind(tool, ["-5"]).value == -5


def test_end_of_options_makes_tokens_positional(binder):
    descriptor = (
        CommandBuilder("echo", Tool)
        .option("--name")
        .argument("words", type=list[str])
        .build()
    )
    command = binder.bind(descriptor, ["--name", "a", "--", "--name", "-x"])
    assert command.name == "a"
    assert command.words == ["--name", "-x"]


def test_unknown_long_option(binder, tool):
    with pytest.raises(UnknownOptionError) as excinfo:
        binder.bind(tool, ["--colour", "red"])
    assert excinfo.value.name == "--colour"
    assert excinfo.value.exit_code == 2


def test_unknown_short_option(binder, tool):
    with pytest.raises(UnknownOptionError):
        binder.bind(tool, ["-z"])


@pytest.mark.parametrize("argv", [["--name"], ["--name", "--verbose"], ["--name", "--"]])
def test_option_missing_value(binder, tool, argv):
    with pytest.raises(InvalidValueError, match="requires a value"):
        binder.bind(tool, argv)


def test_single_dash_is_positional(binder):
    descriptor = CommandBuilder("cat", Tool).argument("path").build()
    assert binder.bind(descriptor, ["-"]).path == "-"
