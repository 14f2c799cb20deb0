import sys

import pytest

from bindery.__main__ import bootstrap, default_application, find_bindery_config, main
from bindery.config import load_config
from bindery.exceptions import CommandError
from bindery.init import init_project


def test_init_project_writes_templates(tmp_path):
    target = init_project(str(tmp_path / "demo"))
    assert (target / "commands.py").is_file()
    assert (target / "bindery.yaml").is_file()

    config = load_config(target / "bindery.yaml")
    assert [command.name for command in config.commands] == ["greet", "wait"]


def test_init_project_refuses_existing(tmp_path):
    init_project(str(tmp_path))
    with pytest.raises(CommandError, match="already initialized"):
        init_project(str(tmp_path))


def test_find_config_in_cwd(tmp_path, monkeypatch):
    monkeypatch.delenv("BINDERY_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    assert find_bindery_config() is None
    (tmp_path / "bindery.toml").write_text('program = "x"\n')
    assert find_bindery_config() == tmp_path / "bindery.toml"


def test_find_config_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("program: x\n")
    monkeypatch.setenv("BINDERY_CONFIG", str(path))
    assert find_bindery_config() == path


def test_bootstrap_adds_config_dir_to_path(tmp_path, monkeypatch):
    monkeypatch.delenv("BINDERY_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "path", list(sys.path))
    (tmp_path / "bindery.yaml").write_text("program: x\n")
    assert bootstrap() == tmp_path / "bindery.yaml"
    assert str(tmp_path) in sys.path


def test_default_application_has_init():
    app = default_application()
    assert "init" in app.commands
    assert app.commands.resolve("init").get_argument(0).dest == "name"


def test_main_init_creates_project(tmp_path, monkeypatch):
    monkeypatch.delenv("BINDERY_CONFIG", raising=False)
    monkeypatch.setattr("bindery.__main__.setup_logging", lambda: None)
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as excinfo:
        main(["init", "sample"])
    assert excinfo.value.code == 0
    assert (tmp_path / "sample" / "bindery.yaml").is_file()


def test_main_reports_broken_config(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("BINDERY_CONFIG", raising=False)
    monkeypatch.setattr("bindery.__main__.setup_logging", lambda: None)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "bindery.yaml").write_text("- not a mapping\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 2
    assert "Could not load" in capsys.readouterr().err
