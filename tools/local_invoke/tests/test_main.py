import sys
from unittest.mock import patch

import pytest

from services.invoker.exceptions import CollaboratorError, NoRegionSpecified, ToolNotConfigured
from tools.local_invoke.main import main


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("tools.local_invoke.main.setup_logging") as mock_setup:
        yield mock_setup


def test_cli_help(capsys):
    """--help works and lists the commands."""
    with patch.object(sys, "argv", ["sam-local-invoke", "--help"]):
        with pytest.raises(SystemExit) as e:
            main()
        assert e.value.code == 0

    captured = capsys.readouterr()
    assert "SAM Local Invoke CLI" in captured.out
    assert "check" in captured.out
    assert "run" in captured.out
    assert "functions" in captured.out


@patch("tools.local_invoke.commands.check.run")
def test_cli_check_dispatch(mock_check_run, no_logging_setup):
    argv = ["sam-local-invoke", "--log-format", "json", "check", "-t", "template.yaml", "-f", "MyFunc"]
    with patch.object(sys, "argv", argv):
        main()

    mock_check_run.assert_called_once()
    args = mock_check_run.call_args[0][0]
    assert args.template == "template.yaml"
    assert args.logical_id == "MyFunc"
    assert args.env == []
    no_logging_setup.assert_called_once_with("json")


@patch("tools.local_invoke.commands.run.run")
def test_cli_run_dispatch(mock_run_run):
    argv = [
        "sam-local-invoke",
        "--parameter",
        "Stage=dev",
        "run",
        "--handler",
        "Handle",
        "--runtime",
        "go1.x",
        "--env",
        "A=1",
        "--env",
        "B=2",
        "--event-file",
        "event.json",
    ]
    with patch.object(sys, "argv", argv):
        main()

    args = mock_run_run.call_args[0][0]
    assert args.parameter == ["Stage=dev"]
    assert args.env == ["A=1", "B=2"]
    assert args.event_file == "event.json"
    assert args.event is None


@patch("tools.local_invoke.commands.functions.run")
def test_cli_functions_dispatch(mock_functions_run):
    with patch.object(sys, "argv", ["sam-local-invoke", "functions", "-t", "template.yaml"]):
        main()
    assert mock_functions_run.call_args[0][0].template == "template.yaml"


def test_cli_event_options_are_exclusive(capsys):
    argv = ["sam-local-invoke", "check", "--event", "{}", "--event-file", "event.json"]
    with patch.object(sys, "argv", argv):
        with pytest.raises(SystemExit) as e:
            main()
    assert e.value.code == 2


@patch("tools.local_invoke.commands.check.run", side_effect=NoRegionSpecified())
def test_cli_configuration_error(mock_check_run, capsys):
    with patch.object(sys, "argv", ["sam-local-invoke", "check"]):
        with pytest.raises(SystemExit) as e:
            main()

    assert e.value.code == 1
    assert "No region specified" in capsys.readouterr().err


@patch("tools.local_invoke.commands.run.run", side_effect=ToolNotConfigured("Install the SAM CLI"))
def test_cli_tool_not_configured_shows_hint(mock_run_run, capsys):
    with patch.object(sys, "argv", ["sam-local-invoke", "run"]):
        with pytest.raises(SystemExit) as e:
            main()

    assert e.value.code == 1
    err = capsys.readouterr().err
    assert "not configured" in err
    assert "Hint: Install the SAM CLI" in err


@patch(
    "tools.local_invoke.commands.check.run",
    side_effect=CollaboratorError("RegionCatalog", RuntimeError("boom")),
)
def test_cli_collaborator_error(mock_check_run, capsys):
    with patch.object(sys, "argv", ["sam-local-invoke", "check"]):
        with pytest.raises(SystemExit) as e:
            main()

    assert e.value.code == 2
    assert "RegionCatalog failed: boom" in capsys.readouterr().err


def test_cli_bad_key_value(capsys):
    with patch.object(sys, "argv", ["sam-local-invoke", "check", "--env", "NOVALUE"]):
        with pytest.raises(SystemExit) as e:
            main()

    assert e.value.code == 2
    assert "--env expects KEY=VALUE" in capsys.readouterr().err


def test_cli_check_end_to_end(project_dir, fake_aws, capsys):
    argv = [
        "sam-local-invoke",
        "--project-dir",
        str(project_dir),
        "check",
        "--template",
        "template.yaml",
        "--logical-id",
        "MyFunc",
        "--region",
        "us-east-1",
        "--credentials",
        "default",
        "--event",
        "{}",
    ]
    with patch.object(sys, "argv", argv):
        main()

    out = capsys.readouterr().out
    assert "[Local] MyFunc" in out
    assert "python3.9" in out
    assert "Configuration is valid" in out
