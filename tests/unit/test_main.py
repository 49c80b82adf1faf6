from unittest.mock import MagicMock

import pytest

from token_server import main as main_module
from token_server.config import ServerOptions
from token_server.duration.human import HumanDuration
from token_server.main import build_parser, resolve_options


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch):
    monkeypatch.delenv("CONFIG_PATH", raising=False)


def test_defaults():
    args = build_parser().parse_args([])

    assert resolve_options(args) == ServerOptions()


def test_parses_durations():
    args = build_parser().parse_args(["--token-lifetime", "3h", "--purge-interval", "90s"])

    assert args.token_lifetime == HumanDuration.parse("3h")
    assert args.purge_interval == HumanDuration.parse("90s")


def test_duration_out_of_range_is_usage_error(capsys):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--purge-interval", "2h"])

    assert "Duration must lie between 1500ms and 90min" in capsys.readouterr().err


def test_duration_syntax_error_is_usage_error(capsys):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--token-lifetime", "soon"])

    assert "Duration must be specified" in capsys.readouterr().err


def test_port_must_be_at_least_3000(capsys):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--port", "80"])

    assert "Port must be between 3000 and 65535" in capsys.readouterr().err


def test_port_must_be_numeric():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-p", "http"])


def test_switches():
    args = build_parser().parse_args(["--dump-enabled", "--shutdown-enabled", "-p", "4000"])
    options = resolve_options(args)

    assert options.dump_enabled is True
    assert options.shutdown_enabled is True
    assert options.port == 4000


def test_help_shows_ranges():
    help_text = build_parser().format_help()

    assert "must be between 1500ms and 2 months" in help_text
    assert "must be between 1500ms and 90min" in help_text


def test_flags_override_config(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("""
port: 4000
token_lifetime: 1h
dump_enabled: true
""")

    args = build_parser().parse_args(["--config", str(config_file), "--token-lifetime", "3h"])
    options = resolve_options(args)

    assert options.port == 4000
    assert options.token_lifetime == HumanDuration.parse("3h")
    assert options.dump_enabled is True
    assert options.shutdown_enabled is False


def test_config_path_from_env(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("port: 5000\n")
    monkeypatch.setenv("CONFIG_PATH", str(config_file))

    options = resolve_options(build_parser().parse_args([]))

    assert options.port == 5000


def test_missing_config_file(tmp_path):
    args = build_parser().parse_args(["--config", str(tmp_path / "missing.yaml")])

    with pytest.raises(FileNotFoundError, match="Config file not found"):
        resolve_options(args)


def test_main_exits_on_bad_config(tmp_path, capsys):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("token_lifetime: 1ms\n")

    with pytest.raises(SystemExit) as exc_info:
        main_module.main(["--config", str(config_file)])

    assert exc_info.value.code == 1
    assert "Configuration error" in capsys.readouterr().err


def test_main_runs_uvicorn(monkeypatch):
    server_cls = MagicMock()
    config_cls = MagicMock()
    monkeypatch.setattr(main_module.uvicorn, "Server", server_cls)
    monkeypatch.setattr(main_module.uvicorn, "Config", config_cls)

    main_module.main(["--port", "4000", "--shutdown-enabled"])

    _, kwargs = config_cls.call_args
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 4000
    server_cls.return_value.run.assert_called_once_with()
