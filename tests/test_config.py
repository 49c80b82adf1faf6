import pytest

from token_server.config import ServerOptions, load_config
from token_server.duration.errors import DurationMustLieBetween
from token_server.duration.human import HumanDuration


def test_load_config_parses_options(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("""
port: 4000
purge_interval: 5min
token_lifetime: 1day 12h
dump_enabled: true
shutdown_enabled: false
""")

    options = load_config(str(config_file))

    assert options.port == 4000
    assert options.purge_interval == HumanDuration.parse("5min")
    assert options.token_lifetime == HumanDuration.parse("36h")
    assert options.dump_enabled is True
    assert options.shutdown_enabled is False


def test_load_config_empty_file_keeps_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("")

    assert load_config(str(config_file)) == ServerOptions()


def test_load_config_substitutes_env_vars(tmp_path, monkeypatch):
    monkeypatch.setenv("TOKEN_LIFETIME", "3h")
    monkeypatch.setenv("ALLOW_SHUTDOWN", "yes")

    config_file = tmp_path / "config.yaml"
    config_file.write_text("""
token_lifetime: ${TOKEN_LIFETIME}
shutdown_enabled: ${ALLOW_SHUTDOWN}
""")

    options = load_config(str(config_file))

    assert options.token_lifetime == HumanDuration.parse("3h")
    assert options.shutdown_enabled is True


def test_load_config_raises_on_missing_env_var(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("""
token_lifetime: ${MISSING_VAR}
""")

    with pytest.raises(ValueError, match="MISSING_VAR"):
        load_config(str(config_file))


def test_load_config_validates_duration_range(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("token_lifetime: 90day\n")

    with pytest.raises(DurationMustLieBetween):
        load_config(str(config_file))


def test_load_config_validates_port(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("port: 80\n")

    with pytest.raises(ValueError, match="Port must be between"):
        load_config(str(config_file))


def test_server_options_str():
    assert str(ServerOptions()) == (
        "Port: 3666, Token lifetime: 2h, Purge cycle: 1min, "
        "HEAD /dump disabled, GET /shutdown disabled"
    )


def test_server_options_str_uses_expanded_durations():
    options = ServerOptions(
        token_lifetime=HumanDuration.parse("90min"),
        dump_enabled=True,
    )
    assert "Token lifetime: 1h 30min" in str(options)
    assert "HEAD /dump enabled" in str(options)
