"""Unit tests for the main entry point.

Tests the main() function including:
- CLI argument parsing
- Log level priority (CLI > env > config)
- Configuration check mode
- Server startup wiring
- Exit code handling
"""

from unittest.mock import patch

import pytest

from support_mailer.config.environment import EnvironmentConfig
from support_mailer.config.exceptions import ConfigurationError
from support_mailer.config.models import AppConfig
from support_mailer.main import build_parser, load_runtime_config, main


def make_env_config(log_level=None):
    return EnvironmentConfig(
        supabase_url="https://project.supabase.co",
        supabase_anon_key="anon-key",
        email_api_key="server-token",
        log_level=log_level,
    )


class TestLoadRuntimeConfig:
    """Test suite for load_runtime_config helper."""

    def test_cli_level_wins(self):
        app_config = AppConfig.model_validate({"logging": {"level": "ERROR"}})
        with patch("support_mailer.main.load_config", return_value=(app_config, make_env_config("WARNING"))):
            _, env_config = load_runtime_config(None, "DEBUG")

        assert env_config.log_level == "DEBUG"

    def test_env_level_beats_config_file(self):
        app_config = AppConfig.model_validate({"logging": {"level": "ERROR"}})
        with patch("support_mailer.main.load_config", return_value=(app_config, make_env_config("WARNING"))):
            _, env_config = load_runtime_config(None, None)

        assert env_config.log_level == "WARNING"

    def test_config_file_level_used_last(self):
        app_config = AppConfig.model_validate({"logging": {"level": "ERROR"}})
        with patch("support_mailer.main.load_config", return_value=(app_config, make_env_config())):
            _, env_config = load_runtime_config(None, None)

        assert env_config.log_level == "ERROR"

    def test_reads_yaml_and_environment(self, mock_env_vars, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            """
server:
  port: 9100
email:
  max_retries: 2
logging:
  level: WARNING
"""
        )

        app_config, env_config = load_runtime_config(config_file, None)

        assert app_config.server.port == 9100
        assert app_config.email.max_retries == 2
        assert env_config.supabase_url == "https://project.supabase.co"
        assert env_config.log_level == "WARNING"


class TestBuildParser:
    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.config is None
        assert args.host is None
        assert args.port is None
        assert args.log_level is None
        assert args.check_config is False

    def test_rejects_unknown_log_level(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--log-level", "VERBOSE"])


class TestMain:
    def test_check_config_prints_summary(self, mock_env_vars, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        with patch("support_mailer.main.uvicorn.run") as mock_run:
            exit_code = main(["--check-config"])

        assert exit_code == 0
        mock_run.assert_not_called()
        out = capsys.readouterr().out
        assert "✓ Configuration is valid" in out
        assert "https://project.supabase.co" in out
        assert "no-reply@scitech.support (stream: outbound)" in out
        assert "Delivery attempts: 1" in out

    def test_missing_environment_returns_1(self, mock_env_vars, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("EMAIL_API_KEY")

        exit_code = main(["--check-config"])

        assert exit_code == 1
        err = capsys.readouterr().err
        assert "Configuration Error" in err
        assert "EMAIL_API_KEY" in err

    def test_missing_explicit_config_file_returns_1(self, mock_env_vars, tmp_path, capsys):
        exit_code = main(["--config", str(tmp_path / "absent.yaml"), "--check-config"])

        assert exit_code == 1
        assert "Specified configuration file not found" in capsys.readouterr().err

    def test_starts_server_with_config_values(self):
        app_config = AppConfig.model_validate({"server": {"host": "127.0.0.1", "port": 9000}})
        env_config = make_env_config()

        with patch("support_mailer.main.load_config", return_value=(app_config, env_config)), patch(
            "support_mailer.main.configure_logging"
        ) as mock_logging, patch("support_mailer.main.uvicorn.run") as mock_run:
            exit_code = main([])

        assert exit_code == 0
        mock_logging.assert_called_once_with(level="INFO", format_type="key-value", environment="local")
        app = mock_run.call_args.args[0]
        assert app.state.notification_service.sender == "no-reply@scitech.support"
        assert mock_run.call_args.kwargs == {"host": "127.0.0.1", "port": 9000, "log_config": None}

    def test_cli_overrides_host_and_port(self):
        with patch(
            "support_mailer.main.load_config", return_value=(AppConfig(), make_env_config())
        ), patch("support_mailer.main.configure_logging"), patch("support_mailer.main.uvicorn.run") as mock_run:
            main(["--host", "localhost", "--port", "8081", "--log-level", "DEBUG"])

        assert mock_run.call_args.kwargs["host"] == "localhost"
        assert mock_run.call_args.kwargs["port"] == 8081

    def test_configuration_error_returns_1(self, capsys):
        error = ConfigurationError("Environment variable validation failed", errors=["Missing SUPABASE_URL"])
        with patch("support_mailer.main.load_config", side_effect=error):
            exit_code = main([])

        assert exit_code == 1
        assert "Missing SUPABASE_URL" in capsys.readouterr().err

    def test_keyboard_interrupt_is_clean_exit(self):
        with patch(
            "support_mailer.main.load_config", return_value=(AppConfig(), make_env_config())
        ), patch("support_mailer.main.configure_logging"), patch(
            "support_mailer.main.uvicorn.run", side_effect=KeyboardInterrupt
        ):
            assert main([]) == 0

    def test_unexpected_startup_error_returns_1(self, capsys):
        with patch(
            "support_mailer.main.load_config", return_value=(AppConfig(), make_env_config())
        ), patch("support_mailer.main.configure_logging"), patch(
            "support_mailer.main.NotificationService.from_config", side_effect=RuntimeError("boom")
        ), patch("support_mailer.main.uvicorn.run") as mock_run:
            exit_code = main([])

        assert exit_code == 1
        assert "Fatal error: boom" in capsys.readouterr().err
        mock_run.assert_not_called()
