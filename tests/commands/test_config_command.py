"""Unit tests for config commands (view, get, set, reset)."""

import json

from typer.testing import CliRunner

from pomolog.commands.config import app

runner = CliRunner()


class TestConfigView:
    def test_view_table(self, config_service):
        result = runner.invoke(app, ["view"])

        assert result.exit_code == 0
        assert "timer.work_minutes" in result.output
        assert "log.format" in result.output

    def test_view_json(self, config_service, tmp_path):
        result = runner.invoke(app, ["view", "--output", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["timer"] == {"work_minutes": 25, "break_minutes": 5}
        assert data["log"]["format"] == "markdown"
        assert data["log"]["resolved_path"] == str(tmp_path / "journal")


class TestConfigGet:
    def test_get_value(self, config_service):
        result = runner.invoke(app, ["get", "timer.break_minutes"])

        assert result.exit_code == 0
        assert result.output.strip() == "5"

    def test_get_unknown_key(self, config_service):
        result = runner.invoke(app, ["get", "timer.long_break"])

        assert result.exit_code == 2
        assert "not found" in result.output


class TestConfigSet:
    def test_set_value(self, config_service):
        result = runner.invoke(app, ["set", "timer.work_minutes", "50"])

        assert result.exit_code == 0
        assert "Success" in result.output
        assert config_service.config.timer.work_minutes == 50

    def test_set_log_format(self, config_service):
        result = runner.invoke(app, ["set", "log.format", "json"])

        assert result.exit_code == 0
        assert config_service.config.log.format == "json"

    def test_set_invalid_value(self, config_service):
        result = runner.invoke(app, ["set", "timer.work_minutes", "0"])

        assert result.exit_code == 2
        assert "Invalid value" in result.output
        assert config_service.config.timer.work_minutes == 25

    def test_set_non_integer(self, config_service):
        result = runner.invoke(app, ["set", "timer.break_minutes", "soon"])

        assert result.exit_code == 2
        assert "must be an integer" in result.output

    def test_set_unknown_key(self, config_service):
        result = runner.invoke(app, ["set", "theme", "dark"])

        assert result.exit_code == 2
        assert "Unknown setting" in result.output


class TestConfigReset:
    def test_reset_with_yes(self, config_service):
        config_service.set("timer.work_minutes", 40)

        result = runner.invoke(app, ["reset", "timer.work_minutes", "--yes"])

        assert result.exit_code == 0
        assert config_service.config.timer.work_minutes == 25

    def test_reset_confirmed(self, config_service):
        config_service.set("log.format", "tsv")

        result = runner.invoke(app, ["reset"], input="y\n")

        assert result.exit_code == 0
        assert config_service.config.log.format == "markdown"
        assert config_service.config.log.path is None

    def test_reset_cancelled(self, config_service):
        config_service.set("timer.break_minutes", 10)

        result = runner.invoke(app, ["reset"], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert config_service.config.timer.break_minutes == 10
