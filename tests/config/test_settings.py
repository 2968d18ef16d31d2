"""Tests for OperatorSettings."""

from datetime import timedelta

from pydantic import ValidationError
import pytest

from ecr_secret_operator.config.base import LogFormat, OperatorSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the caller's environment and any .env file."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "ECR_SECRET_OPERATOR_MAX_AGE",
        "ECR_SECRET_OPERATOR_CONFIG_FILE",
        "ECR_SECRET_OPERATOR_LOG_LEVEL",
        "ECR_SECRET_OPERATOR_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)


class TestOperatorSettings:
    """Tests for OperatorSettings."""

    def test_defaults(self):
        settings = OperatorSettings()

        assert settings.config_file == "/etc/ecr-secret-operator/config.toml"
        assert settings.max_age == timedelta(hours=4)
        assert settings.scan_interval == timedelta(minutes=1)
        assert settings.workers == 2
        assert settings.log_level == "INFO"
        assert settings.log_format is LogFormat.TEXT

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("4h", timedelta(hours=4)),
            ("12h0m0s", timedelta(hours=12)),
            ("90m", timedelta(minutes=90)),
            (3600, timedelta(hours=1)),
        ],
    )
    def test_max_age_formats(self, value, expected):
        assert OperatorSettings(max_age=value).max_age == expected

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ECR_SECRET_OPERATOR_MAX_AGE", "2h")
        monkeypatch.setenv("ECR_SECRET_OPERATOR_WORKERS", "4")

        settings = OperatorSettings()

        assert settings.max_age == timedelta(hours=2)
        assert settings.workers == 4

    def test_log_level_normalised(self):
        assert OperatorSettings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            OperatorSettings(log_level="chatty")

    def test_invalid_max_age(self):
        with pytest.raises(ValidationError):
            OperatorSettings(max_age="soon")

    def test_workers_must_be_positive(self):
        with pytest.raises(ValidationError):
            OperatorSettings(workers=0)
