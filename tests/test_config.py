"""Client settings tests."""

from datetime import timedelta
from pathlib import Path

import pytest

from paddle_sdk.config import PRODUCTION, SANDBOX, PaddleConfig, load_config
from paddle_sdk.exceptions import ConfigError, ConfigErrorCodes


def test_defaults() -> None:
    """Default settings target the sandbox."""
    config = PaddleConfig()
    assert config.environment == "sandbox"
    assert config.base_url_for() == SANDBOX
    assert config.timeout_seconds == 10.0
    assert config.max_variance() == timedelta(seconds=5)


def test_production_environment() -> None:
    """The production environment selects the production URL."""
    assert PaddleConfig(environment="production").base_url_for() == PRODUCTION


def test_base_url_override() -> None:
    """An explicit base_url wins and loses its trailing slash."""
    config = PaddleConfig(environment="production", base_url="http://localhost:9000/")
    assert config.base_url_for() == "http://localhost:9000"


def test_max_variance_disabled() -> None:
    """A null variance disables the timestamp check."""
    assert PaddleConfig(max_variance_seconds=None).max_variance() is None


def test_load_config_top_level(tmp_path: Path) -> None:
    """Settings at the top level of the file are loaded."""
    config_file = tmp_path / "paddle.yaml"
    config_file.write_text("api_key: pdl_test\nenvironment: production\n")
    config = load_config(config_file)
    assert config.api_key == "pdl_test"
    assert config.base_url_for() == PRODUCTION


def test_load_config_paddle_section(tmp_path: Path) -> None:
    """Settings under a paddle key are loaded."""
    config_file = tmp_path / "app.yaml"
    config_file.write_text(
        "paddle:\n  api_key: pdl_test\n  webhook_secret: whsec_x\n  max_variance_seconds: 30\n"
    )
    config = load_config(config_file)
    assert config.webhook_secret == "whsec_x"
    assert config.max_variance() == timedelta(seconds=30)


def test_load_config_file_not_found(tmp_path: Path) -> None:
    """A missing file raises READ_FILE."""
    with pytest.raises(ConfigError) as exc_info:
        load_config(tmp_path / "missing.yaml")
    assert exc_info.value.code == ConfigErrorCodes.READ_FILE


def test_load_config_invalid_yaml(tmp_path: Path) -> None:
    """Invalid YAML raises PARSE_YAML."""
    bad_file = tmp_path / "bad.yaml"
    bad_file.write_text("paddle: {invalid: yaml: content:\n")
    with pytest.raises(ConfigError) as exc_info:
        load_config(bad_file)
    assert exc_info.value.code == ConfigErrorCodes.PARSE_YAML


def test_load_config_validation_error(tmp_path: Path) -> None:
    """An unknown environment raises VALIDATION."""
    bad_file = tmp_path / "bad.yaml"
    bad_file.write_text("environment: staging\n")
    with pytest.raises(ConfigError) as exc_info:
        load_config(bad_file)
    assert exc_info.value.code == ConfigErrorCodes.VALIDATION


def test_load_config_not_a_mapping(tmp_path: Path) -> None:
    """A YAML list raises VALIDATION."""
    bad_file = tmp_path / "list.yaml"
    bad_file.write_text("- a\n- b\n")
    with pytest.raises(ConfigError) as exc_info:
        load_config(bad_file)
    assert exc_info.value.code == ConfigErrorCodes.VALIDATION


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings are read from PADDLE_* variables."""
    monkeypatch.setenv("PADDLE_API_KEY", "pdl_env")
    monkeypatch.setenv("PADDLE_ENVIRONMENT", "production")
    monkeypatch.setenv("PADDLE_WEBHOOK_SECRET", "whsec_env")
    monkeypatch.delenv("PADDLE_BASE_URL", raising=False)
    config = PaddleConfig.from_env()
    assert config.api_key == "pdl_env"
    assert config.webhook_secret == "whsec_env"
    assert config.base_url_for() == PRODUCTION


def test_from_env_invalid(monkeypatch: pytest.MonkeyPatch) -> None:
    """An invalid PADDLE_ENVIRONMENT raises VALIDATION."""
    monkeypatch.setenv("PADDLE_ENVIRONMENT", "staging")
    with pytest.raises(ConfigError) as exc_info:
        PaddleConfig.from_env()
    assert exc_info.value.code == ConfigErrorCodes.VALIDATION
