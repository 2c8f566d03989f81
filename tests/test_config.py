import pytest

from job_harvester.config import CrawlConfig

# NOTE: conftest.py already sets INTER_STEP_DELAY_MS, MAX_LOAD_RETRIES and
# DB_PATH in os.environ before any source imports. These tests use
# monkeypatch to override/remove env vars for specific scenarios.


def test_import_config_does_not_crash():
    """Test that importing config module does not raise."""
    import job_harvester.config  # noqa: F401


def test_module_level_values():
    """Test that module-level settings come from the environment."""
    from job_harvester.config import DB_PATH, INTER_STEP_DELAY_MS, MAX_LOAD_RETRIES

    assert INTER_STEP_DELAY_MS == 0
    assert MAX_LOAD_RETRIES == 2
    assert DB_PATH == ":memory:"


def test_defaults_when_env_missing(monkeypatch):
    """Test the defaults used when no environment variables are set."""
    monkeypatch.delenv("INTER_STEP_DELAY_MS", raising=False)
    monkeypatch.delenv("MAX_LOAD_RETRIES", raising=False)
    monkeypatch.delenv("DB_PATH", raising=False)

    from job_harvester.config import _Config

    cfg = _Config()
    assert cfg.INTER_STEP_DELAY_MS == 1000
    assert cfg.MAX_LOAD_RETRIES == 3
    assert cfg.DB_PATH == "jobs.db"


def test_invalid_delay_raises_value_error(monkeypatch):
    """Test that a non-numeric delay raises ValueError on access."""
    monkeypatch.setenv("INTER_STEP_DELAY_MS", "soon")

    from job_harvester.config import _Config

    cfg = _Config()
    with pytest.raises(ValueError, match="INTER_STEP_DELAY_MS must be a non-negative integer"):
        _ = cfg.INTER_STEP_DELAY_MS


def test_negative_retries_raise_value_error(monkeypatch):
    """Test that a negative retry count raises ValueError on access."""
    monkeypatch.setenv("MAX_LOAD_RETRIES", "-1")

    from job_harvester.config import _Config

    cfg = _Config()
    with pytest.raises(ValueError, match="MAX_LOAD_RETRIES"):
        _ = cfg.MAX_LOAD_RETRIES


def test_unknown_module_attribute_raises():
    """Test that unknown module attributes still raise AttributeError."""
    import job_harvester.config as config

    with pytest.raises(AttributeError):
        _ = config.NOT_A_SETTING


def test_crawl_config_defaults():
    """Test the session configuration defaults."""
    config = CrawlConfig()
    assert config.inter_step_delay_ms == 1000
    assert config.max_load_retries == 3
    assert config.step_delay == 1.0


def test_crawl_config_from_settings_ignores_unknown_keys():
    """Test that camelCase settings are recognized and unknown keys ignored."""
    config = CrawlConfig.from_settings(
        {"interStepDelayMs": 250, "maxLoadRetries": 5, "theme": "dark"}
    )
    assert config.inter_step_delay_ms == 250
    assert config.max_load_retries == 5
    assert config.step_delay == 0.25


def test_crawl_config_from_snake_case_settings():
    """Test that snake_case names are accepted as well."""
    config = CrawlConfig.from_settings({"max_load_retries": 1})
    assert config.max_load_retries == 1
    assert config.inter_step_delay_ms == 1000


def test_crawl_config_from_empty_settings():
    """Test that missing settings fall back to defaults."""
    assert CrawlConfig.from_settings(None) == CrawlConfig()


def test_crawl_config_rejects_negative_values():
    """Test that negative values are rejected."""
    with pytest.raises(ValueError):
        CrawlConfig.from_settings({"interStepDelayMs": -5})
