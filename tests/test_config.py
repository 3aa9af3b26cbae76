"""Unit tests for settings loading and metrics path normalization."""
import json
from unittest.mock import Mock

import pytest

from portal.config import Settings, flatten_json_config, load_json_config
from portal.middleware import PrometheusMiddleware


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory with no overriding env vars."""
    monkeypatch.chdir(tmp_path)
    for name in ("CONFIG_FILE", "REDIS_HOST", "REDIS_PORT", "VENUE_TIMEZONE", "MAX_OCCURRENCES"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestSettings:
    """Test Settings priority: env vars > JSON config > defaults."""

    def test_defaults(self, clean_env):
        settings = Settings()

        assert settings.redis_address == "redis:6379"
        assert settings.venue_timezone == "America/New_York"
        assert settings.analytics_day_window == 14
        assert settings.recent_days_window == 7
        assert settings.reviews_recent_days == 30
        assert settings.top_vibe_tags_limit == 4
        assert settings.default_occurrences == 10
        assert settings.max_occurrences == 50

    def test_json_config_file(self, clean_env, monkeypatch):
        config_path = clean_env / "config.json"
        config_path.write_text(json.dumps({
            "_comment": "local",
            "redis": {"redis_host": "localhost", "redis_port": 6390},
            "events": {"max_occurrences": 20},
        }))
        monkeypatch.setenv("CONFIG_FILE", str(config_path))

        settings = Settings()

        assert settings.redis_address == "localhost:6390"
        assert settings.max_occurrences == 20

    def test_env_wins_over_json(self, clean_env, monkeypatch):
        config_path = clean_env / "config.json"
        config_path.write_text(json.dumps({"redis": {"redis_port": 6390}}))
        monkeypatch.setenv("CONFIG_FILE", str(config_path))
        monkeypatch.setenv("REDIS_PORT", "7000")

        assert Settings().redis_port == 7000

    def test_dotenv_wins_over_json(self, clean_env, monkeypatch):
        config_path = clean_env / "config.json"
        config_path.write_text(json.dumps({"redis": {"redis_host": "json-host", "redis_port": 6390}}))
        (clean_env / ".env").write_text("REDIS_PORT=7100\n")
        monkeypatch.setenv("CONFIG_FILE", str(config_path))

        settings = Settings()

        assert settings.redis_port == 7100
        assert settings.redis_host == "json-host"

    def test_missing_or_invalid_file(self, clean_env):
        broken = clean_env / "broken.json"
        broken.write_text("{nope")

        assert load_json_config(str(clean_env / "absent.json")) == {}
        assert load_json_config(str(broken)) == {}

    def test_flatten_skips_comments(self):
        flat = flatten_json_config({"_note": "x", "a": {"b": 1, "c": {"d": 2}}, "e": 3})
        assert flat == {"b": 1, "d": 2, "e": 3}


class TestEndpointNormalization:
    """Test metric label normalization keeps cardinality bounded."""

    @pytest.fixture
    def middleware(self):
        return PrometheusMiddleware(app=Mock())

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/v1/venues/club-42/analytics", "/v1/venues/{id}/analytics"),
            ("/v1/events", "/v1/events"),
            ("/v1/events/3f2a9c", "/v1/events/{id}"),
            ("/v1/events/preview-occurrences", "/v1/events/preview-occurrences"),
            ("/v1/venue/hours", "/v1/venue/hours"),
            ("/", "/"),
        ],
    )
    def test_normalize(self, middleware, path, expected):
        assert middleware._normalize_endpoint(path) == expected
