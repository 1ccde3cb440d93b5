"""
Unit Tests for Configuration and Time Utilities
"""
import pytest

from voicedash.core.config import ConfigManager
from voicedash.utils.time_utils import appointment_epoch, parse_iso_timestamp


class TestConfigManager:

    def test_defaults_loaded(self):
        config = ConfigManager(env="production")

        assert config.get("cache.ttl.enhanced_data") == 1800
        assert config.get("scheduling_triggers.trigger_type") == "appointment-scheduled"
        assert config.get("missing.key", "fallback") == "fallback"

    def test_environment_override(self):
        config = ConfigManager(env="development")
        assert config.get("cache.default_ttl") == 60

    def test_env_var_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ENRICH_URL", "https://enrich.internal")
        (tmp_path / "default.yaml").write_text(
            "addons:\n  enhanced_data:\n    base_url: ${ENRICH_URL}\n"
        )

        config = ConfigManager(env="test", config_dir=tmp_path)

        assert config.get("addons.enhanced_data.base_url") == "https://enrich.internal"

    def test_get_section(self):
        config = ConfigManager(env="production")

        assert config.get_section("cache.ttl")["recordings"] == 300
        assert config.get_section("nope") == {}


class TestTimeUtils:

    def test_iso_with_z(self):
        assert parse_iso_timestamp("2024-05-01T10:00:00Z").utcoffset().total_seconds() == 0

    @pytest.mark.parametrize("value", [None, "", "yesterday", 12345])
    def test_iso_invalid(self, value):
        assert parse_iso_timestamp(value) is None

    @pytest.mark.parametrize("time_str", ["2:00 PM", "2:00PM", "2 pm", "2p.m.", "14:00", "14:00:00"])
    def test_appointment_formats(self, time_str):
        assert appointment_epoch("2024-06-02", time_str) == 1717336800

    def test_appointment_unparsable(self):
        assert appointment_epoch("2024-06-02", "sometime") is None
        assert appointment_epoch(None, "2:00 PM") is None

    def test_appointment_needs_iso_date(self):
        assert appointment_epoch("June 2, 2024", "2:00 PM") is None
        assert appointment_epoch("06/02/2024", "2:00 PM") is None
