"""Tests for configuration loading and validation."""

import pytest

from campaign_results.config.defaults import RID_ALPHABET, RID_LENGTH, get_default_config
from campaign_results.config.loader import ConfigLoader
from campaign_results.config.validation import ConfigValidator


class TestDefaultConfig:
    """Built-in defaults."""

    def test_defaults(self):
        config = get_default_config()

        assert config.identifier.max_attempts == 20
        assert not hasattr(config.identifier, "length")
        assert config.geo.database_path == "static/db/geolite2-city.mmdb"
        assert config.store.max_save_attempts == 5
        assert config.logging.level == "INFO"

    def test_immutable(self):
        config = get_default_config()

        with pytest.raises(AttributeError):
            config.identifier.max_attempts = 8


class TestConfigLoader:
    """YAML overrides merged over defaults."""

    def test_no_file_uses_defaults(self, tmp_path):
        loader = ConfigLoader.create(tmp_path)

        assert loader.load_overrides() == {}
        assert loader.build_config() == get_default_config()

    def test_yaml_overrides(self, tmp_path):
        (tmp_path / "tracker.yaml").write_text(
            "store:\n"
            "  database_path: /var/lib/tracker/results.db\n"
            "geo:\n"
            "  enabled: false\n"
        )

        config = ConfigLoader.create(tmp_path).build_config()

        assert config.store.database_path == "/var/lib/tracker/results.db"
        assert config.store.max_save_attempts == 5
        assert config.geo.enabled is False
        assert config.geo.database_path == "static/db/geolite2-city.mmdb"

    def test_explicit_overrides_win(self, tmp_path):
        (tmp_path / "tracker.yaml").write_text("identifier:\n  max_attempts: 10\n")

        config = ConfigLoader.create(tmp_path).build_config(
            {"identifier": {"max_attempts": 3}}
        )

        assert config.identifier.max_attempts == 3

    def test_empty_file(self, tmp_path):
        (tmp_path / "tracker.yaml").write_text("")

        assert ConfigLoader.create(tmp_path).load_overrides() == {}


class TestConfigValidator:
    """Validation of merged configuration."""

    def test_defaults_are_valid(self, tmp_path):
        assert ConfigValidator.validate_config(ConfigLoader.create(tmp_path).load_config()) == []

    @pytest.mark.parametrize("params,field", [
        ({"length": 7}, "identifier.length"),
        ({"length": 1}, "identifier.length"),
        ({"alphabet": RID_ALPHABET}, "identifier.alphabet"),
        ({"alphabet": "ab"}, "identifier.alphabet"),
        ({"max_attempts": -1}, "identifier.max_attempts"),
        ({"seed": 4}, "identifier.seed"),
    ])
    def test_identifier_params(self, params, field):
        errors = ConfigValidator.validate_identifier_params(params)

        assert [e.field for e in errors] == [field]

    def test_identifier_format_is_fixed(self):
        errors = ConfigValidator.validate_identifier_params({"length": RID_LENGTH, "max_attempts": 5})

        assert len(errors) == 1
        assert errors[0].field == "identifier.length"
        assert errors[0].message == "Fixed identifier format, not configurable"

    def test_store_params(self):
        errors = ConfigValidator.validate_store_params({
            "database_path": "",
            "max_save_attempts": 0,
            "timeout_seconds": 0,
        })

        assert {e.field for e in errors} == {
            "store.database_path", "store.max_save_attempts", "store.timeout_seconds"
        }

    def test_geo_params(self):
        errors = ConfigValidator.validate_geo_params({"enabled": "yes", "url": "x"})

        assert {e.field for e in errors} == {"geo.enabled", "geo.url"}

    def test_logging_params(self):
        assert ConfigValidator.validate_logging_params({"level": "debug"}) == []

        errors = ConfigValidator.validate_logging_params({"level": "LOUD", "format_json": 1})

        assert {e.field for e in errors} == {"logging.level", "logging.format_json"}

    def test_unknown_and_malformed_sections(self):
        errors = ConfigValidator.validate_config({"metrics": {}, "store": "results.db"})

        assert [(e.field, e.message) for e in errors] == [
            ("metrics", "Unknown configuration section"),
            ("store", "Must be a mapping"),
        ]
