"""Tests for configuration loading and validation."""

import json

import pytest
import yaml

from molsep.core.exceptions import ConfigurationError
from molsep.utils.config import (
    create_default_configuration, load_configuration, merge_configurations,
    save_configuration, validate_configuration_schema
)


class TestValidation:

    def test_default_configuration_is_valid(self):
        result = validate_configuration_schema(create_default_configuration())
        assert result.is_valid
        assert result.errors == []

    def test_unsupported_strategy(self):
        config = create_default_configuration()
        config["separation"]["strategy"] = "cos"
        result = validate_configuration_schema(config)
        assert not result.is_valid
        assert "unsupported molecule separation strategy" in result.errors[0]

    @pytest.mark.parametrize("threads", [0, -2, "4", True])
    def test_invalid_threads(self, threads):
        config = create_default_configuration()
        config["resources"]["threads"] = threads
        assert not validate_configuration_schema(config).is_valid

    def test_missing_section_is_a_warning(self):
        config = create_default_configuration()
        del config["output"]
        result = validate_configuration_schema(config)
        assert result.is_valid
        assert any("output" in warning for warning in result.warnings)


class TestLoadSave:

    def test_round_trip_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        save_configuration(create_default_configuration(), path)
        assert load_configuration(path) == create_default_configuration()

    def test_partial_json_is_merged_with_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"resources": {"threads": 4}}))
        config = load_configuration(path)
        assert config["resources"]["threads"] == 4
        assert config["separation"]["strategy"] == "bc"

    def test_invalid_strategy_in_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"separation": {"strategy": "k3"}}))
        with pytest.raises(ConfigurationError) as excinfo:
            load_configuration(path)
        assert excinfo.value.config_path == path

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "config.txt"
        path.write_text("separation: {}")
        with pytest.raises(ConfigurationError, match="Unsupported config file format"):
            load_configuration(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("separation: [unclosed")
        with pytest.raises(ConfigurationError, match="Error parsing"):
            load_configuration(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_configuration(tmp_path / "absent.yaml")


def test_merge_overrides_nested_values():
    merged = merge_configurations(
        create_default_configuration(), {"logging": {"level": "DEBUG"}}
    )
    assert merged["logging"]["level"] == "DEBUG"
    assert merged["logging"]["file"] is None
