"""Unit tests for configuration management."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from fieldverify.config import (
    CONFIG_FILE_NAME,
    LogLevel,
    OutputFormat,
    VerifierConfig,
    VerifyConfig,
    create_default_config,
    find_config_file,
    load_config,
)


class TestVerifyConfig:
    """Test complete VerifyConfig model."""

    def test_defaults(self):
        config = VerifyConfig()
        assert config.verifier.tag_key == "verify"
        assert config.verifier.strict_keywords is False
        assert config.output.format == OutputFormat.TABLE.value
        assert config.logging.level == LogLevel.WARN.value

    def test_config_from_dict(self):
        config_data = {
            "verifier": {"tagKey": "check", "strictKeywords": True},
            "output": {"format": "json"},
            "logging": {"level": "debug"}
        }

        config = VerifyConfig(**config_data)
        assert config.verifier.tag_key == "check"
        assert config.verifier.strict_keywords is True
        assert config.output.format == "json"
        assert config.logging.level == "debug"

    def test_populate_by_name(self):
        config = VerifierConfig(tag_key="rules")
        assert config.tag_key == "rules"

    def test_empty_tag_key_rejected(self):
        with pytest.raises(ValidationError):
            VerifierConfig(tag_key="")

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            VerifyConfig(unknown={"a": 1})

    def test_invalid_format(self):
        with pytest.raises(ValidationError):
            VerifyConfig(output={"format": "xml"})


class TestLoadConfig:
    """Test loading configuration files."""

    def test_load_from_path(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text(json.dumps({"verifier": {"tagKey": "check"}}), encoding="utf-8")

        config = load_config(config_file)
        assert config.verifier.tag_key == "check"

    def test_missing_explicit_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "nope.json")

    def test_no_file_found_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        if find_config_file() is not None:
            pytest.skip("a .fieldverify.json exists above the temp directory")

        assert load_config() == create_default_config()

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(config_file)

    def test_non_object_json(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ValueError, match="must contain a JSON object"):
            load_config(config_file)

    def test_invalid_content(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text(json.dumps({"verifier": {"tagKey": ""}}), encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(config_file)

    def test_search_from_cwd(self, tmp_path, monkeypatch):
        (tmp_path / CONFIG_FILE_NAME).write_text(json.dumps({"logging": {"level": "info"}}), encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        config = load_config()
        assert config.logging.level == "info"


class TestFindConfigFile:
    """Test searching for the configuration file."""

    def test_found_in_parent(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text("{}", encoding="utf-8")
        nested = tmp_path / "child"
        nested.mkdir()

        assert find_config_file(nested) == config_file.resolve()

    def test_found_in_start_dir(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text("{}", encoding="utf-8")

        assert find_config_file(tmp_path) == Path(config_file).resolve()

    def test_not_found(self, tmp_path):
        if find_config_file(tmp_path) is not None:
            pytest.skip("a .fieldverify.json exists above the temp directory")

        assert find_config_file(tmp_path) is None
