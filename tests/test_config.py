import pytest

from yamlzoom.core.config import ZoomConfig
from yamlzoom.core.errors import ConfigError


def test_defaults():
    config = ZoomConfig()
    assert config.header_prefix == "# YAML Path: "
    assert config.inference == "position"
    assert config.fallback_inference == "value"
    assert (config.mapping_indent, config.sequence_indent, config.sequence_dash_offset) == (2, 4, 2)


@pytest.mark.parametrize("overrides", [
    {"inference": "telepathy"},
    {"fallback_inference": "guess"},
    {"header_prefix": "YAML Path: "},
    {"mapping_indent": 1},
    {"sequence_indent": 12},
    {"sequence_dash_offset": -1},
    {"sequence_dash_offset": 4},
    {"width": 0},
    {"log_level": "LOUD"},
])
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ConfigError):
        ZoomConfig(**overrides)


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ConfigError, match="colour"):
        ZoomConfig.from_mapping({"inference": "value", "colour": "red"})


def test_load_from_file(tmp_path):
    config_file = tmp_path / "yamlzoom.yaml"
    config_file.write_text("inference: line\nfallback_inference: null\nlog_level: debug\n")

    config = ZoomConfig.load(config_file)
    assert config.inference == "line"
    assert config.fallback_inference is None
    assert config.log_level == "debug"


def test_missing_file_gives_defaults(tmp_path):
    assert ZoomConfig.load(tmp_path / "absent.yaml") == ZoomConfig()


def test_malformed_file(tmp_path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("inference: [position\n")
    with pytest.raises(ConfigError):
        ZoomConfig.load(config_file)

    config_file.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        ZoomConfig.load(config_file)
