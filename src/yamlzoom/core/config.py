#!/usr/bin/env python3
"""
YAMLZOOM CONFIGURATION
----------------------
Holds every tunable of the engine in one dataclass. Values can be supplied
programmatically or read from a small YAML file, e.g.:

    inference: position
    fallback_inference: value
    header_prefix: "# YAML Path: "
    log_level: DEBUG

Author: YamlZoom Team
Date: 2026-10-19
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ruamel.yaml import YAML, YAMLError

from yamlzoom.core.errors import ConfigError

logger = logging.getLogger("yamlzoom.config")

INFERENCE_STRATEGIES = ("position", "value", "line")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ZoomConfig:
    """
    Engine settings. Defaults reproduce the behaviour users expect from the
    editor integration: exact position inference with a value-matching
    fallback, 2-space mappings and sequences indented under their key.
    """
    header_prefix: str = "# YAML Path: "
    inference: str = "position"
    fallback_inference: Optional[str] = "value"
    default_language: str = "plaintext"
    mapping_indent: int = 2
    sequence_indent: int = 4
    sequence_dash_offset: int = 2
    # Large enough that the emitter never folds a line
    width: int = 1 << 30
    prompt_message: str = "Enter the YAML path of the field to edit (e.g. .spec.containers[0].image)"
    log_level: str = "INFO"

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raises ConfigError on values the engine cannot work with."""
        if self.inference not in INFERENCE_STRATEGIES:
            raise ConfigError(
                f"Unknown inference strategy '{self.inference}'. "
                f"Expected one of: {', '.join(INFERENCE_STRATEGIES)}"
            )
        if self.fallback_inference is not None and self.fallback_inference not in INFERENCE_STRATEGIES:
            raise ConfigError(f"Unknown fallback inference strategy '{self.fallback_inference}'.")
        if not self.header_prefix.startswith('#'):
            raise ConfigError("header_prefix must start with '#' so the header stays a YAML comment.")
        for name in ("mapping_indent", "sequence_indent"):
            value = getattr(self, name)
            if not isinstance(value, int) or not 1 < value < 10:
                raise ConfigError(f"{name} must be an integer between 2 and 9, got {value!r}.")
        if not isinstance(self.sequence_dash_offset, int) or self.sequence_dash_offset < 0:
            raise ConfigError("sequence_dash_offset must be a non-negative integer.")
        if self.sequence_dash_offset >= self.sequence_indent:
            raise ConfigError("sequence_dash_offset must be smaller than sequence_indent.")
        if not isinstance(self.width, int) or self.width <= 0:
            raise ConfigError("width must be a positive integer.")
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level '{self.log_level}'.")

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "ZoomConfig":
        """Builds a config from a plain mapping, rejecting unknown keys."""
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping of option names to values.")

        known = {f.name for f in fields(cls)}
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            raise ConfigError(f"Unknown configuration option(s): {', '.join(unknown)}")
        return cls(**{str(k): v for k, v in data.items()})

    @classmethod
    def load(cls, config_path: Union[str, Path]) -> "ZoomConfig":
        """
        Reads configuration from a YAML file. A missing file yields the
        defaults; a malformed one raises ConfigError.
        """
        path = Path(config_path)
        if not path.exists():
            logger.info(f"No configuration at {path}, using defaults")
            return cls()

        try:
            data = YAML(typ='safe').load(path.read_text(encoding='utf-8-sig'))
        except YAMLError as e:
            raise ConfigError(f"Failed to parse configuration {path}: {e}")
        return cls.from_mapping(data)
