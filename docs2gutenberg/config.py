"""Converter configuration and configuration file loading."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Literal, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .policies.engine import normalize_policy_config
from .utils.errors import ConfigError

logger = logging.getLogger(__name__)


class PolicySetting(BaseModel):
    enabled: bool = False
    options: Dict[str, Any] = Field(default_factory=dict)


PolicyEntry = Union[bool, PolicySetting]


def _default_policies() -> Dict[str, PolicyEntry]:
    return {
        "requireH2": PolicySetting(enabled=True, options={"minCount": 1}),
        "minImageCount": PolicySetting(enabled=True, options={"minCount": 0}),
        "forbiddenTags": PolicySetting(enabled=True, options={"tags": ["script", "iframe", "object", "embed"]}),
        "addDisclaimer": PolicySetting(
            enabled=False,
            options={"keywords": ["โปรโมชั่น", "ส่วนลด", "ราคาพิเศษ"]},
        ),
    }


class ConverterConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mode: Literal["strict", "relaxed"] = "relaxed"
    keep_classes: bool = Field(False, alias="keepClasses")
    inline_styles: bool = Field(True, alias="inlineStyles")
    output_format: Literal["html", "json"] = Field("html", alias="outputFormat")
    # with mode "strict", stop running policies after the first failure
    stop_on_error: bool = Field(False, alias="stopOnError")
    policies: Dict[str, PolicyEntry] = Field(default_factory=_default_policies)

    def policy_config(self) -> Dict[str, Any]:
        """Policy entries as plain values, the shape the policy engine reads."""
        out: Dict[str, Any] = {}
        for name, entry in self.policies.items():
            if isinstance(entry, PolicySetting):
                out[name] = {"enabled": entry.enabled, "options": dict(entry.options)}
            else:
                out[name] = entry
        return out


def _read_config_file(path: str) -> Mapping[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.lower().endswith((".yaml", ".yml")):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def build_config(overrides: Optional[Mapping[str, Any]] = None) -> ConverterConfig:
    """Validate ``overrides`` on top of the defaults; top-level keys replace defaults."""
    data = ConverterConfig().model_dump(by_alias=True)
    data.update(overrides or {})
    try:
        return ConverterConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Optional[str] = None) -> ConverterConfig:
    """
    Load a JSON or YAML configuration file.

    A missing ``path`` (or a path that does not exist) yields the default
    configuration.  ``.yaml`` / ``.yml`` files are read with PyYAML,
    anything else as JSON.

    Raises:
        ConfigError: when the file cannot be parsed or does not validate.
    """
    if not path:
        return ConverterConfig()
    if not os.path.exists(path):
        logger.warning("Config file %s not found, using defaults", path)
        return ConverterConfig()
    config = build_config(_read_config_file(path))
    logger.debug("Loaded config from %s (mode=%s)", path, config.mode)
    return config


DEFAULT_CONFIG_TEMPLATE = """\
# docs2gutenberg configuration

# strict: a failed policy marks the conversion unsuccessful
# relaxed: policy failures are only reported
mode: relaxed

# with mode strict, stop running policies after the first failure
stopOnError: false

keepClasses: false
inlineStyles: true

# html or json
outputFormat: html

policies:
  removeBeforeH1:
    enabled: true

  removeInternalNotes:
    enabled: true
    options:
      autoRemove: true
      removeEmptyContainers: true

  forbiddenTags:
    enabled: true
    options:
      tags:
        - script
        - iframe
        - object
        - embed
      autoRemove: true
      keepContent: false

  requireH2:
    enabled: true
    options:
      minCount: 1
      autoGenerate: false

  minImageCount:
    enabled: true
    options:
      minCount: 0
      autoInsertPlaceholder: false

  addDisclaimer:
    enabled: false
    options:
      keywords:
        - โปรโมชั่น
        - ส่วนลด
        - ราคาพิเศษ
      position: end
"""


__all__ = [
    "ConverterConfig",
    "DEFAULT_CONFIG_TEMPLATE",
    "PolicySetting",
    "build_config",
    "load_config",
    "normalize_policy_config",
]
