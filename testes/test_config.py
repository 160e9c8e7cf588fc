import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
yaml = pytest.importorskip("yaml")

from docs2gutenberg.config import (
    DEFAULT_CONFIG_TEMPLATE,
    ConverterConfig,
    PolicySetting,
    build_config,
    load_config,
)
from docs2gutenberg.utils.errors import ConfigError


def test_defaults():
    config = ConverterConfig()
    assert config.mode == "relaxed"
    assert config.keep_classes is False
    assert config.inline_styles is True
    assert config.output_format == "html"
    assert config.stop_on_error is False
    assert config.policies["addDisclaimer"].enabled is False
    assert config.policy_config()["requireH2"] == {"enabled": True, "options": {"minCount": 1}}


def test_camel_case_aliases():
    config = ConverterConfig.model_validate({"keepClasses": True, "outputFormat": "json"})
    assert config.keep_classes and config.output_format == "json"
    dumped = ConverterConfig(stop_on_error=True).model_dump(by_alias=True)
    assert dumped["stopOnError"] is True


def test_missing_path_gives_defaults(tmp_path):
    assert load_config(None) == ConverterConfig()
    assert load_config(str(tmp_path / "missing.yaml")) == ConverterConfig()


def test_yaml_file_replaces_top_level_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("mode: strict\nkeepClasses: true\npolicies:\n  requireH2: false\n", encoding="utf-8")
    config = load_config(str(path))
    assert config.mode == "strict"
    assert config.keep_classes is True
    policies = config.policy_config()
    assert policies == {"requireH2": False}


def test_json_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"outputFormat": "json", "policies": {"minImageCount": {"options": {"minCount": 2}}}}', encoding="utf-8")
    config = load_config(str(path))
    assert config.output_format == "json"
    setting = config.policies["minImageCount"]
    assert isinstance(setting, PolicySetting)
    # an entry without "enabled" stays off
    assert setting.enabled is False
    assert setting.options == {"minCount": 2}
    assert config.policy_config()["minImageCount"] == {"enabled": False, "options": {"minCount": 2}}


def test_shipped_example_config_loads():
    config = load_config(os.path.join(PROJECT_ROOT, "config", "converter_config.json"))
    assert config.mode == "strict"
    assert config.policy_config()["removeBeforeH1"] is True


@pytest.mark.parametrize(
    "filename,content",
    [
        ("bad.json", "{not json"),
        ("list.yaml", "- a\n- b\n"),
        ("mode.yaml", "mode: loud\n"),
        ("fmt.json", '{"outputFormat": "xml"}'),
    ],
)
def test_invalid_files_raise_config_error(tmp_path, filename, content):
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_empty_yaml_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == ConverterConfig()


def test_build_config_overrides():
    config = build_config({"mode": "strict", "stopOnError": True})
    assert config.mode == "strict" and config.stop_on_error
    with pytest.raises(ConfigError):
        build_config({"inlineStyles": "sometimes"})


def test_default_template_is_valid():
    config = build_config(yaml.safe_load(DEFAULT_CONFIG_TEMPLATE))
    policies = config.policy_config()
    assert set(policies) == {
        "removeBeforeH1",
        "removeInternalNotes",
        "forbiddenTags",
        "requireH2",
        "minImageCount",
        "addDisclaimer",
    }
    assert policies["addDisclaimer"]["enabled"] is False
    assert policies["forbiddenTags"]["options"]["tags"] == ["script", "iframe", "object", "embed"]
