from pathlib import Path

import pytest
from pydantic import ValidationError

from repolens.config import (
    CONFIG_FILENAME,
    AnalyzerSettings,
    load_config,
    merge_options,
    settings_from_options,
)


def test_load_config_missing(tmp_path: Path):
    assert load_config(tmp_path) == {}


def test_load_config_valid(tmp_path: Path):
    (tmp_path / CONFIG_FILENAME).write_text("analyze:\n  batch_size: 10\n  extra_exclude_dirs: [vendor]\n")
    assert load_config(tmp_path) == {"analyze": {"batch_size": 10, "extra_exclude_dirs": ["vendor"]}}


@pytest.mark.parametrize("content", ["analyze: [unclosed", "- just\n- a list\n"])
def test_load_config_malformed_is_ignored(tmp_path: Path, content: str):
    (tmp_path / CONFIG_FILENAME).write_text(content)
    assert load_config(tmp_path) == {}


def test_cli_values_override_config():
    config = {"analyze": {"batch_size": 10, "batch_delay": 2.0}}
    merged = merge_options(config, "analyze", {"batch_size": 3, "batch_delay": None})
    assert merged == {"batch_size": 3, "batch_delay": 2.0}


def test_zero_is_a_real_cli_value():
    merged = merge_options({"analyze": {"batch_delay": 2.0}}, "analyze", {"batch_delay": 0.0})
    assert merged["batch_delay"] == 0.0


def test_defaults():
    settings = AnalyzerSettings()
    assert settings.batch_size == 5
    assert settings.batch_delay == 1.0
    assert settings.max_content_chars == 5_000_000
    assert "node_modules" in settings.excluded_dir_names


def test_invalid_settings_rejected():
    with pytest.raises(ValidationError):
        AnalyzerSettings(batch_size=0)
    with pytest.raises(ValidationError):
        AnalyzerSettings(batch_delay=-1)


def test_settings_from_options_skips_bad_values():
    settings = settings_from_options({"batch_size": 0, "batch_delay": 0.5, "unknown": True})
    assert settings.batch_size == 5
    assert settings.batch_delay == 0.5


def test_extra_exclude_dirs_are_lowercased():
    settings = settings_from_options({"extra_exclude_dirs": ["Vendor"]})
    assert "vendor" in settings.excluded_dir_names
    assert "node_modules" in settings.excluded_dir_names
