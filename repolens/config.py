"""Configuration loading and merging utilities for RepoLens.

Per-repository defaults live in a `.repolens.yaml` file placed at the root
of a local repository.  Each top-level key in that YAML maps to a command
name (e.g. `analyze`) and contains the same options that would normally be
provided on the command line.

Command-line flags always take precedence over values coming from the
configuration file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

# ---------------------------------------------------------------------------
# Analyzer settings
# ---------------------------------------------------------------------------

CONFIG_FILENAME = ".repolens.yaml"

# Dependency caches, VCS metadata, build output, coverage reports and
# scratch directories; matched case-insensitively against each path segment.
DEFAULT_EXCLUDE_DIRS: List[str] = [
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    "coverage",
    ".nyc_output",
    "tmp",
    "temp",
    "__pycache__",
    "venv",
    ".venv",
]


class AnalyzerSettings(BaseModel):
    """Tunables of :class:`repolens.aggregator.StructureAnalyzer`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    batch_size: int = Field(default=5, ge=1)
    batch_delay: float = Field(default=1.0, ge=0)
    max_content_chars: int = Field(default=5_000_000, ge=0)
    exclude_dirs: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    extra_exclude_dirs: List[str] = Field(default_factory=list)

    @property
    def excluded_dir_names(self) -> frozenset:
        return frozenset(name.lower() for name in [*self.exclude_dirs, *self.extra_exclude_dirs])


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def load_config(repo_path: Path) -> Dict[str, Any]:
    """Load `.repolens.yaml` from *repo_path*.

    If the file does not exist or cannot be parsed, an empty ``dict`` is
    returned.  Configuration never breaks analysis.
    """
    config_file = Path(repo_path) / CONFIG_FILENAME
    if not config_file.is_file():
        return {}

    try:
        with config_file.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
            if isinstance(data, dict):
                return data
            # Malformed content – we expect a mapping at top level
            return {}
    except (yaml.YAMLError, OSError):
        return {}


def merge_options(
    config: Dict[str, Any],
    command: str,
    cli_args: Dict[str, Any],
) -> Dict[str, Any]:
    """Merge *cli_args* with config file entries for *command*.

    ``cli_args`` is expected to be a mapping of option name → value.  Any
    value other than ``None``, ``""`` or ``False`` overrides the config file.
    """
    merged: Dict[str, Any] = {}

    command_cfg = config.get(command, {})
    if isinstance(command_cfg, dict):
        merged.update(command_cfg)

    for key, value in cli_args.items():
        # Identity checks: ``0`` and ``0.0`` are real values.
        if value is None or value is False or value == "":
            continue
        merged[key] = value

    return merged


def settings_from_options(options: Dict[str, Any]) -> AnalyzerSettings:
    """Build :class:`AnalyzerSettings` from merged options.

    Unknown keys are ignored.  Invalid values from the config file fall back
    to the defaults field by field.
    """
    fields = {k: v for k, v in options.items() if k in AnalyzerSettings.model_fields and v is not None}
    try:
        return AnalyzerSettings(**fields)
    except ValidationError as exc:
        bad = {str(err["loc"][0]) for err in exc.errors() if err.get("loc")}
        return AnalyzerSettings(**{k: v for k, v in fields.items() if k not in bad})


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_EXCLUDE_DIRS",
    "AnalyzerSettings",
    "load_config",
    "merge_options",
    "settings_from_options",
]
