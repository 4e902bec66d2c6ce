# repolens/manifests.py
"""Light-weight readers for package manifests.

Currently supports:
• package.json           (npm / yarn / pnpm)
• package-lock.json      (npm lockfile v1/v2/v3)
• requirements.txt       (pip)
• pyproject.toml         (PEP 621 / Poetry)

The readers work on already-fetched text and stay lenient: versions are
not resolved and marker syntax is not interpreted; we only surface
*dependency names* so the structure summary can list what external
libraries a repository relies on.  Malformed input yields ``None``.
"""

from __future__ import annotations

import json
import re
from pathlib import PurePosixPath
from typing import Any, Callable, Dict, List, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover – fallback for <3.11
    import tomli  # type: ignore

from .models import ManifestInfo

__all__ = [
    "MANIFEST_FILENAMES",
    "parse_package_json",
    "parse_package_lock",
    "parse_requirements_txt",
    "parse_pyproject_toml",
    "parse_manifest",
]

# ---------------------------------------------------------------------------
# Helpers / constants
# ---------------------------------------------------------------------------

# Split a requirement line at the first version operator, extras bracket,
# marker, whitespace or inline comment.
_REQ_SPLIT_RE = re.compile(r"[=<>!~#;\[\s]")


def _keys(value: Any) -> List[str]:
    return list(value.keys()) if isinstance(value, dict) else []


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _table(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _requirement_names(value: Any) -> List[str]:
    """Names from a TOML array of requirement strings; anything else is empty."""
    if not isinstance(value, list):
        return []
    names = (_requirement_name(item) for item in value if isinstance(item, str))
    return [name for name in names if name]


def _requirement_name(line: str) -> Optional[str]:
    line = line.strip()
    if not line or line.startswith(("#", "-")):
        return None
    name = _REQ_SPLIT_RE.split(line, maxsplit=1)[0].strip()
    return name or None


# ---------------------------------------------------------------------------
# Individual manifest parsers
# ---------------------------------------------------------------------------


def parse_package_json(content: str) -> Optional[ManifestInfo]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    return ManifestInfo(
        kind="package-json",
        name=_text(data.get("name")),
        version=_text(data.get("version")),
        dependencies=_keys(data.get("dependencies")),
        dev_dependencies=_keys(data.get("devDependencies")),
    )


def parse_package_lock(content: str) -> Optional[ManifestInfo]:
    """Read the top-level package list of an npm lockfile.

    Lockfile v2/v3 records the root package under ``packages[""]``; v1 only
    has the flat ``dependencies`` map with ``dev`` flags.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None

    deps: List[str] = []
    dev: List[str] = []
    packages = data.get("packages")
    root = packages.get("") if isinstance(packages, dict) else None
    if isinstance(root, dict):
        deps = _keys(root.get("dependencies"))
        dev = _keys(root.get("devDependencies"))
    elif isinstance(data.get("dependencies"), dict):
        for name, meta in data["dependencies"].items():
            (dev if isinstance(meta, dict) and meta.get("dev") else deps).append(name)

    return ManifestInfo(
        kind="package-lock",
        name=_text(data.get("name")),
        version=_text(data.get("version")),
        dependencies=deps,
        dev_dependencies=dev,
    )


def parse_requirements_txt(content: str) -> Optional[ManifestInfo]:
    deps = [name for name in map(_requirement_name, content.splitlines()) if name]
    return ManifestInfo(kind="requirements", dependencies=deps)


def parse_pyproject_toml(content: str) -> Optional[ManifestInfo]:
    try:
        data = tomli.loads(content)
    except tomli.TOMLDecodeError:
        return None

    project = _table(data.get("project"))
    poetry = _table(_table(data.get("tool")).get("poetry"))

    # PEP 621 standard location
    deps = _requirement_names(project.get("dependencies"))
    # Poetry legacy location (``python`` is the interpreter constraint)
    deps.extend(k for k in _keys(poetry.get("dependencies")) if k.lower() != "python")

    dev: List[str] = []
    for group in _table(project.get("optional-dependencies")).values():
        dev.extend(_requirement_names(group))
    dev.extend(_keys(poetry.get("dev-dependencies")))

    return ManifestInfo(
        kind="pyproject",
        name=_text(project.get("name")) or _text(poetry.get("name")),
        version=_text(project.get("version")) or _text(poetry.get("version")),
        dependencies=deps,
        dev_dependencies=dev,
    )


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

_PARSERS: Dict[str, Callable[[str], Optional[ManifestInfo]]] = {
    "package.json": parse_package_json,
    "package-lock.json": parse_package_lock,
    "requirements.txt": parse_requirements_txt,
    "pyproject.toml": parse_pyproject_toml,
}

MANIFEST_FILENAMES = frozenset(_PARSERS)


def parse_manifest(path: str, content: str) -> Optional[ManifestInfo]:
    """Return manifest info when *path* names a known manifest, else ``None``."""

    parser = _PARSERS.get(PurePosixPath(path.replace("\\", "/")).name.lower())
    if parser is None:
        return None
    return parser(content)
