"""Directory classification by path substrings."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .models import DirectoryInfo, DirectoryType, FileEntry

__all__ = ["classify_directory", "directory_purpose", "analyze_directories"]

# First match wins.
_TYPE_RULES: Sequence[Tuple[DirectoryType, Tuple[str, ...]]] = (
    ("source", ("src", "source")),
    ("test", ("test", "spec", "__tests__")),
    ("documentation", ("doc", "documentation", "docs")),
    ("configuration", ("config", "conf", ".config")),
    ("assets", ("asset", "static", "public", "media")),
    ("build", ("build", "dist", "output", "target")),
    ("scripts", ("script", "tool", "bin")),
)

_PURPOSE_RULES: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("UI Components", ("component",)),
    ("Business Logic Services", ("service",)),
    ("Utility Functions", ("util", "helper", "lib")),
    ("Data Models", ("model", "entity", "schema")),
    ("Request Handlers", ("controller", "handler", "api")),
    ("Middleware Functions", ("middleware",)),
    ("Routing Logic", ("route", "router", "endpoint")),
    ("Test Files", ("test", "spec")),
    ("Configuration Files", ("config", "settings")),
    ("Styling", ("style", "css", "scss")),
    ("Static Assets", ("asset", "image", "icon")),
    ("Documentation", ("doc", "readme")),
)


def classify_directory(path: str) -> DirectoryType:
    lowered = path.lower()
    for kind, needles in _TYPE_RULES:
        if any(needle in lowered for needle in needles):
            return kind
    return "other"


def directory_purpose(path: str) -> str:
    lowered = path.lower()
    for label, needles in _PURPOSE_RULES:
        if any(needle in lowered for needle in needles):
            return label
    return "General Purpose"


def analyze_directories(entries: Sequence[FileEntry]) -> List[DirectoryInfo]:
    """One :class:`DirectoryInfo` per distinct directory path, in listing order."""

    found: Dict[str, DirectoryInfo] = {}
    for entry in entries:
        if entry.type != "dir" or entry.path in found:
            continue
        found[entry.path] = DirectoryInfo(
            name=entry.name,
            path=entry.path,
            type=classify_directory(entry.path),
            purpose=directory_purpose(entry.path),
        )
    return list(found.values())
