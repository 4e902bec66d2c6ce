# repolens/parser.py
"""Single-file analysis.

:func:`parse_file` turns one path and its text into a :class:`ParsedFile`.
It is synchronous, has no side effects beyond reporting to an optional
observer, and never raises for a single bad file: binary and oversized
inputs come back zero-valued, and an exception inside any extractor yields a
degraded result that keeps only the line count.
"""

from __future__ import annotations

from typing import Optional

from .complexity import count_complexity
from .languages import classify, classify_from_content, is_binary_path
from .manifests import parse_manifest
from .models import ParsedFile
from .observers import AnalysisObserver
from .registry import support_for

__all__ = ["MAX_CONTENT_CHARS", "count_lines", "calculate_complexity", "parse_file"]

MAX_CONTENT_CHARS = 5_000_000


def count_lines(content: str) -> int:
    """Number of lines; a final line without ``\\n`` still counts."""
    if not content:
        return 0
    newlines = content.count("\n")
    return newlines if content.endswith("\n") else newlines + 1


def calculate_complexity(content: str, language: str) -> int:
    """File-level complexity score of *content*.

    The pattern set of *language* is used when it has one; otherwise the
    language is guessed from the content itself, which falls back to
    counting ternaries only.
    """
    support = support_for(language)
    if not support.has_dedicated_patterns:
        support = support_for(classify_from_content(content))
    return count_complexity(content, support.complexity_patterns)


def _analyse(path: str, content: str, language: str) -> ParsedFile:
    support = support_for(language)
    patterns = support.complexity_patterns

    def score(body: str) -> int:
        return count_complexity(body, patterns)

    functions = support.function_extractor(content, score) if support.function_extractor else []
    imports = support.import_extractor(content) if support.import_extractor else []
    exports = support.export_extractor(content) if support.export_extractor else []

    return ParsedFile(
        path=path,
        language=language,
        content=content,
        lines=count_lines(content),
        size=len(content),
        complexity=calculate_complexity(content, language),
        functions=functions,
        imports=imports,
        exports=exports,
        manifest=parse_manifest(path, content),
    )


def parse_file(
    path: str,
    content: str,
    *,
    max_chars: int = MAX_CONTENT_CHARS,
    observer: Optional[AnalysisObserver] = None,
) -> ParsedFile:
    """Analyse one file.  Never raises for problems with the file itself."""

    language = classify(path)

    # Binary or oversized: nothing is analysed, only the size is kept.
    if is_binary_path(path) or len(content) > max_chars:
        return ParsedFile(path=path, language=language, size=len(content))

    try:
        return _analyse(path, content, language)
    except Exception as exc:  # noqa: BLE001
        if observer is not None:
            observer.parse_degraded(path, exc)
        return ParsedFile(
            path=path,
            language=language,
            lines=count_lines(content),
            size=len(content),
        )
