"""Threshold-based code issues and the test-file heuristic."""

from __future__ import annotations

from typing import Iterable, List

from .models import CodeIssue, ParsedFile

__all__ = [
    "COMPLEXITY_THRESHOLD",
    "LINES_THRESHOLD",
    "FUNCTIONS_THRESHOLD",
    "TEST_MARKERS",
    "issues_for",
    "detect_issues",
    "is_test_path",
    "coverage_percent",
]

COMPLEXITY_THRESHOLD = 15
HIGH_COMPLEXITY = 25
LINES_THRESHOLD = 500
VERY_LARGE_FILE = 1000
FUNCTIONS_THRESHOLD = 20

# Matched case-sensitively against the raw path.
TEST_MARKERS = ("test", "spec", "__tests__", ".test.", ".spec.")


def issues_for(parsed: ParsedFile) -> List[CodeIssue]:
    """Issues raised by one file, in complexity/size/function-count order."""

    issues: List[CodeIssue] = []
    if parsed.complexity > COMPLEXITY_THRESHOLD:
        issues.append(
            CodeIssue(
                type="complexity",
                severity="high" if parsed.complexity > HIGH_COMPLEXITY else "medium",
                message=f"High complexity ({parsed.complexity}) in {parsed.path}",
                file=parsed.path,
            )
        )
    if parsed.lines > LINES_THRESHOLD:
        issues.append(
            CodeIssue(
                type="maintainability",
                severity="medium" if parsed.lines > VERY_LARGE_FILE else "low",
                message=f"Large file ({parsed.lines} lines): {parsed.path}",
                file=parsed.path,
            )
        )
    if len(parsed.functions) > FUNCTIONS_THRESHOLD:
        issues.append(
            CodeIssue(
                type="maintainability",
                severity="low",
                message=f"Many functions ({len(parsed.functions)}) in {parsed.path}",
                file=parsed.path,
            )
        )
    return issues


def detect_issues(files: Iterable[ParsedFile]) -> List[CodeIssue]:
    return [issue for parsed in files for issue in issues_for(parsed)]


def is_test_path(path: str) -> bool:
    return any(marker in path for marker in TEST_MARKERS)


def coverage_percent(test_files: int, total_files: int) -> int:
    """``round(100 * test_files / total_files)``; 0 for an empty repository."""
    if total_files <= 0:
        return 0
    # Rounds half up.
    return min(100, int(100 * test_files / total_files + 0.5))
