"""Exception hierarchy for RepoLens.

Only repository-level failures ever reach the caller of
:func:`repolens.aggregator.analyze_repository`; per-file problems are
recovered inside the pipeline and reported to the observer instead.
"""

from __future__ import annotations

from typing import Dict, Optional


class RepolensError(Exception):
    """Base exception for all RepoLens errors."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class RepositoryAccessError(RepolensError):
    """Raised when the file list of a repository cannot be obtained."""

    def __init__(self, repo_id: str, reason: str):
        super().__init__(
            f"Cannot list files of repository: {repo_id}",
            details={"repo_id": repo_id, "reason": reason},
        )
        self.repo_id = repo_id
        self.reason = reason


class FileFetchError(RepolensError):
    """Raised by a file source when the content of one path is unavailable."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Cannot fetch file content: {path}",
            details={"path": path, "reason": reason},
        )
        self.path = path
        self.reason = reason


__all__ = ["RepolensError", "RepositoryAccessError", "FileFetchError"]
