"""Analysis events and the observers that receive them.

The aggregator and the parser never log directly: they report what happens
to an :class:`AnalysisObserver`.  :class:`LoggingObserver` is the default and
turns every event into a record on the ``repolens`` logger with the event
name and its fields attached through ``extra``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .logging_config import get_logger
from .models import ParsedFile, ProjectStructure


class AnalysisObserver:
    """No-op base class; override only the events you care about."""

    def files_listed(self, repo_id: str, count: int) -> None:
        pass

    def files_filtered(self, kept: int, dropped: int) -> None:
        pass

    def batch_started(self, index: int, total: int, size: int) -> None:
        pass

    def file_parsed(self, parsed: ParsedFile) -> None:
        pass

    def empty_content(self, path: str) -> None:
        pass

    def fetch_failed(self, path: str, error: BaseException) -> None:
        pass

    def parse_degraded(self, path: str, error: BaseException) -> None:
        pass

    def analysis_completed(self, repo_id: str, structure: ProjectStructure) -> None:
        pass


class LoggingObserver(AnalysisObserver):
    """Forward analysis events to :mod:`logging`."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger()

    def _emit(self, level: int, event: str, message: str, *args: Any, **fields: Any) -> None:
        self.logger.log(level, message, *args, extra={"event": event, **fields})

    def files_listed(self, repo_id: str, count: int) -> None:
        self._emit(logging.INFO, "files_listed", "Listed %d entries in %s", count, repo_id,
                   repo_id=repo_id, count=count)

    def files_filtered(self, kept: int, dropped: int) -> None:
        self._emit(logging.INFO, "files_filtered", "Analysing %d files (%d entries skipped)",
                   kept, dropped, kept=kept, dropped=dropped)

    def batch_started(self, index: int, total: int, size: int) -> None:
        self._emit(logging.DEBUG, "batch_started", "Batch %d/%d (%d files)", index, total, size,
                   batch=index, batches=total, size=size)

    def file_parsed(self, parsed: ParsedFile) -> None:
        self._emit(logging.DEBUG, "file_parsed", "Parsed %s (%s, %d lines, complexity %d)",
                   parsed.path, parsed.language, parsed.lines, parsed.complexity,
                   path=parsed.path, language=parsed.language)

    def empty_content(self, path: str) -> None:
        self._emit(logging.DEBUG, "empty_content", "Skipping %s: empty content", path, path=path)

    def fetch_failed(self, path: str, error: BaseException) -> None:
        self._emit(logging.WARNING, "fetch_failed", "Could not fetch %s: %s", path, error,
                   path=path, error=str(error))

    def parse_degraded(self, path: str, error: BaseException) -> None:
        self._emit(logging.WARNING, "parse_degraded", "Analysis of %s failed, keeping line count only: %s",
                   path, error, path=path, error=str(error))

    def analysis_completed(self, repo_id: str, structure: ProjectStructure) -> None:
        self._emit(logging.INFO, "analysis_completed", "Analysed %s: %d files, %d lines",
                   repo_id, structure.total_files, structure.total_lines,
                   repo_id=repo_id, total_files=structure.total_files,
                   total_lines=structure.total_lines)


__all__ = ["AnalysisObserver", "LoggingObserver"]
