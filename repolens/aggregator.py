"""Repository-wide analysis.

:class:`StructureAnalyzer` lists a repository through a file source, keeps
the entries worth analysing, fetches and parses them in small concurrent
batches and folds the results into one :class:`ProjectStructure`.

Folding is an explicit reduction: every batch becomes an immutable
:class:`PartialStructure`, partials are combined with the pure
:func:`merge_partials`, and :func:`finalize` derives the summary fields
(complexity statistics, issues, directories, patterns) once at the end.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from .config import AnalyzerSettings
from .detection import detect_patterns
from .directories import analyze_directories
from .exceptions import RepositoryAccessError
from .issues import coverage_percent, detect_issues, is_test_path
from .languages import (
    SOURCE_EXTENSIONS,
    display_language,
    extension_of,
    is_binary_path,
    is_known_filename,
    is_server_path,
)
from .models import ComplexitySummary, FileComplexity, FileEntry, ParsedFile, ProjectStructure
from .observers import AnalysisObserver, LoggingObserver
from .parser import parse_file
from .sources import FileSource

__all__ = [
    "PartialStructure",
    "should_analyze",
    "filter_entries",
    "partial_from_files",
    "merge_partials",
    "finalize",
    "StructureAnalyzer",
    "analyze_repository",
]

Sleep = Callable[[float], Awaitable[None]]

# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def should_analyze(entry: FileEntry, excluded_dirs: FrozenSet[str]) -> bool:
    """True for text files outside excluded directories.

    A file qualifies by a known source/config/doc extension, by a well-known
    filename (``Dockerfile``, ``Makefile``, ...), or by living under a
    server-like path (extensionless entry points).
    """
    if entry.type != "file":
        return False
    segments = entry.path.replace("\\", "/").lower().split("/")
    if any(segment in excluded_dirs for segment in segments[:-1]):
        return False
    if is_binary_path(entry.path):
        return False
    return (
        extension_of(entry.path) in SOURCE_EXTENSIONS
        or is_known_filename(entry.path)
        or is_server_path(entry.path)
    )


def filter_entries(entries: Iterable[FileEntry], excluded_dirs: FrozenSet[str]) -> List[FileEntry]:
    return [entry for entry in entries if should_analyze(entry, excluded_dirs)]


# ---------------------------------------------------------------------------
# Folding
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PartialStructure:
    """Summary of a contiguous run of parsed files."""

    files: Tuple[ParsedFile, ...] = ()
    total_lines: int = 0
    languages: Mapping[str, int] = field(default_factory=dict)
    test_files: int = 0


def partial_from_files(files: Iterable[ParsedFile]) -> PartialStructure:
    files = tuple(files)
    languages: Dict[str, int] = {}
    for parsed in files:
        name = display_language(parsed.path)
        if name is not None:
            languages[name] = languages.get(name, 0) + parsed.lines
    return PartialStructure(
        files=files,
        total_lines=sum(parsed.lines for parsed in files),
        languages=languages,
        test_files=sum(1 for parsed in files if is_test_path(parsed.path)),
    )


def merge_partials(left: PartialStructure, right: PartialStructure) -> PartialStructure:
    """Combine two partials; *left* files come first."""
    languages = dict(left.languages)
    for name, lines in right.languages.items():
        languages[name] = languages.get(name, 0) + lines
    return PartialStructure(
        files=left.files + right.files,
        total_lines=left.total_lines + right.total_lines,
        languages=languages,
        test_files=left.test_files + right.test_files,
    )


def _complexity_summary(files: Sequence[ParsedFile]) -> ComplexitySummary:
    # Zero marks skipped or degraded files, which are not "simple" code.
    scores = [parsed.complexity for parsed in files if parsed.complexity > 0]
    return ComplexitySummary(
        average=sum(scores) / len(scores) if scores else 0.0,
        max=max(scores, default=0),
        min=min(scores, default=0),
        files=[FileComplexity(path=parsed.path, complexity=parsed.complexity) for parsed in files],
    )


def finalize(partial: PartialStructure, entries: Sequence[FileEntry]) -> ProjectStructure:
    """Turn the folded partial into the final structure.

    *entries* is the raw, unfiltered listing used for directory
    classification and architecture detection.
    """
    files = list(partial.files)
    return ProjectStructure(
        total_files=len(files),
        total_lines=partial.total_lines,
        languages=dict(partial.languages),
        complexity=_complexity_summary(files),
        test_coverage=coverage_percent(partial.test_files, len(files)),
        issues=detect_issues(files),
        directories=analyze_directories(entries),
        patterns=detect_patterns(files, entries),
        dependencies={
            parsed.path: parsed.manifest.dependencies + parsed.manifest.dev_dependencies
            for parsed in files
            if parsed.manifest is not None
        },
        files=files,
    )


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


class StructureAnalyzer:
    """Analyse whole repositories served by a :class:`FileSource`.

    Parameters
    ----------
    source:
        Provider of the listing and of file contents.
    settings:
        Batch size, pause between batches, exclusions and the content cap.
    observer:
        Receives progress and per-file failure events; defaults to a
        :class:`LoggingObserver`.
    sleep:
        Coroutine used for the pause between batches.
    """

    def __init__(
        self,
        source: FileSource,
        settings: Optional[AnalyzerSettings] = None,
        observer: Optional[AnalysisObserver] = None,
        *,
        sleep: Sleep = asyncio.sleep,
    ):
        self.source = source
        self.settings = settings or AnalyzerSettings()
        self.observer = observer or LoggingObserver()
        self._sleep = sleep

    async def analyze_repository(self, repo_id: str) -> ProjectStructure:
        """Run the full pipeline; only a failed listing raises."""

        try:
            entries = await self.source.list_files(repo_id)
        except RepositoryAccessError:
            raise
        except Exception as exc:
            raise RepositoryAccessError(repo_id, str(exc)) from exc

        self.observer.files_listed(repo_id, len(entries))
        kept = filter_entries(entries, self.settings.excluded_dir_names)
        self.observer.files_filtered(len(kept), len(entries) - len(kept))

        size = self.settings.batch_size
        batches = [kept[i : i + size] for i in range(0, len(kept), size)]

        partial = PartialStructure()
        for index, batch in enumerate(batches, start=1):
            self.observer.batch_started(index, len(batches), len(batch))
            # gather() keeps input order, so results are deterministic.
            results = await asyncio.gather(*(self._analyze_entry(repo_id, entry) for entry in batch))
            partial = merge_partials(
                partial, partial_from_files(parsed for parsed in results if parsed is not None)
            )
            if index < len(batches) and self.settings.batch_delay > 0:
                await self._sleep(self.settings.batch_delay)

        structure = finalize(partial, entries)
        self.observer.analysis_completed(repo_id, structure)
        return structure

    async def _analyze_entry(self, repo_id: str, entry: FileEntry) -> Optional[ParsedFile]:
        try:
            content = await self.source.get_file_content(repo_id, entry.path)
        except Exception as exc:
            self.observer.fetch_failed(entry.path, exc)
            return None

        if not content:
            self.observer.empty_content(entry.path)
            return None

        parsed = parse_file(
            entry.path,
            content,
            max_chars=self.settings.max_content_chars,
            observer=self.observer,
        )
        self.observer.file_parsed(parsed)
        return parsed


async def analyze_repository(
    repo_id: str,
    source: FileSource,
    settings: Optional[AnalyzerSettings] = None,
    observer: Optional[AnalysisObserver] = None,
) -> ProjectStructure:
    """Convenience wrapper around :meth:`StructureAnalyzer.analyze_repository`."""
    return await StructureAnalyzer(source, settings, observer).analyze_repository(repo_id)
