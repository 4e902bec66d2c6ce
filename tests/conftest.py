"""Pytest configuration file ensuring local package import works regardless of CWD."""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    # Prepend so it has priority over any globally installed package version
    sys.path.insert(0, str(PROJECT_ROOT))

from repolens.exceptions import FileFetchError  # noqa: E402
from repolens.models import FileEntry  # noqa: E402
from repolens.observers import AnalysisObserver  # noqa: E402


class MemorySource:
    """File source serving a dict of ``path -> content``.

    Directories are derived from the file paths.  Paths mapped to an
    exception instance raise it when fetched.
    """

    def __init__(self, files: Dict[str, object], extra_entries: Optional[List[FileEntry]] = None):
        self.files = files
        self.extra_entries = extra_entries or []
        self.fetched: List[str] = []
        self.list_error: Optional[Exception] = None

    async def list_files(self, repo_id: str) -> List[FileEntry]:
        if self.list_error is not None:
            raise self.list_error
        dirs: List[str] = []
        for path in self.files:
            parts = path.split("/")[:-1]
            for i in range(1, len(parts) + 1):
                d = "/".join(parts[:i])
                if d not in dirs:
                    dirs.append(d)
        entries = [FileEntry(path=d, name=d.rsplit("/", 1)[-1], type="dir") for d in dirs]
        for path, content in self.files.items():
            size = len(content) if isinstance(content, str) else 0
            entries.append(FileEntry(path=path, name=path.rsplit("/", 1)[-1], type="file", size=size))
        return entries + self.extra_entries

    async def get_file_content(self, repo_id: str, path: str) -> str:
        self.fetched.append(path)
        content = self.files.get(path)
        if isinstance(content, Exception):
            raise content
        if content is None:
            raise FileFetchError(path, "not found")
        return content


class RecordingObserver(AnalysisObserver):
    def __init__(self):
        self.events: List[Tuple[str, tuple]] = []

    def files_listed(self, repo_id, count):
        self.events.append(("files_listed", (repo_id, count)))

    def files_filtered(self, kept, dropped):
        self.events.append(("files_filtered", (kept, dropped)))

    def batch_started(self, index, total, size):
        self.events.append(("batch_started", (index, total, size)))

    def empty_content(self, path):
        self.events.append(("empty_content", (path,)))

    def fetch_failed(self, path, error):
        self.events.append(("fetch_failed", (path, error)))

    def parse_degraded(self, path, error):
        self.events.append(("parse_degraded", (path, error)))

    def analysis_completed(self, repo_id, structure):
        self.events.append(("analysis_completed", (repo_id,)))

    def names(self, event: str) -> List[tuple]:
        return [args for name, args in self.events if name == event]


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def memory_source():
    return MemorySource
