"""File source providers.

A file source lists the entries of a repository and fetches the text of one
path at a time.  Both calls may be slow and may fail; the aggregator treats
a failed listing as fatal and a failed fetch as a dropped file.

* :class:`LocalFileSource` – a directory on disk (``repo_id`` is its path).
* :class:`GitHubFileSource` – a GitHub repository (``repo_id`` is
  ``owner/repo``) read through the REST API with *requests*.
"""

from __future__ import annotations

import asyncio
import base64
import os
import re
from pathlib import Path
from typing import List, Optional, Protocol, Tuple
from urllib.parse import quote

import requests

from .exceptions import FileFetchError
from .fs_walk import walk_repository
from .logging_config import get_logger
from .models import FileEntry

__all__ = [
    "FileSource",
    "LocalFileSource",
    "GitHubFileSource",
    "parse_repo_id",
]


logger = get_logger("sources")


class FileSource(Protocol):
    async def list_files(self, repo_id: str) -> List[FileEntry]:
        ...

    async def get_file_content(self, repo_id: str, path: str) -> str:
        ...


# ---------------------------------------------------------------------------
# Local directories
# ---------------------------------------------------------------------------


class LocalFileSource:
    """Serve a checked-out repository from the local file system."""

    def __init__(
        self,
        *,
        include_hidden: bool = False,
        exclude_dirs: Optional[List[str]] = None,
        exclude_patterns: Optional[List[str]] = None,
    ):
        self.include_hidden = include_hidden
        self.exclude_dirs = exclude_dirs
        self.exclude_patterns = exclude_patterns

    async def list_files(self, repo_id: str) -> List[FileEntry]:
        return await asyncio.to_thread(
            walk_repository,
            Path(repo_id),
            include_hidden=self.include_hidden,
            exclude_dirs=self.exclude_dirs,
            exclude_patterns=self.exclude_patterns,
        )

    async def get_file_content(self, repo_id: str, path: str) -> str:
        return await asyncio.to_thread(self._read, Path(repo_id), path)

    @staticmethod
    def _read(root: Path, path: str) -> str:
        root = root.resolve()
        target = (root / path).resolve()
        if root != target and root not in target.parents:
            raise FileFetchError(path, "path escapes the repository root")
        try:
            return target.read_text("utf-8", errors="replace")
        except OSError as exc:
            raise FileFetchError(path, str(exc)) from exc


# ---------------------------------------------------------------------------
# GitHub
# ---------------------------------------------------------------------------

GITHUB_API_URL = "https://api.github.com"

_REPO_ID_RE = re.compile(
    r"^(?:https?://github\.com/)?([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+?)(?:\.git)?/?$"
)


def parse_repo_id(repo_id: str) -> Tuple[str, str]:
    """Split ``owner/repo`` (or a github.com URL) into its two parts."""
    match = _REPO_ID_RE.match(repo_id.strip())
    if not match:
        raise ValueError(f"Expected 'owner/repo', got {repo_id!r}")
    return match.group(1), match.group(2)


class GitHubFileSource:
    """Read a repository through the GitHub REST API.

    Listing uses the recursive git tree of *ref*; content comes from the
    contents endpoint and is base64-decoded.  Requests run in a worker
    thread so concurrent fetches inside a batch overlap.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        ref: str = "HEAD",
        api_url: str = GITHUB_API_URL,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.ref = ref
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "User-Agent": "repolens",
            }
        )
        token = token or os.getenv("GITHUB_TOKEN")
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    # -- listing ------------------------------------------------------------

    def _list_files_sync(self, repo_id: str) -> List[FileEntry]:
        owner, repo = parse_repo_id(repo_id)
        response = self.session.get(
            f"{self.api_url}/repos/{owner}/{repo}/git/trees/{quote(self.ref, safe='')}",
            params={"recursive": "1"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        if data.get("truncated"):
            logger.warning(
                "Tree listing of %s/%s is truncated by the API; analysing a partial file list",
                owner,
                repo,
                extra={"event": "listing_truncated", "repo_id": repo_id},
            )

        entries: List[FileEntry] = []
        for item in data.get("tree", []):
            kind = item.get("type")
            if kind not in ("blob", "tree"):
                continue  # submodules ("commit")
            path = item["path"]
            entries.append(
                FileEntry(
                    path=path,
                    name=path.rsplit("/", 1)[-1],
                    type="file" if kind == "blob" else "dir",
                    size=item.get("size") or 0,
                    sha=item.get("sha"),
                )
            )
        return entries

    async def list_files(self, repo_id: str) -> List[FileEntry]:
        return await asyncio.to_thread(self._list_files_sync, repo_id)

    # -- content ------------------------------------------------------------

    def _get_file_content_sync(self, repo_id: str, path: str) -> str:
        owner, repo = parse_repo_id(repo_id)
        try:
            response = self.session.get(
                f"{self.api_url}/repos/{owner}/{repo}/contents/{quote(path)}",
                params={"ref": self.ref},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise FileFetchError(path, str(exc)) from exc

        if isinstance(data, list):
            raise FileFetchError(path, "path is a directory, not a file")
        if not isinstance(data, dict) or "content" not in data:
            raise FileFetchError(path, "unsupported content type")
        if data.get("encoding", "base64") != "base64":
            raise FileFetchError(path, f"unsupported encoding {data.get('encoding')!r}")

        try:
            raw = base64.b64decode(data["content"])
        except (ValueError, TypeError) as exc:
            raise FileFetchError(path, f"invalid base64 payload: {exc}") from exc
        return raw.decode("utf-8", errors="replace")

    async def get_file_content(self, repo_id: str, path: str) -> str:
        return await asyncio.to_thread(self._get_file_content_sync, repo_id, path)
