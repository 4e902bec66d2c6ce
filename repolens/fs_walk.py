import os, fnmatch
from pathlib import Path
from typing import Callable, List, Optional

from gitignore_parser import parse_gitignore

from .models import FileEntry

# Directories that are always skipped regardless of .gitignore
DEFAULT_IGNORES = {"node_modules", ".git", "__pycache__"}

__all__ = ["walk_repository", "DEFAULT_IGNORES"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _compile_ignore(root: Path) -> Callable[[str], bool]:
    """Return a callable that determines whether an absolute path is ignored."""

    gitignore = root / ".gitignore"
    if gitignore.is_file():
        try:
            return parse_gitignore(str(gitignore))
        except OSError:
            pass
    # Fallback – do not ignore anything
    return lambda _p: False


def _relative(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def _file_entry(file_path: Path, root: Path) -> Optional[FileEntry]:
    # Skip symlinks to prevent traversal attacks and reading unintended files.
    if file_path.is_symlink():
        return None
    try:
        size_on_disk = file_path.stat().st_size
    except OSError:
        return None
    return FileEntry(
        path=_relative(file_path, root),
        name=file_path.name,
        type="file",
        size=size_on_disk,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def walk_repository(
    root_path: Path,
    *,
    include_hidden: bool = False,
    exclude_dirs: Optional[List[str]] = None,
    exclude_patterns: Optional[List[str]] = None,
) -> List[FileEntry]:
    """Return a flat listing of *root_path* as :class:`FileEntry` records.

    Directories are listed before the files of the same parent, both sorted,
    and paths are POSIX-style relative to *root_path*.  Ignored directories
    are pruned **before** ``os.walk`` descends into them so we never pay the
    cost of scanning large folders like *node_modules*.
    """

    root_path = Path(root_path).resolve()
    if not root_path.exists():
        raise FileNotFoundError(root_path)
    if not root_path.is_dir():
        raise NotADirectoryError(root_path)

    is_ignored = _compile_ignore(root_path)
    exclude_dirs_set = set(exclude_dirs or [])
    entries: List[FileEntry] = []

    for dirpath_str, dirnames, filenames in os.walk(root_path, topdown=True):
        current_dir = Path(dirpath_str)

        # Prune sub-directories in-place (os.walk respects the modified list)
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in DEFAULT_IGNORES
            and d not in exclude_dirs_set
            and (include_hidden or not d.startswith('.'))
            and not (current_dir / d).is_symlink()
            and not is_ignored(str(current_dir / d))
        )

        for d_name in dirnames:
            entries.append(
                FileEntry(path=_relative(current_dir / d_name, root_path), name=d_name, type="dir")
            )

        filtered_files = sorted(
            f for f in filenames
            if (include_hidden or not f.startswith('.'))
            and not is_ignored(str(current_dir / f))
            and not (exclude_patterns and any(fnmatch.fnmatch(f, pat) for pat in exclude_patterns))
        )

        for f_name in filtered_files:
            entry = _file_entry(current_dir / f_name, root_path)
            if entry:
                entries.append(entry)

    return entries
