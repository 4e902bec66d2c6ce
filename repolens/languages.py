"""Language classification helpers.

Languages are identified by short lowercase tags (``"python"``,
``"typescript"``, ...).  :func:`classify` works from the path alone and tags
server-side code in the common web languages with a ``-backend`` suffix so
callers can tell frontend and backend sources apart without classifying
twice.  :func:`classify_from_content` is a best-effort fallback used by the
complexity scorer when the path says nothing useful.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Dict, FrozenSet, Optional

# ---------------------------------------------------------------------------
# Public constants
# ---------------------------------------------------------------------------

TEXT = "text"
BACKEND_SUFFIX = "-backend"

# Extension (lower-case, with leading dot) -> language tag.
EXTENSION_MAP: Dict[str, str] = {
    # JavaScript / TypeScript and component flavours
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".vue": "vue",
    ".svelte": "svelte",
    # Python
    ".py": "python",
    ".pyi": "python",
    ".pyx": "python",
    ".pyw": "python",
    # JVM
    ".java": "java",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".scala": "scala",
    ".sc": "scala",
    # C family
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".hxx": "cpp",
    ".cs": "csharp",
    ".csx": "csharp",
    # Scripting / systems
    ".php": "php",
    ".phtml": "php",
    ".rb": "ruby",
    ".rbw": "ruby",
    ".go": "go",
    ".rs": "rust",
    ".swift": "swift",
    ".dart": "dart",
    ".r": "r",
    ".pl": "perl",
    ".pm": "perl",
    ".lua": "lua",
    ".sql": "sql",
    # Shell
    ".sh": "shell",
    ".bash": "shell",
    ".zsh": "shell",
    ".fish": "shell",
    ".ps1": "powershell",
    ".bat": "batch",
    # Markup / style
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "sass",
    ".less": "less",
    # Data / config / docs
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".xml": "xml",
    ".toml": "toml",
    ".ini": "ini",
    ".md": "markdown",
    ".markdown": "markdown",
    ".dockerfile": "dockerfile",
}

# Extensionless filenames recognised by exact (case-insensitive) name.
FILENAME_MAP: Dict[str, str] = {
    "dockerfile": "dockerfile",
    "makefile": "makefile",
    "gemfile": "ruby",
    "rakefile": "ruby",
}

# Languages that get a backend-flavoured tag when the path looks server-side.
BACKEND_CAPABLE: FrozenSet[str] = frozenset(
    {"javascript", "typescript", "python", "java", "csharp", "php", "ruby", "go"}
)

BACKEND_INDICATORS = ("server", "backend", "api", "routes")

# Extensions that are never treated as text.
BINARY_EXTENSIONS: FrozenSet[str] = frozenset(
    {
        # Images
        ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".svg", ".webp", ".tiff",
        # Archives
        ".zip", ".tar", ".gz", ".tgz", ".bz2", ".xz", ".7z", ".rar", ".jar",
        # Executables & compiled objects
        ".exe", ".dll", ".so", ".dylib", ".o", ".a", ".lib", ".class", ".pyc", ".pyo", ".wasm",
        # Audio / video
        ".mp3", ".mp4", ".avi", ".mov", ".wav", ".flac", ".flv", ".mkv", ".ogg", ".webm",
        # Fonts
        ".ttf", ".otf", ".woff", ".woff2", ".eot",
        # Documents & databases
        ".pdf", ".bin", ".dat", ".db", ".sqlite", ".sqlite3",
    }
)

# Extensions worth fetching during repository analysis (source, config, docs).
SOURCE_EXTENSIONS: FrozenSet[str] = frozenset(
    {
        ".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts", ".vue", ".svelte",
        ".py", ".pyi", ".java", ".kt", ".kts", ".scala", ".c", ".h", ".cpp", ".cc",
        ".hpp", ".cs", ".php", ".rb", ".go", ".rs", ".swift", ".dart", ".r", ".pl",
        ".pm", ".lua", ".sql", ".sh", ".bash", ".zsh", ".ps1", ".bat", ".html", ".htm",
        ".css", ".scss", ".sass", ".less", ".json", ".yaml", ".yml", ".xml", ".toml",
        ".ini", ".md", ".markdown", ".txt", ".dockerfile",
    }
)

# Extension -> human readable name used by the repository language histogram.
DISPLAY_NAMES: Dict[str, str] = {
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".py": "Python",
    ".pyi": "Python",
    ".java": "Java",
    ".kt": "Kotlin",
    ".scala": "Scala",
    ".c": "C",
    ".h": "C",
    ".cpp": "C++",
    ".cc": "C++",
    ".hpp": "C++",
    ".cs": "C#",
    ".php": "PHP",
    ".rb": "Ruby",
    ".go": "Go",
    ".rs": "Rust",
    ".swift": "Swift",
    ".dart": "Dart",
    ".r": "R",
    ".pl": "Perl",
    ".lua": "Lua",
    ".html": "HTML",
    ".htm": "HTML",
    ".css": "CSS",
    ".scss": "SCSS",
    ".sass": "Sass",
    ".less": "Less",
    ".vue": "Vue",
    ".svelte": "Svelte",
    ".json": "JSON",
    ".xml": "XML",
    ".yaml": "YAML",
    ".yml": "YAML",
    ".toml": "TOML",
    ".md": "Markdown",
    ".sql": "SQL",
    ".sh": "Shell",
    ".bash": "Bash",
    ".ps1": "PowerShell",
    ".dockerfile": "Dockerfile",
}

_SHEBANG_RE = re.compile(r"\A#![^\n]*")
_ES_MODULE_RE = re.compile(r"\bimport\s+.*\bfrom\b|\bexport\s+")
_PY_DEF_RE = re.compile(r"\bdef\s+\w+\s*\(")
_PY_IMPORT_RE = re.compile(r"^\s*(?:from\s+\S+\s+)?import\s+\w+", re.MULTILINE)

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def extension_of(path: str) -> str:
    """Return the lower-cased extension of *path* including the dot, or ``""``."""
    return PurePosixPath(path.replace("\\", "/")).suffix.lower()


def is_binary_path(path: str) -> bool:
    return extension_of(path) in BINARY_EXTENSIONS


def is_known_filename(path: str) -> bool:
    """True for well-known extensionless files such as ``Dockerfile``."""
    return PurePosixPath(path.replace("\\", "/")).name.lower() in FILENAME_MAP


def is_server_path(path: str) -> bool:
    """True when *path* contains one of the server-side indicator substrings."""
    lowered = path.replace("\\", "/").lower()
    return any(indicator in lowered for indicator in BACKEND_INDICATORS)


def display_language(path: str) -> Optional[str]:
    """Return the histogram name for *path* or *None* for unmapped extensions."""
    return DISPLAY_NAMES.get(extension_of(path))


def base_language(language: str) -> str:
    """Strip the backend flavour from a language tag."""
    if language.endswith(BACKEND_SUFFIX):
        return language[: -len(BACKEND_SUFFIX)]
    return language


def is_backend(language: str) -> bool:
    return language.endswith(BACKEND_SUFFIX)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify(path: str) -> str:
    """Return the language tag for *path*.

    The extension table is consulted first, then the table of well-known
    extensionless filenames.  Unknown files are ``"text"``.  Backend-capable
    languages living under a server-like path get the ``-backend`` flavour.
    """

    normalised = path.replace("\\", "/")
    language = EXTENSION_MAP.get(extension_of(normalised))
    if language is None:
        language = FILENAME_MAP.get(PurePosixPath(normalised).name.lower(), TEXT)

    if language in BACKEND_CAPABLE and is_server_path(normalised):
        return language + BACKEND_SUFFIX
    return language


def classify_from_content(text: str) -> str:
    """Guess a language from the shape of *text*.

    Order: shebang line, ES-module syntax, Python ``def``/``import``.  This is
    only a disambiguator for files whose path is inconclusive.
    """

    shebang = _SHEBANG_RE.match(text)
    if shebang:
        line = shebang.group(0)
        if "python" in line:
            return "python"
        if "node" in line or "javascript" in line:
            return "javascript"
        if "bash" in line or "sh" in line:
            return "shell"

    if _ES_MODULE_RE.search(text):
        return "javascript"

    if _PY_DEF_RE.search(text) or _PY_IMPORT_RE.search(text):
        return "python"

    return TEXT


__all__ = [
    "TEXT",
    "BACKEND_SUFFIX",
    "EXTENSION_MAP",
    "FILENAME_MAP",
    "BINARY_EXTENSIONS",
    "SOURCE_EXTENSIONS",
    "DISPLAY_NAMES",
    "extension_of",
    "is_binary_path",
    "is_server_path",
    "is_known_filename",
    "display_language",
    "base_language",
    "is_backend",
    "classify",
    "classify_from_content",
]
