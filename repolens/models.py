"""Central data models for RepoLens using Pydantic.

Defining all data structures in one place prevents circular dependencies
and ensures a single source of truth for the application's data shapes.
Python attributes are snake_case; the JSON form uses camelCase aliases so the
serialized structure matches what downstream consumers expect
(``totalFiles``, ``returnType``, ...).  Both spellings are accepted on input.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DirectoryType = Literal[
    "source", "test", "documentation", "configuration", "assets", "build", "scripts", "other"
]
IssueType = Literal["complexity", "maintainability"]
Severity = Literal["low", "medium", "high"]


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# --- File source listing --------------------------------------------------

class FileEntry(_Record):
    """One entry of a repository listing as returned by a file source."""

    path: str
    name: str
    type: Literal["file", "dir"]
    size: int = 0
    sha: Optional[str] = None


# --- Per-file analysis ----------------------------------------------------

class FunctionInfo(_Record):
    name: str
    line: int = Field(ge=1)
    complexity: int = Field(ge=1)
    parameters: List[str] = Field(default_factory=list)
    return_type: Optional[str] = None


class ImportInfo(_Record):
    module: str
    imports: List[str] = Field(default_factory=list)
    line: int = Field(ge=1)


class ExportInfo(_Record):
    name: str
    type: Literal["default", "named"]
    line: int = Field(ge=1)


class ManifestInfo(_Record):
    """Dependency declarations read from a package manifest."""

    kind: str
    name: Optional[str] = None
    version: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    dev_dependencies: List[str] = Field(default_factory=list)


class ParsedFile(_Record):
    """Analysis result for a single file.

    ``complexity == 0`` marks a file that was skipped (binary, oversized) or
    whose analysis failed; such files are not "simple", they are unanalysed.
    """

    path: str
    language: str
    content: str = ""
    lines: int = Field(default=0, ge=0)
    size: int = Field(default=0, ge=0)
    complexity: int = Field(default=0, ge=0)
    functions: List[FunctionInfo] = Field(default_factory=list)
    imports: List[ImportInfo] = Field(default_factory=list)
    exports: List[ExportInfo] = Field(default_factory=list)
    manifest: Optional[ManifestInfo] = None


# --- Repository-wide summary ---------------------------------------------

class FileComplexity(_Record):
    path: str
    complexity: int


class ComplexitySummary(_Record):
    average: float = 0.0
    max: int = 0
    min: int = 0
    files: List[FileComplexity] = Field(default_factory=list)


class CodeIssue(_Record):
    type: IssueType
    severity: Severity
    message: str
    file: str
    line: int = 1


class DirectoryInfo(_Record):
    name: str
    path: str
    type: DirectoryType
    purpose: str


class PatternSummary(_Record):
    architecture: str = "Unknown"
    framework: List[str] = Field(default_factory=list)
    patterns: List[str] = Field(default_factory=list)


class ProjectStructure(_Record):
    total_files: int = 0
    total_lines: int = 0
    languages: Dict[str, int] = Field(default_factory=dict)
    complexity: ComplexitySummary = Field(default_factory=ComplexitySummary)
    test_coverage: int = Field(default=0, ge=0, le=100)
    issues: List[CodeIssue] = Field(default_factory=list)
    directories: List[DirectoryInfo] = Field(default_factory=list)
    patterns: PatternSummary = Field(default_factory=PatternSummary)
    dependencies: Dict[str, List[str]] = Field(default_factory=dict)
    files: List[ParsedFile] = Field(default_factory=list)
