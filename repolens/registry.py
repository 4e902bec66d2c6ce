"""Per-language capability table.

Each supported base language maps to a :class:`LanguageSupport` record that
bundles its complexity patterns and its function, import and export
extractors.  The parser only ever looks languages up here, so adding a
language means registering one more entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from . import extractors
from .complexity import (
    C_STYLE_PATTERNS,
    GO_PATTERNS,
    PYTHON_PATTERNS,
    RUBY_PATTERNS,
    RUST_PATTERNS,
    TERNARY_PATTERNS,
    PatternSet,
)
from .extractors import Scorer
from .languages import base_language
from .models import ExportInfo, FunctionInfo, ImportInfo

FunctionExtractor = Callable[[str, Scorer], List[FunctionInfo]]
ImportExtractor = Callable[[str], List[ImportInfo]]
ExportExtractor = Callable[[str], List[ExportInfo]]


@dataclass(frozen=True)
class LanguageSupport:
    complexity_patterns: PatternSet = TERNARY_PATTERNS
    function_extractor: Optional[FunctionExtractor] = None
    import_extractor: Optional[ImportExtractor] = None
    export_extractor: Optional[ExportExtractor] = None

    @property
    def has_dedicated_patterns(self) -> bool:
        return self.complexity_patterns is not TERNARY_PATTERNS


DEFAULT_SUPPORT = LanguageSupport()

_JS_FAMILY = LanguageSupport(
    complexity_patterns=C_STYLE_PATTERNS,
    function_extractor=extractors.extract_javascript_functions,
    import_extractor=extractors.extract_javascript_imports,
    export_extractor=extractors.extract_javascript_exports,
)
_C_FAMILY = LanguageSupport(complexity_patterns=C_STYLE_PATTERNS)

_REGISTRY: Dict[str, LanguageSupport] = {
    "javascript": _JS_FAMILY,
    "typescript": _JS_FAMILY,
    "vue": _JS_FAMILY,
    "svelte": _JS_FAMILY,
    "python": LanguageSupport(
        complexity_patterns=PYTHON_PATTERNS,
        function_extractor=extractors.extract_python_functions,
        import_extractor=extractors.extract_python_imports,
    ),
    "java": LanguageSupport(
        complexity_patterns=C_STYLE_PATTERNS,
        function_extractor=extractors.extract_java_functions,
        import_extractor=extractors.extract_java_imports,
    ),
    "csharp": LanguageSupport(
        complexity_patterns=C_STYLE_PATTERNS,
        function_extractor=extractors.extract_csharp_functions,
        import_extractor=extractors.extract_csharp_imports,
    ),
    "go": LanguageSupport(
        complexity_patterns=GO_PATTERNS,
        function_extractor=extractors.extract_go_functions,
        import_extractor=extractors.extract_go_imports,
    ),
    "rust": LanguageSupport(
        complexity_patterns=RUST_PATTERNS,
        function_extractor=extractors.extract_rust_functions,
        import_extractor=extractors.extract_rust_imports,
    ),
    "php": LanguageSupport(
        complexity_patterns=C_STYLE_PATTERNS,
        function_extractor=extractors.extract_php_functions,
    ),
    "ruby": LanguageSupport(
        complexity_patterns=RUBY_PATTERNS,
        function_extractor=extractors.extract_ruby_functions,
    ),
    "c": _C_FAMILY,
    "cpp": _C_FAMILY,
    "kotlin": _C_FAMILY,
    "swift": _C_FAMILY,
    "scala": _C_FAMILY,
    "dart": _C_FAMILY,
}


def register_language(language: str, support: LanguageSupport) -> None:
    """Add or replace the capabilities of *language*."""
    _REGISTRY[base_language(language)] = support


def support_for(language: str) -> LanguageSupport:
    """Capabilities of *language* (backend flavours resolve to their base)."""
    return _REGISTRY.get(base_language(language), DEFAULT_SUPPORT)


def registered_languages() -> List[str]:
    return sorted(_REGISTRY)


__all__ = [
    "LanguageSupport",
    "DEFAULT_SUPPORT",
    "FunctionExtractor",
    "ImportExtractor",
    "ExportExtractor",
    "register_language",
    "support_for",
    "registered_languages",
]
