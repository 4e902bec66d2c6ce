"""Regex-based extraction of functions, imports and exports.

Every extractor takes the raw file text and returns plain model objects.
Function extractors also receive a *score* callable that turns an
extracted body into a complexity value, so the per-function number uses
the same scale as the file-level one.

Bodies are located without parsing:

* brace languages: balanced ``{``/``}`` counting from the first opening
  brace after the declaration;
* Python: following lines until indentation drops below the first body line;
* Ruby: following lines until one whose stripped text is exactly ``end``.

Braces inside strings, template literals and comments are counted like any
other brace, so bodies can run long or short on such code.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Set, Tuple

from .models import ExportInfo, FunctionInfo, ImportInfo

Scorer = Callable[[str], int]

# Names that brace matching picks up from control-flow blocks rather than
# real declarations.
SKIPPED_NAMES = frozenset(
    {"if", "for", "while", "switch", "catch", "constructor", "function", "return"}
)

_MODIFIERS = frozenset(
    {
        "public", "private", "protected", "static", "final", "abstract",
        "synchronized", "native", "internal", "virtual", "override", "sealed",
        "async", "extern", "unsafe", "partial", "readonly",
    }
)
_NOT_A_TYPE = frozenset({"return", "new", "else", "throw", "await", "yield", "case", "do"})

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def line_of(content: str, index: int) -> int:
    """1-based line number of character *index*."""
    return content.count("\n", 0, index) + 1


def parse_parameters(raw: Optional[str]) -> List[str]:
    """Split a parameter list, dropping type annotations and defaults."""
    if not raw or not raw.strip():
        return []
    params = []
    for param in raw.split(","):
        name = param.strip().split(":")[0].strip()
        name = name.split("=")[0].strip()
        if name:
            params.append(name)
    return params


def brace_body(content: str, start: int) -> str:
    """Return the ``{...}`` block opening at or after *start*.

    An unterminated block runs to the end of *content*; no opening brace at
    all yields an empty body.
    """
    open_at = content.find("{", start)
    if open_at == -1:
        return ""
    depth = 0
    for i in range(open_at, len(content)):
        char = content[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return content[open_at : i + 1]
    return content[open_at:]


def arrow_body(content: str, start: int) -> str:
    """Body of an arrow function whose ``=>`` lies at or after *start*."""
    arrow = content.find("=>", start)
    if arrow == -1:
        return ""
    i = arrow + 2
    while i < len(content) and content[i].isspace():
        i += 1
    if i < len(content) and content[i] == "{":
        return brace_body(content, i)
    end = i
    while end < len(content) and content[end] not in "\n;":
        end += 1
    return content[i:end]


def _indent(line: str) -> int:
    line = line.expandtabs()
    return len(line) - len(line.lstrip())


def indented_body(lines: List[str], first: int, header_indent: int) -> str:
    """Collect the indentation-delimited block starting at line index *first*."""
    body: List[str] = []
    base = -1
    for line in lines[first:]:
        if not line.strip():
            continue
        indent = _indent(line)
        if base == -1:
            if indent <= header_indent:
                break
            base = indent
        if indent < base:
            break
        body.append(line)
    return "\n".join(body) + ("\n" if body else "")


def end_delimited_body(lines: List[str], first: int) -> str:
    """Collect lines from index *first* up to a line reading exactly ``end``."""
    body: List[str] = []
    for line in lines[first:]:
        if line.strip() == "end":
            break
        body.append(line)
    return "\n".join(body) + ("\n" if body else "")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ---------------------------------------------------------------------------
# Function extractors
# ---------------------------------------------------------------------------

_JS_FUNCTION_RE = re.compile(
    r"\bfunction\s*\*?\s*([A-Za-z_$][\w$]*)\s*(?:<[^>]*>)?\s*\(([^)]*)\)(?:\s*:\s*([^{;\n]+))?"
)
_JS_ARROW_RE = re.compile(
    r"\b(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*(?::[^=\n]+)?=\s*(?:async\s+)?"
    r"(?:\(([^)]*)\)|([A-Za-z_$][\w$]*))\s*(?::\s*([^=\n]+?))?\s*=>"
)
_JS_METHOD_RE = re.compile(
    r"(?:async\s+)?([A-Za-z_$][\w$]*)\s*\(([^)]*)\)\s*(?::\s*([^{;\n()]+?))?\s*\{"
)


def extract_javascript_functions(content: str, score: Scorer) -> List[FunctionInfo]:
    """Function declarations, arrow bindings and method shorthands."""
    functions: List[FunctionInfo] = []
    seen: Set[Tuple[str, int]] = set()

    def add(name: str, line: int, body: str, params: List[str], return_type: Optional[str]):
        if name in SKIPPED_NAMES or (name, line) in seen:
            return
        seen.add((name, line))
        functions.append(
            FunctionInfo(
                name=name,
                line=line,
                complexity=score(body),
                parameters=params,
                return_type=return_type,
            )
        )

    for match in _JS_FUNCTION_RE.finditer(content):
        add(
            match.group(1),
            line_of(content, match.start()),
            brace_body(content, match.end()),
            parse_parameters(match.group(2)),
            _clean(match.group(3)),
        )

    for match in _JS_ARROW_RE.finditer(content):
        raw_params = match.group(2) if match.group(2) is not None else match.group(3)
        add(
            match.group(1),
            line_of(content, match.start()),
            arrow_body(content, match.start()),
            parse_parameters(raw_params),
            _clean(match.group(4)),
        )

    for match in _JS_METHOD_RE.finditer(content):
        add(
            match.group(1),
            line_of(content, match.start(1)),
            brace_body(content, match.end() - 1),
            parse_parameters(match.group(2)),
            _clean(match.group(3)),
        )

    return functions


_PY_DEF_RE = re.compile(
    r"^([ \t]*)(?:async[ \t]+)?def\s+([A-Za-z_]\w*)\s*\(([^)]*)\)(?:\s*->\s*([^:]+?))?\s*:",
    re.MULTILINE,
)


def extract_python_functions(content: str, score: Scorer) -> List[FunctionInfo]:
    functions: List[FunctionInfo] = []
    lines = content.split("\n")
    for match in _PY_DEF_RE.finditer(content):
        # Body starts on the line after the one holding the closing colon.
        first_body_line = line_of(content, match.end())
        body = indented_body(lines, first_body_line, len(match.group(1).expandtabs()))
        functions.append(
            FunctionInfo(
                name=match.group(2),
                line=line_of(content, match.start(2)),
                complexity=score(body),
                parameters=parse_parameters(match.group(3)),
                return_type=_clean(match.group(4)),
            )
        )
    return functions


def _typed_method_regex(modifiers: str) -> "re.Pattern[str]":
    return re.compile(
        r"^[ \t]*(?:@\w+(?:\([^)]*\))?\s+)*(?:(?:" + modifiers + r")\s+)*"
        r"([\w<>\[\],.?]+)\s+([A-Za-z_]\w*)\s*\(([^)]*)\)\s*"
        r"(?:throws\s+[\w.,\s]+?)?\s*\{",
        re.MULTILINE,
    )


_JAVA_METHOD_RE = _typed_method_regex(
    "public|private|protected|static|final|abstract|synchronized|native|default"
)
_CSHARP_METHOD_RE = _typed_method_regex(
    "public|private|protected|internal|static|virtual|override|abstract|sealed|async|extern|unsafe|partial|new"
)


def _extract_typed_methods(content: str, score: Scorer, pattern: "re.Pattern[str]") -> List[FunctionInfo]:
    functions: List[FunctionInfo] = []
    for match in pattern.finditer(content):
        return_type, name = match.group(1), match.group(2)
        if name in SKIPPED_NAMES or return_type in _NOT_A_TYPE:
            continue
        functions.append(
            FunctionInfo(
                name=name,
                line=line_of(content, match.start(2)),
                complexity=score(brace_body(content, match.end() - 1)),
                parameters=parse_parameters(match.group(3)),
                # ``public Foo(...)`` is a constructor: no return type.
                return_type=None if return_type in _MODIFIERS else return_type,
            )
        )
    return functions


def extract_java_functions(content: str, score: Scorer) -> List[FunctionInfo]:
    return _extract_typed_methods(content, score, _JAVA_METHOD_RE)


def extract_csharp_functions(content: str, score: Scorer) -> List[FunctionInfo]:
    return _extract_typed_methods(content, score, _CSHARP_METHOD_RE)


_GO_FUNC_RE = re.compile(
    r"\bfunc\s+(?:\([^)]*\)\s*)?([A-Za-z_]\w*)\s*(?:\[[^\]]*\])?\s*\(([^)]*)\)\s*"
    r"(?:\(([^)]*)\)|([\w.*\[\]]+))?\s*\{"
)


def extract_go_functions(content: str, score: Scorer) -> List[FunctionInfo]:
    functions: List[FunctionInfo] = []
    for match in _GO_FUNC_RE.finditer(content):
        functions.append(
            FunctionInfo(
                name=match.group(1),
                line=line_of(content, match.start()),
                complexity=score(brace_body(content, match.end() - 1)),
                parameters=parse_parameters(match.group(2)),
                return_type=_clean(match.group(3) or match.group(4)),
            )
        )
    return functions


_RUST_FN_RE = re.compile(
    r"\bfn\s+([A-Za-z_]\w*)\s*(?:<[^>]*>)?\s*\(([^)]*)\)\s*(?:->\s*([^{;]+?))?\s*(?:where\s[^{;]*)?\{"
)


def extract_rust_functions(content: str, score: Scorer) -> List[FunctionInfo]:
    functions: List[FunctionInfo] = []
    for match in _RUST_FN_RE.finditer(content):
        functions.append(
            FunctionInfo(
                name=match.group(1),
                line=line_of(content, match.start()),
                complexity=score(brace_body(content, match.end() - 1)),
                parameters=parse_parameters(match.group(2)),
                return_type=_clean(match.group(3)),
            )
        )
    return functions


_PHP_FUNCTION_RE = re.compile(
    r"\bfunction\s+&?([A-Za-z_]\w*)\s*\(([^)]*)\)\s*(?::\s*([?\w\\|]+))?\s*\{"
)


def extract_php_functions(content: str, score: Scorer) -> List[FunctionInfo]:
    functions: List[FunctionInfo] = []
    for match in _PHP_FUNCTION_RE.finditer(content):
        if match.group(1) in SKIPPED_NAMES:
            continue
        functions.append(
            FunctionInfo(
                name=match.group(1),
                line=line_of(content, match.start()),
                complexity=score(brace_body(content, match.end() - 1)),
                parameters=parse_parameters(match.group(2)),
                return_type=_clean(match.group(3)),
            )
        )
    return functions


_RUBY_DEF_RE = re.compile(
    r"^[ \t]*def\s+(?:self\.)?([A-Za-z_]\w*[!?=]?)[ \t]*(?:\(([^)]*)\))?[ \t]*$",
    re.MULTILINE,
)


def extract_ruby_functions(content: str, score: Scorer) -> List[FunctionInfo]:
    functions: List[FunctionInfo] = []
    lines = content.split("\n")
    for match in _RUBY_DEF_RE.finditer(content):
        line = line_of(content, match.start())
        functions.append(
            FunctionInfo(
                name=match.group(1),
                line=line,
                complexity=score(end_delimited_body(lines, line)),
                parameters=parse_parameters(match.group(2)),
            )
        )
    return functions


# ---------------------------------------------------------------------------
# Import extractors
# ---------------------------------------------------------------------------

_ES_IMPORT_RE = re.compile(
    r"\bimport\s+(?:type\s+)?([\w$*{}\s,]+?)\s+from\s+['\"]([^'\"]+)['\"]"
)
_ES_SIDE_EFFECT_RE = re.compile(r"^[ \t]*import\s+['\"]([^'\"]+)['\"]", re.MULTILINE)
_REQUIRE_RE = re.compile(
    r"\b(?:const|let|var)\s+(?:\{([^}]+)\}|([A-Za-z_$][\w$]*))\s*=\s*require\(\s*['\"]([^'\"]+)['\"]\s*\)"
)


def _split_names(raw: str) -> List[str]:
    names = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        # ``a as b`` / ``a: b`` keep the local binding
        item = re.split(r"\s+as\s+|\s*:\s*", item)[-1].strip()
        if item:
            names.append(item)
    return names


def _es_import_names(clause: str) -> List[str]:
    names: List[str] = []
    braces = re.search(r"\{([^}]*)\}", clause)
    if braces:
        names.extend(_split_names(braces.group(1)))
        clause = clause[: braces.start()] + clause[braces.end() :]
    namespace = re.search(r"\*\s*as\s+([\w$]+)", clause)
    if namespace:
        names.insert(0, namespace.group(1))
        clause = clause[: namespace.start()] + clause[namespace.end() :]
    default = clause.strip().strip(",").strip()
    if default:
        names.insert(0, default)
    return names


def extract_javascript_imports(content: str) -> List[ImportInfo]:
    """ES module imports (including side-effect ones) and ``require`` bindings."""
    found: List[Tuple[int, ImportInfo]] = []

    for match in _ES_IMPORT_RE.finditer(content):
        found.append(
            (
                match.start(),
                ImportInfo(
                    module=match.group(2),
                    imports=_es_import_names(match.group(1)),
                    line=line_of(content, match.start()),
                ),
            )
        )

    for match in _ES_SIDE_EFFECT_RE.finditer(content):
        found.append(
            (match.start(), ImportInfo(module=match.group(1), line=line_of(content, match.start())))
        )

    for match in _REQUIRE_RE.finditer(content):
        names = _split_names(match.group(1)) if match.group(1) else [match.group(2)]
        found.append(
            (
                match.start(),
                ImportInfo(module=match.group(3), imports=names, line=line_of(content, match.start())),
            )
        )

    found.sort(key=lambda item: item[0])
    return [info for _, info in found]


_PY_IMPORT_RE = re.compile(
    r"^[ \t]*(?:from[ \t]+([\w.]+)[ \t]+)?import[ \t]+(\([^)]*\)|[^\n#;]+)",
    re.MULTILINE,
)


def extract_python_imports(content: str) -> List[ImportInfo]:
    """``import a, b`` yields one entry per module; ``from m import x, y`` one entry."""
    imports: List[ImportInfo] = []
    for match in _PY_IMPORT_RE.finditer(content):
        line = line_of(content, match.start())
        names = [
            name.split(" as ")[0].strip()
            for name in match.group(2).strip("()\n\\ \t").replace("\n", " ").split(",")
        ]
        names = [name for name in names if name]
        if match.group(1):
            imports.append(ImportInfo(module=match.group(1), imports=names, line=line))
        else:
            for name in names:
                imports.append(ImportInfo(module=name, imports=[name], line=line))
    return imports


_JAVA_IMPORT_RE = re.compile(r"^[ \t]*import\s+(?:static\s+)?([\w.*]+)\s*;", re.MULTILINE)


def extract_java_imports(content: str) -> List[ImportInfo]:
    imports: List[ImportInfo] = []
    for match in _JAVA_IMPORT_RE.finditer(content):
        package, _, symbol = match.group(1).rpartition(".")
        imports.append(
            ImportInfo(
                module=package or symbol,
                imports=[symbol],
                line=line_of(content, match.start()),
            )
        )
    return imports


_CSHARP_USING_RE = re.compile(
    r"^[ \t]*(?:global\s+)?using\s+(?:static\s+)?(?:(\w+)\s*=\s*)?([\w.]+)\s*;", re.MULTILINE
)


def extract_csharp_imports(content: str) -> List[ImportInfo]:
    imports: List[ImportInfo] = []
    for match in _CSHARP_USING_RE.finditer(content):
        namespace = match.group(2)
        imports.append(
            ImportInfo(
                module=namespace,
                imports=[match.group(1) or namespace.split(".")[-1]],
                line=line_of(content, match.start()),
            )
        )
    return imports


_GO_IMPORT_RE = re.compile(r"\bimport\s+(?:([\w.]+)\s+)?\"([^\"]+)\"|\bimport\s*\(([^)]*)\)")
_GO_SPEC_RE = re.compile(r"(?:([\w.]+)\s+)?\"([^\"]+)\"")


def extract_go_imports(content: str) -> List[ImportInfo]:
    imports: List[ImportInfo] = []
    for match in _GO_IMPORT_RE.finditer(content):
        if match.group(2):
            package = match.group(2)
            imports.append(
                ImportInfo(
                    module=package,
                    imports=[match.group(1) or package.split("/")[-1]],
                    line=line_of(content, match.start()),
                )
            )
            continue
        block_start = match.start(3)
        for spec in _GO_SPEC_RE.finditer(match.group(3)):
            package = spec.group(2)
            imports.append(
                ImportInfo(
                    module=package,
                    imports=[spec.group(1) or package.split("/")[-1]],
                    line=line_of(content, block_start + spec.start()),
                )
            )
    return imports


_RUST_USE_RE = re.compile(r"^[ \t]*(?:pub(?:\([^)]*\))?\s+)?use\s+([^;]+);", re.MULTILINE)


def extract_rust_imports(content: str) -> List[ImportInfo]:
    imports: List[ImportInfo] = []
    for match in _RUST_USE_RE.finditer(content):
        path = " ".join(match.group(1).split())
        line = line_of(content, match.start())
        if path.endswith("}") and "::{" in path:
            module, _, group = path.partition("::{")
            names = [name.strip().split(" as ")[-1] for name in group[:-1].split(",")]
            imports.append(ImportInfo(module=module, imports=[n for n in names if n], line=line))
            continue
        module, _, item = path.rpartition("::")
        imports.append(
            ImportInfo(module=module or path, imports=[item.split(" as ")[-1].strip()], line=line)
        )
    return imports


# ---------------------------------------------------------------------------
# Export extractors
# ---------------------------------------------------------------------------

_DEFAULT_EXPORT_RE = re.compile(
    r"\bexport\s+default\s+(?:async\s+)?(?:class\s+([\w$]+)|function\s*\*?\s*([\w$]+)|([\w$]+))?"
)
_NAMED_EXPORT_RE = re.compile(
    r"\bexport\s+(?:\{([^}]*)\}|(?:declare\s+)?(?:async\s+)?"
    r"(?:const|let|var|function\*?|class|interface|type|enum|abstract\s+class)\s+([\w$]+))"
)
_DEFAULT_KEYWORDS = frozenset({"class", "function", "async", "new"})


def extract_javascript_exports(content: str) -> List[ExportInfo]:
    found: List[Tuple[int, ExportInfo]] = []

    for match in _DEFAULT_EXPORT_RE.finditer(content):
        name = match.group(1) or match.group(2) or match.group(3)
        if not name or name in _DEFAULT_KEYWORDS:
            name = "default"
        found.append(
            (match.start(), ExportInfo(name=name, type="default", line=line_of(content, match.start())))
        )

    for match in _NAMED_EXPORT_RE.finditer(content):
        line = line_of(content, match.start())
        if match.group(1) is not None:
            for name in _split_names(match.group(1)):
                found.append((match.start(), ExportInfo(name=name, type="named", line=line)))
        else:
            found.append((match.start(), ExportInfo(name=match.group(2), type="named", line=line)))

    found.sort(key=lambda item: item[0])
    return [info for _, info in found]


__all__ = [
    "Scorer",
    "SKIPPED_NAMES",
    "line_of",
    "parse_parameters",
    "brace_body",
    "arrow_body",
    "indented_body",
    "end_delimited_body",
    "extract_javascript_functions",
    "extract_python_functions",
    "extract_java_functions",
    "extract_csharp_functions",
    "extract_go_functions",
    "extract_rust_functions",
    "extract_php_functions",
    "extract_ruby_functions",
    "extract_javascript_imports",
    "extract_python_imports",
    "extract_java_imports",
    "extract_csharp_imports",
    "extract_go_imports",
    "extract_rust_imports",
    "extract_javascript_exports",
]
