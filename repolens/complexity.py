# repolens/complexity.py
"""Heuristic cyclomatic complexity via token counting.

There is no parser behind these numbers.  Each language family has an
ordered set of regular expressions for the constructs that add a decision
point (conditionals, loops, exception handlers, case labels, short-circuit
operators, ternaries); the score is ``1 + total matches``.  Expect over-counts
from keywords inside strings or comments and under-counts from unusual
formatting.  Scores are comparable across files of the same family, not an
exact McCabe value.
"""

from __future__ import annotations

import re
from typing import Iterable, Pattern, Tuple

PatternSet = Tuple[Pattern[str], ...]

__all__ = [
    "PatternSet",
    "TERNARY_PATTERNS",
    "C_STYLE_PATTERNS",
    "PYTHON_PATTERNS",
    "GO_PATTERNS",
    "RUST_PATTERNS",
    "RUBY_PATTERNS",
    "count_complexity",
]

# ``cond ? a : b``; skips ``??``, ``?.`` and ``?:`` (optional members).
_TERNARY = re.compile(r"\?(?![?.:])[^\n]*?:")
_LOGICAL = re.compile(r"&&|\|\|")

TERNARY_PATTERNS: PatternSet = (_TERNARY,)

# JavaScript, TypeScript, Java, C#, C/C++, PHP and other brace languages.
C_STYLE_PATTERNS: PatternSet = (
    _TERNARY,
    re.compile(r"\bif\s*\("),
    re.compile(r"\belse\s+if\s*\("),
    re.compile(r"\bwhile\s*\("),
    re.compile(r"\bfor\s*\("),
    re.compile(r"\bcatch\s*\("),
    re.compile(r"\bcase\s+[^:\n]*:"),
    _LOGICAL,
    re.compile(r"\bswitch\s*\("),
)

PYTHON_PATTERNS: PatternSet = (
    _TERNARY,
    re.compile(r"\bif\s+[^\n]*:"),
    re.compile(r"\belif\s+[^\n]*:"),
    re.compile(r"\bwhile\s+[^\n]*:"),
    re.compile(r"\bfor\s+[^\n]*:"),
    re.compile(r"\bexcept\s*:"),
    re.compile(r"\bexcept\s+\w[^\n]*:"),
    re.compile(r"\b(?:and|or)\b"),
)

GO_PATTERNS: PatternSet = (
    _TERNARY,
    re.compile(r"\bif\s+[^\n]*\{"),
    re.compile(r"\bfor\b[^\n]*\{"),
    re.compile(r"\bswitch\b[^\n]*\{"),
    re.compile(r"\bcase\s+[^:\n]*:"),
    _LOGICAL,
)

RUST_PATTERNS: PatternSet = (
    _TERNARY,
    re.compile(r"\bif\s+[^\n]*\{"),
    re.compile(r"\bwhile\s+[^\n]*\{"),
    re.compile(r"\bfor\s+[^\n]*\{"),
    re.compile(r"\bmatch\s+[^\n]*\{"),
    _LOGICAL,
)

RUBY_PATTERNS: PatternSet = (
    _TERNARY,
    re.compile(r"\bif\b"),
    re.compile(r"\belsif\b"),
    re.compile(r"\bunless\b"),
    re.compile(r"\bwhile\b"),
    re.compile(r"\buntil\b"),
    re.compile(r"\brescue\b"),
    re.compile(r"\bwhen\b"),
    re.compile(r"&&|\|\||\b(?:and|or)\b"),
)


def count_complexity(content: str, patterns: Iterable[Pattern[str]]) -> int:
    """Return ``1 + number of matches`` of every pattern in *content*."""

    complexity = 1
    for pattern in patterns:
        complexity += sum(1 for _ in pattern.finditer(content))
    return complexity
