# file: tests/test_parser.py

import pytest

from repolens import registry
from repolens.complexity import C_STYLE_PATTERNS, PYTHON_PATTERNS, count_complexity
from repolens.parser import calculate_complexity, count_lines, parse_file
from repolens.registry import LanguageSupport

# ---------------------------------------------------------------------------
# Basics
# ---------------------------------------------------------------------------


def test_python_function_with_branch():
    parsed = parse_file("app.py", "def foo(a, b):\n    if a:\n        return b\n")

    assert parsed.lines == 3
    assert parsed.language == "python"
    assert parsed.complexity >= 2
    assert len(parsed.functions) == 1
    func = parsed.functions[0]
    assert func.name == "foo"
    assert func.parameters == ["a", "b"]
    assert func.line == 1
    assert func.complexity >= 2


@pytest.mark.parametrize(
    "content, expected",
    [("", 0), ("a", 1), ("a\n", 1), ("a\nb", 2), ("a\nb\n", 2), ("\n\n", 2)],
)
def test_count_lines(content, expected):
    assert count_lines(content) == expected


def test_binary_file_is_skipped():
    content = "x" * 2_000_000
    parsed = parse_file("image.png", content)

    assert parsed.size == 2_000_000
    assert parsed.lines == 0
    assert parsed.complexity == 0
    assert parsed.functions == [] and parsed.imports == [] and parsed.exports == []
    assert parsed.content == ""


def test_oversized_content_is_skipped():
    content = "if (a) {}\n" * 10
    parsed = parse_file("big.js", content, max_chars=50)

    assert parsed.lines == 0
    assert parsed.complexity == 0
    assert parsed.size == len(content)


def test_plain_text_scores_one():
    parsed = parse_file("notes.txt", "hello world\n")
    assert parsed.language == "text"
    assert parsed.complexity == 1
    assert parsed.functions == []


def test_complexity_is_monotonic():
    base = "function f(a) {\n  return a;\n}\n"
    more = "function f(a) {\n  if (a) { return a; }\n  return a;\n}\n"
    assert calculate_complexity(more, "javascript") > calculate_complexity(base, "javascript")


def test_text_file_falls_back_to_content_classifier():
    # A shebang Python script without extension is scored with Python patterns.
    script = "#!/usr/bin/env python\nif x:\n    pass\n"
    assert calculate_complexity(script, "text") == 2


def test_count_complexity_patterns():
    js = "if (a && b) { x = c ? 1 : 2; } else if (d) {} for (;;) {} while (e) {}"
    # if, else-if (counted by both if and else-if patterns), &&, ternary, for, while
    assert count_complexity(js, C_STYLE_PATTERNS) == 1 + 2 + 1 + 1 + 1 + 1 + 1
    py = "if a and b:\n    pass\nelif c:\n    pass\n"
    assert count_complexity(py, PYTHON_PATTERNS) == 1 + 1 + 1 + 1


# ---------------------------------------------------------------------------
# JavaScript / TypeScript
# ---------------------------------------------------------------------------

JS_SOURCE = """\
import React, { useState, useEffect as useFx } from 'react';
import * as path from "path";
import './styles.css';
const fs = require('fs');
const { join, resolve } = require('path');

export function add(a, b = 2) {
  if (a > b) {
    return a;
  }
  return a + b;
}

export const double = (x) => x * 2;

const handler = async (req, res) => {
  if (req.ok && res) {
    return 1;
  }
};

class Widget {
  render(props) {
    for (const p of props) {
      console.log(p);
    }
  }
}

export default Widget;
export { handler as requestHandler, double };
"""


def test_javascript_extraction():
    parsed = parse_file("src/app.js", JS_SOURCE)
    names = {f.name: f for f in parsed.functions}

    assert set(names) == {"add", "double", "handler", "render"}
    assert names["add"].parameters == ["a", "b"]
    assert names["add"].line == 7
    assert names["add"].complexity == 2
    assert names["handler"].complexity == 3
    assert names["render"].complexity == 2
    assert names["double"].complexity == 1

    modules = [imp.module for imp in parsed.imports]
    assert modules == ["react", "path", "./styles.css", "fs", "path"]
    assert parsed.imports[0].imports == ["React", "useState", "useFx"]
    assert parsed.imports[1].imports == ["path"]
    assert parsed.imports[2].imports == []
    assert parsed.imports[4].imports == ["join", "resolve"]
    assert parsed.imports[3].line == 4

    exports = [(e.name, e.type) for e in parsed.exports]
    assert ("add", "named") in exports
    assert ("double", "named") in exports
    assert ("Widget", "default") in exports
    assert ("requestHandler", "named") in exports


def test_control_flow_blocks_are_not_functions():
    source = "function run() {\n  if (x) {\n  }\n  while (y) {\n  }\n}\n"
    parsed = parse_file("run.js", source)
    assert [f.name for f in parsed.functions] == ["run"]


def test_typescript_return_types():
    source = "function greet(name: string, times = 1): string {\n  return name;\n}\n"
    parsed = parse_file("greet.ts", source)
    func = parsed.functions[0]
    assert func.name == "greet"
    assert func.parameters == ["name", "times"]
    assert func.return_type == "string"


def test_backend_flavour_uses_base_extractors():
    parsed = parse_file("server/index.js", "function start() {\n  return 1;\n}\n")
    assert parsed.language == "javascript-backend"
    assert [f.name for f in parsed.functions] == ["start"]


# ---------------------------------------------------------------------------
# Python
# ---------------------------------------------------------------------------

PY_SOURCE = """\
import os, sys as system
from typing import (
    List,
    Optional as Opt,
)
from .models import Thing


class Service:
    def run(self, items: List[int], limit: int = 10) -> int:
        total = 0
        for item in items:
            if item > limit:
                break
            total += item
        return total

    async def fetch(self):
        return None


def helper():
    pass
"""


def test_python_extraction():
    parsed = parse_file("pkg/service.py", PY_SOURCE)
    funcs = {f.name: f for f in parsed.functions}

    assert set(funcs) == {"run", "fetch", "helper"}
    assert funcs["run"].parameters == ["self", "items", "limit"]
    assert funcs["run"].return_type == "int"
    assert funcs["run"].line == 10
    assert funcs["run"].complexity == 3
    assert funcs["fetch"].complexity == 1
    assert funcs["helper"].line == 22

    imports = [(i.module, i.imports) for i in parsed.imports]
    assert imports == [
        ("os", ["os"]),
        ("sys", ["sys"]),
        ("typing", ["List", "Optional"]),
        (".models", ["Thing"]),
    ]
    assert parsed.exports == []


def test_python_tab_indented_method_keeps_its_body():
    source = "class A:\n\tdef m(self, x):\n\t\tif x:\n\t\t\treturn 1\n\t\treturn 2\n"
    (method,) = parse_file("a.py", source).functions

    assert method.name == "m"
    assert method.line == 2
    assert method.complexity == 2


# ---------------------------------------------------------------------------
# Other languages
# ---------------------------------------------------------------------------


def test_java_extraction():
    source = """\
package com.example;

import java.util.List;
import static org.junit.Assert.assertTrue;

public class Greeter {
    public Greeter(String name) {
        this.name = name;
    }

    public static String greet(String name, int times) {
        if (times > 1) {
            return name;
        }
        return "";
    }
}
"""
    parsed = parse_file("src/Greeter.java", source)
    funcs = {f.name: f for f in parsed.functions}
    assert set(funcs) == {"Greeter", "greet"}
    assert funcs["greet"].return_type == "String"
    assert funcs["greet"].parameters == ["String name", "int times"]
    assert funcs["greet"].complexity == 2
    assert funcs["Greeter"].return_type is None
    assert [(i.module, i.imports) for i in parsed.imports] == [
        ("java.util", ["List"]),
        ("org.junit.Assert", ["assertTrue"]),
    ]


def test_csharp_extraction():
    source = """\
using System;
using Json = Newtonsoft.Json;

public class Calc
{
    public int Add(int a, int b)
    {
        return a > b ? a : b;
    }
}
"""
    parsed = parse_file("Calc.cs", source)
    assert [f.name for f in parsed.functions] == ["Add"]
    assert parsed.functions[0].complexity == 2
    assert [(i.module, i.imports) for i in parsed.imports] == [
        ("System", ["System"]),
        ("Newtonsoft.Json", ["Json"]),
    ]


def test_go_extraction():
    source = """\
package main

import "fmt"
import (
    "os"
    str "strings"
)

func (s *Server) Handle(w Writer, r *Request) error {
    if r == nil {
        return nil
    }
    return nil
}

func main() {
    fmt.Println(os.Args)
}
"""
    parsed = parse_file("cmd/main.go", source)
    funcs = {f.name: f for f in parsed.functions}
    assert set(funcs) == {"Handle", "main"}
    assert funcs["Handle"].return_type == "error"
    assert funcs["Handle"].complexity == 2
    assert [(i.module, i.imports, i.line) for i in parsed.imports] == [
        ("fmt", ["fmt"], 3),
        ("os", ["os"], 5),
        ("strings", ["str"], 6),
    ]


def test_rust_extraction():
    source = """\
use std::collections::HashMap;
use std::io::{self, Read};

pub fn parse<T: Clone>(input: &str, count: usize) -> Option<T> {
    match input {
        _ => None,
    }
}
"""
    parsed = parse_file("src/lib.rs", source)
    assert [f.name for f in parsed.functions] == ["parse"]
    func = parsed.functions[0]
    assert func.parameters == ["input", "count"]
    assert func.return_type == "Option<T>"
    assert func.complexity == 2
    assert [(i.module, i.imports) for i in parsed.imports] == [
        ("std::collections", ["HashMap"]),
        ("std::io", ["self", "Read"]),
    ]


def test_php_extraction():
    source = "<?php\nfunction total($items, $tax = 0): float {\n  foreach ($items as $i) {}\n  return 0;\n}\n"
    parsed = parse_file("lib/total.php", source)
    func = parsed.functions[0]
    assert func.name == "total"
    assert func.parameters == ["$items", "$tax"]
    assert func.return_type == "float"


def test_ruby_extraction():
    source = """\
class Greeter
  def self.build(name)
    new(name)
  end

  def greet(times)
    if times > 1
      puts "hi"
    end
  end
end
"""
    parsed = parse_file("lib/greeter.rb", source)
    funcs = {f.name: f for f in parsed.functions}
    assert set(funcs) == {"build", "greet"}
    assert funcs["build"].parameters == ["name"]
    assert funcs["build"].complexity == 1
    assert funcs["greet"].complexity == 2


def test_language_without_extractors_has_no_functions():
    parsed = parse_file("style.css", "a { color: red; }\n")
    assert parsed.functions == []
    assert parsed.imports == []


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


def test_package_json_gets_manifest():
    content = '{"name": "demo", "version": "1.2.3", "dependencies": {"react": "^18"}, "devDependencies": {"vite": "^5"}}'
    parsed = parse_file("package.json", content)
    assert parsed.manifest is not None
    assert parsed.manifest.kind == "package-json"
    assert parsed.manifest.dependencies == ["react"]
    assert parsed.manifest.dev_dependencies == ["vite"]
    assert parsed.lines == 1


def test_malformed_manifest_is_not_an_error():
    parsed = parse_file("package.json", "{not json")
    assert parsed.manifest is None
    assert parsed.lines == 1


# ---------------------------------------------------------------------------
# Degradation
# ---------------------------------------------------------------------------


def test_extractor_failure_degrades(monkeypatch, observer):
    def explode(content, score):
        raise RuntimeError("boom")

    broken = LanguageSupport(complexity_patterns=PYTHON_PATTERNS, function_extractor=explode)
    monkeypatch.setitem(registry._REGISTRY, "python", broken)

    parsed = parse_file("app.py", "def f():\n    pass\n", observer=observer)

    assert parsed.lines == 2
    assert parsed.complexity == 0
    assert parsed.functions == []
    assert parsed.content == ""
    degraded = observer.names("parse_degraded")
    assert len(degraded) == 1
    assert degraded[0][0] == "app.py"


def test_register_language(monkeypatch):
    monkeypatch.setattr(registry, "_REGISTRY", dict(registry._REGISTRY))
    registry.register_language("markdown", LanguageSupport(complexity_patterns=C_STYLE_PATTERNS))
    assert registry.support_for("markdown").has_dedicated_patterns
    assert not registry.support_for("unknown-lang").has_dedicated_patterns
