# file: tests/test_languages.py

import pytest

from repolens.languages import (
    TEXT,
    base_language,
    classify,
    classify_from_content,
    display_language,
    extension_of,
    is_backend,
    is_binary_path,
)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("src/App.tsx", "typescript"),
        ("src/main.JS", "javascript"),
        ("lib/module.py", "python"),
        ("Main.java", "java"),
        ("include/util.h", "c"),
        ("engine.cpp", "cpp"),
        ("Program.cs", "csharp"),
        ("lib/tool.rb", "ruby"),
        ("cmd/main.go", "go"),
        ("src/lib.rs", "rust"),
        ("App.swift", "swift"),
        ("build.kts", "kotlin"),
        ("styles/site.scss", "scss"),
        ("config.yml", "yaml"),
        ("README.md", "markdown"),
        ("scripts/run.sh", "shell"),
        ("query.sql", "sql"),
        ("analysis.R", "r"),
        ("main.dart", "dart"),
        ("Dockerfile", "dockerfile"),
        ("Gemfile", "ruby"),
        ("LICENSE", TEXT),
        ("notes.unknownext", TEXT),
    ],
)
def test_classify_by_extension(path, expected):
    assert classify(path) == expected


@pytest.mark.parametrize(
    "path, expected",
    [
        ("server/index.js", "javascript-backend"),
        ("src/api/users.ts", "typescript-backend"),
        ("backend/app.py", "python-backend"),
        ("routes/home.rb", "ruby-backend"),
        ("src/apiClient.js", "javascript-backend"),
        ("server/styles.css", "css"),
        ("src/components/Button.tsx", "typescript"),
    ],
)
def test_backend_override(path, expected):
    assert classify(path) == expected


def test_backend_helpers():
    assert is_backend("go-backend")
    assert not is_backend("go")
    assert base_language("python-backend") == "python"
    assert base_language("python") == "python"


def test_extension_and_binary_helpers():
    assert extension_of("a/b/photo.PNG") == ".png"
    assert extension_of("Makefile") == ""
    assert extension_of("dir\\file.Py") == ".py"
    assert is_binary_path("assets/logo.png")
    assert is_binary_path("data/app.sqlite")
    assert not is_binary_path("src/app.py")


def test_display_language():
    assert display_language("src/a.tsx") == "TypeScript"
    assert display_language("b.py") == "Python"
    assert display_language("Makefile") is None
    assert display_language("notes.txt") is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("#!/usr/bin/env python3\nprint('x')\n", "python"),
        ("#!/usr/bin/env node\nconsole.log(1)\n", "javascript"),
        ("#!/bin/bash\necho hi\n", "shell"),
        ("import React from 'react';\n", "javascript"),
        ("export const x = 1;\n", "javascript"),
        ("def main():\n    pass\n", "python"),
        ("import os\n", "python"),
        ("just some words\n", TEXT),
        ("", TEXT),
    ],
)
def test_classify_from_content(text, expected):
    assert classify_from_content(text) == expected
