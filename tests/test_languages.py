"""Tests for language detection and rule tables."""

from __future__ import annotations

from semmap.languages import (
    Language,
    UNKNOWN_LANGUAGE,
    detect_language,
    extensions_for,
    language_tag,
    rules_for,
)


def test_detect_language_by_extension() -> None:
    assert detect_language("src/app.ts").language is Language.TYPESCRIPT
    assert detect_language("src/App.TSX").language is Language.TYPESCRIPT
    assert detect_language("web/index.mjs").language is Language.JAVASCRIPT
    assert detect_language("pkg/main.go").language is Language.GO
    assert detect_language("tool/run.py").language is Language.PYTHON
    assert detect_language("README.md") is None


def test_detect_language_respects_enabled_languages() -> None:
    assert detect_language("pkg/main.go", ["typescript"]) is None
    assert language_tag("pkg/main.go", ["typescript"]) == UNKNOWN_LANGUAGE
    assert language_tag("pkg/main.go") == "go"


def test_extensions_for_selected_languages() -> None:
    extensions = extensions_for(["python", "go"])

    assert extensions == [".py", ".pyi", ".go"]
    assert ".ts" in extensions_for()


def test_rules_for_is_case_insensitive() -> None:
    languages = [rules.language for rules in rules_for(["TypeScript"])]

    assert languages == [Language.TYPESCRIPT]
