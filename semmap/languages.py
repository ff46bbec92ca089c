"""Per-language lexical extraction rules.

Rules are plain regular expressions over raw file text. Named groups carry
the captured parts:

* ``name``: the declared identifier
* ``extends`` / ``implements``: heritage lists for classes and interfaces
* ``params`` / ``return_type``: function signature parts
* ``receiver``: Go method receiver type
* ``indent``: leading whitespace, non-empty for nested (method) definitions
* ``items`` / ``source``: imported names and the module they come from
* ``type``: declared type of a variable
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Pattern, Sequence, Tuple

UNKNOWN_LANGUAGE = "unknown"


class Language(str, Enum):
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    GO = "go"


@dataclass(frozen=True)
class LanguageRules:
    """Extraction rules for one language."""

    language: Language
    extensions: Tuple[str, ...]
    classes: Tuple[Pattern[str], ...] = ()
    functions: Tuple[Pattern[str], ...] = ()
    interfaces: Tuple[Pattern[str], ...] = ()
    types: Tuple[Pattern[str], ...] = ()
    imports: Tuple[Pattern[str], ...] = ()
    variables: Tuple[Pattern[str], ...] = ()
    export_marker: Optional[str] = None
    const_markers: Tuple[str, ...] = ()
    # "uppercase": exported when the name starts upper-case (Go)
    # "underscore": private when the name starts with "_" (Python)
    naming_visibility: Optional[str] = None
    upper_case_constants: bool = False


def _compile(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(pattern, re.MULTILINE) for pattern in patterns)


_TS_GENERIC = r"(?:\s*<[^>{}]*>)?"

_ECMASCRIPT_FUNCTIONS = (
    r"\b(?:async\s+)?function\s*\*?\s*(?P<name>[A-Za-z_$][\w$]*)"
    + _TS_GENERIC
    + r"\s*\((?P<params>[^)]*)\)\s*(?::\s*(?P<return_type>[^{;=\n]+?))?\s*\{",
    r"\b(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*(?::[^=;\n]+)?=\s*(?:async\s+)?"
    r"\((?P<params>[^)]*)\)\s*(?::\s*(?P<return_type>[^=;\n]+?))?\s*=>",
    r"^(?P<indent>[ \t]+)(?:(?:public|private|protected|static|async|readonly|override|abstract|get|set)\s+)*"
    r"(?!(?:if|for|while|switch|catch|function|return|with|else|do|new|typeof)\b)"
    r"(?P<name>[A-Za-z_$][\w$]*)"
    + _TS_GENERIC
    + r"\s*\((?P<params>[^)]*)\)\s*(?::\s*(?P<return_type>[^{;=\n]+?))?\s*\{",
)

_ECMASCRIPT_IMPORTS = (
    r"\bimport\s+(?:type\s+)?(?P<items>[\w$*{}\s,]+?)\s+from\s+['\"](?P<source>[^'\"\n]+)['\"]",
    r"^\s*import\s+['\"](?P<source>[^'\"\n]+)['\"]",
    r"\b(?:const|let|var)\s+(?P<items>[\w$]+|\{[^}]*\})\s*=\s*require\(\s*['\"](?P<source>[^'\"\n]+)['\"]\s*\)",
)

_ECMASCRIPT_CLASS = (
    r"\b(?:abstract\s+)?class\s+(?P<name>[A-Za-z_$][\w$]*)"
    + _TS_GENERIC
    + r"(?:\s+extends\s+(?P<extends>[\w$.]+)"
    + _TS_GENERIC
    + r")?(?:\s+implements\s+(?P<implements>[\w$.,\s]+?))?\s*\{"
)

_ECMASCRIPT_VARIABLE = (
    r"\b(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*(?::\s*(?P<type>[^=;\n]+?))?\s*=(?!=)"
)

TYPESCRIPT = LanguageRules(
    language=Language.TYPESCRIPT,
    extensions=(".ts", ".tsx", ".mts", ".cts"),
    classes=_compile(_ECMASCRIPT_CLASS),
    functions=_compile(*_ECMASCRIPT_FUNCTIONS),
    interfaces=_compile(
        r"\binterface\s+(?P<name>[A-Za-z_$][\w$]*)"
        + _TS_GENERIC
        + r"(?:\s+extends\s+(?P<extends>[\w$.,\s<>]+?))?\s*\{"
    ),
    types=_compile(r"\btype\s+(?P<name>[A-Za-z_$][\w$]*)" + _TS_GENERIC + r"\s*=(?!=)"),
    imports=_compile(*_ECMASCRIPT_IMPORTS),
    variables=_compile(_ECMASCRIPT_VARIABLE),
    export_marker="export",
    const_markers=("const",),
)

JAVASCRIPT = LanguageRules(
    language=Language.JAVASCRIPT,
    extensions=(".js", ".jsx", ".mjs", ".cjs"),
    classes=_compile(_ECMASCRIPT_CLASS),
    functions=_compile(*_ECMASCRIPT_FUNCTIONS),
    imports=_compile(*_ECMASCRIPT_IMPORTS),
    variables=_compile(_ECMASCRIPT_VARIABLE),
    export_marker="export",
    const_markers=("const",),
)

PYTHON = LanguageRules(
    language=Language.PYTHON,
    extensions=(".py", ".pyi"),
    classes=_compile(r"^[ \t]*class\s+(?P<name>\w+)\s*(?:\((?P<extends>[^)]*)\))?\s*:"),
    functions=_compile(
        r"^(?P<indent>[ \t]*)(?:async\s+)?def\s+(?P<name>\w+)\s*\((?P<params>[^)]*)\)"
        r"\s*(?:->\s*(?P<return_type>[^:\n]+?))?\s*:"
    ),
    types=_compile(
        r"^type[ \t]+(?P<name>[A-Za-z_]\w*)[ \t]*(?:\[[^\]\n]*\])?[ \t]*=",
        r"^(?P<name>[A-Za-z_]\w*)[ \t]*:[ \t]*(?:typing\.)?TypeAlias[ \t]*=",
    ),
    imports=_compile(
        r"^[ \t]*from\s+(?P<source>\.*[\w.]*)\s+import\s+(?P<items>\([^)]*\)|[^\n#]+)",
        r"^[ \t]*import[ \t]+(?P<source>[\w.]+)",
    ),
    variables=_compile(
        r"^(?!(?:if|elif|else|try|except|finally|for|while|with|return)\b)"
        r"(?P<name>[A-Za-z_]\w*)[ \t]*(?::[ \t]*(?P<type>[^=\n]+?))?[ \t]*=(?!=)"
    ),
    naming_visibility="underscore",
    upper_case_constants=True,
)

GO = LanguageRules(
    language=Language.GO,
    extensions=(".go",),
    classes=_compile(r"^type\s+(?P<name>\w+)\s+struct\s*\{"),
    functions=_compile(
        r"^func\s+(?:\(\s*(?:\w+\s+)?\*?\s*(?P<receiver>\w+)(?:\[[^\]]*\])?\s*\)\s*)?(?P<name>\w+)"
        r"(?:\[[^\]]*\])?\s*\((?P<params>[^)]*)\)\s*(?P<return_type>[^{\n]*?)\s*\{"
    ),
    interfaces=_compile(r"^type\s+(?P<name>\w+)\s+interface\s*\{"),
    types=_compile(
        r"^type[ \t]+(?P<name>\w+)[ \t]+(?:=[ \t]*)?(?!struct\b|interface\b)[\w\[\]*.]+[ \t]*$"
    ),
    imports=_compile(
        r"^import\s+(?:[\w.]+\s+)?\"(?P<source>[^\"\n]+)\"",
        r"^[ \t]+(?:[\w.]+[ \t]+)?\"(?P<source>[^\"\n]+)\"[ \t]*$",
    ),
    variables=_compile(r"^[ \t]*(?:var|const)\s+(?P<name>\w+)(?:[ \t]+(?P<type>[\w\[\]*.]+))?"),
    const_markers=("const",),
    naming_visibility="uppercase",
)

LANGUAGE_RULES: Dict[Language, LanguageRules] = {
    rules.language: rules for rules in (TYPESCRIPT, JAVASCRIPT, PYTHON, GO)
}


def rules_for(languages: Optional[Iterable[str]] = None) -> Sequence[LanguageRules]:
    """Return the rule tables for the requested language tags (all when ``None``)."""
    if languages is None:
        return list(LANGUAGE_RULES.values())
    wanted = {language.lower() for language in languages}
    return [rules for rules in LANGUAGE_RULES.values() if rules.language.value in wanted]


def extensions_for(languages: Optional[Iterable[str]] = None) -> list[str]:
    extensions: list[str] = []
    for rules in rules_for(languages):
        for extension in rules.extensions:
            if extension not in extensions:
                extensions.append(extension)
    return extensions


def detect_language(
    path: str, languages: Optional[Iterable[str]] = None
) -> Optional[LanguageRules]:
    """Pick the table whose extension is the longest suffix of ``path``."""
    lower = path.lower()
    best: Optional[LanguageRules] = None
    best_length = 0
    for rules in rules_for(languages):
        for extension in rules.extensions:
            if lower.endswith(extension) and len(extension) > best_length:
                best = rules
                best_length = len(extension)
    return best


def language_tag(path: str, languages: Optional[Iterable[str]] = None) -> str:
    rules = detect_language(path, languages)
    return rules.language.value if rules is not None else UNKNOWN_LANGUAGE


__all__ = [
    "LANGUAGE_RULES",
    "Language",
    "LanguageRules",
    "UNKNOWN_LANGUAGE",
    "detect_language",
    "extensions_for",
    "language_tag",
    "rules_for",
]
