"""Heuristic element extraction from raw file text."""

from __future__ import annotations

import hashlib
import posixpath
import re
from typing import Any, Dict, Iterable, Iterator, List, Optional, Pattern, Tuple

from .languages import Language, LanguageRules
from .models import CodeElement, ElementKind, SourceLocation, Visibility

_MARKER_WINDOW = 10
_COMMENT_LOOKBACK = 4000
_DOCSTRING = re.compile(r"\s*(?:\"\"\"(.*?)\"\"\"|'''(.*?)''')", re.DOTALL)
_GENERIC_ARGS = re.compile(r"<[^<>]*>")
_METHOD_MODIFIERS = {
    "private": Visibility.PRIVATE,
    "protected": Visibility.PROTECTED,
    "public": Visibility.PUBLIC,
}


def element_id(kind: ElementKind, file_path: str, qualified_name: str, offset: int) -> str:
    digest = hashlib.sha1(
        f"{file_path}\0{kind.value}\0{qualified_name}\0{offset}".encode("utf-8")
    ).hexdigest()
    return f"{kind.value}-{digest[:16]}"


def file_element_id(file_path: str) -> str:
    digest = hashlib.sha1(file_path.encode("utf-8")).hexdigest()
    return f"file-{digest[:16]}"


def normalize_module_source(source: str, language: Language) -> str:
    """Turn an import specifier into a path fragment usable for file matching."""
    value = source.strip().strip("'\"")
    if language is Language.PYTHON:
        value = value.lstrip(".").replace(".", "/")
    while value.startswith(("./", "../")):
        value = value.split("/", 1)[1]
    return value.strip("/")


class Extractor:
    """Runs one language's rule table over a file and yields code elements."""

    def __init__(self, rules: LanguageRules) -> None:
        self.rules = rules

    def extract(self, content: str, file_path: str) -> List[CodeElement]:
        elements = [self._file_element(content, file_path)]
        elements.extend(self._classes(content, file_path))
        elements.extend(self._functions(content, file_path))
        elements.extend(self._interfaces(content, file_path))
        elements.extend(self._types(content, file_path))
        elements.extend(self._imports(content, file_path))
        elements.extend(self._variables(content, file_path))
        return elements

    # ------------------------------------------------------------------
    # Categories

    def _file_element(self, content: str, file_path: str) -> CodeElement:
        return CodeElement(
            id=file_element_id(file_path),
            kind=ElementKind.FILE,
            name=posixpath.basename(file_path) or file_path,
            qualified_name=file_path,
            file_path=file_path,
            location=SourceLocation(start_line=1, end_line=content.count("\n") + 1),
            language=self.rules.language.value,
            visibility=Visibility.PUBLIC,
            metadata={"size": len(content.encode("utf-8"))},
        )

    def _classes(self, content: str, file_path: str) -> Iterator[CodeElement]:
        for match in _iter_matches(self.rules.classes, content):
            name = _group(match, "name")
            if not name:
                continue
            bases = _split_names(_group(match, "extends"))
            implements = _split_names(_group(match, "implements")) + bases[1:]
            yield self._element(
                ElementKind.CLASS,
                name,
                file_path,
                content,
                match,
                visibility=self._visibility(content, match, name),
                metadata={"extends": bases[0] if bases else None, "implements": implements},
                documentation=self._documentation(content, match),
            )

    def _functions(self, content: str, file_path: str) -> Iterator[CodeElement]:
        for match in _iter_matches(self.rules.functions, content):
            function_name = _group(match, "name")
            receiver = _group(match, "receiver")
            name = receiver or function_name
            if not name:
                continue
            indent = _group(match, "indent")
            kind = ElementKind.METHOD if receiver or indent else ElementKind.FUNCTION
            signature = match.group(0).split("{", 1)[0].strip()
            metadata: Dict[str, Any] = {
                "params": parse_params(_group(match, "params"), self.rules.language),
                "return_type": (_group(match, "return_type") or "").strip() or None,
                "async": bool(re.search(r"\basync\b", signature)),
            }
            if receiver:
                metadata["receiver"] = receiver
                metadata["method_name"] = function_name

            visibility = self._visibility(content, match, function_name or name)
            if indent and self.rules.export_marker:
                for modifier, level in _METHOD_MODIFIERS.items():
                    if re.search(rf"\b{modifier}\b", signature):
                        visibility = level
                        break

            yield self._element(
                kind,
                name,
                file_path,
                content,
                match,
                visibility=visibility,
                metadata=metadata,
                signature=signature,
                documentation=self._documentation(content, match),
            )

    def _interfaces(self, content: str, file_path: str) -> Iterator[CodeElement]:
        for match in _iter_matches(self.rules.interfaces, content):
            name = _group(match, "name")
            if not name:
                continue
            yield self._element(
                ElementKind.INTERFACE,
                name,
                file_path,
                content,
                match,
                visibility=Visibility.PUBLIC,
                metadata={"extends": _split_names(_group(match, "extends"))},
                documentation=self._documentation(content, match),
            )

    def _types(self, content: str, file_path: str) -> Iterator[CodeElement]:
        for match in _iter_matches(self.rules.types, content):
            name = _group(match, "name")
            if not name:
                continue
            yield self._element(
                ElementKind.TYPE,
                name,
                file_path,
                content,
                match,
                visibility=Visibility.PUBLIC,
                metadata={},
                documentation=self._documentation(content, match),
            )

    def _imports(self, content: str, file_path: str) -> Iterator[CodeElement]:
        for match in _iter_matches(self.rules.imports, content):
            source = _group(match, "source") or ""
            module = normalize_module_source(source, self.rules.language)
            name = module or source
            if not name:
                continue
            yield self._element(
                ElementKind.IMPORT,
                name,
                file_path,
                content,
                match,
                qualified_name=f"{file_path}:import:{name}",
                visibility=Visibility.PRIVATE,
                metadata={
                    "source": source,
                    "module": module,
                    "items": parse_import_items(_group(match, "items")),
                },
            )

    def _variables(self, content: str, file_path: str) -> Iterator[CodeElement]:
        for match in _iter_matches(self.rules.variables, content):
            name = _group(match, "name")
            if not name:
                continue
            window = _preceding(content, match.start("name"))
            is_constant = any(marker in window for marker in self.rules.const_markers)
            if self.rules.upper_case_constants and name.isupper():
                is_constant = True
            declared_type = (_group(match, "type") or "").strip() or None
            yield self._element(
                ElementKind.CONSTANT if is_constant else ElementKind.VARIABLE,
                name,
                file_path,
                content,
                match,
                visibility=self._visibility(content, match, name),
                metadata={"type": declared_type},
            )

    # ------------------------------------------------------------------
    # Helpers

    def _element(
        self,
        kind: ElementKind,
        name: str,
        file_path: str,
        content: str,
        match: re.Match[str],
        *,
        visibility: Visibility,
        metadata: Dict[str, Any],
        qualified_name: Optional[str] = None,
        signature: Optional[str] = None,
        documentation: Optional[str] = None,
    ) -> CodeElement:
        qualified = qualified_name or f"{file_path}:{name}"
        start_line, start_column = _position(content, match.start())
        end_line, end_column = _position(content, match.end())
        return CodeElement(
            id=element_id(kind, file_path, qualified, match.start()),
            kind=kind,
            name=name,
            qualified_name=qualified,
            file_path=file_path,
            location=SourceLocation(
                start_line=start_line,
                end_line=end_line,
                start_column=start_column,
                end_column=end_column,
            ),
            language=self.rules.language.value,
            visibility=visibility,
            metadata=metadata,
            signature=signature,
            documentation=documentation,
        )

    def _visibility(self, content: str, match: re.Match[str], name: str) -> Visibility:
        naming = self.rules.naming_visibility
        if naming == "uppercase":
            return Visibility.PUBLIC if name[:1].isupper() else Visibility.PRIVATE
        if naming == "underscore":
            return Visibility.PRIVATE if name.startswith("_") else Visibility.PUBLIC
        marker = self.rules.export_marker
        if marker and marker in _preceding(content, match.start()):
            return Visibility.PUBLIC
        return Visibility.PRIVATE

    def _documentation(self, content: str, match: re.Match[str]) -> Optional[str]:
        if self.rules.language is Language.PYTHON:
            return _python_docstring(content, match.end())
        return _leading_comment(content, match.start())


def parse_params(raw: Optional[str], language: Language) -> List[Dict[str, Any]]:
    """Split a parameter list into ``{"name", "type", "optional"}`` entries."""
    params: List[Dict[str, Any]] = []
    for piece in _split_top_level(raw or ""):
        piece = piece.strip()
        if not piece or piece in {"*", "/"}:
            continue
        optional = False
        if "=" in piece:
            piece = piece.split("=", 1)[0].strip()
            optional = True
        param_type: Optional[str] = None
        if ":" in piece:
            piece, param_type = (part.strip() for part in piece.split(":", 1))
        elif language is Language.GO and " " in piece:
            piece, param_type = (part.strip() for part in piece.split(None, 1))
        if piece.endswith("?"):
            piece = piece[:-1]
            optional = True
        name = piece.lstrip(".*").strip()
        if not name:
            continue
        params.append({"name": name, "type": param_type or None, "optional": optional})
    return params


def parse_import_items(raw: Optional[str]) -> List[str]:
    """Return imported names as written, aliases included (``Foo as Bar``)."""
    if not raw:
        return []
    cleaned = raw.replace("{", ",").replace("}", ",").replace("(", ",").replace(")", ",")
    items: List[str] = []
    for part in cleaned.split(","):
        item = " ".join(part.split())
        if item.startswith("type "):
            item = item[len("type ") :]
        if item and item not in items:
            items.append(item)
    return items


def strip_alias(item: str) -> str:
    return re.split(r"\s+as\s+", item.strip(), maxsplit=1)[0].strip()


def _iter_matches(patterns: Iterable[Pattern[str]], content: str) -> Iterator[re.Match[str]]:
    for pattern in patterns:
        yield from pattern.finditer(content)


def _group(match: re.Match[str], name: str) -> Optional[str]:
    if name not in match.re.groupindex:
        return None
    return match.group(name)


def _preceding(content: str, index: int) -> str:
    return content[max(0, index - _MARKER_WINDOW) : index]


def _position(content: str, index: int) -> Tuple[int, int]:
    line = content.count("\n", 0, index) + 1
    column = index - (content.rfind("\n", 0, index) + 1) + 1
    return line, column


def _split_names(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    text = raw
    while _GENERIC_ARGS.search(text):
        text = _GENERIC_ARGS.sub("", text)
    names: List[str] = []
    for part in text.split(","):
        name = part.strip()
        if not name or "=" in name or name == "object":
            continue
        names.append(name)
    return names


def _split_top_level(raw: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in raw:
        if char in "([{<":
            depth += 1
        elif char in ")]}>" and depth:
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def _leading_comment(content: str, start: int) -> Optional[str]:
    line_start = content.rfind("\n", 0, start) + 1
    before = content[max(0, line_start - _COMMENT_LOOKBACK) : line_start].rstrip()
    if before.endswith("*/"):
        opening = before.rfind("/**")
        if opening == -1:
            return None
        body = before[opening + 3 : -2]
        lines = [line.strip().lstrip("*").strip() for line in body.splitlines()]
        text = "\n".join(line for line in lines if line)
        return text or None

    comments: List[str] = []
    for line in reversed(before.splitlines()):
        stripped = line.strip()
        if not stripped.startswith("//"):
            break
        comments.append(stripped[2:].strip())
    text = "\n".join(reversed(comments)).strip()
    return text or None


def _python_docstring(content: str, end: int) -> Optional[str]:
    match = _DOCSTRING.match(content, end)
    if match is None:
        return None
    text = (match.group(1) or match.group(2) or "").strip()
    return text or None


__all__ = [
    "Extractor",
    "element_id",
    "file_element_id",
    "normalize_module_source",
    "parse_import_items",
    "parse_params",
    "strip_alias",
]
