"""Tests for relationship inference."""

from __future__ import annotations

import pytest

from semmap.analyzers.relationships import RelationshipBuilder
from semmap.config import MapConfig
from semmap.models import ElementKind, RelationshipKind
from tests._fixtures.elements import make_element, map_of


def _import(element_id: str, module: str, items: list[str], file_path: str = "src/app.ts"):  # type: ignore[no-untyped-def]
    return make_element(
        element_id,
        ElementKind.IMPORT,
        module,
        file_path,
        metadata={"source": f"./{module}", "module": module, "items": items},
    )


def _kinds(semantic_map, kind: RelationshipKind) -> set[tuple[str, str]]:  # type: ignore[no-untyped-def]
    return {
        (rel.source_id, rel.target_id)
        for rel in semantic_map.relationships.values()
        if rel.kind == kind
    }


def test_files_contain_their_elements() -> None:
    semantic_map = map_of(
        make_element("file-app", ElementKind.FILE, "app.ts", "src/app.ts"),
        make_element("fn-run", ElementKind.FUNCTION, "run", "src/app.ts"),
        make_element("fn-orphan", ElementKind.FUNCTION, "orphan", "src/other.ts"),
    )

    added = RelationshipBuilder().run(semantic_map, MapConfig())

    assert _kinds(semantic_map, RelationshipKind.CONTAINS) == {("file-app", "fn-run")}
    assert added == 1


def test_imports_resolve_to_files_and_named_items() -> None:
    semantic_map = map_of(
        make_element("file-app", ElementKind.FILE, "app.ts", "src/app.ts"),
        make_element("file-foo", ElementKind.FILE, "foo.ts", "src/lib/foo.ts"),
        make_element("class-foo", ElementKind.CLASS, "Foo", "src/lib/foo.ts"),
        make_element("fn-bar", ElementKind.FUNCTION, "Bar", "src/lib/foo.ts"),
        _import("import-foo", "lib/foo", ["Foo", "Bar as Baz", "Missing"]),
        _import("import-react", "react", ["useState"]),
    )

    RelationshipBuilder().run(semantic_map, MapConfig())

    assert _kinds(semantic_map, RelationshipKind.IMPORTS) == {
        ("import-foo", "file-foo"),
        ("import-foo", "class-foo"),
        ("import-foo", "fn-bar"),
    }
    assert semantic_map.relationships["import-foo:imports:file-foo"].strength == pytest.approx(1.0)
    assert semantic_map.relationships["import-foo:imports:class-foo"].strength == pytest.approx(0.8)
    assert semantic_map.outgoing("import-react") == []


def test_imports_can_be_disabled() -> None:
    semantic_map = map_of(
        make_element("file-foo", ElementKind.FILE, "foo.ts", "src/lib/foo.ts"),
        _import("import-foo", "lib/foo", []),
    )

    RelationshipBuilder().run(semantic_map, MapConfig(analyze_imports=False))

    assert _kinds(semantic_map, RelationshipKind.IMPORTS) == set()


def test_class_and_interface_heritage() -> None:
    semantic_map = map_of(
        make_element("class-base", ElementKind.CLASS, "Base"),
        make_element(
            "class-child",
            ElementKind.CLASS,
            "Child",
            metadata={"extends": "Base", "implements": ["Named", "Unknown"]},
        ),
        make_element("class-self", ElementKind.CLASS, "Loop", metadata={"extends": "Loop"}),
        make_element("iface-named", ElementKind.INTERFACE, "Named", metadata={"extends": ["Labeled"]}),
        make_element("iface-labeled", ElementKind.INTERFACE, "Labeled", metadata={"extends": []}),
    )

    RelationshipBuilder().run(semantic_map, MapConfig())

    assert _kinds(semantic_map, RelationshipKind.EXTENDS) == {
        ("class-child", "class-base"),
        ("iface-named", "iface-labeled"),
    }
    assert _kinds(semantic_map, RelationshipKind.IMPLEMENTS) == {("class-child", "iface-named")}


def test_signatures_mentioning_types_create_uses_edges() -> None:
    elements = (
        make_element("type-id", ElementKind.TYPE, "Id"),
        make_element("iface-user", ElementKind.INTERFACE, "User", metadata={"extends": []}),
        make_element(
            "fn-load", ElementKind.FUNCTION, "load", signature="function load(id: Id): Promise<User>"
        ),
        make_element("fn-other", ElementKind.FUNCTION, "other", signature="function other()"),
    )
    semantic_map = map_of(*elements)

    RelationshipBuilder().run(semantic_map, MapConfig())

    assert _kinds(semantic_map, RelationshipKind.USES) == {
        ("fn-load", "type-id"),
        ("fn-load", "iface-user"),
    }
    assert semantic_map.relationships["fn-load:uses:type-id"].strength == pytest.approx(0.5)

    untyped = map_of(*elements)
    RelationshipBuilder().run(untyped, MapConfig(analyze_types=False))
    assert _kinds(untyped, RelationshipKind.USES) == set()


def test_relative_import_links_only_the_named_file() -> None:
    semantic_map = map_of(
        make_element("file-a", ElementKind.FILE, "a.ts", "a.ts"),
        make_element("file-main", ElementKind.FILE, "main.ts", "lib/main.ts"),
        make_element("file-other", ElementKind.FILE, "other.ts", "data/other.ts"),
        make_element("file-lambda", ElementKind.FILE, "lambda.ts", "src/lambda.ts"),
        _import("import-a", "a", ["A"], file_path="lib/main.ts"),
    )

    RelationshipBuilder().run(semantic_map, MapConfig())

    assert _kinds(semantic_map, RelationshipKind.IMPORTS) == {("import-a", "file-a")}


def test_import_never_links_back_to_its_own_file() -> None:
    semantic_map = map_of(
        make_element("file-app", ElementKind.FILE, "app.ts", "src/app.ts"),
        _import("import-app", "app", []),
    )

    RelationshipBuilder().run(semantic_map, MapConfig())

    assert _kinds(semantic_map, RelationshipKind.IMPORTS) == set()


def test_package_entry_files_resolve_to_their_directory() -> None:
    semantic_map = map_of(
        make_element("file-index", ElementKind.FILE, "index.ts", "src/lib/index.ts"),
        make_element("file-init", ElementKind.FILE, "__init__.py", "pkg/models/__init__.py"),
        make_element("file-mylib", ElementKind.FILE, "foo.ts", "src/mylib/foo.ts"),
        _import("import-lib", "lib", []),
        _import("import-models", "models", [], file_path="pkg/api.py"),
        _import("import-foo", "lib/foo", []),
    )

    RelationshipBuilder().run(semantic_map, MapConfig())

    assert _kinds(semantic_map, RelationshipKind.IMPORTS) == {
        ("import-lib", "file-index"),
        ("import-models", "file-init"),
    }
