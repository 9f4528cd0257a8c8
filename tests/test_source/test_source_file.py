"""Tests for fetchgen.source.source_file and the file cache of GenerateContext."""

from __future__ import annotations

from fetchgen.context import GenerateContext
from fetchgen.models import ModelInfo
from fetchgen.source.declarations import InterfaceDeclaration
from fetchgen.source.source_file import SourceFile, model_file_path, normalize_file_path


class TestPaths:
    """Test path normalization."""

    def test_normalize(self) -> None:
        assert normalize_file_path("/example//cart/./types.ts") == "example/cart/types.ts"
        assert normalize_file_path("a\\b.ts") == "a/b.ts"
        assert normalize_file_path("/") == ""

    def test_model_file_path(self) -> None:
        assert model_file_path(ModelInfo(name="Cart", path="/example/cart")) == (
            "example/cart/types.ts"
        )
        assert model_file_path(ModelInfo(name="Result", path="/")) == "types.ts"

    def test_properties(self) -> None:
        source_file = SourceFile("example/cart/queryClient.ts")
        assert source_file.directory == "example/cart"
        assert source_file.base_name == "queryClient.ts"
        assert source_file.module_name == "queryClient"


class TestContextCache:
    """Test that one path always yields one file."""

    def test_same_instance(self) -> None:
        context = GenerateContext({}, "out")
        first = context.get_or_create_source_file("example/cart/types.ts")
        second = context.get_or_create_source_file("/example//cart/types.ts")
        assert first is second
        assert context.source_files == [first]

    def test_context_file_path(self) -> None:
        context = GenerateContext({}, "out", current_context_alias="example")
        assert context.context_file_path("/", "OrderApiClient.ts") == "example/OrderApiClient.ts"
        assert context.context_file_path("/sales", "A.ts") == "example/sales/A.ts"
        assert GenerateContext({}, "out").context_file_path("/", "A.ts") == "A.ts"


class TestImports:
    """Test import merging."""

    def test_names_merged_per_module(self) -> None:
        source_file = SourceFile("a.ts")
        source_file.add_import("@ahoo-wang/fetcher-wow", ["CommandResult"])
        source_file.add_import("@ahoo-wang/fetcher-wow", ["CommandResult", "CommandStage"])
        [declaration] = source_file.imports
        assert declaration.named_imports == ["CommandResult", "CommandStage"]

    def test_type_modifier_deduplicated(self) -> None:
        source_file = SourceFile("a.ts")
        source_file.add_import("m", ["type ApiMetadata"])
        source_file.add_import("m", ["ApiMetadata"])
        assert source_file.imports[0].named_imports == ["type ApiMetadata"]

    def test_value_import_clears_type_only(self) -> None:
        source_file = SourceFile("a.ts")
        source_file.add_import("m", ["A"], type_only=True)
        source_file.add_import("m", ["B"])
        assert not source_file.imports[0].type_only

    def test_relative_model_imports(self) -> None:
        source_file = SourceFile("example/cart/queryClient.ts")
        source_file.add_model_import(ModelInfo(name="CartState", path="/example/cart"))
        source_file.add_model_import(ModelInfo(name="Money", path="/example"))
        source_file.add_model_import(ModelInfo(name="Aggregate", path="@ahoo-wang/fetcher-wow"))
        assert [imp.module_specifier for imp in source_file.imports] == [
            "./types",
            "../types",
            "@ahoo-wang/fetcher-wow",
        ]

    def test_root_file_imports(self) -> None:
        source_file = SourceFile("OrderApiClient.ts")
        source_file.add_model_import(ModelInfo(name="Order", path="/order"))
        assert source_file.imports[0].module_specifier == "./order/types"

    def test_organize_imports(self) -> None:
        source_file = SourceFile("a/b.ts")
        source_file.add_import("./types", ["Z", "A"])
        source_file.add_import("@ahoo-wang/fetcher", ["b", "type A"])
        source_file.organize_imports()
        assert [imp.module_specifier for imp in source_file.imports] == [
            "@ahoo-wang/fetcher",
            "./types",
        ]
        assert source_file.imports[0].named_imports == ["type A", "b"]
        assert source_file.imports[1].named_imports == ["A", "Z"]


class TestDeclarations:
    """Test declaration lookup and rollback."""

    def test_lookup(self) -> None:
        source_file = SourceFile("a/types.ts")
        interface = source_file.add_interface("Cart")
        source_file.add_statement("export * from './x';")
        assert source_file.get_interface("Cart") is interface
        assert source_file.get_class("Cart") is None
        assert source_file.declaration_names() == ["Cart"]

    def test_snapshot_restore(self) -> None:
        source_file = SourceFile("a/types.ts")
        source_file.add_import("./b", ["B"])
        snapshot = source_file.snapshot()
        source_file.add_import("./b", ["C"])
        source_file.add_import("./c", ["D"])
        source_file.add_type_alias("X", "string")
        source_file.restore(snapshot)
        assert source_file.declarations == []
        assert len(source_file.imports) == 1
        assert source_file.imports[0].named_imports == ["B"]

    def test_set_property_replaces_in_place(self) -> None:
        from fetchgen.source.declarations import PropertySignature

        interface = InterfaceDeclaration(name="A")
        interface.set_property(PropertySignature(name="a", type="string"))
        interface.set_property(PropertySignature(name="b", type="number"))
        interface.set_property(PropertySignature(name="a", type="boolean"))
        assert [(p.name, p.type) for p in interface.properties] == [
            ("a", "boolean"),
            ("b", "number"),
        ]

    def test_is_empty(self) -> None:
        source_file = SourceFile("a.ts")
        assert source_file.is_empty()
        source_file.add_statement("export {};")
        assert not source_file.is_empty()
