from pathlib import Path
from textwrap import dedent

import pytest

from api_doc_gen.parser.base import FieldDef, TypeDefinition
from api_doc_gen.parser.errors import SourceDecodeError
from api_doc_gen.parser.source import (
    SymbolTable,
    module_name,
    read_annotation_lines,
    read_source,
    scan_module,
    scan_package,
)

FIXTURES = Path(__file__).parent / "fixtures"


class TestScanModule:
    def test_comment_block_above_decorators(self):
        code = dedent(
            """
            import app

            # not attached

            # @Title getPet
            # @router /pets/{id}
            @app.get("/pets/{id}")
            def get_pet(ctx: Context, id: int):
                pass
            """
        )
        handlers, _ = scan_module("app.handlers", code)
        assert len(handlers) == 1
        assert handlers[0].comments == ["# @Title getPet", "# @router /pets/{id}"]
        signature = handlers[0].signature
        assert signature.qualname == "get_pet"
        assert signature.annotations == ["Context", "int"]
        assert signature.decorators == ["app.get('/pets/{id}')"]

    def test_docstring_lines_are_appended(self):
        code = dedent(
            '''
            async def ping(ctx: Context):
                """Liveness probe.

                @router /ping
                """
            '''
        )
        handlers, _ = scan_module("app", code)
        assert handlers[0].comments == ["Liveness probe.", "", "@router /ping"]

    def test_methods_get_class_qualname(self):
        code = dedent(
            """
            class PetHandler:
                # @router /pets
                def list(self, ctx: Context):
                    pass
            """
        )
        handlers, types = scan_module("app", code)
        assert handlers[0].signature.qualname == "PetHandler.list"
        assert handlers[0].comments == ["    # @router /pets"]
        assert types[0].name == "PetHandler"

    def test_class_fields(self):
        code = dedent(
            """
            class Pet(BaseModel):
                registry: ClassVar[dict] = {}
                _cache: dict
                id: int
                name: str = ""
                tags: list[str] = []
            """
        )
        _, types = scan_module("app.models", code)
        assert types[0] == TypeDefinition(name="Pet", module="app.models", bases=["BaseModel"], fields=[
            FieldDef(name="id", type="int"),
            FieldDef(name="name", type="str", required=False),
            FieldDef(name="tags", type="list[str]", required=False),
        ])

    def test_class_bases(self):
        code = dedent(
            """
            class Pet(Entity, Generic[T]):
                name: str
            """
        )
        _, types = scan_module("app.models", code)
        assert types[0].bases == ["Entity", "Generic[T]"]


class TestSymbolTable:
    def _table(self) -> SymbolTable:
        return SymbolTable([
            TypeDefinition(name="Pet", module="app.models"),
            TypeDefinition(name="Pet", module="legacy.models"),
            TypeDefinition(name="Pet", module="app.v2.models"),
        ])

    def test_prefers_same_package(self):
        assert self._table().lookup("Pet", "legacy.handlers").module == "legacy.models"

    def test_prefers_same_module(self):
        assert self._table().lookup("Pet", "app.v2.models").module == "app.v2.models"

    def test_falls_back_to_sorted_module(self):
        assert self._table().lookup("Pet", "other").module == "app.models"

    def test_qualified(self):
        assert self._table().lookup("v2.models.Pet", "legacy").module == "app.v2.models"

    def test_missing(self):
        assert self._table().lookup("Owner", "app") is None
        assert self._table().lookup("billing.Pet", "app") is None


class TestScanPackage:
    def test_module_name(self):
        root = FIXTURES / "petstore"
        assert module_name(root, root / "handlers.py") == "petstore.handlers"
        assert module_name(root, root / "sub" / "__init__.py") == "petstore.sub"

    def test_scan_fixture(self):
        tree = scan_package(FIXTURES / "petstore")
        qualnames = [h.signature.qualname for h in tree.handlers]
        assert "get_pet" in qualnames
        assert "OwnerHandler.get" in qualnames
        assert tree.symbols.lookup("models.Pet", "petstore.handlers").module == "petstore.models"

    def test_read_annotation_lines(self):
        lines = read_annotation_lines(FIXTURES / "main_api.py")
        assert "# @APIVersion 1.0.0" in lines
        assert lines[-1] == "Petstore web service."

    def test_read_source_rejects_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin.py"
        path.write_bytes(b"# caf\xe9\n")
        with pytest.raises(SourceDecodeError) as exc_info:
            read_source(path)
        assert exc_info.value.path == str(path)
        assert exc_info.value.reason == "not valid UTF-8 at byte 5"
