"""Python source scanner.

Walks a package directory and collects two things for the core parser:
handler candidates (every function with the comment lines attached to it)
and a symbol table of annotated classes used to resolve model types.
"""

import ast
from pathlib import Path

from .base import FieldDef, FunctionSignature, HandlerCandidate, TypeDefinition
from .errors import SourceDecodeError

IGNORED_DIRS = {".git", "__pycache__", ".venv", "venv", "build", "dist", "node_modules"}


class SymbolTable:
    """Composite types indexed by class name."""

    def __init__(self, definitions: list[TypeDefinition] | None = None):
        self._by_name: dict[str, list[TypeDefinition]] = {}
        for definition in definitions or []:
            self.add(definition)

    def add(self, definition: TypeDefinition) -> None:
        self._by_name.setdefault(definition.name, []).append(definition)

    def lookup(self, type_ref: str, package: str) -> TypeDefinition | None:
        """Find the class for type_ref as seen from module package.

        A qualified reference (models.Pet) must match the module suffix. An
        unqualified one prefers the same module, then the same parent
        package, then the first module in sorted order.
        """
        qualifier, _, name = type_ref.strip().rpartition(".")
        candidates = self._by_name.get(name, [])
        if qualifier:
            candidates = [
                c for c in candidates if c.module == qualifier or c.module.endswith("." + qualifier)
            ]
        if not candidates:
            return None
        parent = _parent(package)
        return min(candidates, key=lambda c: (c.module != package, _parent(c.module) != parent, c.module))


class SourceTree:
    def __init__(self, handlers: list[HandlerCandidate], symbols: SymbolTable):
        self.handlers = handlers
        self.symbols = symbols


def scan_package(root: Path) -> SourceTree:
    """Parse every .py file under root, in sorted path order."""
    handlers: list[HandlerCandidate] = []
    symbols = SymbolTable()
    for path in iter_python_files(root):
        module = module_name(root, path)
        found_handlers, found_types = scan_module(module, read_source(path), str(path))
        handlers.extend(found_handlers)
        for definition in found_types:
            symbols.add(definition)
    return SourceTree(handlers, symbols)


def iter_python_files(root: Path) -> list[Path]:
    if root.is_file():
        return [root]
    return sorted(
        p for p in root.rglob("*.py")
        if not any(part in IGNORED_DIRS for part in p.relative_to(root).parts)
    )


def module_name(root: Path, path: Path) -> str:
    """Dotted module name of path, prefixed with the root directory name."""
    if root.is_file():
        return path.stem
    parts = list(path.relative_to(root).with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join([root.name, *parts]).replace("-", "_")


def scan_module(module: str, text: str, filename: str = "<unknown>") -> tuple[list[HandlerCandidate], list[TypeDefinition]]:
    tree = ast.parse(text, filename=filename)
    lines = text.splitlines()
    handlers: list[HandlerCandidate] = []
    types: list[TypeDefinition] = []

    for node in tree.body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            handlers.append(_candidate(node, module, node.name, lines))
        elif isinstance(node, ast.ClassDef):
            types.append(TypeDefinition(
                name=node.name,
                module=module,
                bases=[ast.unparse(b) for b in node.bases],
                fields=_class_fields(node),
            ))
            for sub in node.body:
                if isinstance(sub, (ast.FunctionDef, ast.AsyncFunctionDef)):
                    handlers.append(_candidate(sub, module, f"{node.name}.{sub.name}", lines))

    return handlers, types


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SourceDecodeError(str(path), f"not valid UTF-8 at byte {e.start}") from e


def read_annotation_lines(path: Path) -> list[str]:
    """Comment lines and the module docstring of a file, for general API info."""
    text = read_source(path)
    lines = [line for line in text.splitlines() if line.strip().startswith("#")]
    docstring = ast.get_docstring(ast.parse(text, filename=str(path)))
    if docstring:
        lines.extend(docstring.splitlines())
    return lines


def comment_block(node: ast.FunctionDef | ast.AsyncFunctionDef, lines: list[str]) -> list[str]:
    """The '#' lines directly above a function (and its decorators) plus its docstring."""
    first = min([node.lineno] + [d.lineno for d in node.decorator_list])
    block: list[str] = []
    index = first - 2
    while index >= 0 and lines[index].strip().startswith("#"):
        block.insert(0, lines[index])
        index -= 1
    docstring = ast.get_docstring(node)
    if docstring:
        block.extend(docstring.splitlines())
    return block


def _candidate(node, module: str, qualname: str, lines: list[str]) -> HandlerCandidate:
    args = node.args
    all_args = args.posonlyargs + args.args + args.kwonlyargs
    annotations = [ast.unparse(a.annotation) for a in all_args if a.annotation is not None]
    signature = FunctionSignature(
        name=node.name,
        qualname=qualname,
        module=module,
        annotations=annotations,
        decorators=[ast.unparse(d) for d in node.decorator_list],
    )
    return HandlerCandidate(signature=signature, comments=comment_block(node, lines))


def _class_fields(node: ast.ClassDef) -> list[FieldDef]:
    fields = []
    for stmt in node.body:
        if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
            continue
        name = stmt.target.id
        annotation = ast.unparse(stmt.annotation)
        if name.startswith("_") or annotation.startswith(("ClassVar", "typing.ClassVar")):
            continue
        fields.append(FieldDef(name=name, type=annotation, required=stmt.value is None))
    return fields


def _parent(module: str) -> str:
    return module.rpartition(".")[0]
