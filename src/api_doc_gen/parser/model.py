"""Model resolver.

Turns a type reference into Swagger model schemas by looking up the fields
of the referenced class and recursively resolving every composite field
type. Resolved models are cached for the whole generation pass, so a type
is looked up once no matter how many operations reference it.
"""

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol

from .base import FieldDef, Model, ModelProperty, OperationItems, TypeDefinition
from .errors import ModelCollisionError, UnresolvedTypeReferenceError

logger = logging.getLogger(__name__)

# Primitive name -> Swagger (type, format)
PRIMITIVE_TYPES: Mapping[str, tuple[str, str | None]] = MappingProxyType({
    "int": ("integer", "int64"),
    "integer": ("integer", "int32"),
    "int32": ("integer", "int32"),
    "int64": ("integer", "int64"),
    "long": ("integer", "int64"),
    "float": ("number", "double"),
    "number": ("number", "float"),
    "float32": ("number", "float"),
    "float64": ("number", "double"),
    "double": ("number", "double"),
    "str": ("string", None),
    "string": ("string", None),
    "bytes": ("string", "byte"),
    "byte": ("string", "byte"),
    "bool": ("boolean", None),
    "boolean": ("boolean", None),
    "date": ("string", "date"),
    "datetime": ("string", "date-time"),
    "date-time": ("string", "date-time"),
    "time": ("string", "time"),
    "timedelta": ("string", "duration"),
    "dict": ("object", None),
    "object": ("object", None),
    "Any": ("object", None),
})

DEFAULT_TYPE_ALIASES: Mapping[str, str] = MappingProxyType({
    "Decimal": "float",
    "UUID": "str",
    "SecretStr": "str",
    "EmailStr": "str",
    "HttpUrl": "str",
    "AnyUrl": "str",
})

_ARRAY_GENERICS = {"list", "List", "Sequence", "Iterable", "set", "Set", "frozenset", "FrozenSet", "tuple", "Tuple"}
_OBJECT_GENERICS = {"dict", "Dict", "Mapping", "MutableMapping"}
_GENERIC = re.compile(r"^(?:typing\.)?([\w.]+)\[(.*)\]$", re.DOTALL)


class TypeLookup(Protocol):
    """Read-only symbol table supplied by the source scanner."""

    def lookup(self, type_ref: str, package: str) -> TypeDefinition | None:
        ...


def _split_top_level(expr: str, sep: str) -> list[str]:
    parts, depth, start = [], 0, 0
    for i, ch in enumerate(expr):
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        elif ch == sep and depth == 0:
            parts.append(expr[start:i].strip())
            start = i + 1
    parts.append(expr[start:].strip())
    return parts


def split_type_expression(expr: str) -> tuple[str, bool]:
    """Reduce an annotation to (element type name, is_array).

    >>> split_type_expression("Optional[list[Pet]]")
    ('Pet', True)
    """
    expr = expr.strip().strip("'\"")
    if expr.startswith("[]"):
        return split_type_expression(expr[2:])[0], True

    members = [m for m in _split_top_level(expr, "|") if m != "None"]
    if len(members) > 1 or (members and members[0] != expr):
        return split_type_expression(members[0])

    match = _GENERIC.match(expr)
    if not match:
        bare = expr.rsplit(".", 1)[-1]
        if bare in _ARRAY_GENERICS:
            return "object", True
        if bare in _OBJECT_GENERICS:
            return "dict", False
        return expr, False

    name, args = match.group(1).rsplit(".", 1)[-1], _split_top_level(match.group(2), ",")
    if name in ("Optional", "Annotated"):
        return split_type_expression(args[0])
    if name == "Union":
        members = [a for a in args if a != "None"] or ["None"]
        return split_type_expression(members[0])
    if name in _ARRAY_GENERICS:
        return split_type_expression(args[0])[0], True
    if name in _OBJECT_GENERICS:
        return "dict", False
    if name == "Literal":
        return "str", False
    return match.group(1), False


class ModelResolver:
    """Resolves type references to models for one generation pass.

    A resolve() call that raises leaves the cache as it was before the
    call, so the resolver stays usable after a caught error.

    Args:
        types: symbol table used to find the fields of composite types.
        aliases: wrapper type name -> primitive name. Copied into a
            read-only mapping at construction time.
    """

    def __init__(self, types: TypeLookup, aliases: Mapping[str, str] = DEFAULT_TYPE_ALIASES):
        self.types = types
        self.aliases = MappingProxyType(dict(aliases))
        self._models: dict[str, Model] = {}
        self._references: dict[str, list[str]] = {}
        self._origins: dict[str, str] = {}

    def primitive_name(self, type_ref: str) -> str | None:
        """Return the primitive name for type_ref, or None if it is composite."""
        name = type_ref.strip()
        for candidate in (name, name.rsplit(".", 1)[-1]):
            candidate = self.aliases.get(candidate, candidate)
            if candidate in PRIMITIVE_TYPES:
                return candidate
        return None

    def resolve(self, type_ref: str, package: str) -> list[Model]:
        """Resolve type_ref as seen from package.

        Returns the referenced model followed by every model it reaches,
        or an empty list when type_ref names a primitive.
        """
        if self.primitive_name(type_ref) is not None:
            return []
        known = set(self._origins)
        try:
            model_id = self._resolve_model(type_ref, package)
        except Exception:
            for added in set(self._origins) - known:
                del self._origins[added]
                self._models.pop(added, None)
                self._references.pop(added, None)
            raise
        return self.closure(model_id)

    def closure(self, model_id: str) -> list[Model]:
        order: list[str] = []
        pending = [model_id]
        while pending:
            current = pending.pop(0)
            if current in order:
                continue
            order.append(current)
            pending.extend(self._references[current])
        return [self._models[i] for i in order]

    def _resolve_model(self, type_ref: str, package: str) -> str:
        definition = self.types.lookup(type_ref, package)
        if definition is None:
            raise UnresolvedTypeReferenceError(type_ref, package)

        model_id = definition.name
        if model_id in self._origins:
            if self._origins[model_id] != definition.module:
                raise ModelCollisionError(model_id)
            # Completed or still being built higher up the stack.
            return model_id

        self._origins[model_id] = definition.module
        model, references = self._build_model(definition)
        self._models[model_id] = model
        self._references[model_id] = references
        logger.debug("Resolved model %s from %s", model_id, definition.module)
        return model_id

    def _collect_fields(self, definition: TypeDefinition, seen: set[str]) -> dict[str, FieldDef]:
        """Fields of definition after those of its known base classes; subclass wins."""
        seen.add(f"{definition.module}.{definition.name}")
        fields: dict[str, FieldDef] = {}
        for base in definition.bases:
            base_definition = self.types.lookup(split_type_expression(base)[0], definition.module)
            if base_definition is None:
                continue
            if f"{base_definition.module}.{base_definition.name}" in seen:
                continue
            fields.update(self._collect_fields(base_definition, seen))
        for field in definition.fields:
            fields[field.name] = field
        return fields

    def _build_model(self, definition: TypeDefinition) -> tuple[Model, list[str]]:
        fields = list(self._collect_fields(definition, set()).values())
        properties: dict[str, ModelProperty] = {}
        references: list[str] = []
        for field in fields:
            element, is_array = split_type_expression(field.type)
            primitive = self.primitive_name(element)
            if primitive is not None:
                swagger_type, swagger_format = PRIMITIVE_TYPES[primitive]
                if is_array:
                    prop = ModelProperty(type="array", items=OperationItems(type=swagger_type))
                else:
                    prop = ModelProperty(type=swagger_type, format=swagger_format)
            else:
                ref = self._resolve_model(element, definition.module)
                if ref not in references:
                    references.append(ref)
                if is_array:
                    prop = ModelProperty(type="array", items=OperationItems(ref=ref))
                else:
                    prop = ModelProperty(ref=ref)
            properties[field.name] = prop

        required = [f.name for f in fields if f.required]
        return Model(id=definition.name, required=required, properties=properties), references
