"""Data models for annotation-derived API documentation.

The comment parser fills an Operation, the model resolver produces Model
schemas, and the builder groups both into Swagger 1.2 documents. Field
names are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SwaggerModel(BaseModel):
    """Base for every model that is serialized into a Swagger document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_swagger(self) -> dict:
        """Dump with Swagger names, dropping unset and empty fields."""
        return _drop_empty(self.model_dump(by_alias=True))


def _drop_empty(value):
    if isinstance(value, dict):
        cleaned = {k: _drop_empty(v) for k, v in value.items()}
        return {k: v for k, v in cleaned.items() if v not in (None, "", [], {})}
    if isinstance(value, list):
        return [_drop_empty(v) for v in value]
    return value


class OperationItems(SwaggerModel):
    """Element reference of an array response: a primitive type or a model id."""

    ref: str | None = Field(default=None, alias="$ref")
    type: str | None = None


class Parameter(SwaggerModel):
    """A single operation parameter from an @Param line."""

    name: str
    param_type: str  # query / form / path / body / header
    type: str
    data_type: str
    required: bool = False
    description: str = ""


class ResponseMessage(SwaggerModel):
    code: int
    message: str = ""
    response_model: str | None = None


class ModelProperty(SwaggerModel):
    """One property of a model: a primitive, a model reference or an array."""

    type: str | None = None
    format: str | None = None
    ref: str | None = Field(default=None, alias="$ref")
    items: OperationItems | None = None


class Model(SwaggerModel):
    """A named schema for a composite type."""

    id: str
    required: list[str] = []
    properties: dict[str, ModelProperty] = {}


class Operation(SwaggerModel):
    """One documented handler function."""

    http_method: str = "GET"
    nickname: str = ""
    type: str = ""
    items: OperationItems | None = None
    summary: str = ""
    notes: str = ""
    parameters: list[Parameter] = []
    response_messages: list[ResponseMessage] = []
    consumes: list[str] = []
    produces: list[str] = []
    authorizations: list[dict] = []
    protocols: list[str] = []
    path: str = ""
    # Models discovered while parsing; merged into the resource registry by the builder.
    models: list[Model] = Field(default=[], exclude=True)


class ApiInfo(SwaggerModel):
    """Global metadata read from the main annotation file."""

    api_version: str = ""
    title: str = ""
    description: str = ""
    base_path: str = ""
    contact: str = ""
    terms_of_service_url: str = ""
    license: str = ""
    license_url: str = ""


class Api(SwaggerModel):
    """All operations sharing one path inside a declaration."""

    path: str
    description: str = ""
    operations: list[Operation] = []


class ApiDeclaration(SwaggerModel):
    """The full document for one resource."""

    api_version: str = ""
    swagger_version: str = "1.2"
    base_path: str = ""
    resource_path: str
    apis: list[Api] = []
    models: dict[str, Model] = {}


class ResourceRef(SwaggerModel):
    path: str
    description: str = ""


class ResourceListing(SwaggerModel):
    """The top-level summary of every documented resource."""

    api_version: str = ""
    swagger_version: str = "1.2"
    base_path: str = ""
    apis: list[ResourceRef] = []
    info: dict[str, str] = {}


# Collaborator seam: what the source scanner hands to the core.


class FieldDef(BaseModel):
    name: str
    type: str  # annotation text, e.g. "list[Pet]" or "Optional[str]"
    required: bool = True


class TypeDefinition(BaseModel):
    """A composite type found in the source tree."""

    name: str
    module: str
    bases: list[str] = []  # base class expressions, e.g. "Entity" or "Base[T]"
    fields: list[FieldDef] = []


class FunctionSignature(BaseModel):
    name: str
    qualname: str
    module: str
    annotations: list[str] = []
    decorators: list[str] = []


class HandlerCandidate(BaseModel):
    """A function with the comment lines attached to it."""

    signature: FunctionSignature
    comments: list[str] = []
