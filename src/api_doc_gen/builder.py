"""Groups parsed operations into per-resource API declarations."""

import logging

from api_doc_gen.parser.base import (
    Api,
    ApiDeclaration,
    ApiInfo,
    Model,
    Operation,
    ResourceListing,
    ResourceRef,
)
from api_doc_gen.parser.errors import MissingRouteError, ModelCollisionError

logger = logging.getLogger(__name__)

# ApiInfo fields that belong in the listing's "info" object.
INFO_FIELDS = ("title", "description", "contact", "terms_of_service_url", "license", "license_url")


def resource_key(path: str) -> str:
    """Top-level resource of a route: '/pets/{id}' -> 'pets'."""
    segments = [s for s in path.split("/") if s]
    return segments[0] if segments else ""


class ModelRegistry:
    """Models of one resource keyed by id.

    Re-adding an identical model is a no-op; a different model under an
    existing id raises ModelCollisionError.
    """

    def __init__(self):
        self.models: dict[str, Model] = {}

    def merge(self, model: Model) -> None:
        existing = self.models.get(model.id)
        if existing is None:
            self.models[model.id] = model
        elif existing != model:
            raise ModelCollisionError(model.id)

    def __len__(self) -> int:
        return len(self.models)


class ApiDescriptionBuilder:
    """Collects operations and builds the resource listing and declarations.

    Args:
        info: general API info from the main annotation file.
        base_path: overrides info.base_path when given.
    """

    def __init__(self, info: ApiInfo, base_path: str | None = None):
        self.info = info
        self.base_path = base_path or info.base_path
        self._operations: dict[str, list[Operation]] = {}
        self._registries: dict[str, ModelRegistry] = {}

    def add(self, operation: Operation) -> None:
        if not operation.path:
            raise MissingRouteError("operation has no path")
        key = resource_key(operation.path)
        self._operations.setdefault(key, []).append(operation)
        registry = self._registries.setdefault(key, ModelRegistry())
        for model in operation.models:
            registry.merge(model)
        logger.debug("Added %s %s to resource %r", operation.http_method, operation.path, key)

    @property
    def resources(self) -> list[str]:
        return sorted(self._operations)

    def declaration(self, key: str) -> ApiDeclaration:
        apis: dict[str, Api] = {}
        for operation in self._operations[key]:
            api = apis.setdefault(operation.path, Api(path=operation.path))
            api.operations.append(operation)

        registry = self._registries[key]
        return ApiDeclaration(
            api_version=self.info.api_version,
            base_path=self.base_path,
            resource_path="/" + key,
            apis=list(apis.values()),
            models=dict(sorted(registry.models.items())),
        )

    def declarations(self) -> dict[str, ApiDeclaration]:
        return {key: self.declaration(key) for key in self.resources}

    def resource_description(self, key: str) -> str:
        """Summary of the first operation of the resource that has one."""
        return next((op.summary for op in self._operations[key] if op.summary), "")

    def resource_listing(self) -> ResourceListing:
        info = {
            name: value
            for name, value in self.info.model_dump(by_alias=True, include=set(INFO_FIELDS)).items()
            if value
        }
        return ResourceListing(
            api_version=self.info.api_version,
            base_path=self.base_path,
            apis=[ResourceRef(path="/" + key, description=self.resource_description(key)) for key in self.resources],
            info=info,
        )
