"""One generation pass: scan sources, parse handlers, build and render documents."""

import logging
from collections.abc import Callable, Iterable, Mapping

from pydantic import BaseModel

from api_doc_gen.builder import ApiDescriptionBuilder
from api_doc_gen.config import DEFAULT_BASE_PATH, GeneratorConfig
from api_doc_gen.parser.base import ApiInfo, FunctionSignature, HandlerCandidate, Operation
from api_doc_gen.parser.errors import ApiDocError, GenerationError, MissingRouteError
from api_doc_gen.parser.general import parse_general_info
from api_doc_gen.parser.model import DEFAULT_TYPE_ALIASES, ModelResolver, TypeLookup
from api_doc_gen.parser.operation import parse_operation
from api_doc_gen.parser.source import read_annotation_lines, scan_package
from api_doc_gen.serializer import render_documents

logger = logging.getLogger(__name__)


class GeneratedDocs(BaseModel):
    """Rendered documents of one pass."""

    resource_listing: str
    api_descriptions: dict[str, str]
    operations: int = 0


class DocumentGenerator:
    """Parses handler candidates into operations and renders the documents.

    Args:
        types: symbol table for model resolution.
        info: general API info.
        is_handler: decides from the signature alone whether a function is parsed.
        aliases: wrapper type -> primitive name table for the resolver.
        base_path: base path written into every document.
    """

    def __init__(
        self,
        types: TypeLookup,
        info: ApiInfo,
        is_handler: Callable[[FunctionSignature], bool],
        aliases: Mapping[str, str] = DEFAULT_TYPE_ALIASES,
        base_path: str | None = None,
    ):
        self.resolver = ModelResolver(types, aliases)
        self.builder = ApiDescriptionBuilder(info, base_path)
        self.is_handler = is_handler
        self.operations: list[Operation] = []
        self.skipped: list[str] = []

    def add_handler(self, candidate: HandlerCandidate) -> Operation | None:
        """Parse one handler. Returns None when it is not a documented operation."""
        signature = candidate.signature
        name = f"{signature.module}:{signature.qualname}"
        try:
            operation = parse_operation(candidate.comments, self.resolver, signature.module)
            self.builder.add(operation)
        except MissingRouteError as e:
            logger.debug("Skipping %s: %s", name, e)
            self.skipped.append(name)
            return None
        except ApiDocError as e:
            raise GenerationError(name, e) from e

        self.operations.append(operation)
        return operation

    def generate(self, candidates: Iterable[HandlerCandidate]) -> GeneratedDocs:
        for candidate in candidates:
            if self.is_handler(candidate.signature):
                self.add_handler(candidate)

        listing, descriptions = render_documents(
            self.builder.resource_listing(), self.builder.declarations()
        )
        logger.info(
            "Parsed %d operations in %d resources, skipped %d functions",
            len(self.operations), len(descriptions), len(self.skipped),
        )
        return GeneratedDocs(
            resource_listing=listing,
            api_descriptions=descriptions,
            operations=len(self.operations),
        )


def generate_from_config(config: GeneratorConfig) -> GeneratedDocs:
    """Run a full pass for config.api_package and config.main_api_file."""
    if config.api_package is None or config.main_api_file is None:
        raise ValueError("api_package and main_api_file are required")
    if not config.api_package.exists():
        raise FileNotFoundError(f"No such file or directory: {str(config.api_package)!r}")

    logger.info("Start parsing %s", config.api_package)
    info = parse_general_info(read_annotation_lines(config.main_api_file))
    tree = scan_package(config.api_package)
    generator = DocumentGenerator(
        tree.symbols,
        info,
        config.is_handler,
        aliases=config.type_aliases,
        base_path=config.base_path or info.base_path or DEFAULT_BASE_PATH,
    )
    return generator.generate(tree.handlers)
