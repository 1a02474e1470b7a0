"""Comment annotation parser.

Turns the comment block of one handler function into an Operation:

    # @Title getPet
    # @Description find a pet by id
    # @Param id path int true "pet id"
    # @Success 200 {object} Pet
    # @Failure 404 Pet not found
    # @Accept json,xml
    # @router /pets/{id} [get]
"""

import logging
import re
from collections.abc import Callable
from enum import Enum

from .base import Operation, OperationItems, Parameter, ResponseMessage
from .errors import (
    EmptyCommentError,
    MalformedDirectiveError,
    MissingModelTypeRefError,
    MissingRouteError,
    NonIntegerCodeError,
)
from .model import ModelResolver

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "json": "application/json",
    "xml": "application/xml",
    "plain": "text/plain",
    "html": "text/html",
}

# name  paramType  dataType  required  "description"
PARAM_PATTERN = re.compile(r'(\w+)\s+(\w+)\s+([\w.\[\]]+)\s+(\w+)\s+"([^"]+)"')

_DIRECTIVE_LINE = re.compile(r"^(@\w+)(?:\s+(.*))?$", re.DOTALL)


class Directive(str, Enum):
    ROUTER = "@router"
    TITLE = "@Title"
    DESCRIPTION = "@Description"
    SUCCESS = "@Success"
    PARAM = "@Param"
    FAILURE = "@Failure"
    ACCEPT = "@Accept"


class OperationParser:
    """Builds one Operation from a comment block.

    Args:
        resolver: model resolver shared by the whole generation pass.
        package: module the handler lives in, used to resolve type names.
    """

    def __init__(self, resolver: ModelResolver, package: str = ""):
        self.resolver = resolver
        self.package = package
        self.operation = Operation()
        self._parsers: dict[Directive, Callable[[str, str], None]] = {
            Directive.ROUTER: self._parse_router,
            Directive.TITLE: self._parse_title,
            Directive.DESCRIPTION: self._parse_description,
            Directive.SUCCESS: self._parse_success,
            Directive.PARAM: self._parse_param,
            Directive.FAILURE: self._parse_failure,
            Directive.ACCEPT: self._parse_accept,
        }

    def parse(self, comments: list[str]) -> Operation:
        """Parse every line; raises on the first malformed directive."""
        if not comments:
            raise EmptyCommentError()

        for raw in comments:
            line = strip_comment_marker(raw)
            match = _DIRECTIVE_LINE.match(line)
            if not match:
                continue
            try:
                directive = Directive(match.group(1))
            except ValueError:
                continue
            self._parsers[directive](line, (match.group(2) or "").strip())

        if not self.operation.path:
            raise MissingRouteError()
        return self.operation

    def _parse_router(self, line: str, rest: str) -> None:
        if not rest:
            raise MalformedDirectiveError(Directive.ROUTER.value, line, "route path is required")
        parts = rest.split(None, 1)
        self.operation.path = parts[0]
        if len(parts) == 2:
            self.operation.http_method = parts[1].split()[0].strip("[]").upper()
        else:
            self.operation.http_method = "GET"

    def _parse_title(self, line: str, rest: str) -> None:
        self.operation.nickname = rest

    def _parse_description(self, line: str, rest: str) -> None:
        self.operation.summary = rest

    def _parse_success(self, line: str, rest: str) -> None:
        # @Success 200 {object} models.Pet
        parts = rest.split()
        if not parts:
            raise MalformedDirectiveError(Directive.SUCCESS.value, line, "status code is required")
        response = ResponseMessage(code=_parse_code(Directive.SUCCESS, line, parts[0]))

        if len(parts) > 1 and parts[1] in ("{object}", "{array}"):
            if len(parts) < 3:
                raise MissingModelTypeRefError(
                    Directive.SUCCESS.value, line, f"{parts[1]} must be followed by a type"
                )
            self._set_response_type(response, parts[1] == "{array}", parts[2])
        elif len(parts) > 2:
            response.message = " ".join(parts[2:])
        elif len(parts) == 2:
            response.message = parts[1]

        self.operation.response_messages.append(response)

    def _set_response_type(self, response: ResponseMessage, is_array: bool, type_ref: str) -> None:
        primitive = self.resolver.primitive_name(type_ref)
        if primitive is not None:
            type_name = primitive
        else:
            models = self.resolver.resolve(type_ref, self.package)
            type_name = models[0].id
            response.response_model = type_name
            for model in models:
                if model not in self.operation.models:
                    self.operation.models.append(model)

        if is_array:
            self.operation.type = "array"
            if primitive is not None:
                self.operation.items = OperationItems(type=type_name)
            else:
                self.operation.items = OperationItems(ref=type_name)
        else:
            self.operation.type = type_name

    def _parse_param(self, line: str, rest: str) -> None:
        match = PARAM_PATTERN.search(rest)
        if not match:
            raise MalformedDirectiveError(
                Directive.PARAM.value, line, 'expected: name paramType dataType required "description"'
            )
        name, param_type, data_type, required, description = match.groups()
        self.operation.parameters.append(
            Parameter(
                name=name,
                param_type=param_type,
                type=data_type,
                data_type=data_type,
                required=required.lower() == "true",
                description=description,
            )
        )

    def _parse_failure(self, line: str, rest: str) -> None:
        # @Failure 404 Pet not found
        parts = rest.split(None, 1)
        if not parts:
            raise MalformedDirectiveError(Directive.FAILURE.value, line, "status code is required")
        code = _parse_code(Directive.FAILURE, line, parts[0])
        message = parts[1].strip() if len(parts) == 2 else ""
        self.operation.response_messages.append(ResponseMessage(code=code, message=message))

    def _parse_accept(self, line: str, rest: str) -> None:
        for token in rest.split(","):
            token = token.strip()
            if not token:
                continue
            content_type = CONTENT_TYPES.get(token)
            if content_type is None:
                logger.warning("Skipping unknown @Accept type %r in %r", token, line)
                continue
            self.operation.consumes.append(content_type)
            self.operation.produces.append(content_type)


def strip_comment_marker(line: str) -> str:
    """Remove leading '#' or '//' markers and surrounding whitespace."""
    return line.strip().lstrip("#/").strip()


def _parse_code(directive: Directive, line: str, token: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise NonIntegerCodeError(directive.value, line, f"status code {token!r} is not an integer") from None


def parse_operation(comments: list[str], resolver: ModelResolver, package: str = "") -> Operation:
    """Parse one comment block into an Operation."""
    return OperationParser(resolver, package).parse(comments)
