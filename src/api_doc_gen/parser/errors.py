"""Exception hierarchy for annotation parsing and document generation.

All errors inherit from ApiDocError. MissingRouteError and its subclass
EmptyCommentError mean "not a documented operation" and are skipped by the
generator; every other error aborts the run.
"""


class ApiDocError(Exception):
    """Base exception for all api-doc-gen errors."""


class DirectiveError(ApiDocError):
    """A single directive line could not be parsed."""

    def __init__(self, directive: str, line: str, reason: str) -> None:
        super().__init__(f"{directive}: {reason} (line: {line!r})")
        self.directive = directive
        self.line = line
        self.reason = reason


class MalformedDirectiveError(DirectiveError):
    """Token count or shape does not match the directive grammar."""


class NonIntegerCodeError(DirectiveError):
    """The status code of @Success or @Failure is not an integer."""


class MissingModelTypeRefError(DirectiveError):
    """{object} or {array} is not followed by a type reference."""


class MissingRouteError(ApiDocError):
    """The comment block has no @router directive."""

    def __init__(self, message: str = "comment block has no @router directive") -> None:
        super().__init__(message)


class EmptyCommentError(MissingRouteError):
    """The function has no comment block at all."""

    def __init__(self) -> None:
        super().__init__("function has no comment block")


class UnresolvedTypeReferenceError(ApiDocError):
    """A composite type reference is not present in the symbol table."""

    def __init__(self, type_ref: str, package: str) -> None:
        super().__init__(f"Can not resolve type {type_ref!r} from {package!r}")
        self.type_ref = type_ref
        self.package = package


class ModelCollisionError(ApiDocError):
    """Two different definitions were registered under the same model id."""

    def __init__(self, model_id: str) -> None:
        super().__init__(f"Conflicting definitions for model {model_id!r}")
        self.model_id = model_id


class SourceDecodeError(ApiDocError):
    """A source file is not valid UTF-8."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Can not read {path}: {reason}")
        self.path = path
        self.reason = reason


class GenerationError(ApiDocError):
    """Parsing a handler failed; names the function and wraps the cause."""

    def __init__(self, function: str, cause: Exception) -> None:
        super().__init__(f"{function}: {cause}")
        self.function = function
        self.cause = cause
