"""Generator configuration, loaded from YAML and overridden by CLI options."""

from pathlib import Path

import yaml
from pydantic import BaseModel

from api_doc_gen.parser.base import FunctionSignature
from api_doc_gen.parser.model import DEFAULT_TYPE_ALIASES

DEFAULT_BASE_PATH = "http://127.0.0.1:3000"


class GeneratorConfig(BaseModel):
    api_package: Path | None = None  # directory with handler modules
    main_api_file: Path | None = None  # file with @APIVersion, @APITitle, ...
    base_path: str | None = None
    output: Path = Path("api_docs.py")
    type_aliases: dict[str, str] = dict(DEFAULT_TYPE_ALIASES)
    handler_markers: list[str] = ["Request", "Context"]

    def is_handler(self, signature: FunctionSignature) -> bool:
        """Default handler predicate: an annotation or decorator mentions a marker."""
        texts = signature.annotations + signature.decorators
        return any(marker in text for marker in self.handler_markers for text in texts)


def load_config(path: Path | None) -> GeneratorConfig:
    """Load a YAML config file; no path means defaults."""
    if path is None:
        return GeneratorConfig()
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return GeneratorConfig(**data)
