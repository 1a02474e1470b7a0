"""Renders built documents into the generated Python module."""

import json
import os
import tempfile
from pathlib import Path

from api_doc_gen.parser.base import ApiDeclaration, ResourceListing

MODULE_HEADER = '"""This file is generated automatically. Do not edit it manually."""\n'


def render_json(document: ResourceListing | ApiDeclaration) -> str:
    return json.dumps(document.to_swagger(), indent=4)


def render_documents(
    listing: ResourceListing, declarations: dict[str, ApiDeclaration]
) -> tuple[str, dict[str, str]]:
    """Return the listing JSON and a resource -> declaration JSON mapping, sorted by resource."""
    return render_json(listing), {key: render_json(declarations[key]) for key in sorted(declarations)}


def render_module(resource_listing: str, api_descriptions: dict[str, str]) -> str:
    """Source of a module exposing RESOURCE_LISTING and API_DESCRIPTIONS."""
    lines = [MODULE_HEADER, f"RESOURCE_LISTING = {resource_listing!r}", "", "API_DESCRIPTIONS = {"]
    for key in sorted(api_descriptions):
        lines.append(f"    {key!r}: {api_descriptions[key]!r},")
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_module(path: Path, source: str) -> None:
    """Write source to path atomically; a failed write leaves no partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(source)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
