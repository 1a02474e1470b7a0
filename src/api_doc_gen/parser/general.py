"""General API info tags from the main annotation file."""

import re

from .base import ApiInfo
from .operation import strip_comment_marker

GENERAL_TAGS = {
    "@APIVersion": "api_version",
    "@APITitle": "title",
    "@APIDescription": "description",
    "@BasePath": "base_path",
    "@Contact": "contact",
    "@TermsOfServiceUrl": "terms_of_service_url",
    "@License": "license",
    "@LicenseUrl": "license_url",
}

_TAG_LINE = re.compile(r"^(@\w+)\s*(.*)$")


def parse_general_info(lines: list[str]) -> ApiInfo:
    """Collect @APIVersion, @APITitle, ... into an ApiInfo. Later lines win."""
    values = {}
    for raw in lines:
        match = _TAG_LINE.match(strip_comment_marker(raw))
        if match and match.group(1) in GENERAL_TAGS:
            values[GENERAL_TAGS[match.group(1)]] = match.group(2).strip()
    return ApiInfo(**values)
