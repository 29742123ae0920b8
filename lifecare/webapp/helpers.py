"""
Helper functions for the web application.

Input sanitization and pagination helpers shared by schemas and routes.
"""

import re
from typing import Any, Optional

# <script>...</script> blocks, including attributes and multi-line bodies
SCRIPT_TAG_PATTERN = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)


def sanitize_text(value: Any) -> Any:
    """
    Strip script blocks and surrounding whitespace from a string.

    Non-string values are returned unchanged.
    """
    if not isinstance(value, str):
        return value
    return SCRIPT_TAG_PATTERN.sub("", value).strip()


def resolve_page_size(limit: Optional[int], default: int, maximum: int) -> int:
    """
    Resolve a requested page size.

    Args:
        limit: Requested size, or None for the default.
        default: Default page size.
        maximum: Upper bound.

    Returns:
        int: Page size between 1 and maximum.
    """
    if limit is None or limit < 1:
        return default
    return min(limit, maximum)


def format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Reduce pydantic error dicts to JSON-safe {field, message, type} entries.

    The leading "body"/"query"/"path" location segment is dropped.
    """
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        formatted.append(
            {
                "field": ".".join(loc),
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "value_error"),
            }
        )
    return formatted
