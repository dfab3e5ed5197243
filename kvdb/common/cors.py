"""
CORS Options

Builds CORSMiddleware keyword arguments from the configured origin list.
Supports "*" (any origin), wildcard patterns such as "https://*.example.org"
and exact origins.
"""

import re
from typing import Any

ALLOWED_METHODS = ["GET", "POST", "PATCH", "DELETE"]
ALLOWED_HEADERS = ["Content-Type"]


def wildcard_to_regex(pattern: str) -> str:
    """Translate a wildcard origin ("https://*.example.org") to an anchored regex"""
    return "^" + ".*".join(re.escape(part) for part in pattern.split("*")) + "$"


def build_cors_options(origins: list[str]) -> dict[str, Any]:
    """
    Build CORSMiddleware options.

    Args:
        origins: Configured origins

    Returns:
        dict: Keyword arguments for CORSMiddleware
    """
    options: dict[str, Any] = {
        "allow_methods": ALLOWED_METHODS,
        "allow_headers": ALLOWED_HEADERS,
    }

    if "*" in origins:
        options["allow_origins"] = ["*"]
        return options

    exact = [origin for origin in origins if "*" not in origin]
    patterns = [wildcard_to_regex(origin) for origin in origins if "*" in origin]

    options["allow_origins"] = exact
    if patterns:
        options["allow_origin_regex"] = "|".join(f"(?:{p})" for p in patterns)
    return options
