"""Stock Rating: technical indicators, multi-factor scores, signals and recommendations."""

import os


def get_server_version() -> str:
    """Get version with fallback for dev mode."""
    if version := os.environ.get("SERVER_VERSION"):
        return version
    try:
        from importlib.metadata import version as pkg_version

        return pkg_version("stock-rating")
    except Exception:
        return "dev"


SERVER_VERSION = get_server_version()
# Bump when output schema changes materially (new fields, renamed fields, structure changes)
# v1: Indicator set, score breakdown, signals, recommendation
# v2: Added week_52 position to the indicator set
SCHEMA_VERSION = "2"
