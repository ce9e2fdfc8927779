"""Stock scoring engine: fundamentals, technicals and news sentiment."""

import os


def get_server_version() -> str:
    """Get version with fallback for dev mode."""
    if version := os.environ.get("SERVER_VERSION"):
        return version
    try:
        from importlib.metadata import version as pkg_version

        return pkg_version("stock-scorer")
    except Exception:
        return "dev"


SERVER_VERSION = get_server_version()
# Bump when the analysis result shape changes (new fields, renamed fields)
# v1: Initial schema
SCHEMA_VERSION = "1"
