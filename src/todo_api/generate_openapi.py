"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

This script imports the FastAPI application instance and serializes its OpenAPI
schema to the interfaces/openapi.json file so that API clients and documentation
tools can consume a stable schema without running the server.

Usage:
    python -m todo_api.generate_openapi [output_path]

Notes:
- Default output file path is relative to the project root: interfaces/openapi.json
"""
from __future__ import annotations

import json
import logging
import os
import sys
from typing import Optional

from .main import app

logger = logging.getLogger(__name__)


def default_output_path() -> str:
    """Return <project_root>/interfaces/openapi.json."""
    src_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    project_root = os.path.dirname(src_dir)
    return os.path.join(project_root, "interfaces", "openapi.json")


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """
    Generate the OpenAPI schema from the FastAPI app and write it to out_path
    (interfaces/openapi.json by default), creating directories as needed.

    Returns:
        The path of the written file.
    """
    schema = app.openapi()

    path = out_path or default_output_path()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    logger.info("Wrote OpenAPI schema to: %s", path)
    return path


def main() -> None:
    generate_openapi(sys.argv[1] if len(sys.argv) > 1 else None)


if __name__ == "__main__":
    main()
