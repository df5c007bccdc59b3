"""CLI argument parsers and validators."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from ..core.models import FileGroup


def parse_files(value: str) -> FileGroup:
    """Parse a files argument in format DEST=SRC[,SRC...]."""
    if "=" not in value:
        raise typer.BadParameter(f"Must be DEST=SRC[,SRC...], got: {value!r}")
    dest, sources = value.split("=", 1)
    if not dest:
        raise typer.BadParameter(f"Missing destination in: {value!r}")
    src = [item.strip() for item in sources.split(",") if item.strip()]
    return FileGroup(src=src, dest=Path(dest))


def parse_compiler_options(value: str) -> dict[str, Any]:
    """Parse a JSON object of Handlebars compiler options."""
    if not value:
        return {}
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise typer.BadParameter("Compiler options must be a JSON object")
    return data
