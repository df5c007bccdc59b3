"""Registration names for templates and partials.

Names are derived from source paths exactly as they were given, so
``./views/a.hbs`` registers as ``./views/a.hbs``. A path segment ends at
``/``; on Windows a ``\\`` also ends a segment. Elsewhere a backslash is an
ordinary filename character.
"""

from __future__ import annotations

import os
import re
from typing import Callable

PARTIAL_MARKER = "_"

_SEGMENT_SEPARATOR = re.compile(r"[/\\]" if os.sep == "\\" else "/")


class TemplateNameError(ValueError):
    """Raised when a source file yields an empty registration name."""


def last_segment(path: str) -> str:
    """Return the final segment of a path."""
    return _SEGMENT_SEPARATOR.split(path)[-1]


def default_process_partial_name(file_path: str) -> str:
    """Strip directory, extension and one leading ``_`` from a partial path.

    A segment without a dot keeps its whole name, so ``_header`` becomes
    ``header``. The result may be empty for degenerate paths like ``_.hbs``;
    callers reject that through :func:`partial_name`.

    Args:
        file_path: Partial source path

    Returns:
        Partial registration name
    """
    segment = last_segment(file_path)
    name = segment.rsplit(".", 1)[0] if "." in segment else segment
    if name.startswith(PARTIAL_MARKER):
        name = name[len(PARTIAL_MARKER) :]
    return name


def _checked(name: str, path: str, kind: str) -> str:
    if not isinstance(name, str) or not name:
        raise TemplateNameError(f"Empty {kind} name derived from {path!r}")
    return name


def template_name(path: str, process_name: Callable[[str], str]) -> str:
    """Derive the namespace key for a template (the path itself by default)."""
    return _checked(process_name(path), path, "template")


def partial_name(path: str, process_partial_name: Callable[[str], str]) -> str:
    """Derive the name a partial is registered under."""
    return _checked(process_partial_name(path), path, "partial")
