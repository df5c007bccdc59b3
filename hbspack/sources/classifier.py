"""Partial/template classification of source files."""

from __future__ import annotations

import logging
import re

from ..core.models import ClassifiedFile, FileKind, TaskOptions
from .naming import last_segment, partial_name, template_name

logger = logging.getLogger(__name__)


def is_partial(
    path: str, partials_path_regex: re.Pattern[str], partial_regex: re.Pattern[str]
) -> bool:
    """Return True when the directory rule and the filename rule both match."""
    return bool(
        partials_path_regex.search(path) and partial_regex.search(last_segment(path))
    )


def classify(
    path: str, partials_path_regex: re.Pattern[str], partial_regex: re.Pattern[str]
) -> FileKind:
    """Classify a source path as a partial or a template."""
    if is_partial(path, partials_path_regex, partial_regex):
        return FileKind.PARTIAL
    return FileKind.TEMPLATE


def classify_file(path: str, options: TaskOptions) -> ClassifiedFile:
    """Classify a source file and derive its registration name.

    Args:
        path: Source path as given in the file group
        options: Task options supplying patterns and name transforms

    Returns:
        Classified file with its registration name
    """
    kind = classify(path, options.partials_path_regex, options.partial_regex)
    if kind is FileKind.PARTIAL:
        name = partial_name(path, options.process_partial_name)
    else:
        name = template_name(path, options.process_name)

    logger.debug(f"Classified {path} as {kind.value} {name!r}")
    return ClassifiedFile(path=path, kind=kind, name=name)
