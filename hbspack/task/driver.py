"""Compile file groups into emitted template modules."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..compiler.adapter import compile_file
from ..compiler.handlebars import TemplateCompiler
from ..core.models import (
    ClassifiedFile,
    FileGroup,
    FileKind,
    GroupResult,
    GroupStatus,
    TaskOptions,
)
from ..core.settings import Settings
from ..output import emitter
from ..output.io import atomic_write_text
from ..sources.classifier import classify_file

logger = logging.getLogger(__name__)


def existing_sources(sources: Iterable[str]) -> tuple[list[str], list[str]]:
    """Split sources into existing and missing paths, warning on each missing one."""
    found: list[str] = []
    missing: list[str] = []
    for path in sources:
        if Path(path).exists():
            found.append(path)
        else:
            logger.warning(f'Source file "{path}" not found.')
            missing.append(path)
    return found, missing


def run_group(
    group: FileGroup,
    options: TaskOptions,
    compiler: TemplateCompiler,
    settings: Settings | None = None,
) -> GroupResult:
    """Compile one file group and write its destination.

    Args:
        group: Sources and destination
        options: Resolved task options
        compiler: Template compiler
        settings: Process settings (linefeed, file mode)

    Returns:
        Group result; EMPTY when nothing was compiled and nothing written

    Raises:
        CompileError: A source failed to compile
        TemplateNameError: A source produced an empty registration name
    """
    settings = settings or Settings()
    mode = emitter.OutputMode.from_options(options)

    files, missing = existing_sources(group.src)
    style = mode.template_style(len(files))

    partials: list[str] = []
    templates: list[str] = []
    classified: list[ClassifiedFile] = []
    for path in files:
        compiled = compile_file(path, options, compiler)
        entry = classify_file(path, options)
        classified.append(entry)

        if entry.kind is FileKind.PARTIAL:
            partials.append(emitter.partial_statement(entry.name, compiled, mode))
        else:
            templates.append(
                emitter.template_statement(entry.name, compiled, mode, style)
            )

    text = emitter.emit(
        partials,
        templates,
        mode,
        file_count=len(files),
        separator=options.separator,
        linefeed=settings.linefeed,
    )

    if text is None:
        logger.warning("Destination not written because compiled files were empty.")
        return GroupResult(
            dest=group.dest, status=GroupStatus.EMPTY, missing=missing, files=classified
        )

    atomic_write_text(group.dest, text, mode=settings.file_mode)
    logger.info(f'File "{group.dest}" created.')
    return GroupResult(
        dest=group.dest,
        status=GroupStatus.WRITTEN,
        missing=missing,
        files=classified,
        text=text,
    )


def run_groups(
    groups: Iterable[FileGroup],
    options: TaskOptions,
    compiler: TemplateCompiler,
    settings: Settings | None = None,
) -> list[GroupResult]:
    """Compile file groups in order, stopping at the first fatal error."""
    settings = settings or Settings()
    logger.debug(f"Options: {options.describe()}")
    return [run_group(group, options, compiler, settings) for group in groups]
