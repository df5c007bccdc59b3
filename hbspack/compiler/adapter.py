"""Compile a single template source file to precompiled JavaScript."""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.models import TaskOptions
from .handlebars import TemplateCompiler

logger = logging.getLogger(__name__)


class CompileError(RuntimeError):
    """Raised when a source file cannot be compiled; aborts the run."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"Handlebars failed to compile {path}.")
        self.path = path


def read_source(path: str | Path) -> str:
    """Read a template source file as UTF-8 text."""
    return Path(path).read_text(encoding="utf-8")


def compile_file(
    path: str | Path, options: TaskOptions, compiler: TemplateCompiler
) -> str:
    """Compile one template file into a JavaScript expression.

    Args:
        path: Template source path
        options: Task options (transforms, wrapping, compiler options)
        compiler: Template compiler used for parse and precompile

    Returns:
        Precompiled code, wrapped in ``Handlebars.template(...)`` when
        ``wrapped`` is set and prefixed with ``return`` for AMD output
        without a namespace

    Raises:
        CompileError: Reading, transforming or compiling failed
    """
    try:
        source = options.process_content(read_source(path))
        ast = options.process_ast(compiler.parse(source))
        compiled = compiler.precompile(ast, options.resolved_compiler_options())
    except Exception as e:
        logger.exception(f"{path}: {e}")
        raise CompileError(path) from e

    if options.wrapped:
        compiled = f"Handlebars.template({compiled})"

    if options.amd and not options.namespaced:
        compiled = f"return {compiled}"

    logger.debug(f"Compiled {path}")
    return compiled
