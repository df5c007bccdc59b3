"""Main CLI application."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from ..compiler.adapter import CompileError
from ..compiler.handlebars import NodeHandlebarsCompiler, TemplateCompiler
from ..core.models import FileGroup, GroupStatus, TaskOptions
from ..core.settings import Settings
from ..sources.naming import TemplateNameError
from ..task import config as task_config
from ..task import driver
from .parsers import parse_compiler_options, parse_files

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="hbspack",
    help="Compile Handlebars templates and partials into one precompiled module.",
)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def get_compiler(settings: Settings) -> TemplateCompiler:
    return NodeHandlebarsCompiler(settings)


def _run(groups: list[FileGroup], options: TaskOptions) -> None:
    settings = get_settings()
    try:
        results = driver.run_groups(groups, options, get_compiler(settings), settings)
    except (CompileError, TemplateNameError) as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e

    written = sum(1 for result in results if result.status is GroupStatus.WRITTEN)
    logger.debug(f"Completed: {written} of {len(results)} file(s) written")


@app.callback()
def configure(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    """Compile Handlebars templates and partials."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


@app.command("compile")
def compile_command(
    files: Annotated[
        list[str],
        typer.Option(
            "--files",
            help="Compile SRC files into DEST (format: DEST=SRC[,SRC...]). Repeatable.",
            metavar="DEST=SRC",
        ),
    ],
    namespace: Annotated[
        str,
        typer.Option("--namespace", help="Namespace object for templates."),
    ] = "JST",
    no_namespace: Annotated[
        bool,
        typer.Option("--no-namespace", help="Do not assign templates to a namespace."),
    ] = False,
    separator: Annotated[
        Optional[str],
        typer.Option("--separator", help="Text joining output statements."),
    ] = None,
    wrapped: Annotated[
        bool,
        typer.Option(
            "--wrapped/--no-wrapped", help="Wrap compiled code in Handlebars.template()."
        ),
    ] = True,
    amd: Annotated[
        bool, typer.Option("--amd", help="Wrap output in an AMD define().")
    ] = False,
    commonjs: Annotated[
        bool, typer.Option("--commonjs", help="Wrap output in a CommonJS function.")
    ] = False,
    node: Annotated[
        bool, typer.Option("--node", help="Emit a Node.js module.")
    ] = False,
    known_helpers: Annotated[
        list[str],
        typer.Option("--known-helper", help="Helper known at compile time. Repeatable."),
    ] = [],
    known_helpers_only: Annotated[
        bool,
        typer.Option("--known-helpers-only", help="Only allow known helpers."),
    ] = False,
    partials_path_regex: Annotated[
        Optional[str],
        typer.Option(
            "--partials-path-regex", help="Only paths matching this can be partials."
        ),
    ] = None,
    partial_regex: Annotated[
        Optional[str],
        typer.Option("--partial-regex", help="File names matching this are partials."),
    ] = None,
    partials_use_namespace: Annotated[
        bool,
        typer.Option(
            "--partials-use-namespace", help="Also assign partials to the namespace."
        ),
    ] = False,
    process_content: Annotated[
        Optional[str],
        typer.Option("--process-content", help="Import path of a content transform."),
    ] = None,
    process_ast: Annotated[
        Optional[str],
        typer.Option("--process-ast", help="Import path of an AST transform."),
    ] = None,
    process_name: Annotated[
        Optional[str],
        typer.Option("--process-name", help="Import path of a template name transform."),
    ] = None,
    process_partial_name: Annotated[
        Optional[str],
        typer.Option(
            "--process-partial-name", help="Import path of a partial name transform."
        ),
    ] = None,
    compiler_options: Annotated[
        str,
        typer.Option(
            "--compiler-options", help="Handlebars compiler options as a JSON object."
        ),
    ] = "",
) -> None:
    """Compile template files given on the command line."""
    groups = [parse_files(value) for value in files]

    raw: dict[str, Any] = {
        "namespace": False if no_namespace else namespace,
        "wrapped": wrapped,
        "amd": amd,
        "commonjs": commonjs,
        "node": node,
        "knownHelpers": known_helpers,
        "knownHelpersOnly": known_helpers_only,
        "partialsUseNamespace": partials_use_namespace,
        "compilerOptions": parse_compiler_options(compiler_options),
        "separator": separator,
        "partialsPathRegex": partials_path_regex,
        "partialRegex": partial_regex,
        "processContent": process_content,
        "processAST": process_ast,
        "processName": process_name,
        "processPartialName": process_partial_name,
    }
    if separator is None:
        del raw["separator"]

    try:
        options = TaskOptions.model_validate(raw)
    except ValidationError as e:
        logger.error(f"Invalid options\n{e}")
        raise typer.Exit(code=1) from e

    _run(groups, options)


@app.command()
def build(
    targets: Annotated[
        Optional[list[str]],
        typer.Argument(help="Targets to build (default: all)."),
    ] = None,
    config_path: Annotated[
        Path,
        typer.Option("--config", "-c", help="YAML task file.", metavar="FILE"),
    ] = task_config.DEFAULT_TASK_FILE,
) -> None:
    """Build targets from a task file."""
    try:
        config = task_config.load_task_config(config_path)
        selected = task_config.select_targets(config, targets or [])
        resolved = [
            (target, task_config.resolve_options(config, target))
            for target in selected
        ]
    except task_config.TaskConfigError as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e

    for target, options in resolved:
        logger.info(f'Running "handlebars:{target.name}" target')
        _run(target.files, options)


@app.command("targets")
def list_targets(
    config_path: Annotated[
        Path,
        typer.Option("--config", "-c", help="YAML task file.", metavar="FILE"),
    ] = task_config.DEFAULT_TASK_FILE,
) -> None:
    """List the targets defined in a task file."""
    try:
        config = task_config.load_task_config(config_path)
    except task_config.TaskConfigError as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e

    for name in config.targets:
        typer.echo(name)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
