"""Task file loading and per-target option merging."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..core.models import FileGroup, TargetConfig, TaskConfig, TaskOptions

logger = logging.getLogger(__name__)

DEFAULT_TASK_FILE = Path("hbspack.yaml")


class TaskConfigError(Exception):
    """Raised when a task file is missing or malformed."""


def _parse_files(target: str, raw: Any) -> list[FileGroup]:
    """Parse a target's ``files`` entry.

    Accepts a ``{dest: [src, ...]}`` mapping or a list of
    ``{src: [...], dest: ...}`` mappings. A single source may be a string.
    """
    if isinstance(raw, dict):
        entries = [{"dest": dest, "src": src} for dest, src in raw.items()]
    elif isinstance(raw, list):
        entries = raw
    else:
        raise TaskConfigError(f"Target '{target}': 'files' must be a mapping or a list")

    groups: list[FileGroup] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise TaskConfigError(f"Target '{target}': invalid files entry {entry!r}")
        src = entry.get("src", [])
        if isinstance(src, str):
            src = [src]
        try:
            groups.append(FileGroup(src=src, dest=entry.get("dest")))
        except ValidationError as e:
            raise TaskConfigError(f"Target '{target}': {e}") from e
    return groups


def parse_task_config(data: Any) -> TaskConfig:
    """Build a TaskConfig from parsed YAML data."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TaskConfigError("Task file must contain a mapping")

    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise TaskConfigError("'options' must be a mapping")

    raw_targets = data.get("targets") or {}
    if not isinstance(raw_targets, dict):
        raise TaskConfigError("'targets' must be a mapping")

    targets: dict[str, TargetConfig] = {}
    for name, raw in raw_targets.items():
        raw = raw or {}
        if not isinstance(raw, dict):
            raise TaskConfigError(f"Target '{name}' must be a mapping")
        target_options = raw.get("options") or {}
        if not isinstance(target_options, dict):
            raise TaskConfigError(f"Target '{name}': 'options' must be a mapping")
        targets[str(name)] = TargetConfig(
            name=str(name),
            options=target_options,
            files=_parse_files(str(name), raw.get("files", {})),
        )

    return TaskConfig(options=options, targets=targets)


def load_task_config(path: Path) -> TaskConfig:
    """Load a YAML task file.

    Args:
        path: Task file path

    Returns:
        Parsed task configuration
    """
    if not path.exists():
        raise TaskConfigError(f"Task file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise TaskConfigError(f"Invalid YAML in {path}: {e}") from e

    config = parse_task_config(data)
    logger.debug(f"Loaded {len(config.targets)} target(s) from {path}")
    return config


def resolve_options(config: TaskConfig, target: TargetConfig) -> TaskOptions:
    """Merge target options over task-level options and validate them.

    Raises:
        TaskConfigError: The merged options are invalid
    """
    merged = {**config.options, **target.options}
    try:
        return TaskOptions.model_validate(merged)
    except ValidationError as e:
        raise TaskConfigError(f"Target '{target.name}': invalid options\n{e}") from e


def select_targets(config: TaskConfig, names: list[str]) -> list[TargetConfig]:
    """Return the named targets in the given order, or all of them."""
    if not names:
        return list(config.targets.values())

    unknown = [name for name in names if name not in config.targets]
    if unknown:
        known = ", ".join(config.targets) or "none"
        raise TaskConfigError(
            f"Unknown target(s): {', '.join(unknown)}. Known targets: {known}."
        )
    return [config.targets[name] for name in names]
