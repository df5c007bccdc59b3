"""Domain models for template compilation tasks."""

from __future__ import annotations

import importlib
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..sources.naming import default_process_partial_name


def _identity(value: Any) -> Any:
    return value


def import_callable(value: str) -> Callable[..., Any]:
    """Resolve a dotted import path to a callable.

    Accepts ``package.module:attr`` or ``package.module.attr``.

    Args:
        value: Import path

    Returns:
        The imported callable
    """
    module_name, sep, attr = value.partition(":")
    if not sep:
        module_name, _, attr = value.rpartition(".")
    if not module_name or not attr:
        raise ValueError(f"Invalid import path: {value!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module {module_name!r}: {e}") from e

    try:
        target = getattr(module, attr)
    except AttributeError as e:
        raise ValueError(f"Module {module_name!r} has no attribute {attr!r}") from e

    if not callable(target):
        raise ValueError(f"{value!r} is not callable")
    return target


_TRANSFORM_DEFAULTS: dict[str, Callable[..., Any]] = {
    "process_content": _identity,
    "process_ast": _identity,
    "process_name": _identity,
    "process_partial_name": default_process_partial_name,
}

_PATTERN_DEFAULTS: dict[str, str] = {
    "partials_path_regex": ".",
    "partial_regex": "^_",
}


class TaskOptions(BaseModel):
    """Options controlling how one file group is compiled and wrapped."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )

    namespace: Literal[False] | str = Field(
        default="JST", description="Namespace object, or false to disable"
    )
    separator: str = Field(default="\n\n", description="Joins output statements")
    wrapped: bool = Field(default=True, description="Wrap in Handlebars.template()")
    amd: bool = False
    commonjs: bool = False
    node: bool = False
    known_helpers: list[str] = Field(default_factory=list)
    known_helpers_only: bool = False
    partials_path_regex: re.Pattern[str] = Field(default=re.compile("."))
    partial_regex: re.Pattern[str] = Field(default=re.compile("^_"))
    partials_use_namespace: bool = False
    process_content: Callable[[str], str] = _identity
    process_ast: Callable[[Any], Any] = Field(default=_identity, alias="processAST")
    process_name: Callable[[str], str] = _identity
    process_partial_name: Callable[[str], str] = default_process_partial_name
    compiler_options: dict[str, Any] = Field(default_factory=dict)

    @field_validator(
        "process_content",
        "process_ast",
        "process_name",
        "process_partial_name",
        mode="before",
    )
    @classmethod
    def _resolve_transform(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return _TRANSFORM_DEFAULTS[info.field_name]
        if isinstance(value, str):
            return import_callable(value)
        return value

    @field_validator("partials_path_regex", "partial_regex", mode="before")
    @classmethod
    def _default_pattern(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return _PATTERN_DEFAULTS[info.field_name]
        return value

    @field_validator("namespace")
    @classmethod
    def _check_namespace(cls, value: Literal[False] | str) -> Literal[False] | str:
        if value is not False and not value.strip():
            raise ValueError("namespace must be a non-empty string or false")
        return value

    @model_validator(mode="after")
    def _check_combinations(self) -> TaskOptions:
        if self.partials_use_namespace and self.namespace is False:
            raise ValueError("partialsUseNamespace requires a namespace")
        if self.amd and self.commonjs:
            raise ValueError("amd and commonjs cannot be combined")
        return self

    @property
    def namespaced(self) -> bool:
        return self.namespace is not False

    def resolved_compiler_options(self) -> dict[str, Any]:
        """Compiler options with the known-helper settings folded in."""
        options = dict(self.compiler_options)
        if self.known_helpers and "knownHelpers" not in options:
            options["knownHelpers"] = {name: True for name in self.known_helpers}
        if self.known_helpers_only and "knownHelpersOnly" not in options:
            options["knownHelpersOnly"] = True
        return options

    def describe(self) -> dict[str, Any]:
        """Loggable view of the options (callables by name, patterns as text)."""
        flags: dict[str, Any] = {}
        for field_name, field in type(self).model_fields.items():
            key = field.alias or field_name
            value = getattr(self, field_name)
            if isinstance(value, re.Pattern):
                value = value.pattern
            elif callable(value):
                value = getattr(value, "__qualname__", repr(value))
            flags[key] = value
        return flags


class FileKind(str, Enum):
    TEMPLATE = "template"
    PARTIAL = "partial"


class FileGroup(BaseModel):
    """A set of source files compiled into one destination."""

    src: list[str] = Field(
        default_factory=list, description="Source paths, kept as given"
    )
    dest: Path = Field(..., description="Destination path")

    @field_validator("src", mode="before")
    @classmethod
    def _fspath_sources(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [
                os.fspath(item) if isinstance(item, os.PathLike) else item
                for item in value
            ]
        return value


class ClassifiedFile(BaseModel):
    """A source file with its kind and registration name."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: FileKind
    name: str


class GroupStatus(str, Enum):
    WRITTEN = "written"
    EMPTY = "empty"


class GroupResult(BaseModel):
    """Outcome of compiling one file group."""

    dest: Path
    status: GroupStatus
    missing: list[str] = Field(default_factory=list)
    files: list[ClassifiedFile] = Field(default_factory=list)
    text: str | None = None


class TargetConfig(BaseModel):
    """One named target of a task file."""

    name: str
    options: dict[str, Any] = Field(default_factory=dict)
    files: list[FileGroup] = Field(default_factory=list)


class TaskConfig(BaseModel):
    """Parsed task file: shared options plus named targets."""

    options: dict[str, Any] = Field(default_factory=dict)
    targets: dict[str, TargetConfig] = Field(default_factory=dict)
