"""Assemble compiled fragments into the emitted JavaScript module."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from ..core.models import TaskOptions
from .namespace import NamespaceInfo, get_namespace_declaration, js_string

logger = logging.getLogger(__name__)

_LINEFEED_PATTERN = re.compile(r"\r\n|\n")

COLLECTOR = "templates"


class ModuleWrapper(str, Enum):
    """Outer envelope placed around the module body."""

    NONE = "none"
    AMD = "amd"
    COMMONJS = "commonjs"


class TemplateStyle(str, Enum):
    """Statement shape used to register a template."""

    NAMESPACE = "namespace"
    COLLECTOR = "collector"
    COLLECTOR_ASSIGN = "collector_assign"
    MODULE_EXPORT = "module_export"
    BARE = "bare"


@dataclass(frozen=True)
class OutputMode:
    """Module layout decided once from the task options.

    ``library`` is the module id of the Handlebars runtime, used by the Node
    preamble and the AMD dependency list.
    """

    namespace: NamespaceInfo | None
    node: bool = False
    wrapper: ModuleWrapper = ModuleWrapper.NONE
    partials_use_namespace: bool = False
    library: str = "handlebars"

    @classmethod
    def from_options(cls, options: TaskOptions) -> OutputMode:
        namespace = None
        if options.namespace is not False:
            namespace = get_namespace_declaration(options.namespace)

        if options.amd:
            wrapper = ModuleWrapper.AMD
        elif options.commonjs:
            wrapper = ModuleWrapper.COMMONJS
        else:
            wrapper = ModuleWrapper.NONE

        return cls(
            namespace=namespace,
            node=options.node,
            wrapper=wrapper,
            partials_use_namespace=options.partials_use_namespace,
        )

    @property
    def namespaced(self) -> bool:
        return self.namespace is not None

    def template_style(self, file_count: int) -> TemplateStyle:
        """Pick the template statement shape for a group of ``file_count`` files."""
        if self.namespace is not None:
            return TemplateStyle.NAMESPACE
        if file_count == 1:
            if self.wrapper is ModuleWrapper.COMMONJS:
                return TemplateStyle.COLLECTOR_ASSIGN
            if self.node:
                return TemplateStyle.MODULE_EXPORT
            return TemplateStyle.BARE
        if self.wrapper is ModuleWrapper.COMMONJS or self.node:
            return TemplateStyle.COLLECTOR
        return TemplateStyle.BARE


def partial_statement(name: str, compiled: str, mode: OutputMode) -> str:
    """Statement registering a compiled partial."""
    key = js_string(name)
    if mode.partials_use_namespace and mode.namespace is not None:
        compiled = f"{mode.namespace.namespace}[{key}] = {compiled}"
    return f"Handlebars.registerPartial({key}, {compiled});"


def template_statement(
    name: str, compiled: str, mode: OutputMode, style: TemplateStyle
) -> str:
    """Statement assigning or exporting a compiled template."""
    key = js_string(name)
    if style is TemplateStyle.NAMESPACE:
        if mode.namespace is None:
            raise ValueError("Namespace style requires a namespace")
        return f"{mode.namespace.namespace}[{key}] = {compiled};"
    if style is TemplateStyle.COLLECTOR:
        return f"{COLLECTOR}[{key}] = {compiled};"
    if style is TemplateStyle.COLLECTOR_ASSIGN:
        return f"{COLLECTOR} = {compiled};"
    if style is TemplateStyle.MODULE_EXPORT:
        return f"module.exports = {compiled};"
    return compiled


def normalize_linefeeds(text: str, linefeed: str) -> str:
    """Convert ``\\r\\n`` and ``\\n`` line endings to ``linefeed``."""
    return _LINEFEED_PATTERN.sub(lambda _: linefeed, text)


def _wrap_namespaced(
    lines: list[str], ns: NamespaceInfo, mode: OutputMode
) -> list[str]:
    lines = [ns.declaration, *lines]
    if mode.node:
        lines = [
            "var glob = ('undefined' === typeof window) ? global : window,",
            f"Handlebars = glob.Handlebars || require('{mode.library}');",
            *lines,
            "if (typeof exports === 'object' && exports) {"
            f"module.exports = {ns.namespace};}}",
        ]
    return lines


def _wrap_node(lines: list[str], mode: OutputMode, file_count: int) -> list[str]:
    if file_count > 1:
        lines = [f"var {COLLECTOR} = {{}};", *lines, f"module.exports = {COLLECTOR};"]
    return [f"var Handlebars = require('{mode.library}');", *lines]


def _wrap_amd(lines: list[str], mode: OutputMode) -> list[str]:
    lines = [f"define(['{mode.library}'], function(Handlebars) {{", *lines]
    if mode.namespace is not None:
        lines.append(f"return {mode.namespace.namespace};")
    lines.append("});")
    return lines


def _wrap_commonjs(lines: list[str], mode: OutputMode) -> list[str]:
    if mode.namespace is None:
        lines = [f"var {COLLECTOR} = {{}};", *lines, f"return {COLLECTOR};"]
    else:
        lines = [*lines, f"return {mode.namespace.namespace};"]
    return ["module.exports = function(Handlebars) {", *lines, "};"]


def emit(
    partials: list[str],
    templates: list[str],
    mode: OutputMode,
    file_count: int,
    separator: str = "\n\n",
    linefeed: str = "\n",
) -> str | None:
    """Build the module text from partial and template statements.

    Partials always precede templates. The body is then enveloped from the
    inside out: namespace declaration or Node preamble, then the AMD or
    CommonJS wrapper.

    Args:
        partials: Partial registration statements, in source order
        templates: Template statements, in source order
        mode: Output layout
        file_count: Number of source files processed for the group
        separator: Joins the statements
        linefeed: Line ending the separator is normalized to

    Returns:
        Module text, or None when there are no statements
    """
    lines = [*partials, *templates]
    if not lines:
        return None

    if mode.namespace is not None:
        lines = _wrap_namespaced(lines, mode.namespace, mode)
    elif mode.node:
        lines = _wrap_node(lines, mode, file_count)

    if mode.wrapper is ModuleWrapper.AMD:
        lines = _wrap_amd(lines, mode)
    elif mode.wrapper is ModuleWrapper.COMMONJS:
        lines = _wrap_commonjs(lines, mode)

    logger.debug(
        f"Emitting {len(partials)} partial(s) and {len(templates)} template(s) "
        f"as {mode.wrapper.value} module"
    )
    return normalize_linefeeds(separator, linefeed).join(lines)
