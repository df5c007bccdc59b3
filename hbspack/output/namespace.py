"""Namespace object declarations for emitted modules."""

from __future__ import annotations

import json
from dataclasses import dataclass


@dataclass(frozen=True)
class NamespaceInfo:
    """Accessor expression and declaration for a dotted namespace."""

    namespace: str
    declaration: str


def js_string(value: str) -> str:
    """Encode a string as a JavaScript string literal."""
    return json.dumps(value, ensure_ascii=False)


def get_namespace_declaration(ns: str) -> NamespaceInfo:
    """Build the accessor and declaration lines for a dotted namespace.

    ``"MyApp.Templates"`` yields the accessor ``this["MyApp"]["Templates"]``
    and one ``x = x || {};`` line per level. Parts equal to ``this`` are
    skipped, so ``"this"`` alone declares nothing.

    Args:
        ns: Dotted namespace

    Returns:
        Namespace accessor and declaration text
    """
    lines: list[str] = []
    current = "this"
    if ns != "this":
        for part in ns.split("."):
            if part == "this":
                continue
            current += f"[{js_string(part)}]"
            lines.append(f"{current} = {current} || {{}};")

    return NamespaceInfo(namespace=current, declaration="\n".join(lines))
