"""Shared fixtures for hbspack tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from hbspack.core.settings import Settings


class FakeCompiler:
    """In-process TemplateCompiler producing ``tpl(<source>)`` code."""

    def __init__(self) -> None:
        self.parsed: list[str] = []
        self.precompile_options: list[dict[str, Any]] = []

    def parse(self, source: str) -> dict[str, Any]:
        if "{{#broken" in source:
            raise ValueError("Parse error on line 1: unclosed block")
        self.parsed.append(source)
        return {"type": "Program", "source": source}

    def precompile(self, ast: dict[str, Any], options: dict[str, Any]) -> str:
        self.precompile_options.append(options)
        return f"tpl({ast['source']})"


@pytest.fixture
def compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def settings() -> Settings:
    return Settings(linefeed="\n")


@pytest.fixture
def write_sources(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Create source files relative to a temporary working directory."""
    monkeypatch.chdir(tmp_path)

    def _write(files: dict[str, str]) -> list[Path]:
        paths = []
        for name, content in files.items():
            path = Path(name)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            paths.append(path)
        return paths

    return _write
