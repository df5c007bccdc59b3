import logging
from pathlib import Path

import pytest

from hbspack.compiler.adapter import CompileError, compile_file
from hbspack.core.models import TaskOptions


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "a.hbs"
    path.write_text("Hello", encoding="utf-8")
    return path


class TestCompileFile:
    def test_wrapped_by_default(self, source, compiler):
        assert compile_file(source, TaskOptions(), compiler) == "Handlebars.template(tpl(Hello))"

    def test_unwrapped(self, source, compiler):
        assert compile_file(source, TaskOptions(wrapped=False), compiler) == "tpl(Hello)"

    def test_amd_without_namespace_returns(self, source, compiler):
        options = TaskOptions(amd=True, namespace=False)
        assert compile_file(source, options, compiler) == (
            "return Handlebars.template(tpl(Hello))"
        )

    def test_amd_with_namespace_does_not_return(self, source, compiler):
        compiled = compile_file(source, TaskOptions(amd=True), compiler)
        assert not compiled.startswith("return")

    def test_process_content_and_ast(self, source, compiler):
        def add_source(ast):
            return {**ast, "source": ast["source"] + "!"}

        options = TaskOptions(
            process_content=lambda text: text.lower(), process_ast=add_source
        )
        assert compile_file(source, options, compiler) == (
            "Handlebars.template(tpl(hello!))"
        )
        assert compiler.parsed == ["hello"]

    def test_compiler_options_forwarded(self, source, compiler):
        options = TaskOptions(
            known_helpers=["t"], compiler_options={"preventIndent": True}
        )
        compile_file(source, options, compiler)
        assert compiler.precompile_options == [
            {"preventIndent": True, "knownHelpers": {"t": True}}
        ]

    def test_parse_failure_is_fatal(self, tmp_path, compiler, caplog):
        bad = tmp_path / "bad.hbs"
        bad.write_text("{{#broken}}", encoding="utf-8")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(CompileError) as excinfo:
                compile_file(bad, TaskOptions(), compiler)

        assert excinfo.value.path == bad
        assert str(excinfo.value) == f"Handlebars failed to compile {bad}."
        assert isinstance(excinfo.value.__cause__, ValueError)
        assert "unclosed block" in caplog.text

    def test_unreadable_file_is_fatal(self, tmp_path, compiler):
        with pytest.raises(CompileError):
            compile_file(tmp_path / "missing.hbs", TaskOptions(), compiler)

    def test_process_content_failure_is_fatal(self, source, compiler):
        def explode(text):
            raise RuntimeError("boom")

        with pytest.raises(CompileError):
            compile_file(source, TaskOptions(process_content=explode), compiler)
