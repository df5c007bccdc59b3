import os
import re

import pytest
from pydantic import ValidationError

from hbspack.core.models import TaskOptions, import_callable
from hbspack.sources.naming import default_process_partial_name


class TestTaskOptionsDefaults:
    def test_defaults(self):
        options = TaskOptions()
        assert options.namespace == "JST"
        assert options.separator == "\n\n"
        assert options.wrapped is True
        assert options.amd is False
        assert options.commonjs is False
        assert options.node is False
        assert options.known_helpers == []
        assert options.known_helpers_only is False
        assert options.partials_use_namespace is False
        assert options.compiler_options == {}
        assert options.process_partial_name is default_process_partial_name
        assert options.process_content("x") == "x"
        assert options.process_ast({"a": 1}) == {"a": 1}
        assert options.process_name("a.hbs") == "a.hbs"

    def test_default_patterns(self):
        options = TaskOptions()
        assert options.partials_path_regex.search("anything")
        assert not options.partials_path_regex.search("")
        assert options.partial_regex.search("_foo.hbs")
        assert not options.partial_regex.search("foo_.hbs")

    def test_is_frozen(self):
        options = TaskOptions()
        with pytest.raises(ValidationError):
            options.namespace = "Other"


class TestTaskOptionsParsing:
    def test_camel_case_keys(self):
        options = TaskOptions.model_validate(
            {
                "namespace": False,
                "knownHelpers": ["t"],
                "knownHelpersOnly": True,
                "partialRegex": r"\.partial$",
                "partialsPathRegex": "partials/",
                "compilerOptions": {"strict": True},
            }
        )
        assert options.namespace is False
        assert not options.namespaced
        assert options.known_helpers == ["t"]
        assert options.partial_regex.pattern == r"\.partial$"
        assert options.partials_path_regex.pattern == "partials/"

    def test_compiled_patterns_pass_through(self):
        pattern = re.compile("x")
        assert TaskOptions(partial_regex=pattern).partial_regex.pattern == "x"

    def test_null_values_fall_back_to_defaults(self):
        options = TaskOptions.model_validate(
            {"processName": None, "partialRegex": None, "processAST": None}
        )
        assert options.process_name("a") == "a"
        assert options.partial_regex.pattern == "^_"

    def test_transform_from_import_path(self):
        options = TaskOptions.model_validate(
            {"processContent": "string:capwords", "processName": "os.path.basename"}
        )
        assert options.process_content("hello world") == "Hello World"
        assert options.process_name("a/b.hbs") == "b.hbs"

    def test_bad_import_path(self):
        with pytest.raises(ValidationError, match="Cannot import"):
            TaskOptions.model_validate({"processName": "no_such_module_xyz:fn"})

    def test_unknown_option_rejected(self):
        with pytest.raises(ValidationError):
            TaskOptions.model_validate({"namspace": "X"})

    def test_namespace_true_rejected(self):
        with pytest.raises(ValidationError):
            TaskOptions.model_validate({"namespace": True})

    def test_empty_namespace_rejected(self):
        with pytest.raises(ValidationError, match="non-empty"):
            TaskOptions(namespace="  ")

    def test_partials_use_namespace_requires_namespace(self):
        with pytest.raises(ValidationError, match="partialsUseNamespace"):
            TaskOptions(namespace=False, partials_use_namespace=True)

    def test_amd_with_commonjs_rejected(self):
        with pytest.raises(ValidationError, match="cannot be combined"):
            TaskOptions(amd=True, commonjs=True)


class TestCompilerOptions:
    def test_known_helpers_forwarded(self):
        options = TaskOptions(known_helpers=["t", "link"], known_helpers_only=True)
        assert options.resolved_compiler_options() == {
            "knownHelpers": {"t": True, "link": True},
            "knownHelpersOnly": True,
        }

    def test_explicit_compiler_options_win(self):
        options = TaskOptions(
            known_helpers=["t"],
            compiler_options={"knownHelpers": {"x": True}, "data": False},
        )
        assert options.resolved_compiler_options() == {
            "knownHelpers": {"x": True},
            "data": False,
        }

    def test_defaults_forward_nothing(self):
        assert TaskOptions().resolved_compiler_options() == {}


def test_describe_is_loggable():
    flags = TaskOptions().describe()
    assert flags["namespace"] == "JST"
    assert flags["partialRegex"] == "^_"
    assert flags["processAST"] == "_identity"
    assert flags["processPartialName"] == "default_process_partial_name"


def test_import_callable_dotted():
    assert import_callable("os.path.join") is os.path.join
