import os

import pytest

from hbspack.sources.naming import (
    TemplateNameError,
    default_process_partial_name,
    last_segment,
    partial_name,
    template_name,
)


def _identity(value):
    return value


class TestDefaultProcessPartialName:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("_foo.hbs", "foo"),
            ("templates/partials/_header.hbs", "header"),
            ("a/b/_item.list.hbs", "item.list"),
            ("partials/footer.hbs", "footer"),
            ("__double.hbs", "_double"),
            ("_noext", "noext"),
            ("plain", "plain"),
        ],
    )
    def test_strips_directory_extension_and_marker(self, path, expected):
        assert default_process_partial_name(path) == expected

    def test_marker_only_yields_empty_name(self):
        assert default_process_partial_name("dir/_.hbs") == ""
        assert default_process_partial_name("_") == ""


class TestPartialName:
    def test_uses_default_transform(self):
        assert partial_name("src/_foo.hbs", default_process_partial_name) == "foo"

    def test_custom_transform(self):
        assert partial_name("src/_foo.hbs", str.upper) == "SRC/_FOO.HBS"

    def test_empty_name_is_rejected(self):
        with pytest.raises(TemplateNameError, match="_.hbs"):
            partial_name("partials/_.hbs", default_process_partial_name)


class TestTemplateName:
    def test_default_is_path(self):
        assert template_name("views/home.hbs", _identity) == "views/home.hbs"

    def test_custom_transform(self):
        def strip(path: str) -> str:
            return path.rsplit("/", 1)[-1].split(".")[0]

        assert template_name("views/home.hbs", strip) == "home"

    def test_empty_name_is_rejected(self):
        with pytest.raises(TemplateNameError):
            template_name("views/home.hbs", lambda _: "")


def test_last_segment():
    assert last_segment("a/b/c.hbs") == "c.hbs"
    assert last_segment("c.hbs") == "c.hbs"


@pytest.mark.skipif(os.sep == "\\", reason="backslash separates segments on Windows")
def test_backslash_is_part_of_segment_on_posix():
    assert last_segment("views\\_row.hbs") == "views\\_row.hbs"
    assert default_process_partial_name("dir/a\\_b.hbs") == "a\\_b"


def test_path_prefix_is_kept_in_template_name():
    assert template_name("./views/a.hbs", _identity) == "./views/a.hbs"
    assert template_name("views//b.hbs", _identity) == "views//b.hbs"
