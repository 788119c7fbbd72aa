"""
tests for kubinit.provision.render
"""
import pytest

from kubinit.provision.render import (generate, yaml_indent, RenderError,
                                      get_environment)


class Data:  # pylint: disable=too-few-public-methods
    """
    Mock a request
    """
    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def context(self):
        return self.kwargs


def test_generate():
    userdata = generate("test", "hello {{ name }}\n", Data(name="world"))
    assert userdata == b"hello world\n"


def test_generate_shell_words():
    userdata = generate("test", "for a in {{ addons | shell_words }} ;",
                        Data(addons=["dns", "ingress"]))
    assert userdata == b"for a in 'dns' 'ingress' ;"


def test_generate_does_not_escape():
    userdata = generate("test", "{{ cmd }}", Data(cmd="a > b && echo '<x>'"))
    assert userdata == b"a > b && echo '<x>'"


def test_generate_missing_field():
    with pytest.raises(RenderError) as exc:
        generate("test", "{{ missing }}", Data())

    assert "failed to generate test template" in str(exc.value)
    assert exc.value.cause is exc.value.__cause__


def test_generate_broken_template():
    with pytest.raises(RenderError) as exc:
        generate("broken", "{% for x in %}", Data())

    assert "failed to parse broken template" in str(exc.value)


def test_generate_filter_failure():
    with pytest.raises(RenderError) as exc:
        generate("test", "{{ content | yaml_indent }}", Data(content=123))

    assert "failed to generate test template" in str(exc.value)
    assert isinstance(exc.value.__cause__, AttributeError)


def test_yaml_indent():
    assert yaml_indent("a\nb\n") == "    a\n    b"
    assert yaml_indent("a\n\nb", 2) == "  a\n\n  b"
    assert yaml_indent("") == ""


def test_environment_is_not_shared():
    assert get_environment() is not get_environment()
