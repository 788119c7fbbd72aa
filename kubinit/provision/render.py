"""
Render user data templates with Jinja2.

Templates see the request's :meth:`context` as variables. Two filters are
available on top of the Jinja2 builtins:

``yaml_indent(width)``
    indent multi-line content, e.g. a PEM certificate, below a YAML
    ``content: |2`` block.

``shell_words``
    render a list as single-quoted words for a shell ``for`` loop.
"""
from jinja2 import Environment, StrictUndefined, TemplateError

from kubinit.util.logger import Logger
from kubinit.util.util import shell_words

LOGGER = Logger(__name__)


class RenderError(Exception):
    """raised when a user data template can't be rendered

    Args:
        msg (str): what failed
        cause (Exception): the underlying error, if any
    """
    def __init__(self, msg, cause=None):
        super().__init__(msg)
        self.cause = cause


def yaml_indent(text, width=4):
    """indent every non empty line of text by width spaces"""
    pad = " " * width
    return "\n".join(pad + line if line else line
                     for line in text.rstrip("\n").split("\n"))


def get_environment():
    """
    create a fresh Jinja2 environment for a single rendering
    """
    env = Environment(autoescape=False,
                      undefined=StrictUndefined,
                      trim_blocks=True,
                      lstrip_blocks=True,
                      keep_trailing_newline=True)
    env.filters['yaml_indent'] = yaml_indent
    env.filters['shell_words'] = shell_words
    return env


def generate(name, template_text, data):
    """
    Render a user data template.

    Args:
        name (str): the template's name, used in messages
        template_text (str): the Jinja2 template
        data: a request object providing ``context()``

    Returns:
        the rendered user data as bytes

    Raises:
        RenderError if the template is broken, refers to missing fields
        or a field can't be rendered
    """
    env = get_environment()
    try:
        template = env.from_string(template_text)
    except TemplateError as err:
        raise RenderError(f"failed to parse {name} template: {err}",
                          err) from err

    LOGGER.debug("Rendering %s", name)
    try:
        userdata = template.render(**data.context())
    except Exception as err:  # pylint: disable=broad-except
        raise RenderError(f"failed to generate {name} template: {err}",
                          err) from err

    return userdata.encode()
