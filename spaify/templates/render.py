from __future__ import annotations

from os.path import dirname, join
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

INFO_DIR = join(dirname(__file__), "info")


class Renderer:
    """
    Render a Jinja template

    Sets up Jinja renderer and renders templates from a template
    folder using provided context. Rendered templates are returned
    as strings; nothing is written to disk.

    Stub files copied into the Laravel project are not rendered:
    they contain Blade and Vue syntax that clashes with Jinja.

    Usage:

    >>> from spaify.templates.render import Renderer
    >>> r = Renderer('path/to/templates')
    >>> output_string = r.render_template('template.tpl', {'key': 'value'})
    """

    def __init__(self, template_dir: str = INFO_DIR):
        self.template_dir = template_dir
        self.jinja_env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=False,
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )

    def render_template(self, template: str, context: Any) -> str:
        """
        Render a single template to a string using provided context

        :param template: Name of the template file, relative to `template_dir`.
        :param context: Context to render the template with.
        :return: The resulting string.
        """

        # Jinja2 always uses /, even on Windows
        template = template.replace("\\", "/")

        tpl_object = self.jinja_env.get_template(template)
        return tpl_object.render(context)


__all__ = ["Renderer"]
