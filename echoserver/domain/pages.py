"""Static HTML form pages served by the dispatcher.

Pages are Jinja2 templates with no variables; going through the template
engine keeps a single render path (and a single failure mode) for both.
"""
from __future__ import annotations

from collections.abc import Mapping

from jinja2 import DictLoader, Environment, TemplateError, select_autoescape

from ..errors import PageRenderError

__all__ = [
    "INDEX_PAGE",
    "REDIRECT_FORM_PAGE",
    "DEFAULT_PAGES",
    "PageRenderer",
]

INDEX_PAGE = "index.html"
REDIRECT_FORM_PAGE = "redirect-form.html"

_INDEX = """
<!DOCTYPE html>
<html>
<head>
</head>
<body>
	<form action="/index.html" method="POST" enctype="multipart/form-data">
		<input name="title">
		<input name="author">
		<input name="attachment-file" type="file">
		<input type="submit">
	</form>
</body>
</html>
"""

_REDIRECT_FORM = """
<!DOCTYPE html>
<html>
<head></head>
<body>
	<form action="redirected-location" method="POST">
		<input type="hidden" name="data" value="message"/>
		<input type="submit" value="Continue" />
	</form>
</body>
</html>
"""

DEFAULT_PAGES: Mapping[str, str] = {
    INDEX_PAGE: _INDEX,
    REDIRECT_FORM_PAGE: _REDIRECT_FORM,
}


class PageRenderer:
    """Render named pages from an in-memory template set."""

    def __init__(self, pages: Mapping[str, str] = DEFAULT_PAGES) -> None:
        self._env = Environment(
            loader=DictLoader(dict(pages)),
            autoescape=select_autoescape(["html"]),
            keep_trailing_newline=True,
        )

    def render(self, name: str) -> str:
        """Return the rendered page.

        Raises:
            PageRenderError: if the template is missing, malformed, or fails to render.
        """
        try:
            return self._env.get_template(name).render()
        except TemplateError as e:
            raise PageRenderError(f"cannot render {name}: {e}") from e
