"""
Jinja2 rendering of pages and collection listings into HTML bytes.
"""

import os
import logging

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from .collection import Collection
from .content import Page
from .errors import RenderError
from .settings import SiteConfig

POST_TEMPLATE = 'post.html'
LISTING_TEMPLATE = 'blog.html'
PACKAGE_TEMPLATES = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')


class PageRenderer:
    """Render Page and Collection objects through the post and listing templates."""

    def __init__(self, config: SiteConfig):
        self.config = config
        self.templates_dir = config.templates_dir or PACKAGE_TEMPLATES
        self.logger = logging.getLogger('Lndev.render')
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=select_autoescape(['html', 'xml']),
            undefined=StrictUndefined,
        )

    def render_template(self, template_name, **context) -> bytes:
        """Render a Jinja2 template to UTF-8 bytes."""
        try:
            template = self.env.get_template(template_name)
            html = template.render(site=self.config, **context)
        except TemplateError as e:
            raise RenderError(template_name, str(e)) from e
        return html.encode('utf-8')

    def render_page(self, page: Page) -> bytes:
        return self.render_template(POST_TEMPLATE, page=page)

    def render_collection(self, collection: Collection) -> bytes:
        return self.render_template(LISTING_TEMPLATE, collection=collection)
