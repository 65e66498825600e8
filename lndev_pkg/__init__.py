"""
lndev - a Markdown blog builder.

lndev reads Markdown posts with YAML front matter, derives canonical URLs,
reading times and social share links, renders them through Jinja2 templates
and writes a minified static site.
"""

__version__ = "1.0.0"

from .core import Lndev
from .content import Page, PostProcessor
from .collection import Collection, CollectionBuilder
from .settings import SiteConfig, LndevSettings

__all__ = ['Lndev', 'Page', 'PostProcessor', 'Collection', 'CollectionBuilder',
           'SiteConfig', 'LndevSettings']
