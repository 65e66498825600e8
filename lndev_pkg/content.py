"""
Content location and parsing.

Turns Markdown files with YAML front matter into fully populated, immutable
:class:`Page` objects carrying everything the templates need: route path,
canonical URL, reading time and social share links.
"""

import os
import logging
from dataclasses import dataclass
from datetime import date, datetime
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple
from urllib.parse import quote_plus

import mistune
import yaml

from .errors import ContentReadError, FrontMatterError
from .settings import SiteConfig

CONTENT_EXTENSION = '.md'
FRONT_MATTER_DELIMITER = '---'

# Platform key -> (display name, URL template). Fields are percent-encoded.
SHARE_PLATFORMS = (
    ('twitter', 'X', 'https://x.com/intent/tweet/?text={title}&url={url}&hashtags={tags}'),
    ('facebook', 'Facebook', 'https://facebook.com/sharer/sharer.php?u={url}'),
    ('linkedin', 'LinkedIn',
     'https://www.linkedin.com/shareArticle?mini=true&url={url}&title={title}&summary={title}&source={url}'),
    ('reddit', 'Reddit', 'https://reddit.com/submit?url={url}&title={title}'),
    ('whatsapp', 'WhatsApp', 'https://api.whatsapp.com/send?text={title}%20-%20{url}'),
    ('telegram', 'Telegram', 'https://telegram.me/share/url?text={title}&url={url}'),
)


@dataclass(frozen=True)
class FrontMatter:
    title: str
    summary: str
    cover_image: str
    publication_date: str
    modified_date: Optional[str]
    tags: Tuple[str, ...]


@dataclass(frozen=True)
class ShareLink:
    url: str
    label: str


@dataclass(frozen=True)
class Page:
    """One content file mapped to one published route."""
    front_matter: FrontMatter
    slug: str
    route_path: str
    canonical_url: str
    cover_image_url: str
    body_html: str
    reading_time_label: str
    share_links: Mapping[str, ShareLink]
    page_title: str
    origin: str
    source_path: str


def find_content_files(root: str) -> Iterator[str]:
    """
    Yield every content file below root, walking directories in name order.

    Errors while listing a directory are raised, not skipped.
    """
    def _raise(err):
        raise ContentReadError(getattr(err, 'filename', None) or root, str(err)) from err

    if not os.path.isdir(root):
        raise ContentReadError(root, "content root is not a directory")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for filename in sorted(filenames):
            path = os.path.join(dirpath, filename)
            if filename.endswith(CONTENT_EXTENSION) and os.path.isfile(path):
                yield path


def estimate_reading_seconds(text: str, words_per_minute: int = 265) -> int:
    """Estimate how many seconds it takes to read text."""
    words = len(text.split())
    return int(round(words * 60 / words_per_minute))


def format_reading_time(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds} sec read"
    return f"{seconds // 60} min read"


def build_route_path(source_path: str, content_root: str) -> str:
    """
    Route for a content file: its directory relative to the content root's
    parent, joined with the file's base name, rooted at '/'.

    ``posts/2024/hello.md`` under root ``posts`` becomes ``/posts/2024/hello``.
    """
    root = os.path.abspath(content_root)
    base = os.path.dirname(root)
    relative = os.path.relpath(os.path.abspath(source_path), base)
    stem = os.path.splitext(relative)[0]
    path = stem.replace(os.sep, '/')
    if not path.startswith('/'):
        path = '/' + path
    return path


def form_encode(value: str) -> str:
    """Encode like application/x-www-form-urlencoded: only alphanumerics and '*-._' stay literal."""
    return quote_plus(value, safe='*').replace('~', '%7E')


def build_share_links(title: str, canonical_url: str, tags) -> Mapping[str, ShareLink]:
    encoded = {
        'title': form_encode(title),
        'url': form_encode(canonical_url),
        'tags': form_encode(','.join(tags)),
    }
    links = {}
    for key, name, template in SHARE_PLATFORMS:
        links[key] = ShareLink(
            url=template.format(**encoded),
            label=f"Share {title} on {name}",
        )
    return MappingProxyType(links)


def split_front_matter(text: str, source_path: str) -> Tuple[str, str]:
    """Split a document into its YAML block and Markdown body."""
    text = text.lstrip('\ufeff')
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        raise FrontMatterError(source_path, "document does not start with '---'")
    for index in range(1, len(lines)):
        if lines[index].strip() == FRONT_MATTER_DELIMITER:
            return ''.join(lines[1:index]), ''.join(lines[index + 1:])
    raise FrontMatterError(source_path, "closing '---' not found")


def _require_str(data: dict, key: str, source_path: str, label: str = None) -> str:
    label = label or key
    if key not in data or data[key] is None:
        raise FrontMatterError(source_path, f"missing required field '{label}'")
    value = data[key]
    # PyYAML resolves unquoted ISO dates; keep them as their string form.
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if not isinstance(value, str):
        raise FrontMatterError(
            source_path, f"field '{label}' must be a string, got {type(value).__name__}"
        )
    return value


def decode_front_matter(block: str, source_path: str) -> FrontMatter:
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise FrontMatterError(source_path, f"invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise FrontMatterError(source_path, "front matter must be a mapping")

    cover = data.get('cover')
    if cover is None:
        raise FrontMatterError(source_path, "missing required field 'cover.image'")
    if not isinstance(cover, dict):
        raise FrontMatterError(source_path, "field 'cover' must be a mapping")

    tags = data.get('tags')
    if tags is None:
        raise FrontMatterError(source_path, "missing required field 'tags'")
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise FrontMatterError(source_path, "field 'tags' must be a list of strings")

    modified = None
    if data.get('modified') is not None:
        modified = _require_str(data, 'modified', source_path)

    return FrontMatter(
        title=_require_str(data, 'title', source_path),
        summary=_require_str(data, 'summary', source_path),
        cover_image=_require_str(cover, 'image', source_path, 'cover.image'),
        publication_date=_require_str(data, 'date', source_path),
        modified_date=modified,
        tags=tuple(tags),
    )


class PostProcessor:
    """Parse content files into Page objects for one site configuration."""

    def __init__(self, config: SiteConfig):
        self.config = config
        self.logger = logging.getLogger('Lndev.content')
        self.markdown_parser = self.create_markdown_parser()

    def create_markdown_parser(self):
        """Create a Mistune markdown parser with a custom renderer."""
        class CustomRenderer(mistune.HTMLRenderer):
            def __init__(self):
                super().__init__(escape=False)

            def block_code(self, code, info=None):
                escaped_code = mistune.escape(code)
                lang = info.strip().split(None, 1)[0] if info and info.strip() else None
                if lang:
                    return '<pre><code class="language-{}">{}</code></pre>\n'.format(
                        mistune.escape(lang), escaped_code)
                return '<pre><code>{}</code></pre>\n'.format(escaped_code)

        return mistune.create_markdown(
            renderer=CustomRenderer(),
            plugins=['table', 'task_lists', 'strikethrough']
        )

    def markdown_filter(self, text):
        """Convert markdown text to HTML."""
        return self.markdown_parser(text)

    def read_source(self, file_path: str) -> str:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return f.read()
        except (IOError, OSError, UnicodeDecodeError) as e:
            raise ContentReadError(file_path, str(e)) from e

    def process(self, file_path: str, content_root: str) -> Page:
        """Parse a single markdown file into a Page."""
        text = self.read_source(file_path)
        block, body = split_front_matter(text, file_path)
        matter = decode_front_matter(block, file_path)

        origin = self.config.origin
        slug = os.path.splitext(os.path.basename(file_path))[0]
        route_path = build_route_path(file_path, content_root)
        canonical_url = origin + route_path
        seconds = estimate_reading_seconds(body, self.config.words_per_minute)

        page = Page(
            front_matter=matter,
            slug=slug,
            route_path=route_path,
            canonical_url=canonical_url,
            cover_image_url=origin + matter.cover_image,
            body_html=self.markdown_filter(body),
            reading_time_label=format_reading_time(seconds),
            share_links=build_share_links(matter.title, canonical_url, matter.tags),
            page_title=f"{self.config.site_name} - {matter.title}",
            origin=origin,
            source_path=file_path,
        )
        self.logger.debug(f"Parsed {file_path} -> {route_path}")
        return page
