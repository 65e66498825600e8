"""Test configuration and fixtures for lndev tests."""

import pytest
import tempfile
import shutil
import os
from pathlib import Path

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lndev_pkg.settings import SiteConfig


def make_post(title="Test Post", summary="A short summary", cover="/images/cover.png",
              date="2023-01-01", tags=("python", "web"), body="Some *markdown* content.",
              extra=""):
    """Return the text of a content file with YAML front matter."""
    lines = [
        "---",
        f"title: {title}",
        f"summary: {summary}",
        "cover:",
        f"  image: {cover}",
        f"date: \"{date}\"",
    ]
    if extra:
        lines.append(extra.rstrip("\n"))
    if tags:
        lines.append("tags:")
        lines.extend(f"  - {tag}" for tag in tags)
    else:
        lines.append("tags: []")
    lines.extend(["---", "", body, ""])
    return "\n".join(lines)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def site_dir(temp_dir):
    """Create a site tree with posts, drafts and static assets."""
    site = Path(temp_dir)
    posts = site / 'posts'
    drafts = site / 'drafts'
    public = site / 'public'
    posts.mkdir()
    drafts.mkdir()
    (public / 'images').mkdir(parents=True)

    (posts / 'first.md').write_text(
        make_post(title='First Post', date='2023-01-01'), encoding='utf-8')
    (posts / 'latest.md').write_text(
        make_post(title='Latest Post', date='2024-06-15', extra='modified: "2024-06-20"\n'),
        encoding='utf-8')
    (posts / '2023').mkdir()
    (posts / '2023' / 'middle.md').write_text(
        make_post(title='Middle Post', date='2023-06-01'), encoding='utf-8')
    (posts / 'notes.txt').write_text('not content', encoding='utf-8')

    (drafts / 'wip.md').write_text(
        make_post(title='Work In Progress', date='2024-01-01'), encoding='utf-8')

    (public / 'styles.css').write_text('body {\n    color: red;\n}\n', encoding='utf-8')
    (public / 'images' / 'logo.png').write_bytes(b'\x89PNG\r\n\x1a\n\x00\x00 fake image')
    (public / 'about.html').write_text(
        '<!DOCTYPE html>\n<html>\n  <head>\n    <title>About</title>\n  </head>\n'
        '  <body>\n    <p>\n      About   this   site\n    </p>\n  </body>\n</html>\n',
        encoding='utf-8')

    return site


@pytest.fixture
def site_config(site_dir):
    """A SiteConfig pointing at the site_dir fixture."""
    return SiteConfig(
        origin='https://lndev.nl',
        content_roots={
            'published': str(site_dir / 'posts'),
            'draft': str(site_dir / 'drafts'),
        },
        assets_root=str(site_dir / 'public'),
        output_root=str(site_dir / 'out'),
    )


@pytest.fixture
def mock_templates_dir(temp_dir):
    """Create a minimal templates directory."""
    templates_dir = Path(temp_dir) / 'templates'
    templates_dir.mkdir()
    (templates_dir / 'post.html').write_text(
        '<!DOCTYPE html><html><head><title>{{ page.page_title }}</title></head>'
        '<body>{{ page.body_html|safe }}</body></html>', encoding='utf-8')
    (templates_dir / 'blog.html').write_text(
        '<!DOCTYPE html><html><head><title>{{ collection.title }}</title></head><body>'
        '{% for page in collection.pages %}<a href="{{ page.route_path }}/">{{ page.slug }}</a>'
        '{% endfor %}</body></html>', encoding='utf-8')
    return str(templates_dir)
