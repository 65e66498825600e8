"""Tests for the Lndev build driver."""

import pytest
import os
import logging
from dataclasses import replace
from pathlib import Path

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from conftest import make_post
from lndev_pkg.core import Lndev, InfoFilter
from lndev_pkg.errors import FrontMatterError, RenderError
from lndev_pkg.output import minify_html_bytes


class TestLndevBuild:
    """Test cases for the full build."""

    def test_full_build_layout(self, site_dir, site_config):
        generator = Lndev(site_config)
        generator.build()
        out = site_dir / 'out'

        assert (out / 'posts' / 'first' / 'index.html').is_file()
        assert (out / 'posts' / 'latest' / 'index.html').is_file()
        assert (out / 'posts' / '2023' / 'middle' / 'index.html').is_file()
        assert (out / 'drafts' / 'wip' / 'index.html').is_file()
        assert (out / 'blog' / 'index.html').is_file()
        assert (out / 'drafts' / 'index.html').is_file()
        assert generator.pages_generated == 4

    def test_listings_contain_their_collection(self, site_dir, site_config):
        Lndev(site_config).build()
        out = site_dir / 'out'
        blog = (out / 'blog' / 'index.html').read_text(encoding='utf-8')
        drafts = (out / 'drafts' / 'index.html').read_text(encoding='utf-8')

        assert 'Latest Post' in blog
        assert 'Work In Progress' not in blog
        assert 'Work In Progress' in drafts
        assert blog.index('Latest Post') < blog.index('Middle Post') < blog.index('First Post')

    def test_pages_are_minified(self, site_dir, site_config):
        Lndev(site_config).build()
        page = (site_dir / 'out' / 'posts' / 'latest' / 'index.html').read_bytes()
        assert minify_html_bytes(page) == page
        assert b'\n    ' not in page
        assert page.startswith(b'<!DOCTYPE html><html')
        assert b'<head>' in page and b'</head>' in page

    def test_rebuild_counts_pages_once(self, site_dir, site_config):
        generator = Lndev(site_config)
        generator.build()
        generator.build()
        assert generator.pages_generated == 4

    def test_assets_are_mirrored(self, site_dir, site_config):
        Lndev(site_config).build()
        out = site_dir / 'out'
        public = site_dir / 'public'
        assert (out / 'styles.css').read_bytes() == (public / 'styles.css').read_bytes()
        assert (out / 'images' / 'logo.png').read_bytes() == (public / 'images' / 'logo.png').read_bytes()
        assert (out / 'about.html').read_bytes() == minify_html_bytes((public / 'about.html').read_bytes())

    def test_minify_assets_option(self, site_dir, site_config):
        Lndev(replace(site_config, minify_assets=True)).build()
        assert (site_dir / 'out' / 'styles.min.css').is_file()

    def test_missing_title_aborts_before_pages(self, site_dir, site_config):
        """A post without a title stops the build before any page is written."""
        (site_dir / 'posts' / 'broken.md').write_text(
            make_post().replace('title: Test Post\n', ''), encoding='utf-8')

        with pytest.raises(FrontMatterError, match="'title'"):
            Lndev(site_config).build()

        out = site_dir / 'out'
        assert not (out / 'posts').exists()
        assert not (out / 'blog').exists()
        assert not (out / 'drafts').exists()

    def test_bad_draft_aborts_whole_build(self, site_dir, site_config):
        (site_dir / 'drafts' / 'broken.md').write_text('no front matter', encoding='utf-8')
        with pytest.raises(FrontMatterError):
            Lndev(site_config).build()
        assert not (site_dir / 'out' / 'posts').exists()

    def test_render_failure_propagates(self, site_dir, site_config, mock_templates_dir):
        Path(mock_templates_dir, 'post.html').write_text('{{ page.missing }}', encoding='utf-8')
        with pytest.raises(RenderError):
            Lndev(replace(site_config, templates_dir=mock_templates_dir)).build()


class TestInfoFilter:
    """Test cases for the console log filter."""

    def _record(self, level, msg):
        return logging.LogRecord('Lndev', level, __file__, 1, msg, None, None)

    def test_allows_milestones(self):
        assert InfoFilter().filter(self._record(logging.INFO, 'Site build completed in 1.0 seconds.'))

    def test_hides_chatter(self):
        assert not InfoFilter().filter(self._record(logging.INFO, 'Starting site build...'))

    def test_always_shows_warnings(self):
        assert InfoFilter().filter(self._record(logging.ERROR, 'anything'))
