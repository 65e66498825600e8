"""
Writing the output tree.

HTML buffers are minified on the way out; every other file is written
byte for byte.
"""

import os
import re
import shutil
import logging
from typing import List

import csscompressor
import minify_html
import rjsmin

from .errors import OutputWriteError

HTML_EXTENSION = '.html'
DOCTYPE_PATTERN = re.compile(r'^\s*(<!doctype[^>]*>)', re.IGNORECASE)


def minify_html_bytes(data: bytes) -> bytes:
    """
    Minify an HTML document.

    Closing tags and the opening ``<html>``/``<head>`` tags are never dropped,
    so minifying an already minified document returns it unchanged. The
    minifier lowercases the doctype; the source's doctype is put back as
    written.
    """
    code = data.decode('utf-8')
    minified = minify_html.minify(
        code,
        keep_closing_tags=True,
        keep_html_and_head_opening_tags=True,
    )
    source_doctype = DOCTYPE_PATTERN.match(code)
    if source_doctype:
        minified = DOCTYPE_PATTERN.sub(
            lambda _: source_doctype.group(1), minified, count=1
        )
    return minified.encode('utf-8')


class OutputWriter:
    """Place buffers and copied assets under the output root."""

    def __init__(self, output_root: str):
        self.output_root = output_root
        self.logger = logging.getLogger('Lndev.output')
        self.files_written = 0

    def target_path(self, relative_path: str) -> str:
        return os.path.join(self.output_root, relative_path.lstrip('/'))

    def _ensure_parent(self, target: str):
        try:
            os.makedirs(os.path.dirname(target) or '.', exist_ok=True)
        except OSError as e:
            raise OutputWriteError(os.path.dirname(target), str(e)) from e

    def write(self, relative_path: str, data: bytes) -> str:
        """Write data at relative_path below the output root, minifying HTML."""
        target = self.target_path(relative_path)
        self._ensure_parent(target)
        if target.endswith(HTML_EXTENSION):
            try:
                data = minify_html_bytes(data)
            except (UnicodeDecodeError, ValueError) as e:
                raise OutputWriteError(target, f"minification failed: {e}") from e
        try:
            with open(target, 'wb') as f:
                f.write(data)
        except (IOError, OSError) as e:
            raise OutputWriteError(target, str(e)) from e
        self.files_written += 1
        self.logger.debug(f"Wrote {target}")
        return target

    def copy_tree(self, source_root: str) -> List[str]:
        """
        Mirror source_root into the output root file by file.

        HTML files go through :meth:`write` and are minified; everything else
        is copied unchanged. Symlinked directories are followed.
        """
        if not os.path.isdir(source_root):
            raise OutputWriteError(source_root, "assets directory does not exist")

        def _raise(err):
            raise OutputWriteError(getattr(err, 'filename', None) or source_root, str(err)) from err

        copied = []
        for dirpath, dirnames, filenames in os.walk(source_root, onerror=_raise, followlinks=True):
            dirnames.sort()
            relative_dir = os.path.relpath(dirpath, source_root)
            for filename in sorted(filenames):
                source = os.path.join(dirpath, filename)
                relative = os.path.normpath(os.path.join(relative_dir, filename))
                if filename.endswith(HTML_EXTENSION):
                    try:
                        with open(source, 'rb') as f:
                            data = f.read()
                    except (IOError, OSError) as e:
                        raise OutputWriteError(source, str(e)) from e
                    copied.append(self.write(relative, data))
                else:
                    target = self.target_path(relative)
                    self._ensure_parent(target)
                    try:
                        shutil.copyfile(source, target)
                    except (IOError, OSError) as e:
                        raise OutputWriteError(target, str(e)) from e
                    self.files_written += 1
                    copied.append(target)
        self.logger.info(f"Copied {len(copied)} asset(s) from {source_root}")
        return copied

    def minify_assets(self, paths: List[str]) -> List[str]:
        """Write .min.css / .min.js siblings for copied CSS and JS files."""
        written = []
        for path in paths:
            if path.endswith('.css') and not path.endswith('.min.css'):
                minifier, suffix = csscompressor.compress, '.css'
            elif path.endswith('.js') and not path.endswith('.min.js'):
                minifier, suffix = rjsmin.jsmin, '.js'
            else:
                continue
            minified_path = path[:-len(suffix)] + '.min' + suffix
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    source = f.read()
                with open(minified_path, 'w', encoding='utf-8') as f:
                    f.write(minifier(source))
            except (IOError, OSError, UnicodeDecodeError) as e:
                raise OutputWriteError(minified_path, str(e)) from e
            self.logger.debug(f"Minified {path} -> {minified_path}")
            written.append(minified_path)
        return written
