"""
The build driver and logging setup.
"""

import os
import time
import logging
from datetime import datetime
from typing import Dict

from .collection import Collection, CollectionBuilder
from .output import OutputWriter
from .render import PageRenderer
from .settings import SiteConfig

COLLECTION_ORDER = ('published', 'draft')


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Site build completed in",
            "Total pages generated:",
            "Total files written:",
            "Copied ",
            "Collected ",
            "Generated listing page",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


def setup_logging(log_dir=None, verbose=False):
    """Set up console and optional file logging for the 'Lndev' logger tree."""
    logger = logging.getLogger('Lndev')
    logger.setLevel(logging.DEBUG)

    if not logger.handlers:
        # Console handler with filter
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        if not verbose:
            console_handler.addFilter(InfoFilter())
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

        # File handler for all logs
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            log_filename = datetime.now().strftime('lndev_%Y-%m-%d_%H-%M-%S.log')
            file_handler = logging.FileHandler(os.path.join(log_dir, log_filename))
            file_handler.setLevel(logging.DEBUG)
            file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)
    return logger


class Lndev:
    """
    Top-level build driver.

    Runs the build as a strict sequence: copy assets, build every collection,
    write one page per entry, then one listing per collection. The first
    failure propagates and stops everything after it.
    """

    def __init__(self, config: SiteConfig):
        self.config = config
        self.logger = logging.getLogger('Lndev')
        self.writer = OutputWriter(config.output_root)
        self.builder = CollectionBuilder(config)
        self.renderer = PageRenderer(config)
        self.pages_generated = 0
        self.collections: Dict[str, Collection] = {}

    def copy_assets(self):
        copied = self.writer.copy_tree(self.config.assets_root)
        if self.config.minify_assets:
            minified = self.writer.minify_assets(copied)
            self.logger.info(f"Minified {len(minified)} CSS/JS asset(s)")

    def build_collections(self) -> Dict[str, Collection]:
        for name in COLLECTION_ORDER:
            if name in self.config.content_roots:
                self.collections[name] = self.builder.build(name)
        # Collections beyond the standard two, in configuration order.
        for name in self.config.content_roots:
            if name not in self.collections:
                self.collections[name] = self.builder.build(name)
        return self.collections

    def write_pages(self, collection: Collection):
        for page in collection.pages:
            html = self.renderer.render_page(page)
            self.writer.write(f"{page.route_path.lstrip('/')}/index.html", html)
            self.pages_generated += 1

    def write_listing(self, collection: Collection):
        html = self.renderer.render_collection(collection)
        target = self.writer.write(f"{collection.listing_path.strip('/')}/index.html", html)
        self.logger.info(f"Generated listing page {target} ({len(collection.pages)} entries)")

    def build(self):
        """Main build process."""
        start_time = time.time()
        self.pages_generated = 0
        self.writer.files_written = 0
        self.collections = {}
        self.logger.info("Starting site build...")

        self.copy_assets()
        collections = self.build_collections()
        for collection in collections.values():
            self.write_pages(collection)
        for collection in collections.values():
            self.write_listing(collection)

        self.logger.info(f"Site build completed in {time.time() - start_time:.6f} seconds.")
        self.logger.info(f"Total pages generated: {self.pages_generated}")
        self.logger.info(f"Total files written: {self.writer.files_written}")
        return collections
