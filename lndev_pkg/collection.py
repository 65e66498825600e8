"""
Collection building: parse every file under a content root and order the
resulting pages newest first.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .content import Page, PostProcessor, find_content_files
from .errors import CollectionBuildError, LndevError
from .settings import SiteConfig, ListingSettings


@dataclass(frozen=True)
class Collection:
    """A named, ordered set of pages rendered as one listing page."""
    name: str
    title: str
    description: str
    listing_path: str
    pages: Tuple[Page, ...]


def sort_pages(pages: Sequence[Page]) -> List[Page]:
    """
    Order pages by publication date, newest first.

    Dates are compared as strings. Equal dates fall back to slug, then route
    path, both ascending.
    """
    ordered = sorted(pages, key=lambda p: (p.slug, p.route_path))
    ordered.sort(key=lambda p: p.front_matter.publication_date, reverse=True)
    return ordered


class CollectionBuilder:
    """Run the content parser over a content root using the configured error policy."""

    def __init__(self, config: SiteConfig, processor: PostProcessor = None):
        self.config = config
        self.processor = processor or PostProcessor(config)
        self.logger = logging.getLogger('Lndev.collection')

    def build_pages(self, name: str, content_root: str) -> List[Page]:
        if self.config.error_policy == 'collect':
            return sort_pages(self._collect_all(name, content_root))
        return sort_pages(self._fail_fast(content_root))

    def _fail_fast(self, content_root: str) -> List[Page]:
        return [self.processor.process(path, content_root)
                for path in find_content_files(content_root)]

    def _collect_all(self, name: str, content_root: str) -> List[Page]:
        pages = []
        errors = []
        # Enumeration failures of the root itself cannot be collected per file.
        for path in find_content_files(content_root):
            try:
                pages.append(self.processor.process(path, content_root))
            except LndevError as e:
                self.logger.error(str(e))
                errors.append(e)
        if errors:
            raise CollectionBuildError(name, errors)
        return pages

    def build(self, name: str) -> Collection:
        """Build the named collection from its configured content root and listing."""
        content_root = self.config.content_roots[name]
        listing: ListingSettings = self.config.listings[name]
        pages = self.build_pages(name, content_root)
        self.logger.info(f"Collected {len(pages)} page(s) for '{name}' from {content_root}")
        return Collection(
            name=name,
            title=listing.title,
            description=listing.description,
            listing_path=listing.path,
            pages=tuple(pages),
        )
