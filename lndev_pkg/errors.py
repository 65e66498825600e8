"""
Exception hierarchy for the lndev site builder.
Every failure in the pipeline is fatal; these types only say where it happened.
"""

from typing import List


class LndevError(Exception):
    """Base class for all build failures."""


class ConfigError(LndevError):
    """Invalid or unreadable configuration."""


class ContentReadError(LndevError):
    """A content file or content root could not be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to read content {path}: {reason}")


class FrontMatterError(LndevError):
    """Front matter is missing, malformed or has a field of the wrong type."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Invalid front matter in {path}: {reason}")


class RenderError(LndevError):
    """A template could not be rendered."""

    def __init__(self, template_name: str, reason: str):
        self.template_name = template_name
        super().__init__(f"Template error in {template_name}: {reason}")


class OutputWriteError(LndevError):
    """An output directory or file could not be created or written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to write {path}: {reason}")


class CollectionBuildError(LndevError):
    """Raised by the collect error policy with every per-file failure."""

    def __init__(self, collection: str, errors: List[LndevError]):
        self.collection = collection
        self.errors = list(errors)
        details = "\n".join(f"  - {err}" for err in self.errors)
        super().__init__(
            f"{len(self.errors)} content file(s) failed in collection '{collection}':\n{details}"
        )
