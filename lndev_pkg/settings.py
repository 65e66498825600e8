#!/usr/bin/env python3
"""
Settings loader for the lndev site builder.
Supports configuration from lndev.yml, lndev.yaml, or lndev.json files.
"""

import os
import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from urllib.parse import urlparse

import yaml

from .errors import ConfigError

ERROR_POLICIES = ('fail_fast', 'collect')


@dataclass(frozen=True)
class ListingSettings:
    """Where a collection's listing page lives and how it is titled."""
    path: str
    title: str
    description: str


def _default_content_roots() -> Dict[str, str]:
    return {'published': 'posts', 'draft': 'drafts'}


def _default_listings() -> Dict[str, ListingSettings]:
    return {
        'published': ListingSettings(
            path='blog',
            title='lndev - blog',
            description='Where insights are shared on development on the lightning network.',
        ),
        'draft': ListingSettings(
            path='drafts',
            title='lndev - drafts',
            description='Currently unfinished drafts',
        ),
    }


@dataclass(frozen=True)
class SiteConfig:
    """
    Build configuration, constructed once and passed to every component.

    Attributes:
        origin: Base URL prepended to route paths and cover images.
        content_roots: Collection name -> content directory.
        assets_root: Directory mirrored verbatim into the output root.
        output_root: Directory receiving the rendered site.
        templates_dir: Jinja2 templates directory; None uses the packaged templates.
        site_name: Prefix for page titles.
        listings: Collection name -> listing page settings.
        words_per_minute: Reading speed used for reading time estimates.
        error_policy: 'fail_fast' or 'collect'.
        minify_assets: Write .min.css/.min.js siblings for copied assets.
        log_dir: Directory for debug log files; None disables file logging.
    """
    origin: str = 'https://lndev.nl'
    content_roots: Dict[str, str] = field(default_factory=_default_content_roots)
    assets_root: str = 'public'
    output_root: str = 'out'
    templates_dir: Optional[str] = None
    site_name: str = 'lndev'
    listings: Dict[str, ListingSettings] = field(default_factory=_default_listings)
    words_per_minute: int = 265
    error_policy: str = 'fail_fast'
    minify_assets: bool = False
    log_dir: Optional[str] = None

    def __post_init__(self):
        parsed = urlparse(self.origin)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ConfigError(f"origin must be an absolute http(s) URL, got {self.origin!r}")
        if self.error_policy not in ERROR_POLICIES:
            raise ConfigError(
                f"error_policy must be one of {', '.join(ERROR_POLICIES)}, got {self.error_policy!r}"
            )
        missing = [name for name in self.content_roots if name not in self.listings]
        if missing:
            raise ConfigError(f"No listing configured for collection(s): {', '.join(missing)}")
        if self.words_per_minute <= 0:
            raise ConfigError("words_per_minute must be positive")


class LndevSettings:
    """Load and manage lndev configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'origin': 'https://lndev.nl',
        'posts': 'posts',
        'drafts': 'drafts',
        'assets': 'public',
        'output': 'out',
        'templates': None,
        'site_name': 'lndev',
        'blog_title': 'lndev - blog',
        'blog_description': 'Where insights are shared on development on the lightning network.',
        'drafts_title': 'lndev - drafts',
        'drafts_description': 'Currently unfinished drafts',
        'words_per_minute': 265,
        'error_policy': 'fail_fast',
        'minify_assets': False,
        'log_dir': 'logs',
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['lndev.yml', 'lndev.yaml', 'lndev.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None
        self.logger = logging.getLogger('Lndev.settings')

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            loaded_settings = self._load_config_file(config_file)
            unknown = sorted(set(loaded_settings) - set(self.DEFAULT_SETTINGS))
            if unknown:
                raise ConfigError(f"Unknown setting(s) in {config_file}: {', '.join(unknown)}")
            # Merge with defaults, giving preference to loaded settings
            self.settings.update(loaded_settings)
            self.logger.info(f"Loaded configuration from: {os.path.relpath(config_file)}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    data = yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    data = json.load(f) or {}
                else:
                    raise ConfigError(f"Unsupported config file format: {file_ext}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file {config_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {config_path}: {e}") from e
        except (IOError, OSError) as e:
            raise ConfigError(f"Error reading configuration file {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file must contain a mapping: {config_path}")
        return data

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        filename = f'lndev.{file_format}'
        config_path = os.path.join(self.config_dir, filename)
        if os.path.exists(config_path):
            raise ConfigError(f"Configuration file already exists: {config_path}")

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    f.write("# lndev configuration file\n\n")
                    f.write("# Base URL for canonical links and share buttons\n")
                    f.write("origin: https://lndev.nl\n")
                    f.write("site_name: lndev\n\n")
                    f.write("# Directories\n")
                    f.write("posts: posts\n")
                    f.write("drafts: drafts\n")
                    f.write("assets: public\n")
                    f.write("output: out\n\n")
                    f.write("# Listing pages\n")
                    f.write("blog_title: lndev - blog\n")
                    f.write("blog_description: Where insights are shared on development on the lightning network.\n")
                    f.write("drafts_title: lndev - drafts\n")
                    f.write("drafts_description: Currently unfinished drafts\n\n")
                    f.write("# Build behaviour\n")
                    f.write("words_per_minute: 265\n")
                    f.write("error_policy: fail_fast  # fail_fast or collect\n")
                    f.write("minify_assets: false\n")
                    f.write("log_dir: logs\n")
                elif file_format == 'json':
                    json.dump(self.DEFAULT_SETTINGS, f, indent=2)
                else:
                    raise ConfigError(f"Unsupported config file format: {file_format}")
        except (IOError, OSError) as e:
            raise ConfigError(f"Error writing configuration file {config_path}: {e}") from e

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()
        for key, value in args_dict.items():
            if value is not None and key in self.DEFAULT_SETTINGS:
                merged[key] = value
        return merged

    @staticmethod
    def to_config(settings: Dict[str, Any]) -> SiteConfig:
        """Convert a flat settings mapping into a SiteConfig."""
        try:
            words_per_minute = int(settings['words_per_minute'])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"words_per_minute must be an integer: {e}") from e

        return SiteConfig(
            origin=str(settings['origin']),
            content_roots={
                'published': settings['posts'],
                'draft': settings['drafts'],
            },
            assets_root=settings['assets'],
            output_root=os.path.expanduser(settings['output']),
            templates_dir=settings['templates'],
            site_name=settings['site_name'],
            listings={
                'published': ListingSettings(
                    path='blog',
                    title=settings['blog_title'],
                    description=settings['blog_description'],
                ),
                'draft': ListingSettings(
                    path='drafts',
                    title=settings['drafts_title'],
                    description=settings['drafts_description'],
                ),
            },
            words_per_minute=words_per_minute,
            error_policy=settings['error_policy'],
            minify_assets=bool(settings['minify_assets']),
            log_dir=settings['log_dir'],
        )
