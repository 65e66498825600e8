#!/usr/bin/env python3
"""
Command-line interface for the lndev site builder.
"""

import os
import sys
import argparse
from datetime import date
from typing import List, Optional

from . import __version__
from .core import Lndev, setup_logging
from .errors import LndevError
from .settings import LndevSettings, ERROR_POLICIES

SAMPLE_POST = """---
title: Hello World
summary: The first post on this site.
cover:
  image: /images/hello.png
date: "{date}"
tags:
  - lightning
  - meta
---

# Hello World

This post was created by `lndev --init`. Edit it in `posts/hello-world.md`
and run `lndev` to rebuild the site into `out/`.
"""


def create_starter_structure(base_dir: str) -> None:
    """Create posts/, drafts/ and public/ with a sample post."""
    for directory in ('posts', 'drafts', 'public'):
        dir_path = os.path.join(base_dir, directory)
        if os.path.exists(dir_path):
            print(f"Directory already exists: {directory}")
        else:
            os.makedirs(dir_path, exist_ok=True)
            print(f"Created directory: {directory}")

    post_path = os.path.join(base_dir, 'posts', 'hello-world.md')
    if os.path.exists(post_path):
        print("Sample post already exists: posts/hello-world.md")
    else:
        with open(post_path, 'w', encoding='utf-8') as f:
            f.write(SAMPLE_POST.format(date=date.today().isoformat()))
        print("Created sample post: posts/hello-world.md")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='lndev - Markdown blog builder')
    parser.add_argument('--origin', type=str,
                        help='Base URL used for canonical links and share buttons')
    parser.add_argument('--posts', type=str,
                        help='Directory with published markdown posts')
    parser.add_argument('--drafts', type=str,
                        help='Directory with draft markdown posts')
    parser.add_argument('--assets', type=str,
                        help='Static assets directory mirrored into the output')
    parser.add_argument('--output', type=str,
                        help='Output directory for the generated site')
    parser.add_argument('--templates', type=str,
                        help='Templates directory (defaults to the bundled templates)')
    parser.add_argument('--error-policy', type=str, choices=ERROR_POLICIES,
                        help='Stop at the first bad post or report all of them')
    parser.add_argument('--minify-assets', action='store_true', default=None,
                        help='Also write .min.css/.min.js copies of CSS and JS assets')
    parser.add_argument('--verbose', action='store_true',
                        help='Show all progress messages')
    parser.add_argument('--config-dir', type=str,
                        help='Directory containing lndev.yml / lndev.json')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file and starter directories')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    settings_loader = LndevSettings(args.config_dir)

    try:
        if args.init:
            config_path = settings_loader.create_sample_config(args.init)
            print(f"Created sample configuration file: {config_path}")
            create_starter_structure(settings_loader.config_dir)
            print("\nRun 'lndev' to build your site.")
            return

        settings_loader.load_settings()
        args_dict = {k: v for k, v in vars(args).items() if v is not None}
        final_settings = settings_loader.merge_with_args(args_dict)
        config = LndevSettings.to_config(final_settings)

        setup_logging(config.log_dir, verbose=args.verbose)
        Lndev(config).build()
    except (LndevError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
