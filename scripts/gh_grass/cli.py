#!/usr/bin/env python3
"""
gh-grass

Check GitHub contribution counts from the terminal for yourself, another
user, or a member of an organization, using an interactive TUI.

Usage:
    gh-grass              Launch the interactive TUI
    gh-grass --version    Print the version and exit

The token is taken from `gh auth token`, so the GitHub CLI must be
installed and authenticated.
"""

import argparse
import logging
import sys

from gh_grass import __version__
from gh_grass.auth import get_gh_token
from gh_grass.config import configure_logging, load_settings
from gh_grass.github_provider import GitHubQueryService
from gh_grass.providers import FatalStartupError

logger = logging.getLogger("gh_grass.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh-grass",
        description="Check GitHub contributions from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    build_parser().parse_args(argv)

    try:
        settings = load_settings()
        configure_logging(settings)
        token = get_gh_token(settings.gh_path)
    except (FatalStartupError, RuntimeError, OSError) as e:
        logger.error("startup failed: %s", e)
        print(e, file=sys.stderr)
        return 1

    from gh_grass.app import run

    with GitHubQueryService(token, settings.api_url, settings.timeout) as service:
        try:
            code = run(service)
        except Exception as e:
            logger.exception("tui failed")
            print(f"failed to run tui: {e}", file=sys.stderr)
            return 1

    if code:
        print("failed to run tui", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
