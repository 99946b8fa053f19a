"""Credential acquisition via the GitHub CLI."""

from __future__ import annotations

import logging
import subprocess

from gh_grass.providers import FatalStartupError

logger = logging.getLogger("gh_grass.auth")


def get_gh_token(gh_path: str = "gh") -> str:
    """Return the active token printed by `gh auth token`.

    Raises FatalStartupError if gh is missing, fails, or prints nothing.
    """
    hint = "Make sure gh cli is installed and authenticated"
    try:
        proc = subprocess.run(
            [gh_path, "auth", "token"],
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise FatalStartupError(f"failed to get gh token: {gh_path} not found. {hint}") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise FatalStartupError(f"failed to get gh token: {detail}. {hint}") from e

    token = proc.stdout.strip()
    if not token:
        raise FatalStartupError(f"failed to get gh token: empty output. {hint}")
    logger.debug("obtained token from %s", gh_path)
    return token
