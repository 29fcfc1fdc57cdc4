#!/usr/bin/env python3
"""Command line, environment and prompt based configuration building."""

from __future__ import annotations

import argparse
import getpass
import os
import sys
from typing import Callable, Optional

from config import Config, ForgejoConfig, GitHubConfig, MigrationConfig, Strategy
from github_source import DEFAULT_API_URL
from logging_utils import Logger
from security import SecurityValidator
from utils import is_affirmative, normalize_base_url

# Exit codes
EXIT_INVALID_STRATEGY = 1
EXIT_MISSING_ARGUMENTS = 2

Prompt = Callable[[str], str]


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Migrate a GitHub user's repositories to a Forgejo instance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Every option may also be given through its environment variable; values
that are still missing are asked for interactively.

Examples:
  %(prog)s --github-user alice --forgejo-url https://git.example.com \\
           --forgejo-user alice
  GITHUB_TOKEN=... FORGEJO_TOKEN=... %(prog)s --github-user alice \\
           --forgejo-url https://git.example.com --forgejo-user backup \\
           --strategy clone --force-sync no --no-input
        """,
    )
    parser.add_argument(
        "--github-user",
        dest="github_user",
        help="GitHub username (or set GITHUB_USER env var)",
    )
    parser.add_argument(
        "--github-token",
        dest="github_token",
        help="GitHub token, only needed for private repos (or set GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--github-api",
        dest="github_api_url",
        help=f"Base URL of the GitHub API (or set GITHUB_API_URL, "
        f"default: {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--forgejo-url",
        dest="forgejo_url",
        help="Forgejo instance URL with protocol (or set FORGEJO_URL)",
    )
    parser.add_argument(
        "--forgejo-user",
        dest="forgejo_user",
        help="Forgejo user or organization to migrate to (or set FORGEJO_USER)",
    )
    parser.add_argument(
        "--forgejo-token",
        dest="forgejo_token",
        help="Forgejo access token (or set FORGEJO_TOKEN)",
    )
    parser.add_argument(
        "--strategy",
        dest="strategy",
        help="mirror (kept in sync by Forgejo) or clone (one-time copy), "
        "default: mirror (or set STRATEGY)",
    )
    parser.add_argument(
        "--force-sync",
        dest="force_sync",
        help="yes/no: delete Forgejo mirrors whose GitHub repo no longer "
        "exists, default: no (or set FORCE_SYNC)",
    )
    parser.add_argument(
        "--no-input",
        action="store_true",
        dest="no_input",
        help="Never prompt; missing values take their defaults",
    )
    return parser


def _read_prompt(message: str) -> str:
    try:
        return input(f"{message} ")
    except EOFError:
        return ""


def _read_secret(message: str) -> str:
    try:
        return getpass.getpass(f"{message} ")
    except EOFError:
        return ""


def or_default(
    current: Optional[str],
    label: str,
    default: str = "",
    *,
    secret: bool = False,
    prompt: Optional[Prompt] = None,
) -> str:
    """Return ``current`` if set, otherwise ask for it (when allowed).

    An empty answer falls back to ``default``.
    """
    if current:
        shown = "********" if secret else current
        Logger.info(f"{label} found in environment, using: {shown}")
        return current

    value = ""
    if prompt is not None:
        value = prompt(f"{label}:").strip()

    if not value and default:
        Logger.info(f"no input provided for {label}, using default: {default}")
        value = default
    return value


def parse_strategy(value: str) -> Strategy:
    """Parse a strategy name; exit with code 1 if it is neither mirror nor clone."""
    normalized = value.strip().lower()
    try:
        return Strategy(normalized)
    except ValueError:
        Logger.error("error: strategy must be either 'mirror' or 'clone'")
        sys.exit(EXIT_INVALID_STRATEGY)


def _require(value: str, label: str, env_name: str) -> str:
    if not value:
        Logger.error(f"error: {label} not provided (set {env_name})")
        sys.exit(EXIT_MISSING_ARGUMENTS)
    return value


def parse_arguments(
    argv=None,
    prompt: Optional[Prompt] = _read_prompt,
    secret_prompt: Optional[Prompt] = _read_secret,
) -> Config:
    """Resolve configuration from flags, environment and prompts.

    Tokens are read through ``secret_prompt`` so they are not echoed.
    """
    args = _create_argument_parser().parse_args(argv)
    if args.no_input:
        prompt = None
        secret_prompt = None

    def source(flag_value: Optional[str], env_name: str) -> Optional[str]:
        return flag_value or os.getenv(env_name)

    github_user = or_default(
        source(args.github_user, "GITHUB_USER"), "GitHub username", prompt=prompt
    ).strip()
    github_token = or_default(
        source(args.github_token, "GITHUB_TOKEN"),
        "GitHub access token (optional, only used for private repositories)",
        secret=True,
        prompt=secret_prompt,
    ).strip()
    github_api_url = normalize_base_url(
        source(args.github_api_url, "GITHUB_API_URL") or DEFAULT_API_URL
    )
    forgejo_url = normalize_base_url(
        or_default(
            source(args.forgejo_url, "FORGEJO_URL"),
            "Forgejo instance URL (with https://)",
            prompt=prompt,
        )
    )
    forgejo_user = or_default(
        source(args.forgejo_user, "FORGEJO_USER"),
        "Forgejo username or organization to migrate to",
        prompt=prompt,
    ).strip()
    forgejo_token = or_default(
        source(args.forgejo_token, "FORGEJO_TOKEN"),
        "Forgejo access token",
        secret=True,
        prompt=secret_prompt,
    ).strip()
    strategy = parse_strategy(
        or_default(
            source(args.strategy, "STRATEGY"),
            "Strategy (mirror/clone)",
            Strategy.MIRROR.value,
            prompt=prompt,
        )
    )
    force_sync = is_affirmative(
        or_default(
            source(args.force_sync, "FORCE_SYNC"),
            "Should mirrored repos that don't have a GitHub source anymore "
            "be deleted? (Yes/No)",
            "No",
            prompt=prompt,
        )
    )

    _require(github_user, "github username", "GITHUB_USER")
    _require(forgejo_url, "forgejo url", "FORGEJO_URL")
    _require(forgejo_user, "forgejo user", "FORGEJO_USER")
    _require(forgejo_token, "forgejo token", "FORGEJO_TOKEN")

    try:
        SecurityValidator.validate_username(github_user)
        SecurityValidator.validate_username(forgejo_user)
        SecurityValidator.validate_url(forgejo_url, ["https", "http"])
        SecurityValidator.validate_url(github_api_url, ["https", "http"])
    except ValueError as e:
        Logger.security_event(
            "CONFIG_VALIDATION_FAILED", f"configuration validation failed: {e}"
        )
        Logger.error(f"configuration validation error: {e}")
        sys.exit(EXIT_MISSING_ARGUMENTS)

    return Config(
        github=GitHubConfig(
            api_url=github_api_url,
            user=github_user,
            token=github_token or None,
        ),
        forgejo=ForgejoConfig(
            url=forgejo_url,
            owner=forgejo_user,
            token=forgejo_token,
        ),
        migration=MigrationConfig(strategy=strategy, force_sync=force_sync),
    )
