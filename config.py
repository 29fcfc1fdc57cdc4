#!/usr/bin/env python3
"""Configuration dataclasses for github-forgejo-migrate."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Strategy(Enum):
    """How repositories are brought over to Forgejo."""
    MIRROR = "mirror"
    CLONE = "clone"

    @property
    def mirror(self) -> bool:
        return self is not Strategy.CLONE

    @property
    def verb(self) -> str:
        return "cloning" if self is Strategy.CLONE else "mirroring"


@dataclass
class GitHubConfig:
    """GitHub-specific configuration."""
    api_url: str
    user: str
    token: Optional[str]


@dataclass
class ForgejoConfig:
    """Forgejo-specific configuration."""
    url: str
    owner: str
    token: str


@dataclass
class MigrationConfig:
    """Migration behavior configuration."""
    strategy: Strategy
    force_sync: bool


@dataclass
class Config:
    """Main configuration for GitHub-to-Forgejo migration."""
    github: GitHubConfig
    forgejo: ForgejoConfig
    migration: MigrationConfig
