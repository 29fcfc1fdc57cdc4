#!/usr/bin/env python3
"""Repository records exchanged with the GitHub and Forgejo APIs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class GitHubRepository:
    """Subset of a GitHub repository object needed for migration."""
    name: str
    full_name: str
    html_url: str
    private: bool
    owner_login: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "GitHubRepository":
        owner = payload.get("owner") or {}
        name = payload.get("name", "")
        owner_login = owner.get("login", "")
        return cls(
            name=name,
            full_name=payload.get("full_name") or f"{owner_login}/{name}",
            html_url=payload.get("html_url", ""),
            private=bool(payload.get("private", False)),
            owner_login=owner_login,
        )


@dataclass(frozen=True)
class ForgejoRepository:
    """Subset of a Forgejo repository object needed for force sync."""
    name: str
    full_name: str
    mirror: bool
    private: bool

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ForgejoRepository":
        return cls(
            name=payload.get("name", ""),
            full_name=payload.get("full_name", ""),
            mirror=payload.get("mirror") is True,
            # Unknown visibility counts as private
            private=payload.get("private") is not False,
        )


@dataclass(frozen=True)
class MigrationRequest:
    """Body of a Forgejo ``/repos/migrate`` call."""
    clone_addr: str
    mirror: bool
    private: bool
    repo_owner: str
    repo_name: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "clone_addr": self.clone_addr,
            "mirror": self.mirror,
            "private": self.private,
            "repo_owner": self.repo_owner,
            "repo_name": self.repo_name,
        }


class MigrationOutcome(Enum):
    """Classification of a single repository migration."""
    MIGRATED = "migrated"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class MigrationResult:
    outcome: MigrationOutcome
    message: Optional[str] = None
