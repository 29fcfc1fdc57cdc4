#!/usr/bin/env python3
"""Main orchestrator for migrating a GitHub account to a Forgejo instance."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional, Set
from urllib.parse import urlparse

from config import Config, Strategy
from forgejo_target import ForgejoTarget
from github_source import GitHubSource
from logging_utils import Logger
from models import (ForgejoRepository, GitHubRepository, MigrationOutcome,
                    MigrationRequest, MigrationResult)

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1


def select_stale_mirrors(
    source_names: Set[str],
    destination: Iterable[ForgejoRepository],
    include_private: bool,
) -> List[ForgejoRepository]:
    """Return the Forgejo mirrors whose name no longer exists on GitHub.

    Private mirrors are only considered with ``include_private``: without a
    GitHub token the private sources are invisible and cannot be checked.
    """
    stale: List[ForgejoRepository] = []
    for repo in destination:
        if not repo.mirror:
            continue
        if repo.private and not include_private:
            continue
        if repo.name not in source_names:
            stale.append(repo)
    return stale


def resolve_clone_address(repo: GitHubRepository, token: Optional[str]) -> Optional[str]:
    """Return the address Forgejo clones from, or None if it cannot be read."""
    if not repo.private:
        return repo.html_url
    if not token:
        return None
    host = urlparse(repo.html_url).netloc or "github.com"
    return f"https://{token}@{host}/{repo.full_name}"


def build_migration_request(
    repo: GitHubRepository,
    strategy: Strategy,
    token: Optional[str],
    owner: str,
) -> Optional[MigrationRequest]:
    clone_addr = resolve_clone_address(repo, token)
    if clone_addr is None:
        return None
    return MigrationRequest(
        clone_addr=clone_addr,
        mirror=strategy.mirror,
        private=repo.private,
        repo_owner=owner,
        repo_name=repo.name,
    )


class SyncOrchestrator:
    def __init__(self, cfg: Config) -> None:
        self.cfg = cfg
        self.gh = GitHubSource(cfg.github.api_url, cfg.github.token)
        self.fj = ForgejoTarget(cfg.forgejo)

    def run(self) -> int:
        try:
            Logger.info(f"strategy: {self.cfg.migration.strategy.value}")
            Logger.info(f"force sync: {self.cfg.migration.force_sync}")

            repos = self.gh.list_repositories(self.cfg.github.user)

            if self.cfg.migration.force_sync:
                if self.gh.incomplete:
                    Logger.warn(
                        "skipping force sync: the github listing is incomplete"
                    )
                else:
                    self._force_sync(repos)

            if not repos:
                Logger.warn(f"no repositories found for user {self.cfg.github.user}")
                return EXIT_SUCCESS

            summary: Counter = Counter()
            total = len(repos)
            for idx, repo in enumerate(repos, start=1):
                result = self._process_single_repo(repo, idx, total)
                summary[result.outcome] += 1

            Logger.info(
                f"migrated: {summary[MigrationOutcome.MIGRATED]}, "
                f"already present: {summary[MigrationOutcome.ALREADY_EXISTS]}, "
                f"skipped: {summary[MigrationOutcome.SKIPPED]}, "
                f"failed: {summary[MigrationOutcome.FAILED]}"
            )
            Logger.info("mission accomplished")
            return EXIT_SUCCESS
        except Exception as e:
            Logger.error(f"unexpected error: {e}")
            return EXIT_EXECUTION_ERROR

    def _force_sync(self, repos: List[GitHubRepository]) -> int:
        """Delete Forgejo mirrors without a GitHub source. Returns the count."""
        Logger.info("force sync: looking for mirrors without a github source")
        source_names = {repo.name for repo in repos}
        stale = select_stale_mirrors(
            source_names,
            self.fj.list_user_repos(),
            include_private=bool(self.cfg.github.token),
        )

        deleted = 0
        for repo in stale:
            Logger.warn(
                f"deleting {self.cfg.forgejo.url}/{repo.full_name} because the "
                "mirror source doesn't exist on github anymore"
            )
            if self.fj.delete_repo(repo.full_name):
                deleted += 1
        Logger.info(f"force sync: deleted {deleted}/{len(stale)} stale mirrors")
        return deleted

    def _process_single_repo(
        self, repo: GitHubRepository, idx: int, total: int
    ) -> MigrationResult:
        access = "private" if repo.private else "public"
        target = f"{self.cfg.forgejo.url}/{self.cfg.forgejo.owner}/{repo.name}"
        Logger.info(
            f"[{idx}/{total}] {self.cfg.migration.strategy.verb} {access} "
            f"repository {repo.html_url} -> {target}"
        )

        request = build_migration_request(
            repo,
            self.cfg.migration.strategy,
            self.cfg.github.token,
            self.cfg.forgejo.owner,
        )
        if request is None:
            Logger.error(
                f"skipping {repo.full_name}: private repo but no github token provided"
            )
            return MigrationResult(MigrationOutcome.SKIPPED)

        result = self.fj.migrate(request)
        if result.outcome is MigrationOutcome.ALREADY_EXISTS:
            Logger.warn(f"{repo.name}: already mirrored")
        elif result.outcome is MigrationOutcome.FAILED:
            Logger.error(f"{repo.name}: unknown error: {result.message}")
        else:
            Logger.success(f"{repo.name}: success")
        return result
