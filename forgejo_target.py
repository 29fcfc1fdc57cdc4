#!/usr/bin/env python3
"""Forgejo API wrapper for listing, deleting and migrating repositories."""

from __future__ import annotations

from typing import Any, List, Optional

import requests

from config import ForgejoConfig
from logging_utils import Logger
from models import (ForgejoRepository, MigrationOutcome, MigrationRequest,
                    MigrationResult)
from utils import RateLimiter

LIST_PAGE_LIMIT = 50
ALREADY_EXISTS_MARKER = "already exists"


def classify_migration_response(
    payload: Any, status_code: Optional[int] = None
) -> MigrationResult:
    """Classify the answer of ``POST /repos/migrate``.

    A 409 Conflict is the structured signal for an existing repository.
    Older Gitea/Forgejo releases only report it in the ``message`` field,
    so a message containing "already exists" is accepted as well.
    """
    message = payload.get("message") if isinstance(payload, dict) else None
    if status_code == 409:
        return MigrationResult(MigrationOutcome.ALREADY_EXISTS, message)
    if message:
        if ALREADY_EXISTS_MARKER in str(message):
            return MigrationResult(MigrationOutcome.ALREADY_EXISTS, message)
        return MigrationResult(MigrationOutcome.FAILED, str(message))
    if status_code is not None and status_code >= 400:
        return MigrationResult(MigrationOutcome.FAILED, f"http status {status_code}")
    return MigrationResult(MigrationOutcome.MIGRATED)


class ForgejoTarget:
    """Wrapper around the Forgejo REST API (``/api/v1``)."""

    def __init__(
        self,
        config: ForgejoConfig,
        timeout: float = 30.0,
        migrate_timeout: float = 600.0,
    ) -> None:
        self.config = config
        self.api_url = f"{config.url.rstrip('/')}/api/v1"
        self.timeout = timeout
        # The migrate call clones the whole repository before answering
        self.migrate_timeout = migrate_timeout
        self.session = requests.Session()
        self.rate_limiter = RateLimiter(max_requests_per_minute=120)

    def _get_api_headers(self) -> dict:
        return {
            "Accept": "application/json",
            "Authorization": f"token {self.config.token}",
        }

    def list_user_repos(self) -> List[ForgejoRepository]:
        """Return all repositories visible to the token owner.

        Page size is capped server side (MAX_RESPONSE_ITEMS), so only an
        empty or failed page ends the listing.
        """
        url = f"{self.api_url}/user/repos"
        repos: List[ForgejoRepository] = []
        page = 1
        while True:
            try:
                self.rate_limiter.wait_if_needed("Forgejo API")
                response = self.session.get(
                    url,
                    headers=self._get_api_headers(),
                    params={"page": page, "limit": LIST_PAGE_LIMIT},
                    timeout=self.timeout,
                )
                payload = response.json()
            except (requests.RequestException, ValueError) as e:
                Logger.warn(f"failed to list forgejo repositories (page {page}): {e}")
                break

            if not isinstance(payload, list):
                message = payload.get("message") if isinstance(payload, dict) else payload
                Logger.warn(
                    f"unexpected forgejo response (page {page}, "
                    f"status {response.status_code}): {message}"
                )
                break

            repos.extend(
                ForgejoRepository.from_payload(item)
                for item in payload
                if isinstance(item, dict)
            )
            if not payload:
                break
            page += 1

        Logger.debug(f"forgejo lists {len(repos)} repositories")
        return repos

    def delete_repo(self, full_name: str) -> bool:
        """Delete ``owner/name``. Returns False when the call did not succeed."""
        url = f"{self.api_url}/repos/{full_name}"
        try:
            self.rate_limiter.wait_if_needed("Forgejo API")
            response = self.session.delete(
                url, headers=self._get_api_headers(), timeout=self.timeout
            )
        except requests.RequestException as e:
            Logger.error(f"failed to delete repo '{full_name}': {e}")
            return False

        if response.status_code >= 400:
            Logger.error(
                f"failed to delete repo '{full_name}': "
                f"http status {response.status_code}"
            )
            return False

        Logger.security_event(
            "REPO_DELETED", f"deleted {self.config.url}/{full_name}"
        )
        return True

    def migrate(self, request: MigrationRequest) -> MigrationResult:
        url = f"{self.api_url}/repos/migrate"
        try:
            self.rate_limiter.wait_if_needed("Forgejo API")
            response = self.session.post(
                url,
                headers=self._get_api_headers(),
                json=request.to_payload(),
                timeout=self.migrate_timeout,
            )
        except requests.RequestException as e:
            return MigrationResult(MigrationOutcome.FAILED, str(e))

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        return classify_migration_response(payload, response.status_code)
