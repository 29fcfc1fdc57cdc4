#!/usr/bin/env python3
"""GitHub API wrapper for listing the repositories owned by an account."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from logging_utils import Logger
from models import GitHubRepository
from utils import RateLimiter

DEFAULT_API_URL = "https://api.github.com"
PAGE_SIZE = 100


class GitHubSource:
    """Wrapper around the GitHub REST API to enumerate repositories."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        token: Optional[str] = None,
        timeout: float = 30.0,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.token = token or None
        self.timeout = timeout
        self.session = requests.Session()
        self.rate_limiter = RateLimiter(max_requests_per_minute=60)
        # Set when a page could not be fetched or decoded
        self.incomplete = False

    def _get_api_headers(self) -> dict:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _listing_url(self, account: str) -> str:
        # The authenticated endpoint is the only one that returns private repos
        if self.token:
            return f"{self.api_url}/user/repos"
        return f"{self.api_url}/users/{account}/repos"

    def _fetch_page(self, account: str, page: int) -> List[Dict[str, Any]]:
        """Return the raw objects of one listing page, or [] on any failure."""
        params: Dict[str, Any] = {"per_page": PAGE_SIZE, "page": page}
        if self.token:
            # /user/repos also lists organization and collaborator repos
            params["affiliation"] = "owner"
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            response = self.session.get(
                self._listing_url(account),
                headers=self._get_api_headers(),
                params=params,
                timeout=self.timeout,
            )
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            Logger.warn(f"failed to fetch github repositories (page {page}): {e}")
            self.incomplete = True
            return []

        if not isinstance(payload, list):
            message = payload.get("message") if isinstance(payload, dict) else payload
            Logger.warn(
                f"unexpected github response (page {page}, "
                f"status {response.status_code}): {message}"
            )
            self.incomplete = True
            return []
        return [item for item in payload if isinstance(item, dict)]

    def list_repositories(self, account: str) -> List[GitHubRepository]:
        """Return every repository owned by ``account``, in API order."""
        Logger.info(f"discovering github repositories owned by: {account}")
        self.incomplete = False
        collected: Dict[str, GitHubRepository] = {}

        page = 1
        while True:
            raw = self._fetch_page(account, page)
            owned = [
                GitHubRepository.from_payload(item)
                for item in raw
                if (item.get("owner") or {}).get("login") == account
            ]
            if not owned:
                if raw:
                    Logger.warn(
                        f"page {page} listed {len(raw)} repositories, none owned "
                        f"by {account}; treating the listing as incomplete"
                    )
                    self.incomplete = True
                break

            for repo in owned:
                if repo.name not in collected:
                    collected[repo.name] = repo
                    Logger.debug(f"found: {repo.full_name}")

            # A short page is the last one
            if len(raw) < PAGE_SIZE:
                break
            page += 1

        Logger.info(f"found {len(collected)} repositories to process")
        return list(collected.values())
