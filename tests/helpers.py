"""Builders for fake API responses used across the tests."""

from __future__ import annotations

from typing import Any, Dict, Optional
from unittest.mock import Mock


def make_response(payload: Any, status_code: int = 200) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


def github_repo(
    name: str, owner: str = 'alice', private: bool = False
) -> Dict[str, Any]:
    return {
        'name': name,
        'full_name': f'{owner}/{name}',
        'html_url': f'https://github.com/{owner}/{name}',
        'private': private,
        'owner': {'login': owner},
    }


def forgejo_repo(
    name: str, mirror: bool = True, private: bool = False, owner: Optional[str] = 'alice'
) -> Dict[str, Any]:
    return {
        'name': name,
        'full_name': f'{owner}/{name}',
        'mirror': mirror,
        'private': private,
    }
