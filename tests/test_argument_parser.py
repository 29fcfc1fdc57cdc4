"""Tests for configuration resolution from flags, environment and prompts."""

from __future__ import annotations

import pytest

from argument_parser import (EXIT_INVALID_STRATEGY, EXIT_MISSING_ARGUMENTS,
                             parse_arguments, parse_strategy)
from config import Strategy

ENV_NAMES = [
    'GITHUB_USER',
    'GITHUB_TOKEN',
    'GITHUB_API_URL',
    'FORGEJO_URL',
    'FORGEJO_USER',
    'FORGEJO_TOKEN',
    'STRATEGY',
    'FORCE_SYNC',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def _set_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('GITHUB_USER', 'alice')
    monkeypatch.setenv('FORGEJO_URL', 'https://git.example.com/')
    monkeypatch.setenv('FORGEJO_USER', 'backup')
    monkeypatch.setenv('FORGEJO_TOKEN', 'fj-token')


def test_environment_values_and_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required(monkeypatch)

    cfg = parse_arguments(['--no-input'])

    assert cfg.github.user == 'alice'
    assert cfg.github.token is None
    assert cfg.github.api_url == 'https://api.github.com'
    assert cfg.forgejo.url == 'https://git.example.com'
    assert cfg.forgejo.owner == 'backup'
    assert cfg.migration.strategy is Strategy.MIRROR
    assert cfg.migration.force_sync is False


def test_flags_override_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required(monkeypatch)
    monkeypatch.setenv('STRATEGY', 'mirror')

    cfg = parse_arguments(['--no-input', '--strategy', 'CLONE', '--force-sync', 'Yes'])

    assert cfg.migration.strategy is Strategy.CLONE
    assert cfg.migration.force_sync is True


def test_prompt_fills_missing_values(monkeypatch: pytest.MonkeyPatch) -> None:
    answers = iter(['alice', ' https://git.example.com// ', 'backup', '', 'y'])
    secrets = iter(['', 'fj-token'])

    cfg = parse_arguments(
        [],
        prompt=lambda _message: next(answers),
        secret_prompt=lambda _message: next(secrets),
    )

    assert cfg.github.user == 'alice'
    assert cfg.github.token is None
    assert cfg.forgejo.url == 'https://git.example.com'
    assert cfg.forgejo.token == 'fj-token'
    assert cfg.migration.strategy is Strategy.MIRROR
    assert cfg.migration.force_sync is True


def test_tokens_are_read_without_echo(monkeypatch: pytest.MonkeyPatch) -> None:
    """Token prompts go through getpass, never through input()."""
    _set_required(monkeypatch)
    monkeypatch.delenv('FORGEJO_TOKEN')
    hidden = []

    def fake_getpass(message: str) -> str:
        hidden.append(message)
        return 'ghp_hidden' if 'GitHub' in message else 'fj-hidden'

    def fail_input(_message: str) -> str:
        raise AssertionError('plain prompt used')

    monkeypatch.setattr('argument_parser.getpass.getpass', fake_getpass)
    monkeypatch.setattr('builtins.input', fail_input)
    monkeypatch.setenv('STRATEGY', 'mirror')
    monkeypatch.setenv('FORCE_SYNC', 'no')

    cfg = parse_arguments([])

    assert len(hidden) == 2
    assert cfg.github.token == 'ghp_hidden'
    assert cfg.forgejo.token == 'fj-hidden'


@pytest.mark.parametrize('answer', ['no', 'n', 'yess', ''])
def test_force_sync_negative_answers(monkeypatch: pytest.MonkeyPatch, answer) -> None:
    _set_required(monkeypatch)
    if answer:
        monkeypatch.setenv('FORCE_SYNC', answer)

    assert parse_arguments(['--no-input']).migration.force_sync is False


def test_invalid_strategy_exits_with_code_one() -> None:
    with pytest.raises(SystemExit) as exc_info:
        parse_strategy('copy')
    assert exc_info.value.code == EXIT_INVALID_STRATEGY


def test_strategy_is_case_insensitive() -> None:
    assert parse_strategy(' Clone ') is Strategy.CLONE


def test_missing_forgejo_token_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required(monkeypatch)
    monkeypatch.delenv('FORGEJO_TOKEN')

    with pytest.raises(SystemExit) as exc_info:
        parse_arguments(['--no-input'])
    assert exc_info.value.code == EXIT_MISSING_ARGUMENTS


def test_url_without_protocol_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required(monkeypatch)
    monkeypatch.setenv('FORGEJO_URL', 'git.example.com')

    with pytest.raises(SystemExit) as exc_info:
        parse_arguments(['--no-input'])
    assert exc_info.value.code == EXIT_MISSING_ARGUMENTS
