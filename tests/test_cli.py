"""Tests for the console entry point."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from cli import main


@patch('cli.SyncOrchestrator')
def test_main_exits_with_run_result(
    mock_orchestrator: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> None:
    """main() resolves the config and exits with the orchestrator's code."""
    monkeypatch.setenv('GITHUB_USER', 'alice')
    monkeypatch.setenv('FORGEJO_URL', 'https://git.example.com')
    monkeypatch.setenv('FORGEJO_USER', 'backup')
    monkeypatch.setenv('FORGEJO_TOKEN', 'fj-token')
    mock_orchestrator.return_value.run.return_value = 0

    with pytest.raises(SystemExit) as exc_info:
        main(['--no-input'])

    assert exc_info.value.code == 0
    cfg = mock_orchestrator.call_args.args[0]
    assert cfg.forgejo.owner == 'backup'
