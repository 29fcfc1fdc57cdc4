#!/usr/bin/env python3
"""Console entry point for github-forgejo-migrate."""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_arguments
from sync_orchestrator import SyncOrchestrator


def main(argv=None) -> NoReturn:
    cfg = parse_arguments(argv)
    orchestrator = SyncOrchestrator(cfg)
    sys.exit(orchestrator.run())
