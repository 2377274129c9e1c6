"""
Pytest config.

Pin the repo root on sys.path so `import main` and `import cani` work whether or not
the project is installed (e.g. when invoking a global `pytest` entrypoint).
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()


@pytest.fixture(autouse=True)
def _isolate_cli_env(monkeypatch: pytest.MonkeyPatch):
    """
    `load_cli_config()` is cached and reads the developer's environment.
    Start every test from a clean env and an empty cache.
    """
    from cani.config import load_cli_config

    for name in ("LOG_LEVEL", "KUBECONFIG", "KUBE_CONTEXT", "CANI_QUIET"):
        monkeypatch.delenv(name, raising=False)
    load_cli_config.cache_clear()
    yield
    load_cli_config.cache_clear()
