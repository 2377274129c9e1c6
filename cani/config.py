from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "y", "on")


def _env_str(name: str) -> Optional[str]:
    return (os.getenv(name) or "").strip() or None


@dataclass(frozen=True)
class CliConfig:
    log_level: str = "WARNING"
    context: Optional[str] = None
    quiet: bool = False

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)


@lru_cache(maxsize=1)
def load_cli_config() -> CliConfig:
    """
    Load CLI defaults from env. Flags override these.

    Vars:
    - LOG_LEVEL=debug|info|warning|error|critical (default: warning)
    - KUBE_CONTEXT=my-context
    - CANI_QUIET=1

    KUBECONFIG is not read here: the kubernetes client resolves (and merges) it itself.
    """
    level = (_env_str("LOG_LEVEL") or "WARNING").upper()
    if level not in _LOG_LEVELS:
        level = "WARNING"

    return CliConfig(
        log_level=level,
        context=_env_str("KUBE_CONTEXT"),
        quiet=_env_bool("CANI_QUIET", False),
    )
