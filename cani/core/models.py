from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

ALL_NAMESPACES = "*"


class Principal(Enum):
    """Who the access question is asked about. Only the caller itself is supported."""

    SELF = "i"


@dataclass(frozen=True)
class AccessQuery:
    verb: str
    resource: str
    group: Optional[str] = None
    name: Optional[str] = None
    namespace: Optional[str] = None
    subresource: Optional[str] = None
    # Applied to the connection (Impersonate-* headers), not to the review body.
    impersonate_user: Optional[str] = None
    impersonate_groups: Optional[Tuple[str, ...]] = None

    @property
    def impersonating(self) -> bool:
        return bool(self.impersonate_user)


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: Optional[str] = None
    denied: bool = False
    evaluation_error: Optional[str] = None
