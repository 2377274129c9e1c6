"""Turn parsed CLI input into a single AccessQuery.

Everything here is pure: no network, no logging configuration. Validation
failures raise ConfigError subclasses before any query exists.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from cani.core.errors import EmptyVerb, GroupsWithoutUser, UnsupportedPrincipal
from cani.core.models import ALL_NAMESPACES, AccessQuery, Principal
from cani.core.specifier import ResourceSpecifier

logger = logging.getLogger(__name__)


def parse_principal(text: Optional[str]) -> Principal:
    """Map the optional leading positional to a Principal (None means self)."""
    if text is None:
        return Principal.SELF
    try:
        return Principal(text)
    except ValueError:
        raise UnsupportedPrincipal(text) from None


def resolve_namespace(
    namespace_flag: Optional[str],
    all_namespaces: bool,
    default_namespace: Optional[str],
) -> Optional[str]:
    """
    First match wins:
    1. --all-namespaces -> "*"
    2. --namespace (an explicit "" is kept as-is)
    3. current-context namespace
    """
    if all_namespaces:
        if namespace_flag is not None:
            logger.debug("--all-namespaces overrides --namespace=%r", namespace_flag)
        return ALL_NAMESPACES
    if namespace_flag is not None:
        return namespace_flag
    return default_namespace


def check_impersonation(user: Optional[str], groups: Optional[Sequence[str]]) -> None:
    # An empty --as counts as no user.
    if groups and not user:
        raise GroupsWithoutUser()


def resolve_access_query(
    verb: str,
    specifier: ResourceSpecifier,
    *,
    namespace_flag: Optional[str] = None,
    all_namespaces: bool = False,
    default_namespace: Optional[str] = None,
    subresource: Optional[str] = None,
    impersonate_user: Optional[str] = None,
    impersonate_groups: Optional[Sequence[str]] = None,
) -> AccessQuery:
    if not (verb or "").strip():
        raise EmptyVerb()
    check_impersonation(impersonate_user, impersonate_groups)

    return AccessQuery(
        verb=verb,
        resource=specifier.resource,
        group=specifier.group,
        name=specifier.name,
        namespace=resolve_namespace(namespace_flag, all_namespaces, default_namespace),
        subresource=subresource or None,
        impersonate_user=impersonate_user or None,
        impersonate_groups=tuple(impersonate_groups) if impersonate_groups else None,
    )
