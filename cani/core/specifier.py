from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cani.core.errors import EmptyResource, TooManyNameSeparators


@dataclass(frozen=True)
class ResourceSpecifier:
    """
    Parsed form of `resource[.group][/name]`.

    - group None: no group given, let the server infer (core group)
    - group "": explicit core group (`pods.`)
    - name None: any name
    """

    resource: str
    name: Optional[str] = None
    group: Optional[str] = None


def parse_resource_specifier(token: str) -> ResourceSpecifier:
    """
    Parse a compact resource token.

    Examples:
    - pods                  -> resource=pods
    - pods/mypod            -> resource=pods, name=mypod
    - deployments.apps      -> resource=deployments, group=apps
    - deployments.apps/web  -> resource=deployments, group=apps, name=web
    """
    parts = token.split("/")
    if len(parts) > 2:
        raise TooManyNameSeparators(token)

    name = parts[1] if len(parts) == 2 else None
    if not name:
        name = None

    segments = parts[0].split(".")
    if not segments or not segments[0]:
        raise EmptyResource(token)

    rest = segments[1:]
    group = ".".join(rest) if rest else None
    return ResourceSpecifier(resource=segments[0], name=name, group=group)
