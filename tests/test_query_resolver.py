from __future__ import annotations

import pytest

from cani.core.errors import ConfigError, EmptyVerb, GroupsWithoutUser, UnsupportedPrincipal
from cani.core.models import ALL_NAMESPACES, AccessQuery, Principal
from cani.core.resolver import (
    check_impersonation,
    parse_principal,
    resolve_access_query,
    resolve_namespace,
)
from cani.core.specifier import parse_resource_specifier


def test_get_pods_uses_default_namespace() -> None:
    q = resolve_access_query("get", parse_resource_specifier("pods"), default_namespace="team-a")
    assert q == AccessQuery(verb="get", resource="pods", group=None, name=None, namespace="team-a")


def test_list_named_deployment_in_explicit_namespace() -> None:
    q = resolve_access_query(
        "list",
        parse_resource_specifier("deployments.apps/web"),
        namespace_flag="staging",
        default_namespace="default",
    )
    assert q.verb == "list"
    assert q.resource == "deployments"
    assert q.group == "apps"
    assert q.name == "web"
    assert q.namespace == "staging"


def test_all_namespaces_wins_over_namespace_flag() -> None:
    assert resolve_namespace("staging", True, "default") == ALL_NAMESPACES
    assert resolve_namespace(None, True, "default") == "*"


def test_explicit_empty_namespace_is_kept() -> None:
    assert resolve_namespace("", False, "default") == ""


def test_default_namespace_used_when_no_flags() -> None:
    assert resolve_namespace(None, False, "default") == "default"


def test_groups_without_user_is_rejected() -> None:
    with pytest.raises(GroupsWithoutUser):
        check_impersonation(None, ["devs"])

    with pytest.raises(ConfigError):
        resolve_access_query(
            "get", parse_resource_specifier("pods"), default_namespace="default", impersonate_groups=["devs"]
        )


def test_user_without_groups_is_fine() -> None:
    check_impersonation("jane", None)
    check_impersonation("jane", [])
    check_impersonation(None, [])


def test_impersonation_passes_through() -> None:
    q = resolve_access_query(
        "get",
        parse_resource_specifier("secrets"),
        default_namespace="default",
        impersonate_user="jane",
        impersonate_groups=["devs", "ops"],
    )
    assert q.impersonate_user == "jane"
    assert q.impersonate_groups == ("devs", "ops")
    assert q.impersonating


def test_subresource_is_carried() -> None:
    q = resolve_access_query("get", parse_resource_specifier("pods"), default_namespace="x", subresource="log")
    assert q.subresource == "log"
    q2 = resolve_access_query("get", parse_resource_specifier("pods"), default_namespace="x", subresource="")
    assert q2.subresource is None


def test_construction_is_deterministic() -> None:
    kwargs = dict(namespace_flag="staging", default_namespace="default", impersonate_user="jane")
    a = resolve_access_query("patch", parse_resource_specifier("deployments.apps/web"), **kwargs)
    b = resolve_access_query("patch", parse_resource_specifier("deployments.apps/web"), **kwargs)
    assert a == b
    assert hash(a) == hash(b)


@pytest.mark.parametrize("verb", ["", "   "])
def test_empty_verb_is_rejected(verb: str) -> None:
    with pytest.raises(EmptyVerb):
        resolve_access_query(verb, parse_resource_specifier("pods"), default_namespace="default")


def test_principal_self_only() -> None:
    assert parse_principal(None) is Principal.SELF
    assert parse_principal("i") is Principal.SELF
    with pytest.raises(UnsupportedPrincipal) as excinfo:
        parse_principal("bob")
    assert "bob" in str(excinfo.value)


def test_empty_user_counts_as_absent() -> None:
    with pytest.raises(GroupsWithoutUser):
        check_impersonation("", ["devs"])

    q = resolve_access_query("get", parse_resource_specifier("pods"), default_namespace="x", impersonate_user="")
    assert q.impersonate_user is None
    assert not q.impersonating
