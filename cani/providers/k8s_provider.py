"""Kubernetes API client for submitting SelfSubjectAccessReviews."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Sequence, runtime_checkable

from kubernetes import client, config
from kubernetes.client import rest
from kubernetes.client.rest import ApiException
from urllib3 import HTTPHeaderDict
from urllib3.exceptions import HTTPError

from cani.core.errors import ConfigError, MissingStatus, SubmissionError
from cani.core.models import AccessDecision, AccessQuery

logger = logging.getLogger(__name__)

IMPERSONATE_USER_HEADER = "Impersonate-User"
IMPERSONATE_GROUP_HEADER = "Impersonate-Group"

_SA_NAMESPACE_FILE = Path("/var/run/secrets/kubernetes.io/serviceaccount/namespace")
_FALLBACK_NAMESPACE = "default"


@runtime_checkable
class K8sProvider(Protocol):
    def default_namespace(self) -> str: ...

    def submit_access_review(self, query: AccessQuery) -> AccessDecision: ...


class _ImpersonatingRESTClient(rest.RESTClientObject):
    """
    REST client that sends one Impersonate-Group header per group.

    ApiClient flattens headers into a plain dict, so repeated headers can only be
    added at this layer.
    """

    def __init__(self, configuration: client.Configuration, groups: Sequence[str]) -> None:
        super().__init__(configuration)
        self._groups = tuple(groups)

    def request(self, method, url, *args, headers=None, **kwargs):  # type: ignore[no-untyped-def]
        merged = HTTPHeaderDict(headers or {})
        for group in self._groups:
            merged.add(IMPERSONATE_GROUP_HEADER, group)
        return super().request(method, url, *args, headers=merged, **kwargs)


class DefaultK8sProvider:
    """
    Loads cluster configuration lazily, once per instance.

    With no explicit kubeconfig/context, in-cluster config is tried first and
    the local kubeconfig is the fallback.
    """

    def __init__(self, kubeconfig: Optional[str] = None, context: Optional[str] = None) -> None:
        self.kubeconfig = kubeconfig
        self.context = context
        self._configuration: Optional[client.Configuration] = None
        self._namespace: Optional[str] = None

    def _load(self) -> client.Configuration:
        if self._configuration is not None:
            return self._configuration

        configuration = client.Configuration()
        explicit = bool(self.kubeconfig or self.context)
        try:
            if explicit:
                self._load_kube_config(configuration)
            else:
                try:
                    config.load_incluster_config(client_configuration=configuration)
                    self._namespace = _read_service_account_namespace()
                    logger.debug("Loaded in-cluster configuration")
                except config.ConfigException:
                    self._load_kube_config(configuration)
        except config.ConfigException as e:
            raise ConfigError(f"Failed to load cluster configuration: {e}") from e

        # Single attempt per invocation: disable urllib3's implicit retries.
        configuration.retries = False
        self._configuration = configuration
        return configuration

    def _load_kube_config(self, configuration: client.Configuration) -> None:
        config.load_kube_config(
            config_file=self.kubeconfig, context=self.context, client_configuration=configuration
        )
        contexts, active = config.list_kube_config_contexts(config_file=self.kubeconfig)
        selected = active
        if self.context:
            selected = next((c for c in contexts or [] if c.get("name") == self.context), active)
        ctx: Dict[str, Any] = (selected or {}).get("context") or {}
        self._namespace = ctx.get("namespace") or _FALLBACK_NAMESPACE
        logger.debug("Loaded kubeconfig context %r", (selected or {}).get("name"))

    def default_namespace(self) -> str:
        self._load()
        return self._namespace or _FALLBACK_NAMESPACE

    def _api_client(self, query: AccessQuery) -> client.ApiClient:
        configuration = self._load()
        api_client = client.ApiClient(configuration)
        if query.impersonating:
            api_client.set_default_header(IMPERSONATE_USER_HEADER, query.impersonate_user)
        if query.impersonate_groups:
            api_client.rest_client = _ImpersonatingRESTClient(configuration, query.impersonate_groups)
        return api_client

    def submit_access_review(self, query: AccessQuery) -> AccessDecision:
        api = client.AuthorizationV1Api(self._api_client(query))
        body = build_self_subject_access_review(query)
        try:
            resp = api.create_self_subject_access_review(body=body)
        except ApiException as e:
            raise SubmissionError(f"Kubernetes API error: {e.status} {e.reason}") from e
        except HTTPError as e:
            raise SubmissionError(f"Failed to reach the API server: {e}") from e
        except ValueError as e:
            # Raised while deserializing a status that lacks `allowed`
            # (pydantic ValidationError on newer clients, ValueError on older ones).
            raise MissingStatus() from e
        return decision_from_review(resp)


def get_k8s_provider(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> K8sProvider:
    """Seam for swapping provider implementations (tests use fakes)."""
    return DefaultK8sProvider(kubeconfig=kubeconfig, context=context)


def _read_service_account_namespace() -> Optional[str]:
    try:
        return _SA_NAMESPACE_FILE.read_text(encoding="utf-8").strip() or None
    except OSError:
        return None


def build_self_subject_access_review(query: AccessQuery) -> client.V1SelfSubjectAccessReview:
    """Review body for `query`. Impersonation travels in headers, not in the body."""
    return client.V1SelfSubjectAccessReview(
        spec=client.V1SelfSubjectAccessReviewSpec(
            resource_attributes=client.V1ResourceAttributes(
                verb=query.verb,
                resource=query.resource,
                group=query.group,
                name=query.name,
                namespace=query.namespace,
                subresource=query.subresource,
            )
        )
    )


def decision_from_review(review: Any) -> AccessDecision:
    status = getattr(review, "status", None)
    if status is None:
        raise MissingStatus()
    return AccessDecision(
        allowed=bool(status.allowed),
        reason=getattr(status, "reason", None) or None,
        denied=bool(getattr(status, "denied", False)),
        evaluation_error=getattr(status, "evaluation_error", None) or None,
    )
