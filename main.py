#!/usr/bin/env python3
"""
kube-can-i - check whether the current identity may perform an action.
Submits one SelfSubjectAccessReview and reports the decision.
"""

import argparse
import logging
import sys
from typing import List, Optional

from cani.config import load_cli_config
from cani.core.errors import CanIError
from cani.core.resolver import check_impersonation, parse_principal, resolve_access_query
from cani.core.specifier import parse_resource_specifier
from cani.report import exit_code_for_decision, exit_code_for_error, render_decision

logger = logging.getLogger("cani")

#
# NOTE: The kubernetes provider is imported lazily (inside run) so malformed
# input is rejected without touching the client library or the cluster config.
#


def configure_logging(level: int) -> None:
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", stream=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kube-can-i",
        description="Check whether an action is allowed for the current identity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Can I list pods in the current namespace?
  kube-can-i list pods

  # Can I get a specific deployment in staging?
  kube-can-i i get deployments.apps/web -n staging

  # Can I delete secrets anywhere, acting as another user?
  kube-can-i delete secrets -A --as jane --as-group devs

Exit codes: 0 allowed, 1 denied, 2 invalid input or configuration, 3 request failed.
        """,
    )
    parser.add_argument(
        "principal", nargs="?", metavar="PRINCIPAL", help="Whose access to check. Only 'i' (yourself) is supported."
    )
    parser.add_argument("verb", metavar="VERB", help="Verb to check (e.g. get, list, create, delete)")
    parser.add_argument("resource", metavar="RESOURCE", help="Resource as resource[.group][/name]")

    parser.add_argument("--namespace", "-n", help="Namespace to check in (default: current context namespace)")
    parser.add_argument(
        "--all-namespaces",
        "-A",
        action="store_true",
        help="Check across all namespaces (takes precedence over --namespace)",
    )
    parser.add_argument("--subresource", help="Subresource to check (e.g. log, status, scale)")
    parser.add_argument("--as", dest="as_user", metavar="USER", help="User to impersonate for the check")
    parser.add_argument(
        "--as-group",
        dest="as_groups",
        action="extend",
        nargs="+",
        metavar="GROUP",
        help="Group(s) to impersonate for the check; takes several values and may be repeated (requires --as)",
    )
    parser.add_argument("--kubeconfig", help="Path to the kubeconfig file (default: $KUBECONFIG or ~/.kube/config)")
    parser.add_argument("--context", help="Kubeconfig context to use (default: $KUBE_CONTEXT or current context)")
    parser.add_argument("--quiet", "-q", action="store_true", help="Print nothing; only set the exit code")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging on stderr")
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_cli_config()
    configure_logging(logging.DEBUG if args.verbose else cfg.log_level_value)
    quiet = args.quiet or cfg.quiet

    try:
        parse_principal(args.principal)
        specifier = parse_resource_specifier(args.resource)
        check_impersonation(args.as_user, args.as_groups)

        from cani.providers.k8s_provider import get_k8s_provider

        provider = get_k8s_provider(kubeconfig=args.kubeconfig, context=args.context or cfg.context)
        default_namespace = None
        if not args.all_namespaces and args.namespace is None:
            default_namespace = provider.default_namespace()

        query = resolve_access_query(
            args.verb,
            specifier,
            namespace_flag=args.namespace,
            all_namespaces=args.all_namespaces,
            default_namespace=default_namespace,
            subresource=args.subresource,
            impersonate_user=args.as_user,
            impersonate_groups=args.as_groups,
        )
        logger.debug("Submitting access review: %s", query)
        decision = provider.submit_access_review(query)
    except CanIError as e:
        logger.debug("Check failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return exit_code_for_error(e)

    text = render_decision(decision, args.verb, args.resource)
    if decision.allowed:
        logger.info("Access allowed for %s %s", args.verb, args.resource)
    else:
        logger.info(
            "Access denied for %s %s (reason: %s, explicit deny: %s)",
            args.verb,
            args.resource,
            decision.reason,
            decision.denied,
        )
    if not quiet:
        print(text)
    return exit_code_for_decision(decision)


def main() -> None:
    """CLI entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
