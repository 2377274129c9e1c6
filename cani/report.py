"""Render an AccessDecision for the terminal and pick the process exit code."""

from __future__ import annotations

import logging

from cani.core.errors import CanIError, ConfigError, ResourceParseError
from cani.core.models import AccessDecision

logger = logging.getLogger(__name__)

EXIT_ALLOWED = 0
EXIT_DENIED = 1
EXIT_USAGE_ERROR = 2
EXIT_SUBMISSION_ERROR = 3

NO_REASON = "No reason given"


def render_decision(decision: AccessDecision, verb: str, resource_token: str) -> str:
    """
    Allowed: `Access allowed: <reason>`.
    Denied: `<verb> <resource token as typed> not allowed`.
    """
    if decision.evaluation_error:
        logger.warning("Authorizer reported an evaluation error: %s", decision.evaluation_error)
    if decision.allowed:
        return f"Access allowed: {decision.reason or NO_REASON}"
    return f"{verb} {resource_token} not allowed"


def exit_code_for_decision(decision: AccessDecision) -> int:
    return EXIT_ALLOWED if decision.allowed else EXIT_DENIED


def exit_code_for_error(err: CanIError) -> int:
    if isinstance(err, (ResourceParseError, ConfigError)):
        return EXIT_USAGE_ERROR
    return EXIT_SUBMISSION_ERROR
