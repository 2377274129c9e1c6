"""Error taxonomy for a single can-i invocation.

Each stage raises at the point of detection; `main()` maps the family to an exit code.
"""

from __future__ import annotations


class CanIError(Exception):
    """Base class for all errors surfaced to the user."""


class ResourceParseError(CanIError):
    """The resource specifier token is malformed."""

    def __init__(self, token: str, message: str) -> None:
        super().__init__(message)
        self.token = token


class TooManyNameSeparators(ResourceParseError):
    def __init__(self, token: str) -> None:
        super().__init__(token, f"invalid resource {token!r}: expected resource[.group][/name]")


class EmptyResource(ResourceParseError):
    def __init__(self, token: str) -> None:
        super().__init__(token, f"invalid resource {token!r}: missing resource kind")


class ConfigError(CanIError):
    """Invalid flag combination or unsupported argument value."""


class GroupsWithoutUser(ConfigError):
    def __init__(self) -> None:
        super().__init__("--as-group requires --as to be set")


class UnsupportedPrincipal(ConfigError):
    def __init__(self, principal: str) -> None:
        super().__init__(f"unsupported principal {principal!r}: only 'i' (self) is supported")
        self.principal = principal


class EmptyVerb(ConfigError):
    def __init__(self) -> None:
        super().__init__("verb must not be empty")


class SubmissionError(CanIError):
    """The access review could not be submitted or its answer was unusable."""


class MissingStatus(SubmissionError):
    def __init__(self) -> None:
        super().__init__("API server response carried no access review status")
