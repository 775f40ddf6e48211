"""Error taxonomy & redaction helpers.

Every failure the reporter can surface derives from ``BugReporterError`` so
callers (test frameworks, the CLI) can catch one base type. Construction-time
problems derive from ``ConfigError``; the remaining classes are per-call.

Public API:
- the exception classes below
- classify_error(exc) -> ErrorInfo
- redact(text, secrets=()) -> str
"""
from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

# Azure DevOps PATs are 52 char base32; newer ones are 84 chars.
_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?i)(authorization:?\s*basic\s+)[A-Za-z0-9+/=]{8,}"),
    re.compile(r"\b[a-z2-7]{52}\b"),
    re.compile(r"\b[A-Za-z0-9]{84}\b"),
]

_REDACTION_PLACEHOLDER = "<redacted>"


class BugReporterError(RuntimeError):
    """Base class for all reporter failures."""


class ConfigError(BugReporterError):
    pass


class ConfigNotFoundError(ConfigError):
    def __init__(self, path: Any):
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


class ConfigParseError(ConfigError):
    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class MissingRequiredFieldError(ConfigError):
    def __init__(self, field: str):
        super().__init__(f"{field} missing from configuration")
        self.field = field


class InvalidArgumentError(BugReporterError, ValueError):
    def __init__(self, message: str, *, argument: str | None = None):
        super().__init__(message)
        self.argument = argument


class NetworkError(BugReporterError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class RemoteApiError(BugReporterError):
    """Raised when Azure DevOps answers with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response_text: str | None = None,
        server_message: str | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.response_text = response_text
        self.server_message = server_message


class ResponseParseError(BugReporterError):
    def __init__(self, message: str, *, response_text: str | None = None):
        super().__init__(message)
        self.response_text = response_text


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False
    details: dict[str, Any] | None = None


def redact(text: str, secrets: Iterable[str] = ()) -> str:
    """Redact credentials in arbitrary text.

    Known token shapes are matched by pattern; ``secrets`` lets callers mask
    values they hold (the configured PAT) regardless of shape.
    """
    if not text:
        return text
    redacted = text
    for secret in secrets:
        if secret:
            redacted = redacted.replace(secret, _REDACTION_PLACEHOLDER)
    for pat in _SENSITIVE_PATTERNS:
        if pat.groups:
            redacted = pat.sub(lambda m: m.group(1) + _REDACTION_PLACEHOLDER, redacted)
        else:
            redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException, secrets: Iterable[str] = ()) -> ErrorInfo:
    """Map an exception onto a reporting category.

    Categories: config, argument, network (transient), remote, parse, generic.
    """
    msg = redact(str(exc) if exc else "", secrets)
    name = exc.__class__.__name__
    if isinstance(exc, MissingRequiredFieldError):
        return ErrorInfo("config", msg, name, details={"field": exc.field})
    if isinstance(exc, ConfigError):
        return ErrorInfo("config", msg, name)
    if isinstance(exc, InvalidArgumentError):
        return ErrorInfo("argument", msg, name)
    if isinstance(exc, NetworkError):
        cause = type(exc.cause).__name__ if exc.cause is not None else None
        return ErrorInfo("network", msg, name, transient=True, details={"cause": cause})
    if isinstance(exc, RemoteApiError):
        return ErrorInfo("remote", msg, name, details={"status": exc.status})
    if isinstance(exc, ResponseParseError):
        return ErrorInfo("parse", msg, name)
    return ErrorInfo("generic", msg, name)


__all__ = [
    "BugReporterError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "MissingRequiredFieldError",
    "InvalidArgumentError",
    "NetworkError",
    "RemoteApiError",
    "ResponseParseError",
    "ErrorInfo",
    "classify_error",
    "redact",
]
