"""bugreporter - file Azure DevOps bugs from failing tests.

High-level public API (stable):

from bugreporter import BugReporter

reporter = BugReporter.from_config_path('appsettings.json')
bug_id = reporter.create_bug('Login fails', repro_steps='See CI log #123')

Optional overrides (description, repro_steps, assigned_to) fall back to the
defaults from the settings file. Every failure is a subclass of
``BugReporterError``.

The CLI (``bugreporter`` / ``python -m bugreporter``) delegates to this library.
"""

from __future__ import annotations

from .config import ReporterConfig, load_config
from .errors import (
    BugReporterError,
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    InvalidArgumentError,
    MissingRequiredFieldError,
    NetworkError,
    RemoteApiError,
    ResponseParseError,
)
from .models import BugFields
from .reporter import BugReporter

# Version constant (sync manually with pyproject)
__version__ = "0.1.0"

__all__ = [
    "BugReporter",
    "BugFields",
    "ReporterConfig",
    "load_config",
    "BugReporterError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "MissingRequiredFieldError",
    "InvalidArgumentError",
    "NetworkError",
    "RemoteApiError",
    "ResponseParseError",
    "__version__",
]
