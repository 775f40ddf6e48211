"""Environment-based authentication for the bug reporter.

Lets configuration files reference secrets as ``$NAME`` instead of storing the
personal access token in plain text. Values come from the process environment,
optionally seeded from a ``.env`` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .logging import get_logger

DEFAULT_TOKEN_VARS = ("AZURE_DEVOPS_PAT", "AZURE_DEVOPS_EXT_PAT", "SYSTEM_ACCESSTOKEN")


@dataclass
class EnvAuthConfig:
    """Configuration for environment-based authentication."""

    load_dotenv: bool = True
    dotenv_path: str | None = None
    token_vars: tuple[str, ...] = DEFAULT_TOKEN_VARS


class EnvironmentAuthManager:
    """Resolves secrets through environment variables and .env files."""

    def __init__(self, config: EnvAuthConfig):
        self.config = config
        self.logger = get_logger()
        self._dotenv_loaded = False

        if config.load_dotenv:
            self._load_dotenv()

    @property
    def dotenv_loaded(self) -> bool:
        return self._dotenv_loaded

    def _load_dotenv(self) -> None:
        """Load .env file if available."""
        if self.config.dotenv_path:
            candidates = [self.config.dotenv_path]
        else:
            candidates = ['.env', '.env.local']
        for location in candidates:
            env_path = Path(location)
            if env_path.exists():
                load_dotenv(str(env_path))
                self._dotenv_loaded = True
                self.logger.debug(f"Loaded environment variables from {env_path}")
                break

    def resolve_reference(self, value: str) -> str | None:
        """Resolve a ``$NAME`` reference; plain values are returned unchanged.

        A bare ``$`` looks the token up in the well-known variables. Returns
        None when the referenced variable is unset or blank.
        """
        if not value.startswith('$'):
            return value
        name = value[1:].strip('{}')
        if not name:
            return self.get_access_token()
        resolved = os.getenv(name)
        if resolved and resolved.strip():
            self.logger.debug(f"Resolved configuration reference from {name}")
            return resolved
        self.logger.debug(f"Environment variable {name} not set")
        return None

    def get_access_token(self) -> str | None:
        """Get a personal access token from the well-known variables."""
        for var in self.config.token_vars:
            token = os.getenv(var)
            if token and token.strip():
                self.logger.debug(f"Found access token in {var}")
                return token.strip()
        return None


def create_env_auth_manager(config: EnvAuthConfig | None = None) -> EnvironmentAuthManager:
    """Factory function to create environment authentication manager."""
    if config is None:
        config = EnvAuthConfig()
    return EnvironmentAuthManager(config)


__all__ = [
    "DEFAULT_TOKEN_VARS",
    "EnvAuthConfig",
    "EnvironmentAuthManager",
    "create_env_auth_manager",
]
