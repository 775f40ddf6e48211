from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

import yaml
from jsonschema import Draft7Validator

from .env_auth import EnvironmentAuthManager, create_env_auth_manager
from .errors import ConfigNotFoundError, ConfigParseError, MissingRequiredFieldError

CONFIG_DEFAULT = 'appsettings.json'

DEFAULT_ASSIGNED_TO = 'shahab@tecoholic.com'
DEFAULT_DESCRIPTION = 'Bug created automatically due to failed Selenium test.'
DEFAULT_REPRO_STEPS = 'See attached logs for detailed error.'
DEFAULT_TIMEOUT_SECONDS = 30.0

REQUIRED_FIELDS = ('AzureDevOpsUrl', 'Project', 'PersonalAccessToken')

_OPTIONAL_STRING = {'type': ['string', 'null']}

CONFIG_SCHEMA: dict[str, Any] = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    'title': 'BugReporterSettings',
    'type': 'object',
    'properties': {
        'AzureDevOpsUrl': {'type': ['string', 'null']},
        'Project': {'type': ['string', 'null']},
        'PersonalAccessToken': {'type': ['string', 'null']},
        'AssignedTo': _OPTIONAL_STRING,
        'DefaultDescription': _OPTIONAL_STRING,
        'DefaultReproSteps': _OPTIONAL_STRING,
        'TimeoutSeconds': {'type': ['number', 'null'], 'exclusiveMinimum': 0},
    },
}

_VALIDATOR = Draft7Validator(CONFIG_SCHEMA)


@dataclass(frozen=True)
class ReporterConfig:
    endpoint_base_url: str
    project: str
    access_token: str = field(repr=False)
    default_assignee: str = DEFAULT_ASSIGNED_TO
    default_description: str = DEFAULT_DESCRIPTION
    default_repro_steps: str = DEFAULT_REPRO_STEPS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    source_file: Path | None = None


def _read_document(p: Path) -> Any:
    try:
        text = p.read_text(encoding='utf-8-sig')
    except UnicodeDecodeError as exc:
        raise ConfigParseError(f'Cannot decode {p}: {exc}') from exc
    if p.suffix.lower() in ('.yaml', '.yml'):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigParseError(f'Invalid YAML in {p}: {exc}') from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(f'Invalid JSON in {p}: {exc}') from exc


def _validate(raw: Any, p: Path) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ConfigParseError(f'Configuration in {p} must be a key-value object')
    errors = sorted(_VALIDATOR.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        key = str(first.path[0]) if first.path else None
        where = f' for {key}' if key else ''
        raise ConfigParseError(f'Invalid value{where} in {p}: {first.message}', field=key)
    return cast(dict[str, Any], raw)


def _resolve(value: Any, env: _LazyEnv) -> Any:
    if isinstance(value, str) and value.startswith('$'):
        return env.get().resolve_reference(value)
    return value


class _LazyEnv:
    """Creates the environment manager only when a ``$NAME`` reference shows up."""

    def __init__(self, manager: EnvironmentAuthManager | None):
        self._manager = manager

    def get(self) -> EnvironmentAuthManager:
        if self._manager is None:
            self._manager = create_env_auth_manager()
        return self._manager


def _required(raw: dict[str, Any], key: str, env: _LazyEnv) -> str:
    value = _resolve(raw.get(key), env)
    if value is None or not str(value).strip():
        raise MissingRequiredFieldError(key)
    return cast(str, value)


def _optional(raw: dict[str, Any], key: str, default: str, env: _LazyEnv) -> str:
    value = _resolve(raw.get(key), env)
    return default if value is None else cast(str, value)


def load_config(
    path: str | Path = CONFIG_DEFAULT,
    *,
    env_auth: EnvironmentAuthManager | None = None,
) -> ReporterConfig:
    p = Path(path)
    if not p.is_file():
        raise ConfigNotFoundError(p)
    raw = _validate(_read_document(p), p)
    env = _LazyEnv(env_auth)

    url, project, token = (_required(raw, key, env) for key in REQUIRED_FIELDS)
    timeout = raw.get('TimeoutSeconds')

    return ReporterConfig(
        endpoint_base_url=url.strip().rstrip('/'),
        project=project.strip(),
        access_token=token.strip(),
        default_assignee=_optional(raw, 'AssignedTo', DEFAULT_ASSIGNED_TO, env),
        default_description=_optional(raw, 'DefaultDescription', DEFAULT_DESCRIPTION, env),
        default_repro_steps=_optional(raw, 'DefaultReproSteps', DEFAULT_REPRO_STEPS, env),
        timeout_seconds=float(timeout) if timeout is not None else DEFAULT_TIMEOUT_SECONDS,
        source_file=p,
    )


__all__ = [
    'CONFIG_DEFAULT',
    'CONFIG_SCHEMA',
    'DEFAULT_ASSIGNED_TO',
    'DEFAULT_DESCRIPTION',
    'DEFAULT_REPRO_STEPS',
    'REQUIRED_FIELDS',
    'ReporterConfig',
    'load_config',
]
