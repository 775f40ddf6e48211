"""Create Azure DevOps bugs from test-failure context.

Typical use from a test harness::

    reporter = BugReporter.from_config_path('appsettings.json')
    bug_id = reporter.create_bug('Login fails', repro_steps=traceback_text)

Each ``create_bug`` call is one blocking POST. Nothing is retried or cached;
errors from :mod:`bugreporter.errors` propagate straight to the caller.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import requests

from .azure_rest import AzureDevOpsRestClient
from .config import CONFIG_DEFAULT, ReporterConfig, load_config
from .errors import InvalidArgumentError, ResponseParseError
from .logging import StructuredLogger, get_logger
from .models import WORK_ITEM_TYPE, BugFields, PreparedBug


def _extract_id(data: dict[str, Any]) -> int:
    value = data.get("id")
    if isinstance(value, bool):
        value = None
    if isinstance(value, str):
        digits = value.strip()
        value = int(digits) if digits.isascii() and digits.isdigit() else None
    if not isinstance(value, int):
        raise ResponseParseError(
            "Azure DevOps response does not contain an integer 'id'",
            response_text=json.dumps(data),
        )
    return value


class BugReporter:
    def __init__(
        self,
        config: ReporterConfig,
        *,
        session: requests.Session | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        self.config = config
        self.logger = logger or get_logger()
        self._client = AzureDevOpsRestClient(
            token=config.access_token,
            base_url=config.endpoint_base_url,
            project=config.project,
            session=session,
            timeout=config.timeout_seconds,
        )

    @classmethod
    def from_config_path(
        cls,
        path: str | Path = CONFIG_DEFAULT,
        *,
        session: requests.Session | None = None,
        logger: StructuredLogger | None = None,
    ) -> BugReporter:
        return cls(load_config(path), session=session, logger=logger)

    def build_request(
        self,
        title: str,
        description: str | None = None,
        repro_steps: str | None = None,
        assigned_to: str | None = None,
    ) -> PreparedBug:
        if not isinstance(title, str) or not title.strip():
            raise InvalidArgumentError("Bug title cannot be empty.", argument="title")
        fields = BugFields.resolve(
            self.config,
            title,
            description=description,
            repro_steps=repro_steps,
            assigned_to=assigned_to,
        )
        return PreparedBug(
            url=self._client.work_item_url(WORK_ITEM_TYPE),
            fields=fields,
            operations=fields.to_patch_document(),
        )

    def create_bug(
        self,
        title: str,
        description: str | None = None,
        repro_steps: str | None = None,
        assigned_to: str | None = None,
    ) -> int:
        """Create a bug and return its work item id."""
        prepared = self.build_request(
            title, description=description, repro_steps=repro_steps, assigned_to=assigned_to
        )
        data = self._client.create_work_item(WORK_ITEM_TYPE, prepared.operations)
        bug_id = _extract_id(data)
        self.logger.log_work_item_created(bug_id, WORK_ITEM_TYPE, project=self.config.project)
        return bug_id


__all__ = ["BugReporter"]
