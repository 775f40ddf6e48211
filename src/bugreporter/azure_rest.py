from __future__ import annotations

import base64
import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import requests

from .errors import NetworkError, RemoteApiError, ResponseParseError

API_VERSION = "6.0"
JSON_PATCH_MEDIA_TYPE = "application/json-patch+json"
USER_AGENT = "ado-bug-reporter/0.1.0"
_MAX_ERROR_TEXT = 500


def basic_auth_header(token: str) -> str:
    """HTTP Basic credentials with an empty user name and the PAT as password."""
    encoded = base64.b64encode(f":{token}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def _server_message(text: str) -> str | None:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


@dataclass
class AzureDevOpsRestClient:
    """Minimal client for the Azure DevOps work item tracking API."""

    token: str = field(repr=False)
    base_url: str
    project: str
    session: requests.Session | None = field(default=None, repr=False)
    timeout: float = 30.0
    _session: requests.Session = field(init=False, repr=False)
    _headers: dict[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Per-request headers; an injected session may be shared between clients
        self._session = self.session or requests.Session()
        self._headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
            "Authorization": basic_auth_header(self.token),
        }

    def work_item_url(self, work_item_type: str) -> str:
        project = quote(self.project, safe="")
        return (
            f"{self.base_url.rstrip('/')}/{project}/_apis/wit/workitems/"
            f"${work_item_type}?api-version={API_VERSION}"
        )

    def _post_patch(self, url: str, operations: Sequence[dict[str, Any]]) -> requests.Response:
        headers = {**self._headers, "Content-Type": JSON_PATCH_MEDIA_TYPE}
        try:
            return self._session.request(
                "POST",
                url,
                data=json.dumps(list(operations)).encode("utf-8"),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(
                f"Exception occurred during API request to {url}: {exc}", cause=exc
            ) from exc

    def create_work_item(
        self, work_item_type: str, operations: Sequence[dict[str, Any]]
    ) -> dict[str, Any]:
        """POST a JSON patch document creating one work item; returns the parsed body."""
        url = self.work_item_url(work_item_type)
        response = self._post_patch(url, operations)
        text = response.text or ""
        if not 200 <= response.status_code < 300:
            server_message = _server_message(text)
            detail = server_message or text.strip()[:_MAX_ERROR_TEXT] or str(
                getattr(response, "reason", "") or ""
            )
            raise RemoteApiError(
                f"Failed to create {work_item_type} in Azure DevOps "
                f"({response.status_code}): {detail}",
                status=response.status_code,
                response_text=text,
                server_message=server_message,
            )
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise ResponseParseError(
                f"Azure DevOps returned a non-JSON body for the created {work_item_type}",
                response_text=text,
            ) from exc
        if not isinstance(data, dict):
            raise ResponseParseError(
                f"Azure DevOps returned an unexpected body for the created {work_item_type}",
                response_text=text,
            )
        return data


__all__ = [
    "API_VERSION",
    "JSON_PATCH_MEDIA_TYPE",
    "AzureDevOpsRestClient",
    "basic_auth_header",
]
