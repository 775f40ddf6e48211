from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .config import ReporterConfig

WORK_ITEM_TYPE = "Bug"

FIELD_TITLE = "System.Title"
FIELD_DESCRIPTION = "System.Description"
FIELD_ASSIGNED_TO = "System.AssignedTo"
FIELD_REPRO_STEPS = "Microsoft.VSTS.TCM.ReproSteps"


def add_field(name: str, value: str) -> dict[str, Any]:
    return {"op": "add", "path": f"/fields/{name}", "value": value}


@dataclass(frozen=True)
class BugFields:
    """Fully resolved field values for one bug.

    Overrides win over configuration defaults only when they are not None, so
    an explicit empty string is sent as-is.
    """

    title: str
    description: str
    repro_steps: str
    assigned_to: str

    @classmethod
    def resolve(
        cls,
        config: ReporterConfig,
        title: str,
        description: str | None = None,
        repro_steps: str | None = None,
        assigned_to: str | None = None,
    ) -> BugFields:
        return cls(
            title=title,
            description=config.default_description if description is None else description,
            repro_steps=config.default_repro_steps if repro_steps is None else repro_steps,
            assigned_to=config.default_assignee if assigned_to is None else assigned_to,
        )

    def to_patch_document(self) -> list[dict[str, Any]]:
        return [
            add_field(FIELD_TITLE, self.title),
            add_field(FIELD_DESCRIPTION, self.description),
            add_field(FIELD_ASSIGNED_TO, self.assigned_to),
            add_field(FIELD_REPRO_STEPS, self.repro_steps),
        ]


@dataclass(frozen=True)
class PreparedBug:
    """Request that ``create_bug`` would send, without sending it."""

    url: str
    fields: BugFields
    operations: list[dict[str, Any]]


__all__ = [
    "WORK_ITEM_TYPE",
    "FIELD_TITLE",
    "FIELD_DESCRIPTION",
    "FIELD_ASSIGNED_TO",
    "FIELD_REPRO_STEPS",
    "BugFields",
    "PreparedBug",
    "add_field",
]
