"""Tasks: fetching, creating, updating, completing and deleting."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Mapping

from .transport import ApiError, Requester, send

__all__ = [
    "Task",
    "ENTITY_TYPE_LEAD",
    "ENTITY_TYPE_CONTACT",
    "ENTITY_TYPE_COMPANY",
    "ENTITY_TYPE_CUSTOMER",
    "get_task",
    "create_task",
    "update_task",
    "complete_task",
    "list_tasks",
    "delete_task",
    "create_task_for_entity",
]

ENTITY_TYPE_LEAD = "leads"
ENTITY_TYPE_CONTACT = "contacts"
ENTITY_TYPE_COMPANY = "companies"
ENTITY_TYPE_CUSTOMER = "customers"

# These calls decode whatever the server sends, whatever its status.
_ANY_STATUS = range(100, 600)


@dataclass
class Task:
    """A task."""

    id: int = 0
    created_by: int = 0
    updated_by: int = 0
    created_at: int = 0
    updated_at: int = 0
    responsible_user_id: int = 0
    group_id: int = 0
    entity_id: int = 0
    entity_type: str = ""
    duration: int = 0
    is_completed: bool = False
    task_type_id: int = 0
    text: str = ""
    result: str = ""
    complete_till: int = 0
    account_id: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialise for the API, leaving out every empty field."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Task":
        values = {}
        for f in fields(cls):
            value = data.get(f.name)
            if value is not None:
                values[f.name] = value
        return cls(**values)


def _embedded_tasks(data: Any) -> list[Task]:
    embedded = data.get("_embedded") if isinstance(data, dict) else None
    return [Task.from_dict(item) for item in (embedded or {}).get("tasks") or []]


def get_task(requester: Requester, task_id: int) -> Task:
    """Fetch one task by ID."""
    response = send(requester, "GET", f"/api/v4/tasks/{task_id}", expected=_ANY_STATUS)
    return Task.from_dict(response.json())


def create_task(requester: Requester, task: Task) -> Task:
    """Create a task and return it as stored."""
    response = send(
        requester, "POST", "/api/v4/tasks", json_body=[task.to_dict()], expected=_ANY_STATUS
    )
    created = _embedded_tasks(response.json())
    if not created:
        raise ApiError("failed to create task")
    return created[0]


def update_task(requester: Requester, task: Task) -> Task:
    """Update an existing task; its ID must be set."""
    if not task.id:
        raise ValueError("task ID is not set")
    response = send(
        requester,
        "PATCH",
        f"/api/v4/tasks/{task.id}",
        json_body=task.to_dict(),
        expected=_ANY_STATUS,
    )
    return Task.from_dict(response.json())


def complete_task(requester: Requester, task_id: int, result: str) -> Task:
    """Mark a task as completed with the given result text."""
    return update_task(requester, Task(id=task_id, is_completed=True, result=result))


def list_tasks(
    requester: Requester, limit: int, page: int, filter: Mapping[str, Any] | None
) -> list[Task]:
    """List tasks; a non-empty filter is sent as one JSON-encoded parameter."""
    params = {"limit": str(limit), "page": str(page)}
    if filter:
        params["filter"] = json.dumps(
            dict(filter), sort_keys=True, separators=(",", ":"), ensure_ascii=False
        )
    data = send(requester, "GET", "/api/v4/tasks", params=params).json()
    return _embedded_tasks(data)


def delete_task(requester: Requester, task_id: int) -> None:
    """Delete a task by ID."""
    send(requester, "DELETE", f"/api/v4/tasks/{task_id}", expected=_ANY_STATUS)


def create_task_for_entity(
    requester: Requester,
    entity_type: str,
    entity_id: int,
    task_type_id: int,
    text: str,
    complete_till: datetime,
    responsible_user_id: int,
) -> Task:
    """Create a task bound to a lead, contact, company or customer."""
    task = Task(
        entity_type=entity_type,
        entity_id=entity_id,
        task_type_id=task_type_id,
        text=text,
        complete_till=int(complete_till.timestamp()),
        responsible_user_id=responsible_user_id,
    )
    return create_task(requester, task)