"""Incoming (unsorted) requests: creation, listing, acceptance and linking."""

from __future__ import annotations

import time
from typing import Any, Mapping

from .transport import ApiError, Requester, send
from .unsorted_models import (
    PipelineType,
    UnsortedContactCreate,
    UnsortedItem,
    UnsortedLeadCreate,
    UnsortedResponse,
)

__all__ = [
    "create_unsorted_lead",
    "create_unsorted_contact",
    "get_unsorted_leads",
    "get_unsorted_contacts",
    "get_unsorted_summary",
    "accept_unsorted_lead",
    "accept_unsorted_contact",
    "decline_unsorted_lead",
    "decline_unsorted_contact",
    "link_unsorted_lead_with_contact",
    "link_unsorted_lead_with_company",
    "link_unsorted_contact_with_company",
]


def _embedded_items(data: Any) -> list[UnsortedItem]:
    if data is None:
        return []
    if not isinstance(data, Mapping):
        raise ApiError("expected a JSON object for the unsorted list")
    embedded = data.get("_embedded")
    if not isinstance(embedded, Mapping):
        return []
    return [UnsortedItem.from_dict(item) for item in embedded.get("unsorted") or []]


def _linked_id(data: Any, key: str) -> int:
    if not isinstance(data, Mapping):
        return 0
    links = data.get("_links")
    if not isinstance(links, Mapping):
        return 0
    entity = links.get(key)
    if not isinstance(entity, Mapping):
        return 0
    return entity.get("id") or 0


def create_unsorted_lead(requester: Requester, lead: UnsortedLeadCreate) -> UnsortedResponse:
    """Create an unsorted request that becomes a lead.

    An unset creation time is filled with the current time and an unset
    pipeline type with ``PipelineType.LEAD``; both are written back to ``lead``.
    """
    if not lead.created_at:
        lead.created_at = int(time.time())
    if not lead.pipeline_type:
        lead.pipeline_type = PipelineType.LEAD
    response = send(
        requester,
        "POST",
        "/api/v4/leads/unsorted/api",
        json_body=[lead.to_dict()],
        expected=(200, 201),
    )
    return UnsortedResponse.from_dict(response.json())


def create_unsorted_contact(
    requester: Requester, contact: UnsortedContactCreate
) -> UnsortedResponse:
    """Create an unsorted request that becomes a contact.

    An unset creation time is filled with the current time and written back.
    """
    if not contact.created_at:
        contact.created_at = int(time.time())
    response = send(
        requester,
        "POST",
        "/api/v4/contacts/unsorted/api",
        json_body=[contact.to_dict()],
        expected=(200, 201),
    )
    return UnsortedResponse.from_dict(response.json())


def _list(
    requester: Requester, path: str, page: int, limit: int, filter: Mapping[str, str] | None
) -> list[UnsortedItem]:
    params = {"page": str(page), "limit": str(limit)}
    if filter:
        params.update(filter)
    return _embedded_items(send(requester, "GET", path, params=params).json())


def get_unsorted_leads(
    requester: Requester, page: int, limit: int, filter: Mapping[str, str] | None
) -> list[UnsortedItem]:
    """List unsorted requests of the lead kind."""
    return _list(requester, "/api/v4/leads/unsorted", page, limit, filter)


def get_unsorted_contacts(
    requester: Requester, page: int, limit: int, filter: Mapping[str, str] | None
) -> list[UnsortedItem]:
    """List unsorted requests of the contact kind."""
    return _list(requester, "/api/v4/contacts/unsorted", page, limit, filter)


def get_unsorted_summary(requester: Requester) -> dict[str, Any]:
    """Fetch the summary of unsorted requests as a plain mapping."""
    data = send(requester, "GET", "/api/v4/unsorted/summary").json()
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ApiError("expected a JSON object for the unsorted summary")
    return data


def accept_unsorted_lead(
    requester: Requester, unsorted_uid: str, status_id: int, responsible_user_id: int
) -> int:
    """Accept an unsorted lead request and return the ID of the new lead."""
    response = send(
        requester,
        "POST",
        f"/api/v4/leads/unsorted/{unsorted_uid}/accept",
        json_body={"status_id": status_id, "responsible_user_id": responsible_user_id},
    )
    return _linked_id(response.json(), "lead")


def accept_unsorted_contact(
    requester: Requester, unsorted_uid: str, responsible_user_id: int
) -> int:
    """Accept an unsorted contact request and return the ID of the new contact."""
    response = send(
        requester,
        "POST",
        f"/api/v4/contacts/unsorted/{unsorted_uid}/accept",
        json_body={"responsible_user_id": responsible_user_id},
    )
    return _linked_id(response.json(), "contact")


def decline_unsorted_lead(requester: Requester, unsorted_uid: str) -> None:
    """Decline an unsorted lead request."""
    send(
        requester,
        "DELETE",
        f"/api/v4/leads/unsorted/{unsorted_uid}/decline",
        expected=(200, 204),
    )


def decline_unsorted_contact(requester: Requester, unsorted_uid: str) -> None:
    """Decline an unsorted contact request."""
    send(
        requester,
        "DELETE",
        f"/api/v4/contacts/unsorted/{unsorted_uid}/decline",
        expected=(200, 204),
    )


def link_unsorted_lead_with_contact(
    requester: Requester, unsorted_uid: str, contact_id: int
) -> None:
    """Link an unsorted lead request with an existing contact."""
    send(
        requester,
        "POST",
        f"/api/v4/leads/unsorted/{unsorted_uid}/link",
        json_body={"contact_id": contact_id},
    )


def link_unsorted_lead_with_company(
    requester: Requester, unsorted_uid: str, company_id: int
) -> None:
    """Link an unsorted lead request with an existing company."""
    send(
        requester,
        "POST",
        f"/api/v4/leads/unsorted/{unsorted_uid}/link",
        json_body={"company_id": company_id},
    )


def link_unsorted_contact_with_company(
    requester: Requester, unsorted_uid: str, company_id: int
) -> None:
    """Link an unsorted contact request with an existing company."""
    send(
        requester,
        "POST",
        f"/api/v4/contacts/unsorted/{unsorted_uid}/link",
        json_body={"company_id": company_id},
    )