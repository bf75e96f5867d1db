"""Tags attached to contacts, leads, companies and customers."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Iterable

from .transport import Requester, Response, send

__all__ = [
    "EntityType",
    "Tag",
    "get_tags",
    "create_tag",
    "create_tags",
    "get_tag",
    "update_tag",
    "delete_tag",
    "link_entity_with_tags",
    "get_entity_tags",
]


class EntityType(str, Enum):
    """Kind of entity that tags belong to."""

    CONTACT = "contacts"
    LEAD = "leads"
    COMPANY = "companies"
    CUSTOMER = "customers"


@dataclass
class Tag:
    """A tag."""

    name: str = ""
    id: int = 0
    color: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialise for the API, leaving out an unset ID and colour."""
        pairs = (("id", self.id), ("name", self.name), ("color", self.color))
        return {key: value for key, value in pairs if value or key == "name"}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tag":
        return cls(**{f.name: data.get(f.name) or f.default for f in fields(cls)})


def _call(
    requester: Requester, method: str, entity_type: EntityType | str, suffix: str, **kwargs: Any
) -> Response:
    segment = str(getattr(entity_type, "value", entity_type))
    return send(requester, method, f"/api/v4/{segment}{suffix}", **kwargs)


def _tags_in(response: Response) -> list[Tag]:
    data = response.json()
    embedded = data.get("_embedded") if isinstance(data, dict) else None
    return [Tag.from_dict(item) for item in (embedded or {}).get("tags") or []]


def _dump_all(tags: Iterable[Tag]) -> list[dict[str, Any]]:
    return [tag.to_dict() for tag in tags]


def get_tags(requester: Requester, entity_type: EntityType | str, page: int, limit: int) -> list[Tag]:
    """List the tags of an entity type, one page at a time."""
    params = {"page": str(page), "limit": str(limit)}
    return _tags_in(_call(requester, "GET", entity_type, "/tags", params=params))


def create_tag(requester: Requester, entity_type: EntityType | str, tag: Tag) -> Tag:
    """Create one tag and return it as stored."""
    data = _call(
        requester, "POST", entity_type, "/tags", json_body=tag.to_dict(), expected=(200, 201)
    ).json()
    stored = data.get("tag") if isinstance(data, dict) else None
    return Tag.from_dict(stored or {})


def create_tags(requester: Requester, entity_type: EntityType | str, tags: Iterable[Tag]) -> list[Tag]:
    """Create several tags at once."""
    return _tags_in(
        _call(requester, "POST", entity_type, "/tags", json_body=_dump_all(tags), expected=(200, 201))
    )


def get_tag(requester: Requester, entity_type: EntityType | str, tag_id: int) -> Tag:
    """Fetch one tag by ID."""
    return Tag.from_dict(_call(requester, "GET", entity_type, f"/tags/{tag_id}").json())


def update_tag(requester: Requester, entity_type: EntityType | str, tag: Tag) -> Tag:
    """Update a tag; its ID must be set."""
    if not tag.id:
        raise ValueError("tag ID must not be empty")
    response = _call(requester, "PATCH", entity_type, f"/tags/{tag.id}", json_body=tag.to_dict())
    return Tag.from_dict(response.json())


def delete_tag(requester: Requester, entity_type: EntityType | str, tag_id: int) -> None:
    """Delete a tag by ID."""
    _call(requester, "DELETE", entity_type, f"/tags/{tag_id}", expected=(200, 204))


def link_entity_with_tags(
    requester: Requester, entity_type: EntityType | str, entity_id: int, tags: Iterable[Tag]
) -> None:
    """Attach tags to one entity."""
    _call(
        requester,
        "POST",
        entity_type,
        f"/{entity_id}/tags",
        json_body=_dump_all(tags),
        expected=(200, 201),
    )


def get_entity_tags(requester: Requester, entity_type: EntityType | str, entity_id: int) -> list[Tag]:
    """List the tags attached to one entity."""
    return _tags_in(_call(requester, "GET", entity_type, f"/{entity_id}/tags"))