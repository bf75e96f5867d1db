"""Users of the account and their rights."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from .transport import ApiError, Requester, send

__all__ = [
    "Rights",
    "User",
    "get_user",
    "get_current_user",
    "list_users",
]


def _require_object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ApiError(f"expected a JSON object for {what}")
    return data


@dataclass
class Rights:
    """Permissions a user holds."""

    leads: bool = False
    contacts: bool = False
    companies: bool = False
    tasks: bool = False
    mailbox: bool = False
    catalog: bool = False
    is_admin: bool = False
    is_manager: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rights":
        data = _require_object(data, "user rights")
        return cls(**{f.name: bool(data.get(f.name)) for f in fields(cls)})


@dataclass
class User:
    """A user of the account."""

    id: int = 0
    name: str = ""
    email: str = ""
    lang: str = ""
    rights: Rights = field(default_factory=Rights)
    is_active: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        data = _require_object(data, "a user")
        rights = data.get("rights")
        return cls(
            id=data.get("id") or 0,
            name=data.get("name") or "",
            email=data.get("email") or "",
            lang=data.get("lang") or "",
            rights=Rights() if rights is None else Rights.from_dict(rights),
            is_active=bool(data.get("is_active")),
        )


def _fetch_user(requester: Requester, path: str) -> User:
    return User.from_dict(send(requester, "GET", path).json())


def get_user(requester: Requester, user_id: int) -> User:
    """Fetch one user by ID."""
    return _fetch_user(requester, f"/api/v4/users/{user_id}")


def get_current_user(requester: Requester) -> User:
    """Fetch the user who owns the API key."""
    return _fetch_user(requester, "/api/v4/users/self")


def list_users(requester: Requester, limit: int, page: int) -> list[User]:
    """List users one page at a time."""
    params = {"limit": str(limit), "page": str(page)}
    data = send(requester, "GET", "/api/v4/users", params=params).json()
    if data is None:
        return []
    embedded = _require_object(data, "the user list").get("_embedded")
    if not isinstance(embedded, Mapping):
        return []
    return [User.from_dict(item) for item in embedded.get("items") or []]