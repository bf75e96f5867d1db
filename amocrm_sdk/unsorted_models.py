"""Data models for incoming (unsorted) requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, TypeVar

from .transport import ApiError

__all__ = [
    "SourceType",
    "CategoryType",
    "PipelineType",
    "UnsortedContact",
    "UnsortedCompany",
    "UnsortedMetadata",
    "UnsortedLeadCreate",
    "UnsortedContactCreate",
    "UnsortedResponse",
    "EmbeddedEntity",
    "UnsortedItem",
]


class SourceType(str, Enum):
    """Where an unsorted request came from."""

    API = "api"
    FORMS = "forms"
    SITE = "site"
    SIP = "sip"
    EMAIL = "mail"
    CHATS = "chats"


class CategoryType(str, Enum):
    """Category of an unsorted request."""

    FORMS = "forms"
    SITE = "site"
    SIP = "sip"
    EMAIL = "mail"
    CHATS = "chats"


class PipelineType(str, Enum):
    """Kind of entity an unsorted request turns into."""

    LEAD = "lead"
    CONTACT = "contact"
    CUSTOMER = "customer"


_E = TypeVar("_E", bound=Enum)


def _value(item: Any) -> Any:
    return getattr(item, "value", item)


def _enum_or_raw(enum_cls: type[_E], value: Any) -> _E | str:
    """Return the enum member for ``value``, or the raw text if unknown."""
    if value is None or value == "":
        return ""
    try:
        return enum_cls(value)
    except ValueError:
        return str(value)


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ApiError(f"expected a JSON object for {what}")
    return data


def _self_href(links: Any) -> str:
    if not isinstance(links, Mapping):
        return ""
    self_link = links.get("self")
    if not isinstance(self_link, Mapping):
        return ""
    return self_link.get("href") or ""


@dataclass
class UnsortedContact:
    """Contact details carried by an unsorted request."""

    name: str = ""
    email: str = ""
    phone: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name}
        if self.email:
            out["email"] = self.email
        if self.phone:
            out["phone"] = self.phone
        return out


@dataclass
class UnsortedCompany:
    """Company details carried by an unsorted request."""

    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass
class UnsortedMetadata:
    """Metadata describing how an unsorted request arrived."""

    ip: str = ""
    form: Any = None
    from_: str = ""
    to: str = ""
    subject: str = ""
    thread: Any = None
    service: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.ip:
            out["ip"] = self.ip
        if self.form is not None:
            out["form"] = self.form
        if self.from_:
            out["from"] = self.from_
        if self.to:
            out["to"] = self.to
        if self.subject:
            out["subject"] = self.subject
        if self.thread is not None:
            out["thread"] = self.thread
        if self.service:
            out["service"] = self.service
        return out


@dataclass
class _UnsortedBase:
    """Fields shared by every kind of unsorted request being created."""

    source_type: SourceType | str = ""
    category: CategoryType | str = ""
    uid: str = ""
    source_uid: str = ""
    created_at: int = 0
    pipeline_id: int = 0
    source_name: str = ""
    metadata_id: int = 0
    account_id: int = 0
    metadata: UnsortedMetadata = field(default_factory=UnsortedMetadata)
    contact: UnsortedContact | None = None
    company: UnsortedCompany | None = None

    def _base_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key in ("uid", "source_uid", "created_at", "pipeline_id", "source_name"):
            value = getattr(self, key)
            if value:
                out[key] = value
        out["source_type"] = _value(self.source_type)
        out["category"] = _value(self.category)
        for key in ("metadata_id", "account_id"):
            value = getattr(self, key)
            if value:
                out[key] = value
        out["metadata"] = self.metadata.to_dict()
        if self.contact is not None:
            out["contact"] = self.contact.to_dict()
        if self.company is not None:
            out["company"] = self.company.to_dict()
        return out


@dataclass
class UnsortedLeadCreate(_UnsortedBase):
    """An unsorted request that becomes a lead."""

    lead_name: str = ""
    status_id: int = 0
    responsible_user_id: int = 0
    price: int = 0
    pipeline_type: PipelineType | str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialise for the API, leaving out empty optional fields."""
        out = self._base_dict()
        for key in ("lead_name", "status_id", "responsible_user_id", "price"):
            value = getattr(self, key)
            if value:
                out[key] = value
        if self.pipeline_type:
            out["pipeline_type"] = _value(self.pipeline_type)
        return out


@dataclass
class UnsortedContactCreate(_UnsortedBase):
    """An unsorted request that becomes a contact."""

    responsible_user_id: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialise for the API, leaving out empty optional fields."""
        out = self._base_dict()
        if self.responsible_user_id:
            out["responsible_user_id"] = self.responsible_user_id
        return out


@dataclass
class EmbeddedEntity:
    """A contact, company or lead embedded in an unsorted item."""

    id: int = 0
    name: str = ""
    self_href: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmbeddedEntity":
        data = _require_mapping(data, "embedded entity")
        return cls(
            id=data.get("id") or 0,
            name=data.get("name") or "",
            self_href=_self_href(data.get("_links")),
        )


@dataclass
class UnsortedItem:
    """One unsorted request as listed by the API."""

    id: str = ""
    uid: str = ""
    source_uid: str = ""
    created_at: int = 0
    pipeline_id: int = 0
    category: CategoryType | str = ""
    source_type: SourceType | str = ""
    source_name: str = ""
    pipeline_type: PipelineType | str = ""
    account_id: int = 0
    contacts: list[EmbeddedEntity] = field(default_factory=list)
    companies: list[EmbeddedEntity] = field(default_factory=list)
    leads: list[EmbeddedEntity] = field(default_factory=list)
    self_href: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UnsortedItem":
        data = _require_mapping(data, "unsorted item")
        embedded = data.get("_embedded")
        embedded = embedded if isinstance(embedded, Mapping) else {}

        def entities(key: str) -> list[EmbeddedEntity]:
            return [EmbeddedEntity.from_dict(item) for item in embedded.get(key) or []]

        return cls(
            id=data.get("id") or "",
            uid=data.get("uid") or "",
            source_uid=data.get("source_uid") or "",
            created_at=data.get("created_at") or 0,
            pipeline_id=data.get("pipeline_id") or 0,
            category=_enum_or_raw(CategoryType, data.get("category")),
            source_type=_enum_or_raw(SourceType, data.get("source_type")),
            source_name=data.get("source_name") or "",
            pipeline_type=_enum_or_raw(PipelineType, data.get("pipeline_type")),
            account_id=data.get("account_id") or 0,
            contacts=entities("contacts"),
            companies=entities("companies"),
            leads=entities("leads"),
            self_href=_self_href(data.get("_links")),
        )


@dataclass
class UnsortedResponse:
    """The API's answer to creating unsorted requests.

    ``self_href`` and ``unsorted`` are ``None`` when the answer omits
    ``_links`` or ``_embedded``.
    """

    uid: str = ""
    account_id: int = 0
    self_href: str | None = None
    unsorted: list[UnsortedItem] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UnsortedResponse":
        data = _require_mapping(data, "unsorted response")
        links = data.get("_links")
        embedded = data.get("_embedded")
        unsorted: list[UnsortedItem] | None = None
        if isinstance(embedded, Mapping):
            unsorted = [UnsortedItem.from_dict(item) for item in embedded.get("unsorted") or []]
        return cls(
            uid=data.get("uid") or "",
            account_id=data.get("account_id") or 0,
            self_href=_self_href(links) if links is not None else None,
            unsorted=unsorted,
        )