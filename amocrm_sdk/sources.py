"""Lead sources: listing, creation, update, deletion and pipeline links."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Callable, Collection

from .transport import Requester, send

__all__ = [
    "Source",
    "Pipeline",
    "Service",
    "External",
    "with_filter",
    "get_sources",
    "get_source",
    "create_source",
    "update_source",
    "delete_source",
    "set_source_default",
    "get_source_services",
    "link_source_to_pipeline",
    "unlink_source_from_pipeline",
]

Option = Callable[[dict], None]


def _dump(obj: Any, required: Collection[str] = ()) -> dict[str, Any]:
    """Serialise a dataclass, leaving out empty values.

    Fields whose default is ``None`` are sent whenever they are set; every
    other field is sent only when truthy, unless it is named in ``required``.
    """
    out: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        if f.default is not None and not value and f.name not in required:
            continue
        if isinstance(value, list):
            value = [_dump(item) for item in value]
        elif is_dataclass(value):
            value = _dump(value)
        out[f.name] = value
    return out


def _load(cls: type, data: dict[str, Any], **nested: Callable[[Any], Any]) -> Any:
    """Build a dataclass from decoded JSON, filling missing values with defaults."""
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        raw = data.get(f.name)
        if f.name in nested:
            kwargs[f.name] = nested[f.name](raw)
        elif f.default is None:
            kwargs[f.name] = raw
        elif isinstance(f.default, bool):
            kwargs[f.name] = bool(raw)
        else:
            kwargs[f.name] = raw or f.default
    return cls(**kwargs)


def _optional(kind: Any) -> Callable[[Any], Any]:
    return lambda raw: None if raw is None else kind.from_dict(raw)


@dataclass
class Pipeline:
    """Pipeline a source is bound to."""

    id: int = 0

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Pipeline":
        return _load(cls, data)


@dataclass
class Service:
    """Service available for sources."""

    id: int = 0
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Service":
        return _load(cls, data)


@dataclass
class External:
    """External data attached to a source."""

    id: str = ""
    service: str = ""
    external_params: Any = None

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "External":
        return _load(cls, data)


@dataclass
class Source:
    """A lead source."""

    name: str = ""
    id: int = 0
    type: str = ""
    default: bool = False
    created_at: int = 0
    updated_at: int = 0
    deleted: bool = False
    effective_from: int = 0
    effective_to: int = 0
    pipeline: Pipeline | None = None
    services: list[Service] = field(default_factory=list)
    external: External | None = None
    params: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise for the API, leaving out empty optional fields."""
        return _dump(self, required={"name"})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Source":
        return _load(
            cls,
            data,
            pipeline=_optional(Pipeline),
            external=_optional(External),
            services=lambda raw: [Service.from_dict(item) for item in raw or []],
        )


def with_filter(filter: dict[str, str]) -> Option:
    """Option adding filter parameters to a source listing."""

    def apply(params: dict) -> None:
        params.update(filter)

    return apply


def _listing(requester: Requester, path: str, key: str, **kwargs: Any) -> list[dict]:
    data = send(requester, "GET", path, **kwargs).json()
    embedded = data.get("_embedded") if isinstance(data, dict) else None
    return (embedded or {}).get(key) or []


def _source_call(requester: Requester, method: str, path: str, **kwargs: Any) -> Source:
    return Source.from_dict(send(requester, method, path, **kwargs).json())


def get_sources(requester: Requester, page: int, limit: int, *args: Option) -> list[Source]:
    """List sources; ``args`` are options such as :func:`with_filter`."""
    params = {"page": str(page), "limit": str(limit)}
    for option in args:
        option(params)
    items = _listing(requester, "/api/v4/sources", "sources", params=params)
    return [Source.from_dict(item) for item in items]


def get_source(requester: Requester, source_id: int) -> Source:
    """Fetch one source by ID."""
    return _source_call(requester, "GET", f"/api/v4/sources/{source_id}")


def create_source(requester: Requester, source: Source) -> Source:
    """Create a source and return it as stored."""
    return _source_call(
        requester, "POST", "/api/v4/sources", json_body=source.to_dict(), expected=(200, 201)
    )


def update_source(requester: Requester, source: Source) -> Source:
    """Update an existing source; its ID must be set."""
    if not source.id:
        raise ValueError("source ID is not set")
    return _source_call(
        requester, "PATCH", f"/api/v4/sources/{source.id}", json_body=source.to_dict()
    )


def delete_source(requester: Requester, source_id: int) -> None:
    """Delete a source by ID."""
    send(requester, "DELETE", f"/api/v4/sources/{source_id}", expected=(200, 204))


def set_source_default(requester: Requester, source_id: int) -> Source:
    """Make a source the default one."""
    return _source_call(requester, "PATCH", f"/api/v4/sources/{source_id}/default")


def get_source_services(requester: Requester) -> list[Service]:
    """List the services available for sources."""
    items = _listing(requester, "/api/v4/sources/services", "services")
    return [Service.from_dict(item) for item in items]


def link_source_to_pipeline(requester: Requester, source_id: int, pipeline_id: int) -> Source:
    """Bind a source to a pipeline."""
    return _source_call(
        requester,
        "POST",
        f"/api/v4/sources/{source_id}/pipeline",
        json_body={"pipeline_id": pipeline_id},
        expected=(200, 201),
    )


def unlink_source_from_pipeline(requester: Requester, source_id: int, pipeline_id: int) -> Source:
    """Remove the binding between a source and a pipeline."""
    return _source_call(requester, "DELETE", f"/api/v4/sources/{source_id}/pipeline/{pipeline_id}")