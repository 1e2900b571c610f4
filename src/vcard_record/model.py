from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping


def _tags(data: Mapping[str, Any]) -> list[str]:
    raw = data.get("type", data.get("types")) or []
    if isinstance(raw, str):
        return [raw]
    return list(raw)


def as_text(value: Any) -> str:
    """Values from JSON/TOML may be numbers or dates; encode them as text."""
    if value is None or value == "":
        return ""
    return str(value)


@dataclass
class Phone:
    number: str | None = None          # required, checked when encoding
    types: list[str] = field(default_factory=list)
    preferred: bool | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Phone:
        return cls(number=data.get("number"), types=_tags(data), preferred=data.get("preferred"))


@dataclass
class PostalAddress:
    po_box: str | None = None
    extended: str | None = None
    street: str | None = None
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country: str | None = None
    types: list[str] = field(default_factory=list)
    preferred: bool | None = None

    # legacy hash keys → attribute names
    _ALIASES = {"pobox": "po_box", "post_code": "postal_code"}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PostalAddress:
        kwargs = {}
        for key in ADDRESS_COMPONENTS:
            kwargs[key] = data.get(key)
        for alias, key in cls._ALIASES.items():
            if kwargs[key] is None and data.get(alias) is not None:
                kwargs[key] = data[alias]
        return cls(types=_tags(data), preferred=data.get("preferred"), **kwargs)

    def components(self) -> tuple[str, ...]:
        """The seven positional ADR components, empty string for missing ones."""
        return tuple(as_text(getattr(self, name)) for name in ADDRESS_COMPONENTS)


# ADR component order (RFC 6350 §6.3.1)
ADDRESS_COMPONENTS = (
    "po_box", "extended", "street", "city", "region", "postal_code", "country",
)


@dataclass
class EmailAddress:
    address: str | None = None         # required, checked when encoding
    types: list[str] = field(default_factory=list)
    preferred: bool | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EmailAddress:
        return cls(address=data.get("address"), types=_tags(data), preferred=data.get("preferred"))


ENTRY_TYPES: dict[str, type] = {
    "phones": Phone,
    "addresses": PostalAddress,
    "email_addresses": EmailAddress,
}


def coerce_entries(name: str, items: Any) -> Any:
    """Turn a sequence of mappings/entries into entry dataclasses (no validation).

    A single mapping counts as a one-entry list. Strings are stored untouched
    and rejected when the record is serialized.
    """
    entry_type = ENTRY_TYPES[name]
    if isinstance(items, (str, bytes)):
        return items
    if isinstance(items, Mapping):
        items = [items]
    out = []
    for item in items:
        if isinstance(item, Mapping):
            out.append(entry_type.from_dict(item))
        else:
            out.append(item)
    return out


@dataclass
class RecordData:
    """Backing store for one card. Unset fields stay None."""
    fullname: str | None = None
    title: str | None = None
    photo: str | None = None
    birthday: str | None = None
    timezone: str | None = None
    phones: list[Phone] | None = None
    addresses: list[PostalAddress] | None = None
    email_addresses: list[EmailAddress] | None = None

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name)}


@dataclass(frozen=True)
class Param:
    name: str                          # "type" or "pref"
    value: Any


@dataclass
class Node:
    """One property line before text assembly."""
    node_type: str
    value: str
    params: list[Param] = field(default_factory=list)
    components: tuple[str, ...] | None = None  # ADR only
