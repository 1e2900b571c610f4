"""Node builders: record data → ordered list of property nodes.

Each builder is a plain function over entries. The serializer calls them in
registry order; nothing here touches text, folding, or escaping.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from .errors import InvalidEntryError, MissingRequiredFieldError
from .fields import SIMPLE_FIELDS
from .model import (
    ENTRY_TYPES,
    EmailAddress,
    Node,
    Param,
    Phone,
    PostalAddress,
    RecordData,
    as_text,
)


# ── Parameters ─────────────────────────────────────────────────────────────────

def build_params(types: Iterable[str] | None, preferred: bool | None) -> list[Param]:
    """All type params in the order given, then pref if set."""
    params = [Param("type", as_text(tag)) for tag in (types or [])]
    if preferred:
        params.append(Param("pref", True))
    return params


# ── Entry shape ────────────────────────────────────────────────────────────────

def check_entries(collection: str, entries: Any) -> None:
    """Raise InvalidEntryError unless `entries` is a list of `collection`'s entry type."""
    if isinstance(entries, (str, bytes)) or not isinstance(entries, (list, tuple)):
        raise InvalidEntryError(collection, f"expected a list of entries, got {type(entries).__name__}")
    entry_type = ENTRY_TYPES[collection]
    for i, entry in enumerate(entries):
        if not isinstance(entry, entry_type):
            raise InvalidEntryError(
                collection, f"expected {entry_type.__name__}, got {type(entry).__name__}", i,
            )


# ── Builders ───────────────────────────────────────────────────────────────────

def build_simple_nodes(data: RecordData) -> list[Node]:
    nodes: list[Node] = []
    for name, prop in SIMPLE_FIELDS:
        value = getattr(data, name)
        if not value:
            continue
        nodes.append(Node(prop, as_text(value)))
    return nodes


def build_phone_nodes(phones: Sequence[Phone]) -> list[Node]:
    check_entries("phones", phones)
    nodes: list[Node] = []
    for i, phone in enumerate(phones):
        if not phone.number:
            raise MissingRequiredFieldError("number", "phones", i)
        nodes.append(Node("TEL", as_text(phone.number), build_params(phone.types, phone.preferred)))
    return nodes


def build_address_nodes(addresses: Sequence[PostalAddress]) -> list[Node]:
    check_entries("addresses", addresses)
    nodes: list[Node] = []
    for adr in addresses:
        parts = adr.components()
        nodes.append(Node(
            "ADR",
            ";".join(parts),
            build_params(adr.types, adr.preferred),
            components=parts,
        ))
    return nodes


def build_email_nodes(emails: Sequence[EmailAddress]) -> list[Node]:
    check_entries("email_addresses", emails)
    nodes: list[Node] = []
    for i, email in enumerate(emails):
        if not email.address:
            raise MissingRequiredFieldError("address", "email_addresses", i)
        nodes.append(Node("EMAIL", as_text(email.address), build_params(email.types, email.preferred)))
    return nodes


# ── Validation pass ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MissingField:
    collection: str
    index: int
    field: str

    def to_error(self) -> MissingRequiredFieldError:
        return MissingRequiredFieldError(self.field, self.collection, self.index)


@dataclass
class ValidationResult:
    missing: list[MissingField] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing

    def raise_for_missing(self) -> None:
        if self.missing:
            raise self.missing[0].to_error()


def validate(data: RecordData) -> ValidationResult:
    """Collect every entry lacking a required sub-field, without raising.

    Values that are not entries at all are left to check_entries.
    """
    result = ValidationResult()
    for i, phone in enumerate(data.phones or []):
        if isinstance(phone, Phone) and not phone.number:
            result.missing.append(MissingField("phones", i, "number"))
    for i, email in enumerate(data.email_addresses or []):
        if isinstance(email, EmailAddress) and not email.address:
            result.missing.append(MissingField("email_addresses", i, "address"))
    return result
