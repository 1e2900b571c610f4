"""Field registry: which record fields exist and which vCard property each becomes.

The order of the tuples below is the encode order. Nothing else decides it.
"""
from __future__ import annotations

from .errors import UnknownFieldError

# ── Scalar fields: one plain string each ───────────────────────────────────────
SIMPLE_FIELDS: tuple[tuple[str, str], ...] = (
    ("fullname", "FN"),
    ("title",    "TITLE"),
    ("photo",    "PHOTO"),
    ("birthday", "BDAY"),
    ("timezone", "TZ"),
)

# ── Multi-valued fields: a list of entries each ────────────────────────────────
MULTI_FIELDS: tuple[tuple[str, str], ...] = (
    ("phones",          "TEL"),
    ("addresses",       "ADR"),
    ("email_addresses", "EMAIL"),
)

SIMPLE_FIELD_NAMES = tuple(name for name, _ in SIMPLE_FIELDS)
MULTI_FIELD_NAMES = tuple(name for name, _ in MULTI_FIELDS)
ALL_FIELDS = SIMPLE_FIELD_NAMES + MULTI_FIELD_NAMES

PROPERTY_FOR_FIELD: dict[str, str] = dict(SIMPLE_FIELDS + MULTI_FIELDS)
FIELD_FOR_PROPERTY: dict[str, str] = {prop: name for name, prop in PROPERTY_FOR_FIELD.items()}


def check_field(name: str) -> str:
    """Return `name` unchanged, or raise UnknownFieldError for a typo."""
    if name not in PROPERTY_FOR_FIELD:
        raise UnknownFieldError(name)
    return name


def is_multi(name: str) -> bool:
    return check_field(name) in MULTI_FIELD_NAMES
