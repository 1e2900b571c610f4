from __future__ import annotations


class VCardError(Exception):
    """Base class for everything this package raises on purpose."""


class MissingRequiredFieldError(VCardError, ValueError):
    """An entry lacks a sub-field it cannot be encoded without.

    Raised at serialization time only; setting incomplete entries is allowed.
    """

    def __init__(self, field: str, collection: str, index: int | None = None):
        self.field = field
        self.collection = collection
        self.index = index
        where = f"{collection}[{index}]" if index is not None else collection
        super().__init__(f"'{field}' attr missing from {where}")


class UnknownFieldError(VCardError, KeyError):
    """A field name outside the registry was used."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"unknown vCard field {self.name!r}"


class UnsupportedVersionError(VCardError, ValueError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(f"unsupported vCard version {version!r} (use 3.0 or 4.0)")


class InvalidEntryError(VCardError, TypeError):
    """A multi-valued field holds something other than a list of entries."""

    def __init__(self, collection: str, detail: str, index: int | None = None):
        self.collection = collection
        self.index = index
        where = f"{collection}[{index}]" if index is not None else collection
        super().__init__(f"{where}: {detail}")


class MalformedNodeError(VCardError, ValueError):
    """A hand-built node cannot be assembled into a property line."""
