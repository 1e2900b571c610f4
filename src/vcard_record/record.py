from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from . import loader
from .fields import check_field, is_multi
from .model import Node, RecordData, coerce_entries
from .serializer import DEFAULT_PRODID, DEFAULT_VERSION, build_nodes, serialize


def _field_property(name: str) -> property:
    def fget(self: Record) -> Any:
        return self.get(name)

    def fset(self: Record, value: Any) -> None:
        self.set(name, value)

    return property(fget, fset, doc=f"The record's {name}. Falsy assignments are ignored.")


class Record:
    """One vCard.

    Fields are set only when the new value is truthy, so optional values can be
    passed straight through without wiping what is already there. Use clear()
    to actually unset a field. Nothing is validated until the record is
    serialized.
    """

    fullname = _field_property("fullname")
    title = _field_property("title")
    photo = _field_property("photo")
    birthday = _field_property("birthday")
    timezone = _field_property("timezone")
    phones = _field_property("phones")
    addresses = _field_property("addresses")
    email_addresses = _field_property("email_addresses")

    def __init__(
        self,
        data: RecordData | None = None,
        version: str = DEFAULT_VERSION,
        prodid: str = DEFAULT_PRODID,
    ):
        self._data = data if data is not None else RecordData()
        self.version = version
        self.prodid = prodid

    # ── Store ──────────────────────────────────────────────────────────────────

    @property
    def data(self) -> RecordData:
        return self._data

    def get(self, name: str) -> Any:
        return getattr(self._data, check_field(name))

    def set(self, name: str, value: Any) -> Any:
        """Set `name` if `value` is truthy; return the current value either way."""
        check_field(name)
        if value:
            if is_multi(name):
                value = coerce_entries(name, value)
            setattr(self._data, name, value)
        return getattr(self._data, name)

    def clear(self, name: str) -> None:
        setattr(self._data, check_field(name), None)

    # ── Loading ────────────────────────────────────────────────────────────────

    def load_hashref(self, mapping: Mapping[str, Any]) -> Record:
        """Replace all data with `mapping` (no merge). Returns self."""
        self._data = loader.data_from_mapping(mapping)
        return self

    def load_string(self, text: str, parser: loader.RecordParser | None = None) -> Record | None:
        """Adopt the first card found in `text`; None if there was none."""
        data = loader.load_text(text, parser=parser)
        if data is None:
            return None
        self._data = data
        return self

    def load_file(self, path: str | Path, parser: loader.RecordParser | None = None) -> Record | None:
        """Adopt the first card in the file at `path`; None if there was none.

        The file is decoded as UTF-8 with invalid bytes replaced by U+FFFD.
        """
        data = loader.load_path(path, parser=parser)
        if data is None:
            return None
        self._data = data
        return self

    # ── Output ─────────────────────────────────────────────────────────────────

    def nodes(self) -> list[Node]:
        return build_nodes(self._data)

    def as_string(self) -> str:
        return serialize(self._data, version=self.version, prodid=self.prodid)

    def as_file(self, path: str | Path) -> Path:
        """Write the card to `path` and return it as a Path. I/O errors propagate."""
        out = Path(path)
        text = self.as_string()
        out.write_text(text, encoding="utf-8", newline="")
        return out

    def __str__(self) -> str:
        return self.as_string()

    def __repr__(self) -> str:
        return f"Record(fullname={self._data.fullname!r})"
