"""Record loader: fills a record's backing data in one go.

Structured input replaces the data wholesale. Text and file input go through
a parser; only the first card it returns is kept, the rest are dropped with
a warning.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from .fields import MULTI_FIELD_NAMES, check_field
from .model import RecordData, coerce_entries

logger = logging.getLogger(__name__)


class RecordParser(Protocol):
    def parse(self, text: str) -> Sequence[RecordData]:
        ...


def default_parser() -> RecordParser:
    from .io import AddressBookParser
    return AddressBookParser()


def data_from_mapping(mapping: Mapping[str, Any]) -> RecordData:
    """Build record data from a plain mapping. Unknown keys raise UnknownFieldError."""
    data = RecordData()
    for key, value in mapping.items():
        check_field(key)
        if key in MULTI_FIELD_NAMES and value is not None:
            value = coerce_entries(key, value)
        setattr(data, key, value)
    return data


def first_record(parsed: Sequence[RecordData], source_label: str) -> RecordData | None:
    if not parsed:
        logger.warning("%s: no vCard found", source_label)
        return None
    if len(parsed) > 1:
        logger.warning(
            "%s: %d vCards found, keeping the first and discarding %d",
            source_label, len(parsed), len(parsed) - 1,
        )
    return parsed[0]


def load_text(text: str, parser: RecordParser | None = None, source_label: str = "<string>") -> RecordData | None:
    parser = parser or default_parser()
    return first_record(parser.parse(text), source_label)


def load_path(path: str | Path, parser: RecordParser | None = None) -> RecordData | None:
    """Read `path` as UTF-8 and hand it to the parser.

    Bytes that are not valid UTF-8 are replaced with U+FFFD rather than
    failing the read. A missing or unreadable file still raises OSError.
    """
    p = Path(path)
    text = p.read_text(encoding="utf-8", errors="replace")
    return load_text(text, parser=parser, source_label=p.name)
