"""Loading from text and files: parser delegation and first-of-many."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest
import vobject

from vcard_record.model import RecordData
from vcard_record.record import Record


# ── helpers ────────────────────────────────────────────────────────────────────

class FakeParser:
    def __init__(self, records: list[RecordData]):
        self.records = records
        self.seen: list[str] = []

    def parse(self, text: str) -> list[RecordData]:
        self.seen.append(text)
        return self.records


class BrokenParser:
    def parse(self, text: str) -> list[RecordData]:
        raise ValueError("bad input")


TWO_CARDS = (
    "BEGIN:VCARD\r\nVERSION:3.0\r\nFN:Alice\r\nEND:VCARD\r\n"
    "BEGIN:VCARD\r\nVERSION:3.0\r\nFN:Bob\r\nEND:VCARD\r\n"
)


# ── Injected parser ────────────────────────────────────────────────────────────

def test_load_string_adopts_first():
    parser = FakeParser([RecordData(fullname="Alice"), RecordData(fullname="Bob")])
    r = Record()
    assert r.load_string("anything", parser=parser) is r
    assert r.fullname == "Alice"
    assert parser.seen == ["anything"]


def test_load_string_warns_on_discard(caplog):
    parser = FakeParser([RecordData(fullname="Alice"), RecordData(fullname="Bob")])
    with caplog.at_level(logging.WARNING, logger="vcard_record.loader"):
        Record().load_string("x", parser=parser)
    assert "discarding 1" in caplog.text


def test_load_string_no_cards():
    r = Record()
    r.fullname = "Keep me"
    assert r.load_string("x", parser=FakeParser([])) is None
    assert r.fullname == "Keep me"


def test_parser_errors_propagate():
    with pytest.raises(ValueError, match="bad input"):
        Record().load_string("x", parser=BrokenParser())


def test_load_file_reads_then_parses(tmp_path: Path):
    src = tmp_path / "card.vcf"
    src.write_text("file body", encoding="utf-8")
    parser = FakeParser([RecordData(title="Scientist")])
    r = Record().load_file(src, parser=parser)
    assert r.title == "Scientist"
    assert parser.seen == ["file body"]


def test_load_file_missing(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        Record().load_file(tmp_path / "missing.vcf", parser=FakeParser([]))


# ── Default parser ─────────────────────────────────────────────────────────────

def test_load_string_real_parser():
    r = Record().load_string(TWO_CARDS)
    assert r.fullname == "Alice"


def test_load_file_real_parser(tmp_path: Path):
    src = tmp_path / "book.vcf"
    src.write_text(TWO_CARDS, encoding="utf-8")
    r = Record().load_file(src)
    assert r.fullname == "Alice"


def test_malformed_text_raises_parse_error():
    with pytest.raises(vobject.base.ParseError):
        Record().load_string("BEGIN:VCARD\r\nGARBAGE\r\nEND:VCARD\r\n")


def test_load_file_replaces_invalid_utf8(tmp_path: Path):
    src = tmp_path / "latin1.vcf"
    src.write_bytes(b"BEGIN:VCARD\r\nVERSION:3.0\r\nFN:Caf\xe9\r\nEND:VCARD\r\n")
    r = Record().load_file(src)
    assert r.fullname == "Caf\ufffd"
