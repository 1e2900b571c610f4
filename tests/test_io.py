"""vCard text → record data, sanitising, and the address book."""
from __future__ import annotations

from pathlib import Path

from vcard_record.address_book import AddressBook
from vcard_record.io import _sanitise_vcf, parse_vcards, read_vcard_file


def _vcf(body: str) -> str:
    return f"BEGIN:VCARD\r\nVERSION:3.0\r\n{body}\r\nEND:VCARD\r\n"


# ── Parsing ────────────────────────────────────────────────────────────────────

def test_parse_scalars():
    [data] = parse_vcards(_vcf("FN:Bruce Banner\r\nTITLE:Scientist\r\nBDAY:1962-05-01\r\nTZ:-05:00"))
    assert data.fullname == "Bruce Banner"
    assert data.title == "Scientist"
    assert data.birthday == "1962-05-01"
    assert data.timezone == "-05:00"


def test_parse_tel_types_and_pref():
    [data] = parse_vcards(_vcf("FN:B\r\nTEL;TYPE=work,pref:555-1234\r\nTEL;TYPE=home:555-1111"))
    first, second = data.phones
    assert (first.number, first.types, first.preferred) == ("555-1234", ["work"], True)
    assert (second.number, second.types, second.preferred) == ("555-1111", ["home"], None)


def test_parse_adr():
    [data] = parse_vcards(_vcf("FN:B\r\nADR;TYPE=home:;;Army St;Springfield;IL;62701;USA"))
    [adr] = data.addresses
    assert adr.street == "Army St"
    assert adr.city == "Springfield"
    assert adr.postal_code == "62701"
    assert adr.po_box is None
    assert adr.types == ["home"]


def test_parse_email():
    [data] = parse_vcards(_vcf("FN:B\r\nEMAIL;TYPE=work:bb@example.com"))
    assert data.email_addresses[0].address == "bb@example.com"
    assert data.phones is None


def test_parse_ignores_other_properties():
    [data] = parse_vcards(_vcf("FN:B\r\nNOTE:hello\r\nX-CUSTOM:1"))
    assert data.as_dict() == {"fullname": "B"}


def test_parse_many():
    text = _vcf("FN:Alice") + _vcf("FN:Bob")
    assert [d.fullname for d in parse_vcards(text)] == ["Alice", "Bob"]


def test_parse_empty():
    assert parse_vcards("") == []


def test_read_vcard_file(tmp_path: Path):
    p = tmp_path / "icloud.vcf"
    p.write_text(_vcf("FN:Alice"), encoding="utf-8")
    assert read_vcard_file(p)[0].fullname == "Alice"


# ── Sanitising ─────────────────────────────────────────────────────────────────

def test_sanitise_item_prefixes():
    raw = "item1.ADR:;;Main St;;;;\r\nitem1.X-ABLabel:_$!<Work>!$_\r\nitem2..EMAIL:a@b.c\r\n"
    out = _sanitise_vcf(raw, "icloud")
    assert out == "ADR:;;Main St;;;;\r\nEMAIL:a@b.c\r\n"


def test_parse_apple_export():
    body = "FN:Alice\r\nitem1.EMAIL;TYPE=INTERNET:alice@example.com\r\nitem1.X-ABLabel:other"
    [data] = parse_vcards(_vcf(body))
    assert data.email_addresses[0].address == "alice@example.com"


# ── Address book ───────────────────────────────────────────────────────────────

def test_address_book_round(tmp_path: Path):
    src = tmp_path / "in.vcf"
    src.write_text(_vcf("FN:Alice\r\nTEL;TYPE=cell:555") + _vcf("FN:Bob"), encoding="utf-8")
    book = AddressBook().load_file(src)
    assert len(book) == 2
    out = book.as_file(tmp_path / "out" / "book.vcf")
    text = out.read_text(encoding="utf-8")
    assert text.count("BEGIN:VCARD") == 2
    assert "TEL;TYPE=cell:555" in text


def test_address_book_add_vcard():
    book = AddressBook()
    card = book.add_vcard()
    card.fullname = "Carol"
    assert "FN:Carol" in book.as_string()


def test_parse_skips_non_vcard_components():
    calendar = "BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//test//EN\r\nEND:VCALENDAR\r\n"
    parsed = parse_vcards(_vcf("FN:Alice") + calendar + _vcf("FN:Bob"))
    assert [d.fullname for d in parsed] == ["Alice", "Bob"]
