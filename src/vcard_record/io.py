from __future__ import annotations

import logging
import re
from pathlib import Path

import vobject

from .fields import FIELD_FOR_PROPERTY, SIMPLE_FIELD_NAMES
from .model import EmailAddress, Phone, PostalAddress, RecordData

logger = logging.getLogger(__name__)

# ── Pre-parse sanitisation ─────────────────────────────────────────────────────
#
# Apple exports group related lines with an itemN. prefix and attach X- labels
# to them. vobject accepts groups, but the labels carry nothing we encode, and
# the double-dot and bare-dot variants are rejected outright.
#
#   item1..ADR   double-dot group prefix  → strip prefix, keep property
#   item1.ADR    single-dot group prefix  → strip prefix, keep property
#   item1.X-*    Apple extension on group → drop line entirely
#   .ADR         bare leading dot         → strip the dot, keep property
#   .X-*         bare leading dot + X-    → drop line entirely

_ITEM_DOUBLE_DOT = re.compile(r"^item\d+\.\.", re.IGNORECASE)
_ITEM_SINGLE_STD = re.compile(r"^item\d+\.((?!X-)[A-Z])", re.IGNORECASE)
_ITEM_X_PROP     = re.compile(r"^item\d+\.X-", re.IGNORECASE)
_BARE_DOT_X      = re.compile(r"^\.(X-)", re.IGNORECASE)
_BARE_DOT_STD    = re.compile(r"^\.((?!X-)[A-Z])", re.IGNORECASE)


def _sanitise_vcf(data: str, source_label: str) -> str:
    """Clean up known malformed line patterns before vobject sees them."""
    out: list[str] = []
    skipped = fixed = 0

    for line in data.splitlines(keepends=True):
        if _ITEM_X_PROP.match(line) or _BARE_DOT_X.match(line):
            skipped += 1
            continue

        if _ITEM_DOUBLE_DOT.match(line):
            line = _ITEM_DOUBLE_DOT.sub("", line)
            fixed += 1
        elif _ITEM_SINGLE_STD.match(line):
            line = _ITEM_SINGLE_STD.sub(r"\1", line)
            fixed += 1
        elif _BARE_DOT_STD.match(line):
            line = _BARE_DOT_STD.sub(r"\1", line)
            fixed += 1

        out.append(line)

    if skipped or fixed:
        logger.debug("%s: %d line(s) fixed, %d dropped", source_label, fixed, skipped)

    return "".join(out)


# ── vobject → record data ──────────────────────────────────────────────────────

def _text(value) -> str:
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    return str(value or "")


def _types_and_pref(line) -> tuple[list[str], bool | None]:
    types: list[str] = []
    preferred = None
    for raw in line.params.get("TYPE", []):
        for tag in raw.split(","):
            tag = tag.strip()
            if not tag:
                continue
            if tag.lower() == "pref":
                preferred = True
            else:
                types.append(tag)
    if "PREF" in line.params:
        preferred = True
    return types, preferred


def card_to_data(vc: vobject.base.Component) -> RecordData:
    data = RecordData()
    for child in vc.getChildren():
        name = FIELD_FOR_PROPERTY.get(child.name.upper())
        if name is None:
            continue

        if name in SIMPLE_FIELD_NAMES:
            if not isinstance(child.value, str):
                logger.debug("skipping non-text %s value", child.name)
                continue
            setattr(data, name, child.value.strip() or None)
            continue

        types, preferred = _types_and_pref(child)
        entries = getattr(data, name)
        if entries is None:
            entries = []
            setattr(data, name, entries)

        if name == "phones":
            entries.append(Phone(number=_text(child.value).strip(), types=types, preferred=preferred))
        elif name == "email_addresses":
            entries.append(EmailAddress(address=_text(child.value).strip(), types=types, preferred=preferred))
        else:
            adr = child.value
            entries.append(PostalAddress(
                po_box=_text(adr.box) or None,
                extended=_text(adr.extended) or None,
                street=_text(adr.street) or None,
                city=_text(adr.city) or None,
                region=_text(adr.region) or None,
                postal_code=_text(adr.code) or None,
                country=_text(adr.country) or None,
                types=types,
                preferred=preferred,
            ))
    return data


# ── Public API ─────────────────────────────────────────────────────────────────

def parse_vcards(text: str, source_label: str = "<string>") -> list[RecordData]:
    """Parse every VCARD component in `text`. vobject parse errors propagate."""
    data = _sanitise_vcf(text, source_label)
    results: list[RecordData] = []
    for vc in vobject.readComponents(data):
        if vc.name.upper() == "VCARD":
            results.append(card_to_data(vc))
        else:
            logger.debug("%s: skipping %s component", source_label, vc.name)
    logger.debug("%s: parsed %d card(s)", source_label, len(results))
    return results


def read_vcard_file(path: Path) -> list[RecordData]:
    raw = Path(path).read_text(encoding="utf-8", errors="replace")
    return parse_vcards(raw, Path(path).stem)


class AddressBookParser:
    """Default parser behind Record.load_string / Record.load_file."""

    def parse(self, text: str) -> list[RecordData]:
        return parse_vcards(text)
