from __future__ import annotations

import logging

import phonenumbers
from phonenumbers import NumberParseException

from .model import Phone, as_text
from .record import Record

logger = logging.getLogger(__name__)


def _format_spaced_e164(num: phonenumbers.PhoneNumber) -> str:
    """Format a parsed number as pretty international, e.g. +44 7980 220 220."""
    intl = phonenumbers.format_number(num, phonenumbers.PhoneNumberFormat.INTERNATIONAL)
    out = intl.replace("-", " ").replace("(", "").replace(")", "")
    return " ".join(out.split())


def format_phone_number(raw: str, region: str) -> str:
    """Return `raw` reformatted, or unchanged if it does not parse as valid."""
    try:
        parsed = phonenumbers.parse(raw, region)
    except NumberParseException:
        return raw
    if phonenumbers.is_possible_number(parsed) and phonenumbers.is_valid_number(parsed):
        return _format_spaced_e164(parsed)
    return raw


def format_phone_numbers(record: Record, region: str) -> int:
    """Reformat every phone number on `record` in place; return how many changed.

    Entries without a number, and values that are not entries, are left for
    the serializer to reject.
    """
    changed = 0
    for phone in record.phones or []:
        if not isinstance(phone, Phone) or not phone.number:
            continue
        raw = as_text(phone.number)
        formatted = format_phone_number(raw, region)
        if formatted != raw:
            logger.debug("phone reformatted: %r -> %r", raw, formatted)
            phone.number = formatted
            changed += 1
    return changed
