from __future__ import annotations

from pathlib import Path

from .io import parse_vcards, read_vcard_file
from .record import Record
from .serializer import DEFAULT_PRODID, DEFAULT_VERSION


class AddressBook:
    """Several cards read from or written to one .vcf document."""

    def __init__(self, vcards: list[Record] | None = None):
        self.vcards: list[Record] = list(vcards or [])

    def add_vcard(self) -> Record:
        card = Record()
        self.vcards.append(card)
        return card

    def load_string(self, text: str, version: str = DEFAULT_VERSION, prodid: str = DEFAULT_PRODID) -> AddressBook:
        self.vcards.extend(Record(d, version=version, prodid=prodid) for d in parse_vcards(text))
        return self

    def load_file(self, path: str | Path, version: str = DEFAULT_VERSION, prodid: str = DEFAULT_PRODID) -> AddressBook:
        self.vcards.extend(Record(d, version=version, prodid=prodid) for d in read_vcard_file(Path(path)))
        return self

    def as_string(self) -> str:
        return "".join(card.as_string() for card in self.vcards)

    def as_file(self, path: str | Path) -> Path:
        out = Path(path)
        text = self.as_string()
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8", newline="")
        return out

    def __len__(self) -> int:
        return len(self.vcards)
