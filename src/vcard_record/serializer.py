from __future__ import annotations

import logging
from typing import Sequence

import vobject
from vobject.vcard import Address, VCard3_0, VCardTextBehavior

from .errors import MalformedNodeError, UnsupportedVersionError
from .fields import MULTI_FIELD_NAMES, PROPERTY_FOR_FIELD
from .model import Node, RecordData
from .nodes import (
    build_address_nodes,
    build_email_nodes,
    build_phone_nodes,
    build_simple_nodes,
    check_entries,
    validate,
)

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = ("3.0", "4.0")
DEFAULT_VERSION = "3.0"
DEFAULT_PRODID = "-//vcard-record//EN"

_TEXT_PROPERTIES = {"FN", "TITLE"}


class _NodeOrderVCard(VCard3_0):
    # vobject writes sortFirst keys first, everything else alphabetically
    sortFirst = ("version", "prodid") + tuple(p.lower() for p in PROPERTY_FOR_FIELD.values())


# ── Nodes ──────────────────────────────────────────────────────────────────────

def build_nodes(data: RecordData) -> list[Node]:
    """Every node for `data`, in registry order. Raises on incomplete entries."""
    nodes = build_simple_nodes(data)
    if data.phones:
        nodes.extend(build_phone_nodes(data.phones))
    if data.addresses:
        nodes.extend(build_address_nodes(data.addresses))
    if data.email_addresses:
        nodes.extend(build_email_nodes(data.email_addresses))
    return nodes


# ── Text assembly ──────────────────────────────────────────────────────────────

def _apply_params(line, node: Node, version: str) -> None:
    types = [p.value for p in node.params if p.name == "type"]
    preferred = any(p.name == "pref" and p.value for p in node.params)
    if preferred and version == "3.0":
        types.append("pref")
    if types:
        line.type_paramlist = types
    if preferred and version != "3.0":
        line.pref_param = "1"


def assemble(nodes: Sequence[Node], version: str = DEFAULT_VERSION, prodid: str = DEFAULT_PRODID) -> str:
    """Wrap nodes in BEGIN/VERSION/END and return folded, escaped vCard text."""
    if version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersionError(version)

    v = vobject.vCard()
    v.setBehavior(_NodeOrderVCard)
    v.add('version'); v.version.value = version
    if prodid:
        v.add('prodid'); v.prodid.value = prodid

    for node in nodes:
        it = v.add(node.node_type.lower())
        if node.node_type == "ADR":
            if node.components is None or len(node.components) != 7:
                raise MalformedNodeError("ADR node needs its seven address components")
            box, extended, street, city, region, code, country = node.components
            it.value = Address(box=box, extended=extended, street=street, city=city,
                               region=region, code=code, country=country)
        else:
            it.value = node.value
            if node.node_type in _TEXT_PROPERTIES and it.behavior is None:
                it.behavior = VCardTextBehavior
        _apply_params(it, node, version)

    return v.serialize(validate=False)


# ── Public API ─────────────────────────────────────────────────────────────────

def serialize(data: RecordData, version: str = DEFAULT_VERSION, prodid: str = DEFAULT_PRODID) -> str:
    """Validate, build nodes, assemble. Nothing is returned if any step fails."""
    for name in MULTI_FIELD_NAMES:
        if getattr(data, name):
            check_entries(name, getattr(data, name))
    validate(data).raise_for_missing()
    nodes = build_nodes(data)
    logger.debug("assembling %d node(s) as vCard %s", len(nodes), version)
    return assemble(nodes, version=version, prodid=prodid)
