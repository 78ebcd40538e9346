"""
MIT License

Attribute-string grammars shared by GFF3 column 9 and VCF ``<...>`` headers.
"""

from __future__ import annotations

import re
from typing import Dict, Mapping
from urllib.parse import quote, unquote

RESERVED_KEYS = (
    "ID",
    "Name",
    "Parent",
    "Target",
    "Gap",
    "Derives_from",
    "Note",
    "Dbxref",
    "Ontology_term",
)

# Printable ASCII left literal when escaping; spaces, ";=&%" and controls are escaped.
_SAFE_CHARS = "!\"#$'()*+,/:<>?@[\\]^`{|}"

_DECLARATION_RE = re.compile(r'\s*([^=,\s]+)\s*=\s*("(?:[^"\\]|\\.)*"|[^,]*)\s*(?:,|$)')
_NEEDS_QUOTES = re.compile(r'[,\s"=<>]')


def decode_attributes(field: str) -> Dict[str, str]:
    """
    Parse a GFF3 attribute column into an ordered mapping.

    Pieces without ``=`` are kept with their own text as value, so ``Is_circular``
    becomes ``{"Is_circular": "Is_circular"}``.
    """

    out: Dict[str, str] = {}
    field = field.strip()
    if not field or field == ".":
        return out
    for chunk in field.split(";"):
        if not chunk.strip():
            continue
        if "=" in chunk:
            key, value = chunk.split("=", 1)
            value = unquote(value.strip())
        else:
            key = value = chunk.strip()
        out[key.strip()] = value
    return out


def encode_attributes(attributes: Mapping[str, str]) -> str:
    """Serialize attributes with the reserved keys first, percent-escaping values."""

    pieces = []
    for key in RESERVED_KEYS:
        value = attributes.get(key)
        if value is not None:
            pieces.append(f"{key}={quote(value, safe=_SAFE_CHARS)}")
    for key, value in attributes.items():
        if key in RESERVED_KEYS:
            continue
        pieces.append(f"{key}={quote(value, safe=_SAFE_CHARS)}")
    return ";".join(pieces) if pieces else "."


def decode_declaration(body: str) -> Dict[str, str]:
    """
    Parse the inside of a VCF ``##KEY=<...>`` block.

    Values may be double-quoted; commas inside quotes do not split and the
    surrounding quotes are removed.
    """

    out: Dict[str, str] = {}
    body = body.strip()
    if body.startswith("<") and body.endswith(">"):
        body = body[1:-1]
    for match in _DECLARATION_RE.finditer(body):
        key, value = match.group(1), match.group(2).strip()
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1].replace('\\"', '"').replace("\\\\", "\\")
        out[key] = value
        if match.end() >= len(body):
            break
    return out


def encode_declaration(fields: Mapping[str, str]) -> str:
    pieces = []
    for key, value in fields.items():
        if key == "Description" or _NEEDS_QUOTES.search(value):
            escaped = value.replace("\\", "\\\\").replace('"', '\\"')
            value = f'"{escaped}"'
        pieces.append(f"{key}={value}")
    return "<" + ",".join(pieces) + ">"


__all__ = [
    "RESERVED_KEYS",
    "decode_attributes",
    "encode_attributes",
    "decode_declaration",
    "encode_declaration",
]
