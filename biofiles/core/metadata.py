"""
MIT License

VCF header metadata: field declarations and the registry that collects them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .datatypes import DataType, ValueType
from ..errors import MalformedLineError, RegistryFrozenError
from ..io.attributes import decode_declaration
from ..util.logging import get_logger

LOGGER = get_logger(__name__)

INFO = "INFO"
FORMAT = "FORMAT"
FILEFORMAT = "fileformat"

_DESCRIPTOR_KEYS = {"ID", "Number", "Type", "Description", "Source", "Version"}


@dataclass(frozen=True)
class FieldDescriptor:
    """Schema entry for one INFO or FORMAT field."""

    id: str
    value_type: ValueType
    number: str
    description: str = ""
    source: str = ""
    version: str = ""
    extra: Dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def kind(self) -> DataType:
        return DataType.of(self.value_type, self.number)

    @property
    def is_vector(self) -> bool:
        return self.kind.is_vector

    @classmethod
    def from_fields(cls, fields: Dict[str, str]) -> "FieldDescriptor":
        type_text = fields.get("Type", "")
        value_type = ValueType.parse(type_text)
        if value_type is None:
            LOGGER.warning("Unknown Type %r for %s; decoding as String", type_text, fields.get("ID", ""))
            value_type = ValueType.STRING
        return cls(
            id=fields["ID"],
            value_type=value_type,
            number=fields.get("Number", "."),
            description=fields.get("Description", ""),
            source=fields.get("Source", ""),
            version=fields.get("Version", ""),
            extra={key: value for key, value in fields.items() if key not in _DESCRIPTOR_KEYS},
        )


@dataclass(frozen=True)
class MetadataLine:
    """One ``##`` header line as read, with its structured fields when bracketed."""

    key: str
    value: str
    raw: str
    fields: Optional[Dict[str, str]] = None

    @property
    def is_structured(self) -> bool:
        return self.fields is not None

    @classmethod
    def parse(cls, line: str) -> "MetadataLine":
        text = line.rstrip("\r\n")
        if not text.startswith("##"):
            raise MalformedLineError("metadata line must start with ##", line=text)
        body = text[2:]
        if "=" not in body:
            return cls(key=body.strip(), value="", raw=text)
        key, value = body.split("=", 1)
        fields = None
        if value.startswith("<") and value.endswith(">"):
            fields = decode_declaration(value)
        return cls(key=key, value=value, raw=text, fields=fields)


class MetadataRegistry:
    """
    Schema accumulated from a VCF header.

    The registry is mutable while the header is read and frozen once the first
    body line is reached; record decoding only ever reads from it.
    """

    def __init__(self) -> None:
        self.fileformat: str = ""
        self.info: Dict[str, FieldDescriptor] = {}
        self.format: Dict[str, FieldDescriptor] = {}
        self.lines: List[MetadataLine] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def ingest(self, line: str) -> MetadataLine:
        """Record one ``##`` header line; INFO/FORMAT declarations extend the schema."""
        if self._frozen:
            raise RegistryFrozenError(f"Header line after body: {line.rstrip()}")
        meta = MetadataLine.parse(line)
        self.lines.append(meta)
        if meta.key == FILEFORMAT:
            self.fileformat = meta.value
        elif meta.key in (INFO, FORMAT) and meta.is_structured:
            self._declare(meta)
        return meta

    def _declare(self, meta: MetadataLine) -> None:
        assert meta.fields is not None
        if not meta.fields.get("ID"):
            LOGGER.warning("%s declaration without ID kept as plain metadata: %s", meta.key, meta.raw)
            return
        descriptor = FieldDescriptor.from_fields(meta.fields)
        table = self.info if meta.key == INFO else self.format
        if descriptor.id in table:
            LOGGER.debug("%s/%s redeclared; using the later declaration", meta.key, descriptor.id)
        table[descriptor.id] = descriptor

    def descriptor(self, section: str, key: str) -> Optional[FieldDescriptor]:
        if section == INFO:
            return self.info.get(key)
        if section == FORMAT:
            return self.format.get(key)
        raise ValueError(f"Unknown metadata section: {section}")

    def lookup_info(self, key: str) -> Optional[FieldDescriptor]:
        return self.info.get(key)

    def lookup_format(self, key: str) -> Optional[FieldDescriptor]:
        return self.format.get(key)

    def to_lines(self) -> List[str]:
        return [meta.raw for meta in self.lines]

    def __repr__(self) -> str:
        return (
            f"MetadataRegistry(fileformat={self.fileformat!r}, info={len(self.info)}, "
            f"format={len(self.format)}, lines={len(self.lines)}, frozen={self._frozen})"
        )


__all__ = ["FieldDescriptor", "MetadataLine", "MetadataRegistry", "INFO", "FORMAT", "FILEFORMAT"]
