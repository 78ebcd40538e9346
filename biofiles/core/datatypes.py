"""
MIT License

Typed values for VCF INFO and FORMAT fields.

A header declaration fixes a field's base type and its Number (arity); the pair
selects one tag of the closed :class:`DataType` set, and the decoder below has
exactly one branch per base type.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple, Union

from ..errors import FieldCoercionError
from ..util.logging import get_logger
from ..util.text import comma_join

if TYPE_CHECKING:
    from .metadata import FieldDescriptor

LOGGER = get_logger(__name__)

_INTEGER_RE = re.compile(r"[+-]?\d+")

Scalar = Union[str, int, float, bool]


class ValueType(str, Enum):
    """Base types a VCF header may declare."""

    STRING = "String"
    INTEGER = "Integer"
    FLOAT = "Float"
    CHARACTER = "Character"
    FLAG = "Flag"

    @classmethod
    def parse(cls, text: str) -> Optional["ValueType"]:
        for member in cls:
            if member.value == text:
                return member
        return None


class DataType(Enum):
    STRING = "String"
    STRING_VECTOR = "String[]"
    INTEGER = "Integer"
    INTEGER_VECTOR = "Integer[]"
    FLOAT = "Float"
    FLOAT_VECTOR = "Float[]"
    CHARACTER = "Character"
    CHARACTER_VECTOR = "Character[]"
    FLAG = "Flag"

    @classmethod
    def of(cls, value_type: ValueType, number: str) -> "DataType":
        """Derive the tag from a declared type and Number."""
        if value_type is ValueType.FLAG:
            return cls.FLAG
        vector = number != "1"
        if value_type is ValueType.INTEGER:
            return cls.INTEGER_VECTOR if vector else cls.INTEGER
        if value_type is ValueType.FLOAT:
            return cls.FLOAT_VECTOR if vector else cls.FLOAT
        if value_type is ValueType.CHARACTER:
            return cls.CHARACTER_VECTOR if vector else cls.CHARACTER
        if value_type is ValueType.STRING:
            return cls.STRING_VECTOR if vector else cls.STRING
        raise ValueError(f"Unhandled value type: {value_type!r}")

    @property
    def is_vector(self) -> bool:
        return self.value.endswith("[]")

    @property
    def base(self) -> ValueType:
        return ValueType(self.value.rstrip("[]"))


@dataclass(frozen=True)
class TypedValue:
    """A decoded INFO or FORMAT value tagged with its :class:`DataType`."""

    kind: DataType
    value: Union[Scalar, Tuple[Scalar, ...]]

    @property
    def is_vector(self) -> bool:
        return self.kind.is_vector

    def encode(self) -> str:
        """Render the value back to VCF text."""
        if self.kind is DataType.FLAG:
            return ""
        if self.kind.is_vector:
            return comma_join(_format_scalar(item) for item in self.value)  # type: ignore[union-attr]
        return _format_scalar(self.value)  # type: ignore[arg-type]


MISSING = TypedValue(DataType.STRING, ".")


def _format_scalar(value: Scalar) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Inf" if value > 0 else "-Inf"
        return repr(value)
    return str(value)


def _parse_integer(text: str) -> int:
    if not _INTEGER_RE.fullmatch(text):
        raise ValueError(text)
    return int(text)


def _parse_float(text: str) -> float:
    if "_" in text or text != text.strip():
        raise ValueError(text)
    return float(text)


def _parse_character(text: str) -> str:
    if not text:
        raise ValueError("empty character")
    return text[0]


def _scalar_parser(value_type: ValueType) -> Callable[[str], Scalar]:
    if value_type is ValueType.INTEGER:
        return _parse_integer
    if value_type is ValueType.FLOAT:
        return _parse_float
    if value_type is ValueType.CHARACTER:
        return _parse_character
    if value_type is ValueType.STRING:
        return str
    raise ValueError(f"No scalar parser for {value_type!r}")


def flag() -> TypedValue:
    return TypedValue(DataType.FLAG, True)


def decode_value(descriptor: Optional["FieldDescriptor"], raw: str) -> TypedValue:
    """
    Decode ``raw`` according to a header declaration.

    Parameters
    ----------
    descriptor:
        The INFO/FORMAT declaration for the field, or ``None`` when the header
        never declared it; undeclared fields decode as an untyped String.
    raw:
        The text found in the data line.

    Raises
    ------
    FieldCoercionError
        When the text (or, for vectors, any one element) does not parse as the
        declared base type. Vectors never decode partially.
    """

    if descriptor is None:
        return TypedValue(DataType.STRING, raw)
    kind = descriptor.kind
    if kind is DataType.FLAG:
        return flag()
    parse = _scalar_parser(kind.base)
    try:
        if kind.is_vector:
            items: List[Scalar] = [parse(part) for part in raw.split(",")]
            return TypedValue(kind, tuple(items))
        return TypedValue(kind, parse(raw))
    except ValueError as exc:
        raise FieldCoercionError(descriptor.id, kind.value, raw) from exc


def decode_field(descriptor: Optional["FieldDescriptor"], raw: str) -> TypedValue:
    """Like :func:`decode_value`, but a coercion failure yields an untyped String."""
    try:
        return decode_value(descriptor, raw)
    except FieldCoercionError as exc:
        LOGGER.debug("%s; keeping raw text", exc)
        return TypedValue(DataType.STRING, raw)


__all__ = [
    "ValueType",
    "DataType",
    "TypedValue",
    "MISSING",
    "flag",
    "decode_value",
    "decode_field",
]
