"""
MIT License

Exception taxonomy shared by the FASTA, GFF3 and VCF decoders.
"""

from __future__ import annotations

from typing import Optional


class BiofilesError(ValueError):
    """Base class for decode failures raised by biofiles."""


class MalformedLineError(BiofilesError):
    """A data row does not have the shape its format requires."""

    def __init__(self, message: str, line: str = "", lineno: Optional[int] = None) -> None:
        self.line = line
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


class FieldCoercionError(BiofilesError):
    """A single field could not be decoded as its declared type."""

    def __init__(self, field_id: str, value_type: str, raw: str) -> None:
        self.field_id = field_id
        self.value_type = value_type
        self.raw = raw
        label = field_id or "<untyped>"
        super().__init__(f"Cannot decode {label}={raw!r} as {value_type}")


class RegistryFrozenError(BiofilesError):
    """Header metadata arrived after the registry was frozen."""


__all__ = ["BiofilesError", "MalformedLineError", "FieldCoercionError", "RegistryFrozenError"]
