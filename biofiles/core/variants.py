"""
MIT License

VCF data rows decoded against a header registry, and the table that owns them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .datatypes import MISSING, DataType, TypedValue, decode_field, flag
from .metadata import MetadataRegistry
from ..errors import MalformedLineError
from ..util.logging import get_logger
from ..util.text import split_columns

LOGGER = get_logger(__name__)

FIXED_COLUMNS = ["CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"]


@dataclass
class VariantRecord:
    """One VCF data line; INFO and sample values are typed by the header."""

    chrom: str
    pos: int
    id: str
    ref: str
    alt: str
    qual: Optional[float]
    filter: str
    info: Dict[str, TypedValue] = field(default_factory=dict)
    format: Optional[List[str]] = None
    genotypes: List[Dict[str, TypedValue]] = field(default_factory=list)

    @property
    def has_qual(self) -> bool:
        return self.qual is not None

    @classmethod
    def from_line(cls, line: str, registry: MetadataRegistry, lineno: Optional[int] = None) -> "VariantRecord":
        parts = split_columns(line)
        if len(parts) < 8:
            raise MalformedLineError(f"expected at least 8 columns, found {len(parts)}", line=line, lineno=lineno)
        chrom, pos_text, var_id, ref, alt, qual_text, filt, info_text = parts[:8]
        try:
            pos = int(pos_text)
        except ValueError:
            raise MalformedLineError(f"invalid POS {pos_text!r}", line=line, lineno=lineno) from None

        record = cls(
            chrom=chrom,
            pos=pos,
            id=var_id,
            ref=ref,
            alt=alt,
            qual=_parse_qual(qual_text),
            filter=filt,
            info=decode_info(info_text, registry),
        )
        if len(parts) > 8:
            record.format = parts[8].split(":")
            record.genotypes = [decode_sample(column, record.format, registry) for column in parts[9:]]
        return record

    def to_line(self) -> str:
        columns = [
            self.chrom,
            str(self.pos),
            self.id,
            self.ref,
            self.alt,
            f"{self.qual:f}" if self.qual is not None else ".",
            self.filter,
            encode_info(self.info),
        ]
        if self.format is not None:
            columns.append(":".join(self.format))
            for sample in self.genotypes:
                columns.append(":".join(sample[key].encode() for key in self.format))
        return "\t".join(columns)

    def __str__(self) -> str:
        return f"({self.chrom}, {self.pos}, {self.id}, {self.ref}, {self.alt})"


def _parse_qual(text: str) -> Optional[float]:
    if text == ".":
        return None
    try:
        return float(text)
    except ValueError:
        LOGGER.debug("Unparsable QUAL %r treated as missing", text)
        return None


def decode_info(text: str, registry: MetadataRegistry) -> Dict[str, TypedValue]:
    """Decode the INFO column; pieces without ``=`` are flags."""
    info: Dict[str, TypedValue] = {}
    text = text.strip()
    if not text or text == ".":
        return info
    for piece in text.split(";"):
        if not piece:
            continue
        if "=" not in piece:
            info[piece] = flag()
            continue
        key, raw = piece.split("=", 1)
        info[key] = decode_field(registry.lookup_info(key), raw)
    return info


def encode_info(info: Dict[str, TypedValue]) -> str:
    if not info:
        return "."
    pieces = []
    for key, value in info.items():
        if value.kind is DataType.FLAG:
            pieces.append(key)
        else:
            pieces.append(f"{key}={value.encode()}")
    return ";".join(pieces)


def decode_sample(column: str, keys: Sequence[str], registry: MetadataRegistry) -> Dict[str, TypedValue]:
    """
    Decode one sample column positionally against the FORMAT keys.

    A literal ``.`` is kept as the untyped missing placeholder whatever the
    declared type. Trailing values a sample omits are filled with that
    placeholder; values beyond the FORMAT keys are dropped.
    """

    values = column.split(":")
    if len(values) > len(keys):
        LOGGER.debug("Sample %r has more values than FORMAT keys %s; extra values dropped", column, keys)
    sample: Dict[str, TypedValue] = {}
    for position, key in enumerate(keys):
        raw = values[position] if position < len(values) else "."
        if raw == ".":
            sample[key] = MISSING
        else:
            sample[key] = decode_field(registry.lookup_format(key), raw)
    return sample


class VariantTable:
    """
    Records of one VCF document plus the registry their values were typed with.

    Built once by the reader; the registry is frozen and the record sequence is
    a tuple.
    """

    def __init__(
        self,
        registry: MetadataRegistry,
        records: Sequence[VariantRecord],
        samples: Sequence[str] = (),
        rejected: int = 0,
    ) -> None:
        registry.freeze()
        self.registry = registry
        self.records: Tuple[VariantRecord, ...] = tuple(records)
        self.samples: Tuple[str, ...] = tuple(samples)
        self.rejected = rejected

    @property
    def fileformat(self) -> str:
        return self.registry.fileformat

    @property
    def metadata(self) -> List[str]:
        return self.registry.to_lines()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[VariantRecord]:
        return iter(self.records)

    def __getitem__(self, position: int) -> VariantRecord:
        return self.records[position]

    def header_columns(self) -> List[str]:
        columns = ["#" + FIXED_COLUMNS[0], *FIXED_COLUMNS[1:]]
        has_format = bool(self.samples) or any(record.format is not None for record in self.records)
        if has_format:
            columns.append("FORMAT")
            columns.extend(self.samples)
        return columns

    def to_dataframe(self) -> pd.DataFrame:
        """One row per record with INFO re-encoded and QUAL as NaN when absent."""
        columns = ["chrom", "pos", "id", "ref", "alt", "qual", "filter", "info", "format", "n_samples"]
        rows = []
        for record in self.records:
            rows.append(
                {
                    "chrom": record.chrom,
                    "pos": record.pos,
                    "id": record.id,
                    "ref": record.ref,
                    "alt": record.alt,
                    "qual": record.qual if record.qual is not None else np.nan,
                    "filter": record.filter,
                    "info": encode_info(record.info),
                    "format": ":".join(record.format) if record.format is not None else "",
                    "n_samples": len(record.genotypes),
                }
            )
        return pd.DataFrame(rows, columns=columns)


__all__ = [
    "VariantRecord",
    "VariantTable",
    "decode_info",
    "encode_info",
    "decode_sample",
    "FIXED_COLUMNS",
]
