"""
MIT License

Line-oriented VCF reading and writing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, TextIO, Union

from ..core.metadata import MetadataRegistry
from ..core.variants import VariantRecord, VariantTable
from ..errors import MalformedLineError
from ..util.logging import get_logger
from ..util.text import open_text

LOGGER = get_logger(__name__)

HEADER = "header"
BODY = "body"


class VCFReader:
    """
    Two-state VCF parser: ``header`` until the first data line, ``body`` after.

    The switch is one-way. A ``#`` line met in the body is decoded as a data
    line like any other and is normally rejected as malformed.
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict
        self.state = HEADER
        self.registry = MetadataRegistry()
        self.samples: List[str] = []
        self.records: List[VariantRecord] = []
        self.rejected = 0

    def feed(self, line: str, lineno: Optional[int] = None) -> None:
        text = line.rstrip("\r\n")
        if not text.strip():
            return
        if self.state == HEADER:
            if text.startswith("##"):
                self.registry.ingest(text)
                return
            if text.startswith("#CHROM"):
                self.samples = text.split("\t")[9:]
                return
            if text.startswith("#"):
                LOGGER.debug("Ignoring header comment: %s", text)
                return
            self.registry.freeze()
            self.state = BODY
        try:
            self.records.append(VariantRecord.from_line(text, self.registry, lineno=lineno))
        except MalformedLineError as exc:
            if self.strict:
                raise
            self.rejected += 1
            LOGGER.warning("Skipping VCF record: %s", exc)

    def table(self) -> VariantTable:
        return VariantTable(self.registry, self.records, samples=self.samples, rejected=self.rejected)


def parse_vcf(lines: Iterable[str], strict: bool = False) -> VariantTable:
    """Decode VCF text lines into a :class:`VariantTable`."""
    reader = VCFReader(strict=strict)
    for lineno, line in enumerate(lines, 1):
        reader.feed(line, lineno=lineno)
    table = reader.table()
    LOGGER.debug("Decoded %s VCF records (%s rejected)", len(table), table.rejected)
    return table


def parse_vcf_string(text: str, strict: bool = False) -> VariantTable:
    return parse_vcf(text.splitlines(), strict=strict)


def read_vcf(path: Union[str, Path], strict: bool = False) -> VariantTable:
    """Load a VCF file (plain or gzip) into memory."""
    with open_text(path) as handle:
        table = parse_vcf(handle, strict=strict)
    LOGGER.info("Read %s records from %s (%s rejected)", len(table), path, table.rejected)
    return table


def iter_vcf_lines(table: VariantTable) -> Iterable[str]:
    yield from table.metadata
    yield "\t".join(table.header_columns())
    for record in table:
        yield record.to_line()


def format_vcf(table: VariantTable) -> str:
    return "".join(f"{line}\n" for line in iter_vcf_lines(table))


def write_vcf(table: VariantTable, target: Union[str, Path, TextIO]) -> None:
    """Write a table to a path or an open text handle."""
    if isinstance(target, (str, Path)):
        out_path = Path(target)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as handle:
            write_vcf(table, handle)
        return
    for line in iter_vcf_lines(table):
        target.write(line + "\n")


__all__ = [
    "VCFReader",
    "parse_vcf",
    "parse_vcf_string",
    "read_vcf",
    "format_vcf",
    "write_vcf",
]
