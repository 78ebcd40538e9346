"""
MIT License

FASTA reading and writing utilities for biofiles.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, TextIO, Union

from Bio import SeqIO

from ..util.logging import get_logger
from ..util.text import open_text, wrap_sequence

LOGGER = get_logger(__name__)

DEFAULT_WIDTH = 80


@dataclass(frozen=True)
class FastaRecord:
    """
    A single FASTA sequence.

    Attributes:
        id: First word of the header line
        description: Remainder of the header line, possibly empty
        sequence: Sequence text with line breaks removed
    """

    id: str
    description: str
    sequence: str

    def __len__(self) -> int:
        return len(self.sequence)

    def header(self) -> str:
        return f">{self.id} {self.description}" if self.description else f">{self.id}"

    def to_fasta(self, width: int = DEFAULT_WIDTH) -> str:
        """Format as FASTA text with the sequence wrapped at ``width`` characters."""
        lines = [self.header()]
        lines.extend(wrap_sequence(self.sequence, width))
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        shown = self.sequence if len(self.sequence) <= 10 else self.sequence[:10] + "..."
        return f"{self.header()}\n{shown}"


def _clean_lines(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        text = line.strip()
        if not text or text.startswith(";"):
            continue
        yield text + "\n"


def parse_fasta(lines: Iterable[str]) -> Iterator[FastaRecord]:
    """Parse FASTA lines; blank and ``;`` comment lines are ignored."""
    handle = StringIO("".join(_clean_lines(lines)))
    for seq_record in SeqIO.parse(handle, "fasta"):
        header = seq_record.description
        description = header[len(seq_record.id) :].strip() if header.startswith(seq_record.id) else header
        yield FastaRecord(id=seq_record.id, description=description, sequence=str(seq_record.seq))


class SequenceStore(Mapping[str, FastaRecord]):
    """Immutable ``id -> FastaRecord`` lookup; the first record wins on duplicate IDs."""

    def __init__(self, records: Iterable[FastaRecord] = ()) -> None:
        self._records: Dict[str, FastaRecord] = {}
        for record in records:
            if record.id in self._records:
                LOGGER.warning("Duplicate FASTA ID %s; keeping the first record", record.id)
                continue
            self._records[record.id] = record

    @classmethod
    def from_records(cls, records: Iterable[FastaRecord]) -> "SequenceStore":
        return cls(records)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "SequenceStore":
        return cls(parse_fasta(lines))

    @classmethod
    def from_string(cls, text: str) -> "SequenceStore":
        return cls.from_lines(text.splitlines())

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SequenceStore":
        with open_text(path) as handle:
            store = cls.from_lines(handle)
        LOGGER.info("Loaded %s sequences from %s", len(store), path)
        return store

    def __getitem__(self, seq_id: str) -> FastaRecord:
        return self._records[seq_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get_sequence(self, seq_id: str) -> Optional[str]:
        record = self._records.get(seq_id)
        return record.sequence if record is not None else None

    def get_length(self, seq_id: str) -> Optional[int]:
        sequence = self.get_sequence(seq_id)
        if sequence is None:
            return None
        return len(sequence)

    def iter_lengths(self) -> Iterator[tuple[str, int]]:
        for seq_id, record in self._records.items():
            yield seq_id, len(record.sequence)

    def records(self) -> List[FastaRecord]:
        return list(self._records.values())


def write_fasta(
    records: Iterable[FastaRecord],
    target: Union[str, Path, TextIO],
    width: int = DEFAULT_WIDTH,
) -> None:
    """Write records to a path or open handle, wrapping sequences at ``width``."""
    if isinstance(target, (str, Path)):
        out_path = Path(target)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as handle:
            write_fasta(records, handle, width=width)
        return
    for record in records:
        target.write(record.to_fasta(width))


__all__ = ["FastaRecord", "SequenceStore", "parse_fasta", "write_fasta", "DEFAULT_WIDTH"]
