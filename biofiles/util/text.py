"""
MIT License

Text helpers for biofiles.
"""

from __future__ import annotations

import gzip
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Union


def open_text(path: Union[str, Path], mode: str = "rt") -> IO[str]:
    """Open a text file, handling gzip compression if needed."""
    text_path = Path(path)
    if text_path.suffix == ".gz":
        return gzip.open(text_path, mode, encoding="utf-8")  # type: ignore[return-value]
    return text_path.open(mode.replace("t", ""), encoding="utf-8")


def wrap_sequence(sequence: str, width: int = 80) -> Iterator[str]:
    """Yield fixed-width chunks of a sequence; nothing for an empty one."""
    if width <= 0:
        raise ValueError(f"Line width must be positive: {width}")
    for start in range(0, len(sequence), width):
        yield sequence[start : start + width]


def comma_join(items: Iterable[object]) -> str:
    """Join values with commas, as used by VCF vectors and GFF3 multi-values."""
    return ",".join(str(item) for item in items)


def split_columns(line: str) -> List[str]:
    """Split a tab-delimited data line after dropping the line terminator."""
    return line.rstrip("\r\n").split("\t")


__all__ = ["open_text", "wrap_sequence", "comma_join", "split_columns"]
