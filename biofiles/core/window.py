"""
MIT License

Flanking sequence windows around GFF3 features.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Optional

from .features import Feature
from ..io.fasta import FastaRecord
from ..util.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class Window:
    id: str
    description: str
    start: int
    end: int
    sequence: str

    def to_record(self) -> FastaRecord:
        return FastaRecord(id=self.id, description=self.description, sequence=self.sequence)


def feature_label(feature: Feature) -> str:
    """The feature ID, or a synthesized ``seqid_source_type_start_end`` label."""
    if feature.id:
        return feature.id
    return f"{feature.seqid}_{feature.source}_{feature.type}_{feature.start}_{feature.end}"


def _clamp(value: int, upper: int) -> int:
    return max(0, min(value, upper))


def extract_window(
    feature: Feature,
    store: Mapping[str, FastaRecord],
    left: int = 0,
    right: int = 0,
) -> Optional[Window]:
    """
    Slice the feature plus ``left``/``right`` flanking bases from its sequence.

    Bounds are zero-based, ``start - 1 - left`` and ``end + right``, each clamped
    to ``[0, len - 1]``. Returns ``None`` when the store lacks ``feature.seqid``.
    """

    target = store.get(feature.seqid)
    if target is None:
        return None
    last = len(target.sequence) - 1
    wstart = _clamp(feature.start - 1 - left, last)
    wend = _clamp(feature.end + right, last)
    return Window(
        id=feature_label(feature),
        description=f"{feature.seqid}:{wstart + 1}..{wend}",
        start=wstart,
        end=wend,
        sequence=target.sequence[wstart:wend],
    )


def extract_windows(
    features: Iterable[Feature],
    store: Mapping[str, FastaRecord],
    left: int = 0,
    right: int = 0,
) -> Iterator[Window]:
    for feature in features:
        window = extract_window(feature, store, left=left, right=right)
        if window is None:
            LOGGER.debug("No sequence %s for feature %s", feature.seqid, feature_label(feature))
            continue
        yield window


__all__ = ["Window", "extract_window", "extract_windows", "feature_label"]
