"""
MIT License

GFF3 features and the parent/child graph linking them.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Union

import pandas as pd

from ..errors import MalformedLineError
from ..io.attributes import decode_attributes, encode_attributes
from ..io.fasta import SequenceStore
from ..util.logging import get_logger
from ..util.text import split_columns

LOGGER = get_logger(__name__)

STRANDS = ("+", "-", ".", "?")
PHASES = ("0", "1", "2", ".")


def _parse_coordinate(text: str) -> int:
    # Unparsable coordinates decode as 0 so the row is still kept.
    if text.isascii() and text.isdecimal():
        return int(text)
    LOGGER.debug("Unparsable coordinate %r decoded as 0", text)
    return 0


def _parse_score(text: str) -> Optional[float]:
    if text == ".":
        return None
    try:
        return float(text)
    except ValueError:
        return None


@dataclass
class Feature:
    """Representation of a single GFF3 record."""

    seqid: str
    source: str
    type: str
    start: int
    end: int
    score: Optional[float]
    strand: str
    phase: str
    attributes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_line(cls, line: str, lineno: Optional[int] = None) -> "Feature":
        parts = split_columns(line)
        if len(parts) != 9:
            raise MalformedLineError(f"expected 9 columns, found {len(parts)}", line=line, lineno=lineno)
        seqid, source, ftype, start, end, score, strand, phase, attrs = parts
        if strand not in STRANDS or phase not in PHASES:
            LOGGER.debug("Non-standard strand/phase %r/%r kept verbatim", strand, phase)
        return cls(
            seqid=seqid,
            source=source,
            type=ftype,
            start=_parse_coordinate(start),
            end=_parse_coordinate(end),
            score=_parse_score(score),
            strand=strand,
            phase=phase,
            attributes=decode_attributes(attrs),
        )

    def to_line(self) -> str:
        score = repr(self.score) if self.score is not None else "."
        return "\t".join(
            [
                self.seqid,
                self.source,
                self.type,
                str(self.start),
                str(self.end),
                score,
                self.strand,
                self.phase,
                encode_attributes(self.attributes),
            ]
        )

    # Reserved attribute shortcuts

    @property
    def id(self) -> str:
        return self.attributes.get("ID", "")

    @property
    def name(self) -> str:
        return self.attributes.get("Name", "")

    @property
    def alias(self) -> str:
        return self.attributes.get("Alias", "")

    @property
    def parent(self) -> str:
        return self.attributes.get("Parent", "")

    @property
    def parents(self) -> List[str]:
        return [value for value in self.parent.split(",") if value]

    @property
    def target(self) -> str:
        return self.attributes.get("Target", "")

    @property
    def gap(self) -> str:
        return self.attributes.get("Gap", "")

    @property
    def derives_from(self) -> str:
        return self.attributes.get("Derives_from", "")

    @property
    def note(self) -> str:
        return self.attributes.get("Note", "")

    @property
    def dbxref(self) -> str:
        return self.attributes.get("Dbxref", "")

    @property
    def ontology_term(self) -> str:
        return self.attributes.get("Ontology_term", "")

    @property
    def is_gene(self) -> bool:
        return self.type == "gene"

    @property
    def has_score(self) -> bool:
        return self.score is not None

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"({self.id}, {self.type}, {self.seqid}, {self.start}, {self.end}, {self.strand})"


FeatureRef = Union[Feature, int, str]


class FeatureGraph:
    """
    Arena of features in file order with their Parent links resolved.

    Linking runs once, after every feature is in the arena: an ``ID -> position``
    index is built first, then every feature is appended to the child list of
    each parent it names. Parents that are never declared are ignored, and
    cycles are not detected.
    """

    def __init__(
        self,
        features: Iterable[Feature] = (),
        directives: Sequence[str] = (),
        sequences: Optional[SequenceStore] = None,
    ) -> None:
        self.features: List[Feature] = list(features)
        self.directives: List[str] = list(directives)
        self.sequences = sequences if sequences is not None else SequenceStore()
        self.index: Dict[str, int] = {}
        self._children: Dict[int, List[int]] = defaultdict(list)
        self._parents: Dict[int, List[int]] = defaultdict(list)
        self.unresolved = 0
        self.skipped = 0
        self.link()

    def link(self) -> None:
        self.index.clear()
        self._children.clear()
        self._parents.clear()
        self.unresolved = 0
        for position, feature in enumerate(self.features):
            if feature.id and feature.id not in self.index:
                self.index[feature.id] = position
        for position, feature in enumerate(self.features):
            for parent_id in feature.parents:
                parent_position = self.index.get(parent_id)
                if parent_position is None:
                    self.unresolved += 1
                    LOGGER.debug("Parent %s of %s not found; leaving it unlinked", parent_id, feature)
                    continue
                self._children[parent_position].append(position)
                self._parents[position].append(parent_position)

    def _position(self, ref: FeatureRef) -> Optional[int]:
        if isinstance(ref, int):
            return ref
        if isinstance(ref, str):
            return self.index.get(ref)
        for position, feature in enumerate(self.features):
            if feature is ref:
                return position
        return None

    def get(self, feature_id: str) -> Optional[Feature]:
        position = self.index.get(feature_id)
        return self.features[position] if position is not None else None

    def children(self, ref: FeatureRef) -> List[Feature]:
        """Children in file order; a feature without an ID never has any."""
        position = self._position(ref)
        if position is None:
            return []
        return [self.features[child] for child in self._children.get(position, [])]

    def parents_of(self, ref: FeatureRef) -> List[Feature]:
        position = self._position(ref)
        if position is None:
            return []
        return [self.features[parent] for parent in self._parents.get(position, [])]

    def roots(self) -> List[Feature]:
        return [feature for position, feature in enumerate(self.features) if not self._parents.get(position)]

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __getitem__(self, position: int) -> Feature:
        return self.features[position]

    def to_dataframe(self) -> pd.DataFrame:
        columns = ["seqid", "source", "type", "start", "end", "score", "strand", "phase", "id", "parent", "n_children"]
        rows = []
        for position, feature in enumerate(self.features):
            rows.append(
                {
                    "seqid": feature.seqid,
                    "source": feature.source,
                    "type": feature.type,
                    "start": feature.start,
                    "end": feature.end,
                    "score": feature.score,
                    "strand": feature.strand,
                    "phase": feature.phase,
                    "id": feature.id,
                    "parent": feature.parent,
                    "n_children": len(self._children.get(position, [])),
                }
            )
        return pd.DataFrame(rows, columns=columns)

    def edges_dataframe(self) -> pd.DataFrame:
        """Parent/child pairs, one row per link, in child file order."""
        rows = []
        for position, feature in enumerate(self.features):
            for parent in self._parents.get(position, []):
                rows.append(
                    {
                        "parent_id": self.features[parent].id,
                        "child_id": feature.id,
                        "child_type": feature.type,
                        "child_start": feature.start,
                        "child_end": feature.end,
                    }
                )
        return pd.DataFrame(rows, columns=["parent_id", "child_id", "child_type", "child_start", "child_end"])


__all__ = ["Feature", "FeatureGraph", "STRANDS", "PHASES"]
