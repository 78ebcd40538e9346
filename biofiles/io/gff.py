"""
MIT License

GFF3 parsing and writing, including the optional ``##FASTA`` section.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, TextIO, Union

from ..core.features import Feature, FeatureGraph
from ..errors import MalformedLineError
from ..util.logging import get_logger
from ..util.text import open_text
from .fasta import DEFAULT_WIDTH, SequenceStore

LOGGER = get_logger(__name__)

FASTA_DIRECTIVE = "##FASTA"
VERSION_DIRECTIVE = "##gff-version"


def parse_gff3(lines: Iterable[str], strict: bool = False) -> FeatureGraph:
    """
    Decode GFF3 lines into a linked :class:`FeatureGraph`.

    Everything after a ``##FASTA`` line is read as FASTA and never as features.
    Rows without nine columns are skipped unless ``strict`` is set.
    """

    features: List[Feature] = []
    directives: List[str] = []
    fasta_lines: List[str] = []
    in_fasta = False
    skipped = 0
    for lineno, line in enumerate(lines, 1):
        if in_fasta:
            fasta_lines.append(line)
            continue
        text = line.rstrip("\r\n")
        if not text.strip():
            continue
        if text.startswith("#"):
            if text.startswith(FASTA_DIRECTIVE):
                in_fasta = True
            elif text.startswith("##"):
                directives.append(text)
            else:
                LOGGER.debug("Dropping comment line %s", lineno)
            continue
        try:
            features.append(Feature.from_line(text, lineno=lineno))
        except MalformedLineError as exc:
            if strict:
                raise
            skipped += 1
            LOGGER.warning("Skipping GFF3 record: %s", exc)

    sequences = SequenceStore.from_lines(fasta_lines) if fasta_lines else SequenceStore()
    graph = FeatureGraph(features, directives=directives, sequences=sequences)
    graph.skipped = skipped
    return graph


def parse_gff3_string(text: str, strict: bool = False) -> FeatureGraph:
    return parse_gff3(text.splitlines(), strict=strict)


def read_gff3(path: Union[str, Path], strict: bool = False) -> FeatureGraph:
    """Load a GFF3 file into memory."""
    with open_text(path) as handle:
        graph = parse_gff3(handle, strict=strict)
    LOGGER.info(
        "Read %s features and %s sequences from %s (%s skipped)",
        len(graph),
        len(graph.sequences),
        path,
        graph.skipped,
    )
    return graph


def iter_gff3_lines(graph: FeatureGraph, width: int = DEFAULT_WIDTH) -> Iterable[str]:
    if not any(directive.startswith(VERSION_DIRECTIVE) for directive in graph.directives):
        yield f"{VERSION_DIRECTIVE} 3"
    yield from graph.directives
    for feature in graph:
        yield feature.to_line()
    if len(graph.sequences):
        yield FASTA_DIRECTIVE
        for record in graph.sequences.values():
            yield record.to_fasta(width).rstrip("\n")


def format_gff3(graph: FeatureGraph, width: int = DEFAULT_WIDTH) -> str:
    return "".join(f"{line}\n" for line in iter_gff3_lines(graph, width=width))


def write_gff3(
    graph: FeatureGraph,
    target: Union[str, Path, TextIO],
    width: int = DEFAULT_WIDTH,
) -> None:
    """Write features, directives and embedded sequences to a path or handle."""
    if isinstance(target, (str, Path)):
        out_path = Path(target)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as handle:
            write_gff3(graph, handle, width=width)
        return
    for line in iter_gff3_lines(graph, width=width):
        target.write(line + "\n")


__all__ = [
    "parse_gff3",
    "parse_gff3_string",
    "read_gff3",
    "format_gff3",
    "write_gff3",
    "FASTA_DIRECTIVE",
]
