"""
MIT License

High-level orchestration: decode inputs, export tables, write normalized files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .features import FeatureGraph
from .variants import VariantTable
from .window import Window, extract_windows
from ..io.fasta import DEFAULT_WIDTH, SequenceStore, write_fasta
from ..io.gff import read_gff3, write_gff3
from ..io.tsv import write_jsonl, write_table, write_tables
from ..io.vcf import read_vcf, write_vcf
from ..util.logging import get_logger

LOGGER = get_logger(__name__)

VERSION = "0.1.0"


@dataclass
class RunConfig:
    inputs: List[str]
    out: str
    emit: str = "tsv"
    strict: bool = False
    width: int = DEFAULT_WIDTH
    fasta: Optional[str] = None
    left: int = 0
    right: int = 0
    types: List[str] = field(default_factory=list)


@dataclass
class VCFRunResult:
    tables: Dict[str, VariantTable]
    variants: pd.DataFrame
    files: List[str]


@dataclass
class GFFRunResult:
    graph: FeatureGraph
    files: List[str]


def _stem(path: str) -> str:
    name = Path(path).name
    for suffix in (".gz", ".vcf", ".gff3", ".gff"):
        if name.endswith(suffix):
            name = name[: -len(suffix)]
    return name


def _run_metadata(command: str, config: RunConfig, files: List[str], **counts: int) -> Dict[str, object]:
    return {
        "command": command,
        "version": VERSION,
        "date_utc": datetime.now(timezone.utc).isoformat(),
        "inputs": config.inputs,
        "strict": config.strict,
        "files": files,
        **counts,
    }


def run_vcf(config: RunConfig) -> VCFRunResult:
    """
    Decode each VCF input with its own registry, then merge the record tables.
    """

    out_dir = Path(config.out)
    tables: Dict[str, VariantTable] = {}
    frames = []
    files: List[str] = []
    for path in config.inputs:
        table = read_vcf(path, strict=config.strict)
        tables[path] = table
        frame = table.to_dataframe()
        frame.insert(0, "source_file", path)
        frames.append(frame)
        normalized = out_dir / f"{_stem(path)}.normalized.vcf"
        write_vcf(table, normalized)
        files.append(str(normalized))

    variants = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()
    files.append(str(write_table(variants, out_dir / f"variants.{config.emit}", fmt=config.emit)))
    write_jsonl(
        [
            _run_metadata(
                "vcf",
                config,
                files,
                records=len(variants),
                rejected=sum(table.rejected for table in tables.values()),
            )
        ],
        out_dir / "run.jsonl",
    )
    LOGGER.info("Wrote %s records from %s file(s) to %s", len(variants), len(tables), out_dir)
    return VCFRunResult(tables=tables, variants=variants, files=files)


def run_gff(config: RunConfig) -> GFFRunResult:
    if len(config.inputs) != 1:
        raise ValueError("GFF3 mode takes exactly one input file")
    path = config.inputs[0]
    out_dir = Path(config.out)
    graph = read_gff3(path, strict=config.strict)

    written = write_tables(
        {"features": graph.to_dataframe(), "children": graph.edges_dataframe()},
        out_dir,
        fmt=config.emit,
    )
    files = [str(p) for p in written.values()]
    normalized = out_dir / f"{_stem(path)}.normalized.gff3"
    write_gff3(graph, normalized, width=config.width)
    files.append(str(normalized))
    if len(graph.sequences):
        fasta_path = out_dir / "sequences.fasta"
        write_fasta(graph.sequences.values(), fasta_path, width=config.width)
        files.append(str(fasta_path))

    write_jsonl(
        [
            _run_metadata(
                "gff",
                config,
                files,
                features=len(graph),
                skipped=graph.skipped,
                unresolved_parents=graph.unresolved,
            )
        ],
        out_dir / "run.jsonl",
    )
    LOGGER.info("Wrote %s features to %s", len(graph), out_dir)
    return GFFRunResult(graph=graph, files=files)


def run_window(config: RunConfig) -> List[Window]:
    """Write flanking windows for the GFF3 features as FASTA to ``config.out``."""
    if len(config.inputs) != 1:
        raise ValueError("Window mode takes exactly one GFF3 file")
    graph = read_gff3(config.inputs[0], strict=config.strict)
    store = SequenceStore.from_path(config.fasta) if config.fasta else graph.sequences
    if not len(store):
        raise ValueError("No sequences available: pass --fasta or embed a ##FASTA section")
    features = [feature for feature in graph if not config.types or feature.type in config.types]
    windows = list(extract_windows(features, store, left=config.left, right=config.right))
    write_fasta((window.to_record() for window in windows), config.out, width=config.width)
    LOGGER.info("Extracted %s of %s windows into %s", len(windows), len(features), config.out)
    return windows


__all__ = ["RunConfig", "VCFRunResult", "GFFRunResult", "run_vcf", "run_gff", "run_window", "VERSION"]
