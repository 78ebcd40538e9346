"""
MIT License

Tabular export of decoded VCF records and GFF3 features.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Mapping

import pandas as pd

FORMATS = ("tsv", "csv", "jsonl")


def table_name(stem: str, fmt: str) -> str:
    return f"{stem}.{fmt}"


def write_table(df: pd.DataFrame, path: str | Path, fmt: str = "tsv") -> Path:
    """
    Persist a DataFrame as ``tsv``, ``csv`` or ``jsonl``.

    Missing values (absent QUAL or score) are written as empty cells, or as
    ``null`` in JSON lines.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported format: {fmt}")
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "jsonl":
        clean = df.astype(object).where(df.notna(), None)
        with out_path.open("w", encoding="utf-8") as handle:
            for record in clean.to_dict(orient="records"):
                handle.write(json.dumps(record, default=str) + "\n")
    else:
        df.to_csv(out_path, sep="\t" if fmt == "tsv" else ",", index=False)
    return out_path


def write_tables(frames: Mapping[str, pd.DataFrame], out_dir: str | Path, fmt: str = "tsv") -> Dict[str, Path]:
    """Write several named frames into ``out_dir``; returns stem -> path."""
    written: Dict[str, Path] = {}
    for stem, df in frames.items():
        written[stem] = write_table(df, Path(out_dir) / table_name(stem, fmt), fmt=fmt)
    return written


def write_jsonl(rows: List[Mapping[str, object]], path: str | Path) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8") as handle:
        for row in rows:
            handle.write(json.dumps(row, default=str) + "\n")
    return out_path


__all__ = ["write_table", "write_tables", "write_jsonl", "table_name", "FORMATS"]
