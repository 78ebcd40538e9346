"""
MIT License

Command-line interface for biofiles.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .core.pipeline import RunConfig, run_gff, run_vcf, run_window
from .io.fasta import DEFAULT_WIDTH
from .io.tsv import FORMATS
from .util.logging import get_logger, set_level

LOGGER = get_logger()

ARTIFACTS = {
    "variants": "variants",
    "features": "features",
    "children": "children",
    "sequences": "sequences.fasta",
    "run": "run.jsonl",
}


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"Expected a non-negative integer: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="biofiles", description="Decode and re-serialize FASTA, GFF3 and VCF")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-field fallbacks")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    subparsers = parser.add_subparsers(dest="command")

    vcf_parser = subparsers.add_parser("vcf", help="Decode one or more VCF files")
    vcf_parser.set_defaults(handler=run_vcf_command)
    vcf_parser.add_argument("--in", dest="inputs", nargs="+", required=True, help="VCF files (plain or .gz)")
    vcf_parser.add_argument("--out", required=True, help="Output directory")
    add_common_args(vcf_parser)

    gff_parser = subparsers.add_parser("gff", help="Decode a GFF3 file and its feature graph")
    gff_parser.set_defaults(handler=run_gff_command)
    gff_parser.add_argument("--gff", required=True, help="GFF3 file (plain or .gz)")
    gff_parser.add_argument("--out", required=True, help="Output directory")
    add_common_args(gff_parser)

    window_parser = subparsers.add_parser("window", help="Extract flanking windows around GFF3 features")
    window_parser.set_defaults(handler=run_window_command)
    window_parser.add_argument("--gff", required=True, help="GFF3 file")
    window_parser.add_argument("--fasta", help="FASTA file; defaults to the GFF3 ##FASTA section")
    window_parser.add_argument("--left", type=_non_negative, default=0, help="Bases upstream of start")
    window_parser.add_argument("--right", type=_non_negative, default=0, help="Bases downstream of end")
    window_parser.add_argument("--type", dest="types", action="append", default=[], help="Only this feature type")
    window_parser.add_argument("--out", required=True, help="Output FASTA path")
    add_common_args(window_parser)

    dump_parser = subparsers.add_parser("dump", help="Print an artifact from an output folder")
    dump_parser.set_defaults(handler=run_dump_command)
    dump_parser.add_argument("--out", required=True, help="Run output folder")
    dump_parser.add_argument("--what", required=True, choices=sorted(ARTIFACTS))
    dump_parser.add_argument("--emit", choices=FORMATS, default="tsv")
    return parser


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--emit", choices=FORMATS, default="tsv")
    parser.add_argument("--strict", action="store_true", help="Fail on the first malformed row")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="FASTA line width")


def dispatch(args: argparse.Namespace) -> None:
    if args.verbose:
        set_level(logging.DEBUG)
    elif args.quiet:
        set_level(logging.WARNING)
    if getattr(args, "handler", None) is None:
        raise SystemExit("No command given; choose one of vcf, gff, window, dump")
    LOGGER.debug("Running %s", args.command)
    try:
        args.handler(args)
    except (ValueError, FileNotFoundError) as exc:
        raise SystemExit(f"biofiles: {exc}") from exc


def run_vcf_command(args: argparse.Namespace) -> None:
    config = RunConfig(inputs=args.inputs, out=args.out, emit=args.emit, strict=args.strict, width=args.width)
    run_vcf(config)


def run_gff_command(args: argparse.Namespace) -> None:
    config = RunConfig(inputs=[args.gff], out=args.out, emit=args.emit, strict=args.strict, width=args.width)
    run_gff(config)


def run_window_command(args: argparse.Namespace) -> None:
    config = RunConfig(
        inputs=[args.gff],
        out=args.out,
        emit=args.emit,
        strict=args.strict,
        width=args.width,
        fasta=args.fasta,
        left=args.left,
        right=args.right,
        types=args.types,
    )
    run_window(config)


def run_dump_command(args: argparse.Namespace) -> None:
    name = ARTIFACTS[args.what]
    if "." not in name:
        name = f"{name}.{args.emit}"
    target = Path(args.out) / name
    if not target.exists():
        raise SystemExit(f"Artifact not found: {target}")
    with target.open("r", encoding="utf-8") as handle:
        for line in handle:
            sys.stdout.write(line)


__all__ = ["build_parser", "dispatch"]
