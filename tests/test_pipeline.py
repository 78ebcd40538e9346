from __future__ import annotations

import json

import pandas as pd
import pytest

from biofiles.cli import build_parser, dispatch
from biofiles.core.pipeline import RunConfig, run_gff, run_vcf, run_window
from biofiles.io.fasta import SequenceStore
from biofiles.io.vcf import read_vcf

from conftest import SEQUENCE_50


def test_run_vcf_writes_tables_and_normalized_copy(vcf_path, tmp_path):
    out = tmp_path / "out"
    result = run_vcf(RunConfig(inputs=[str(vcf_path)], out=str(out)))

    assert len(result.variants) == 3
    variants = pd.read_csv(out / "variants.tsv", sep="\t")
    assert list(variants["id"]) == ["rs11449", "rs84825", "rs84823"]
    assert variants["source_file"].iloc[0] == str(vcf_path)

    normalized = read_vcf(out / "sample.normalized.vcf")
    assert normalized.samples == ("SAMP001", "SAMP002")
    assert [r.to_line() for r in normalized] == [r.to_line() for r in result.tables[str(vcf_path)]]

    meta = json.loads((out / "run.jsonl").read_text(encoding="utf-8").splitlines()[0])
    assert meta["command"] == "vcf"
    assert meta["records"] == 3
    assert meta["rejected"] == 0


def test_run_vcf_jsonl_writes_null_qual(vcf_path, tmp_path):
    out = tmp_path / "out"
    run_vcf(RunConfig(inputs=[str(vcf_path)], out=str(out), emit="jsonl"))
    rows = [json.loads(line) for line in (out / "variants.jsonl").read_text(encoding="utf-8").splitlines()]
    assert rows[0]["qual"] is None
    assert rows[1]["qual"] == 29.5


def test_run_gff_writes_features_edges_and_sequences(gff_path, tmp_path):
    out = tmp_path / "out"
    result = run_gff(RunConfig(inputs=[str(gff_path)], out=str(out)))

    assert len(result.graph) == 2
    features = pd.read_csv(out / "features.tsv", sep="\t")
    assert list(features["type"]) == ["gene", "exon"]
    edges = pd.read_csv(out / "children.tsv", sep="\t")
    assert list(edges["parent_id"]) == ["g1"]
    assert SequenceStore.from_path(out / "sequences.fasta").get_sequence("ctg1") == SEQUENCE_50
    assert (out / "annotation.normalized.gff3").exists()


def test_run_gff_rejects_several_inputs(gff_path, tmp_path):
    with pytest.raises(ValueError):
        run_gff(RunConfig(inputs=[str(gff_path), str(gff_path)], out=str(tmp_path)))


def test_run_window_uses_embedded_sequences(gff_path, tmp_path):
    target = tmp_path / "windows.fa"
    windows = run_window(RunConfig(inputs=[str(gff_path)], out=str(target), left=2, right=2))
    assert [(w.start, w.end) for w in windows] == [(0, 12), (38, 49)]
    store = SequenceStore.from_path(target)
    assert list(store) == ["g1", "ctg1_demo_exon_41_50"]
    assert store["g1"].description == "ctg1:1..12"


def test_run_window_filters_types(gff_path, tmp_path):
    target = tmp_path / "genes.fa"
    windows = run_window(RunConfig(inputs=[str(gff_path)], out=str(target), types=["exon"]))
    assert [w.id for w in windows] == ["ctg1_demo_exon_41_50"]


def test_run_window_needs_sequences(tmp_path):
    gff = tmp_path / "bare.gff3"
    gff.write_text("##gff-version 3\nc\t.\tgene\t1\t9\t.\t+\t.\tID=g1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        run_window(RunConfig(inputs=[str(gff)], out=str(tmp_path / "w.fa")))


def test_cli_vcf_then_dump(vcf_path, tmp_path, capsys):
    out = tmp_path / "cli"
    parser = build_parser()
    dispatch(parser.parse_args(["vcf", "--in", str(vcf_path), "--out", str(out), "--emit", "csv"]))
    assert (out / "variants.csv").exists()

    dispatch(parser.parse_args(["dump", "--out", str(out), "--what", "variants", "--emit", "csv"]))
    printed = capsys.readouterr().out.splitlines()
    assert printed[0].startswith("source_file,chrom,pos")
    assert len(printed) == 4


def test_cli_window(gff_path, tmp_path):
    target = tmp_path / "w.fa"
    args = build_parser().parse_args(
        ["window", "--gff", str(gff_path), "--left", "1", "--type", "gene", "--out", str(target)]
    )
    dispatch(args)
    assert list(SequenceStore.from_path(target)) == ["g1"]


def test_cli_reports_missing_input(tmp_path):
    args = build_parser().parse_args(["gff", "--gff", str(tmp_path / "missing.gff3"), "--out", str(tmp_path)])
    with pytest.raises(SystemExit):
        dispatch(args)


def test_cli_requires_command():
    with pytest.raises(SystemExit):
        dispatch(build_parser().parse_args([]))


def test_cli_rejects_negative_flank(gff_path):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["window", "--gff", str(gff_path), "--left", "-1", "--out", "x.fa"])
