from __future__ import annotations

from biofiles.core.features import Feature
from biofiles.core.window import extract_window, extract_windows, feature_label
from biofiles.io.fasta import FastaRecord, SequenceStore

from conftest import SEQUENCE_50


def make_store() -> SequenceStore:
    return SequenceStore([FastaRecord(id="chr1", description="", sequence=SEQUENCE_50)])


def feature(start: int, end: int, attrs: str = "ID=f1", seqid: str = "chr1") -> Feature:
    return Feature.from_line(f"{seqid}\tsrc\tgene\t{start}\t{end}\t.\t+\t.\t{attrs}")


def test_left_flank_clamps_to_zero():
    window = extract_window(feature(1, 10), make_store(), left=20)
    assert window.start == 0
    assert window.end == 10
    assert window.sequence == SEQUENCE_50[:10]
    assert window.description == "chr1:1..10"


def test_right_flank_clamps_to_last_index():
    window = extract_window(feature(40, 50), make_store(), right=20)
    assert window.start == 39
    assert window.end == 49
    assert window.sequence == SEQUENCE_50[39:49]


def test_flanks_inside_sequence():
    window = extract_window(feature(11, 20), make_store(), left=5, right=5)
    assert (window.start, window.end) == (5, 25)
    assert window.sequence == SEQUENCE_50[5:25]
    assert window.to_record().id == "f1"


def test_missing_sequence_returns_none():
    assert extract_window(feature(1, 5, seqid="chrX"), make_store()) is None


def test_label_is_synthesized_without_id():
    unnamed = feature(3, 8, attrs="Parent=f1")
    assert feature_label(unnamed) == "chr1_src_gene_3_8"
    assert extract_window(unnamed, make_store()).id == "chr1_src_gene_3_8"


def test_extract_windows_skips_missing():
    features = [feature(1, 5), feature(1, 5, seqid="chrX"), feature(6, 9, attrs="ID=f2")]
    assert [w.id for w in extract_windows(features, make_store())] == ["f1", "f2"]
