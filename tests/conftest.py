from __future__ import annotations

from pathlib import Path

import pytest


def tabbed(*rows: str) -> str:
    """Build file text from rows whose columns are separated by single spaces."""
    lines = []
    for row in rows:
        lines.append(row if row.startswith("##") else "\t".join(row.split(" ")))
    return "\n".join(lines) + "\n"


VCF_TEXT = tabbed(
    "##fileformat=VCFv4.2",
    '##INFO=<ID=DP,Number=1,Type=Integer,Description="Total Depth">',
    '##INFO=<ID=AF,Number=A,Type=Float,Description="Allele Frequency">',
    '##INFO=<ID=DB,Number=0,Type=Flag,Description="dbSNP membership, build 129">',
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
    '##FORMAT=<ID=GP,Number=G,Type=Float,Description="Genotype Probabilities">',
    '##FORMAT=<ID=PL,Number=G,Type=Float,Description="Phred-scaled Genotype Likelihoods">',
    "##reference=file:///seq/references/1000GenomesPilot-NCBI36.fasta",
    "#CHROM POS ID REF ALT QUAL FILTER INFO FORMAT SAMP001 SAMP002",
    "chrI 1291018 rs11449 G A . PASS . GT 0/0 0/1",
    "chrI 2300608 rs84825 C T 29.5 PASS DP=14;AF=0.5;DB GT:GP 0/1:. 0/1:0.03,0.97,0",
    "chrI 2301308 rs84823 T G 0 q10 DP=11;XX=foo GT:PL ./.:. 1/1:10,5,0",
)

GFF_TEXT = tabbed(
    "##gff-version 3",
    "chrI SGD chromosome 1 230218 . . . ID=chrI;dbxref=NCBI:NC_001133;Name=chrI",
    "chrI SGD telomere 1 801 . - . ID=TEL01L;Name=TEL01L",
    "chrI SGD gene 335 649 . + . ID=YAL069W;Name=YAL069W;",
    "chrI SGD CDS 335 649 . + 0 Parent=YAL069W_mRNA;Name=YAL069W_CDS;",
    "chrI SGD mRNA 335 649 . + . ID=YAL069W_mRNA;Name=YAL069W_mRNA;Parent=YAL069W",
)

SEQUENCE_50 = "ACGTACGTAC" * 5


@pytest.fixture
def vcf_text() -> str:
    return VCF_TEXT


@pytest.fixture
def gff_text() -> str:
    return GFF_TEXT


@pytest.fixture
def gff_with_fasta() -> str:
    return (
        tabbed(
            "##gff-version 3",
            "ctg1 demo gene 1 10 . + . ID=g1",
            "ctg1 demo exon 41 50 . + . Parent=g1",
        )
        + "##FASTA\n"
        + ">ctg1 demo contig\n"
        + SEQUENCE_50[:25]
        + "\n"
        + SEQUENCE_50[25:]
        + "\n"
    )


@pytest.fixture
def vcf_path(tmp_path: Path) -> Path:
    path = tmp_path / "sample.vcf"
    path.write_text(VCF_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def gff_path(tmp_path: Path, gff_with_fasta: str) -> Path:
    path = tmp_path / "annotation.gff3"
    path.write_text(gff_with_fasta, encoding="utf-8")
    return path
