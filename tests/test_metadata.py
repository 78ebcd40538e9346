from __future__ import annotations

import pytest

from biofiles.core.datatypes import DataType, ValueType
from biofiles.core.metadata import MetadataLine, MetadataRegistry
from biofiles.errors import MalformedLineError, RegistryFrozenError


def test_ingest_builds_info_and_format_tables():
    registry = MetadataRegistry()
    registry.ingest("##fileformat=VCFv4.2")
    registry.ingest('##INFO=<ID=AF,Number=A,Type=Float,Description="Allele Frequency">')
    registry.ingest('##FORMAT=<ID=GQ,Number=1,Type=Integer,Description="Genotype Quality">')

    assert registry.fileformat == "VCFv4.2"
    af = registry.lookup_info("AF")
    assert af is not None
    assert af.value_type is ValueType.FLOAT
    assert af.kind is DataType.FLOAT_VECTOR
    assert af.description == "Allele Frequency"
    assert registry.lookup_format("GQ").kind is DataType.INTEGER
    assert registry.descriptor("INFO", "missing") is None


def test_type_before_number_still_derives_vector():
    registry = MetadataRegistry()
    registry.ingest("##INFO=<ID=AC,Type=Integer,Number=A>")
    assert registry.lookup_info("AC").kind is DataType.INTEGER_VECTOR


def test_redeclared_id_uses_last_declaration():
    registry = MetadataRegistry()
    registry.ingest("##INFO=<ID=DP,Number=1,Type=String>")
    registry.ingest("##INFO=<ID=DP,Number=1,Type=Integer>")
    assert registry.lookup_info("DP").value_type is ValueType.INTEGER
    assert len(registry.lines) == 2


def test_opaque_lines_are_kept_in_order():
    registry = MetadataRegistry()
    lines = [
        "##fileformat=VCFv4.2",
        "##source=myImputationProgramV3.1",
        "##contig=<ID=20,length=62435964,assembly=B36>",
        "##INFO=<Number=1,Type=Integer>",
        "##bare",
    ]
    for line in lines:
        registry.ingest(line)
    assert registry.to_lines() == lines
    assert registry.info == {}
    contig = registry.lines[2]
    assert contig.is_structured
    assert contig.fields["length"] == "62435964"


def test_unknown_type_decodes_as_string():
    registry = MetadataRegistry()
    registry.ingest("##INFO=<ID=ODD,Number=1,Type=Blob>")
    assert registry.lookup_info("ODD").value_type is ValueType.STRING


def test_extra_tags_are_kept():
    registry = MetadataRegistry()
    registry.ingest('##INFO=<ID=CSQ,Number=.,Type=String,Description="x",Source="vep",Version="110",Tag=y>')
    csq = registry.lookup_info("CSQ")
    assert csq.source == "vep"
    assert csq.version == "110"
    assert csq.extra == {"Tag": "y"}


def test_frozen_registry_rejects_ingest():
    registry = MetadataRegistry()
    registry.freeze()
    with pytest.raises(RegistryFrozenError):
        registry.ingest("##fileformat=VCFv4.2")


def test_metadata_line_requires_double_hash():
    with pytest.raises(MalformedLineError):
        MetadataLine.parse("#CHROM\tPOS")
