"""Tests for PANTHER ortholog parsing and homolog aggregation.

Covers line acceptance rules, malformed-line handling, and the
least-diverged precedence rule in every insertion order.
"""

from itertools import permutations

import pytest

from orthopairs.exceptions import ConfigurationError, OrthologFileFormatError
from orthopairs.homology import (
    HomologAggregator,
    HomologTable,
    OrthologRecord,
    OrthologType,
    aggregate_ortholog_files,
    iter_ortholog_records,
    parse_ortholog_line,
)


TARGETS = {"MOUSE", "RAT"}

SAMPLE_LINE = (
    "HUMAN|HGNC=10663|UniProtKB=O60524\t"
    "MOUSE|MGI=MGI=1918305|UniProtKB=Q8CCP0\t"
    "LDO\tEuarchontoglires\tPTHR15239\n"
)


def _line(source, target, type_code="LDO"):
    return f"{source}\t{target}\t{type_code}\tEuarchontoglires\tPTHR00000"


# Parser

def test_parse_sample_line():
    """Test parsing a least-diverged ortholog line keeps raw identifiers."""
    record = parse_ortholog_line(SAMPLE_LINE, "HUMAN", TARGETS)

    assert record == OrthologRecord(
        source_species="HUMAN",
        source_gene="HGNC=10663",
        source_protein="UniProtKB=O60524",
        target_species="MOUSE",
        target_gene="MGI=MGI=1918305",
        target_protein="UniProtKB=Q8CCP0",
        ortholog_type=OrthologType.LEAST_DIVERGED,
    )
    assert record.is_least_diverged


@pytest.mark.parametrize("type_code,expected", [
    ("LDO", OrthologType.LEAST_DIVERGED),
    ("O", OrthologType.ORTHOLOG),
    ("SO", OrthologType.ORTHOLOG),
    ("P", None),
    ("X", None),
    ("LDX", None),
])
def test_ortholog_type_classification(type_code, expected):
    """Test that only codes containing O are orthologs, and only LDO is least diverged."""
    assert OrthologType.classify(type_code) is expected


def test_parse_rejects_paralog():
    """Test that paralog lines are skipped."""
    line = _line("HUMAN|HGNC=1|UniProtKB=P1", "MOUSE|MGI=MGI=2|UniProtKB=Q1", "P")

    assert parse_ortholog_line(line, "HUMAN", TARGETS) is None


def test_parse_rejects_other_source_species():
    """Test that lines from another source species are skipped."""
    line = _line("RAT|RGD=1|UniProtKB=P1", "MOUSE|MGI=MGI=2|UniProtKB=Q1")

    assert parse_ortholog_line(line, "HUMAN", TARGETS) is None


def test_parse_rejects_untracked_target_species():
    """Test that lines whose target species is not configured are skipped."""
    line = _line("HUMAN|HGNC=1|UniProtKB=P1", "CHICK|Ensembl=ENSGALG1|UniProtKB=Q1")

    assert parse_ortholog_line(line, "HUMAN", TARGETS) is None


@pytest.mark.parametrize("source_gene,target_gene", [
    ("Gene=ABC1", "MGI=MGI=2"),
    ("HGNC=1", "Gene_Name=abc1"),
    ("HGNC=1", "GeneID=12345"),
    ("Gene_ORFName=x", "Gene_OrderedLocusName=y"),
])
def test_parse_rejects_gene_name_placeholders(source_gene, target_gene):
    """Test that gene fields holding display names instead of IDs are skipped."""
    line = _line(f"HUMAN|{source_gene}|UniProtKB=P1", f"MOUSE|{target_gene}|UniProtKB=Q1")

    assert parse_ortholog_line(line, "HUMAN", TARGETS) is None


def test_parse_keeps_non_uniprot_protein_ids():
    """Test that protein IDs from other namespaces are accepted unchanged."""
    line = _line("HUMAN|HGNC=1|UniProtKB=P1", "RAT|RGD=2|Ensembl=ENSRNOP0001", "O")

    record = parse_ortholog_line(line, "HUMAN", TARGETS)

    assert record.target_protein == "Ensembl=ENSRNOP0001"
    assert record.ortholog_type is OrthologType.ORTHOLOG


@pytest.mark.parametrize("line", [
    "HUMAN|HGNC=1|UniProtKB=P1\tMOUSE|MGI=MGI=2|UniProtKB=Q1",
    "HUMAN|HGNC=1\tMOUSE|MGI=MGI=2|UniProtKB=Q1\tLDO",
    "HUMAN|HGNC=1|UniProtKB=P1\tMOUSE||UniProtKB=Q1\tLDO",
    "HUMAN|HGNC=1|UniProtKB=P1\tMOUSE|MGI=MGI=2|UniProtKB=Q1|extra\tLDO",
    "HUMAN|HGNC=1|UniProtKB=P1\tMOUSE|MGI=MGI=2|UniProtKB=Q1\t\tEuarchontoglires",
])
def test_parse_malformed_line_raises(line):
    """Test that lines not matching the dump layout raise ValueError."""
    with pytest.raises(ValueError):
        parse_ortholog_line(line, "HUMAN", TARGETS)


def test_parse_malformed_line_of_other_species_still_raises():
    """Test that layout checks apply before species filtering."""
    line = "RAT|RGD=1|UniProtKB=P1\tCHICK|Ensembl=ENSGALG1\tO"

    with pytest.raises(ValueError):
        parse_ortholog_line(line, "HUMAN", TARGETS)


def test_iter_records_from_file(tmp_path):
    """Test streaming accepted records from a dump file."""
    dump = tmp_path / "orthologs"
    dump.write_text("\n".join([
        _line("HUMAN|HGNC=1|UniProtKB=P1", "MOUSE|MGI=MGI=2|UniProtKB=Q1", "LDO"),
        _line("HUMAN|HGNC=1|UniProtKB=P1", "MOUSE|MGI=MGI=3|UniProtKB=Q2", "P"),
        "",
        _line("HUMAN|HGNC=4|UniProtKB=P4", "RAT|RGD=5|UniProtKB=R5", "O"),
    ]) + "\n")

    records = list(iter_ortholog_records(dump, "HUMAN", TARGETS))

    assert [r.target_protein for r in records] == ["UniProtKB=Q1", "UniProtKB=R5"]


def test_iter_records_reports_line_number(tmp_path):
    """Test that a malformed line aborts parsing with its location."""
    dump = tmp_path / "orthologs"
    dump.write_text("\n".join([
        _line("HUMAN|HGNC=1|UniProtKB=P1", "MOUSE|MGI=MGI=2|UniProtKB=Q1"),
        "garbage line without tabs",
    ]) + "\n")

    with pytest.raises(OrthologFileFormatError) as exc_info:
        list(iter_ortholog_records(dump, "HUMAN", TARGETS))

    assert exc_info.value.line_number == 2
    assert f"{dump}:2:" in str(exc_info.value)


# Homolog table precedence

LDO = OrthologType.LEAST_DIVERGED
ORTH = OrthologType.ORTHOLOG


def _table_from(insertions):
    table = HomologTable()
    for value, ortholog_type in insertions:
        table.add("MOUSE", "K", value, ortholog_type)
    return table


def test_first_value_starts_set():
    """Test that the first value for a key starts a singleton set."""
    table = _table_from([("o1", ORTH)])

    assert table.get("MOUSE") == {"K": {"o1"}}
    assert not table.is_least_diverged("MOUSE", "K")


def test_ordinary_orthologs_accumulate():
    """Test that ordinary orthologs collect until a least-diverged one arrives."""
    table = _table_from([("o1", ORTH), ("o2", ORTH)])

    assert table.get("MOUSE")["K"] == {"o1", "o2"}


def test_least_diverged_replaces_ordinary():
    """Test that the first least-diverged value replaces earlier ordinary values."""
    table = _table_from([("o1", ORTH), ("o2", ORTH), ("ldo", LDO)])

    assert table.get("MOUSE")["K"] == {"ldo"}
    assert table.is_least_diverged("MOUSE", "K")


def test_ordinary_after_least_diverged_is_dropped():
    """Test that an ordinary value never joins a least-diverged key."""
    table = _table_from([("ldo", LDO), ("o1", ORTH)])

    assert table.get("MOUSE")["K"] == {"ldo"}


def test_multiple_least_diverged_values_kept():
    """Test that every least-diverged value of a key is preserved."""
    table = _table_from([("ldo1", LDO), ("o1", ORTH), ("ldo2", LDO)])

    assert table.get("MOUSE")["K"] == {"ldo1", "ldo2"}


def test_duplicate_values_collapse():
    """Test set semantics for repeated insertions."""
    table = _table_from([("o1", ORTH), ("o1", ORTH), ("o1", ORTH)])

    assert table.get("MOUSE")["K"] == {"o1"}
    assert table.pair_count("MOUSE") == 1


@pytest.mark.parametrize("insertions,expected", [
    ([("ldo", LDO), ("o1", ORTH)], {"ldo"}),
    ([("o1", ORTH), ("o2", ORTH), ("ldo", LDO)], {"ldo"}),
    ([("o1", ORTH), ("ldo1", LDO), ("o2", ORTH), ("ldo2", LDO)], {"ldo1", "ldo2"}),
    ([("o1", ORTH), ("o2", ORTH)], {"o1", "o2"}),
])
def test_precedence_is_order_independent(insertions, expected):
    """Test that every insertion order yields the same value set."""
    for order in permutations(insertions):
        table = _table_from(order)
        assert table.get("MOUSE")["K"] == expected, order


def test_species_are_independent():
    """Test that keys of different species never interact."""
    table = HomologTable()
    table.add("MOUSE", "K", "ldo", LDO)
    table.add("RAT", "K", "o1", ORTH)

    assert table.get("MOUSE") == {"K": {"ldo"}}
    assert table.get("RAT") == {"K": {"o1"}}
    assert not table.is_least_diverged("RAT", "K")
    assert table.species() == ["MOUSE", "RAT"]


def test_missing_species_is_empty():
    """Test that a species without records yields an empty mapping."""
    table = HomologTable()

    assert table.get("PIG") == {}
    assert "PIG" not in table


# Aggregation

def test_aggregator_builds_both_tables():
    """Test that one record lands in the protein and gene-protein tables."""
    record = parse_ortholog_line(
        _line("HUMAN|HGNC=1|UniProtKB=P1", "MOUSE|MGI=MGI=2|UniProtKB=Q1"),
        "HUMAN",
        TARGETS,
    )

    aggregator = HomologAggregator().add_all([record])

    assert aggregator.protein_homologs.get("MOUSE") == {"UniProtKB=P1": {"UniProtKB=Q1"}}
    assert aggregator.gene_proteins.get("MOUSE") == {"MGI=MGI=2": {"UniProtKB=Q1"}}
    assert aggregator.record_count == 1


def test_aggregator_applies_precedence_per_table():
    """Test that precedence is applied independently to each table."""
    lines = [
        # Ordinary ortholog from P1 to Q2, gene G3
        _line("HUMAN|HGNC=1|UniProtKB=P1", "MOUSE|MGI=MGI=3|UniProtKB=Q2", "O"),
        # Least-diverged from P1 to Q1, gene G2
        _line("HUMAN|HGNC=1|UniProtKB=P1", "MOUSE|MGI=MGI=2|UniProtKB=Q1", "LDO"),
        # Ordinary from P9 to Q2, same gene G3
        _line("HUMAN|HGNC=9|UniProtKB=P9", "MOUSE|MGI=MGI=3|UniProtKB=Q2", "O"),
    ]
    records = [parse_ortholog_line(line, "HUMAN", TARGETS) for line in lines]

    aggregator = HomologAggregator().add_all(records)

    assert aggregator.protein_homologs.get("MOUSE") == {
        "UniProtKB=P1": {"UniProtKB=Q1"},
        "UniProtKB=P9": {"UniProtKB=Q2"},
    }
    assert aggregator.gene_proteins.get("MOUSE") == {
        "MGI=MGI=2": {"UniProtKB=Q1"},
        "MGI=MGI=3": {"UniProtKB=Q2"},
    }


def test_aggregate_ortholog_files_merges_dumps(tmp_path):
    """Test that overlapping dumps are merged and duplicates absorbed."""
    qfo = tmp_path / "QfO_Genome_Orthologs"
    hcop = tmp_path / "Orthologs_HCOP"
    qfo.write_text(_line("HUMAN|HGNC=1|UniProtKB=P1", "MOUSE|MGI=MGI=2|UniProtKB=Q1", "O") + "\n")
    hcop.write_text("\n".join([
        _line("HUMAN|HGNC=1|UniProtKB=P1", "MOUSE|MGI=MGI=2|UniProtKB=Q1", "O"),
        _line("HUMAN|HGNC=1|UniProtKB=P1", "MOUSE|MGI=MGI=4|UniProtKB=Q4", "O"),
        _line("HUMAN|HGNC=1|UniProtKB=P1", "RAT|RGD=5|UniProtKB=R5", "LDO"),
    ]) + "\n")

    aggregator = aggregate_ortholog_files([qfo, hcop], "HUMAN", TARGETS)

    assert aggregator.record_count == 4
    assert aggregator.protein_homologs.get("MOUSE") == {
        "UniProtKB=P1": {"UniProtKB=Q1", "UniProtKB=Q4"},
    }
    assert aggregator.protein_homologs.get("RAT") == {"UniProtKB=P1": {"UniProtKB=R5"}}
    assert aggregator.protein_homologs.pair_count("MOUSE") == 2


def test_aggregate_missing_file_raises(tmp_path):
    """Test that a missing dump file is a configuration error."""
    with pytest.raises(ConfigurationError, match="not found"):
        aggregate_ortholog_files([tmp_path / "missing"], "HUMAN", TARGETS)
