"""Unit tests for the tab-separated mapping file writers."""

import pytest

from orthopairs.output import read_mapping_file, write_gene_name_file, write_mapping_file


@pytest.fixture
def protein_homologs():
    return {
        "UniProtKB=P2": {"UniProtKB=Q9", "UniProtKB=Q3"},
        "UniProtKB=P1": {"UniProtKB=Q1"},
    }


def test_write_mapping_file_lines(tmp_path, protein_homologs):
    """Test one key<TAB>value line per pair, sorted by key then value."""
    path = tmp_path / "hsap_mmus_mapping.tsv"

    line_count = write_mapping_file(protein_homologs, path)

    assert line_count == 3
    assert path.read_text() == (
        "UniProtKB=P1\tUniProtKB=Q1\n"
        "UniProtKB=P2\tUniProtKB=Q3\n"
        "UniProtKB=P2\tUniProtKB=Q9\n"
    )


def test_write_mapping_file_roundtrip(tmp_path, protein_homologs):
    """Test that the reader restores the written mapping."""
    path = tmp_path / "mapping.tsv"
    write_mapping_file(protein_homologs, path)

    assert read_mapping_file(path) == protein_homologs


def test_values_with_equals_signs_kept_verbatim(tmp_path):
    """Test that raw PANTHER identifiers are written unquoted."""
    path = tmp_path / "mmus_gene_protein_mapping.tsv"

    write_mapping_file({"MGI=MGI=1918305": {"UniProtKB=Q8CCP0"}}, path)

    assert path.read_text() == "MGI=MGI=1918305\tUniProtKB=Q8CCP0\n"


def test_write_replaces_existing_file(tmp_path):
    """Test that a second write replaces rather than appends."""
    path = tmp_path / "mapping.tsv"
    write_mapping_file({"A": {"1", "2"}}, path)

    write_mapping_file({"B": {"3"}}, path)

    assert path.read_text() == "B\t3\n"


def test_write_empty_mapping(tmp_path):
    """Test that an empty mapping produces an empty file."""
    path = tmp_path / "empty.tsv"

    assert write_mapping_file({}, path) == 0
    assert path.exists()
    assert path.read_text() == ""
    assert read_mapping_file(path) == {}


def test_write_creates_parent_directory(tmp_path):
    """Test that the release directory is created on demand."""
    path = tmp_path / "90" / "mapping.tsv"

    write_mapping_file({"A": {"1"}}, path)

    assert path.exists()


def test_write_gene_name_file(tmp_path):
    """Test accession<TAB>gene name lines, sorted by accession."""
    path = tmp_path / "mmus_gene_name_mapping.tsv"

    line_count = write_gene_name_file({"Q8CCP0": "Kdm2b", "P12345": "Brca2"}, path)

    assert line_count == 2
    assert path.read_text() == "P12345\tBrca2\nQ8CCP0\tKdm2b\n"
