"""Tests for taxonomy ID input parsing."""

import json

import pandas as pd
import pytest

from co1_extract.input_parser import InputParser, normalize_taxid


class TestInputParser:
    """Test cases for the supported input formats."""

    @pytest.fixture
    def parser(self):
        return InputParser()

    def test_missing_file(self, parser, tmp_path):
        """Test a missing file raises with its path."""
        path = tmp_path / "orders.csv"

        with pytest.raises(FileNotFoundError, match="not found!"):
            parser.parse_file(path)

    def test_text_file(self, parser, tmp_path):
        """Test one ID per line with comments and blanks skipped."""
        path = tmp_path / "orders.txt"
        path.write_text("# insect orders\n7147\n\n  7088  \ntxid7041\n")

        assert parser.parse_file(path) == ["7147", "7088", "7041"]
        assert parser.get_format_info()['format'] == 'text'

    def test_csv_with_header(self, parser, tmp_path):
        """Test the taxid column is found by name."""
        path = tmp_path / "orders.csv"
        path.write_text("order,taxid\nDiptera,7147\nLepidoptera,7088\n")

        assert parser.parse_file(path) == ["7147", "7088"]
        assert parser.get_format_info() == {'format': 'csv', 'delimiter': ','}

    def test_csv_single_column(self, parser, tmp_path):
        path = tmp_path / "orders.csv"
        path.write_text("taxid\n7147\n7088\n")

        assert parser.parse_file(path) == ["7147", "7088"]

    def test_csv_first_column_fallback(self, parser, tmp_path):
        """Test the first column is used when no header matches."""
        path = tmp_path / "orders.csv"
        path.write_text("id,name\n7147,Diptera\n7088,Lepidoptera\n")

        assert parser.parse_file(path) == ["7147", "7088"]

    def test_csv_without_header(self, parser, tmp_path):
        """Test the first row is kept when it is already an ID."""
        path = tmp_path / "orders.csv"
        path.write_text("7147\n7088\n7041\n")

        assert parser.parse_file(path) == ["7147", "7088", "7041"]

    def test_csv_blank_cells_dropped(self, parser, tmp_path):
        path = tmp_path / "orders.csv"
        path.write_text("taxid,order\n7147,Diptera\n,Unknown\n7088,Lepidoptera\n")

        assert parser.parse_file(path) == ["7147", "7088"]

    def test_tsv_file(self, parser, tmp_path):
        path = tmp_path / "orders.tsv"
        path.write_text("taxid\torder\n7147\tDiptera\n")

        assert parser.parse_file(path) == ["7147"]
        assert parser.get_format_info()['delimiter'] == '\t'

    def test_excel_file(self, parser, tmp_path):
        """Test Excel sheets are read through pandas."""
        path = tmp_path / "orders.xlsx"
        pd.DataFrame({'order': ['Diptera', 'Coleoptera'], 'taxid': [7147, 7041]}).to_excel(path, index=False)

        assert parser.parse_file(path) == ["7147", "7041"]
        assert parser.get_format_info()['format'] == 'excel'

    def test_json_list(self, parser, tmp_path):
        path = tmp_path / "orders.json"
        path.write_text(json.dumps([7147, "7088"]))

        assert parser.parse_file(path) == ["7147", "7088"]

    def test_json_objects(self, parser, tmp_path):
        path = tmp_path / "orders.json"
        path.write_text(json.dumps([{'name': 'Diptera', 'taxid': 7147}, {'name': 'none'}]))

        assert parser.parse_file(path) == ["7147"]

    def test_json_dict(self, parser, tmp_path):
        path = tmp_path / "orders.json"
        path.write_text(json.dumps({'taxids': ["7147", "7041"]}))

        assert parser.parse_file(path) == ["7147", "7041"]
        assert parser.get_format_info()['format'] == 'json'


class TestNormalizeTaxid:
    """Test cases for taxonomy ID clean-up."""

    @pytest.mark.parametrize("value,expected", [
        ("7147", "7147"),
        (" 7147 ", "7147"),
        ("txid7147", "7147"),
        ("TXID7147", "7147"),
        ("7147.0", "7147"),
        (7147, "7147"),
        ("", ""),
    ])
    def test_normalize(self, value, expected):
        assert normalize_taxid(value) == expected
