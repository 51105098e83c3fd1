"""Reading taxonomy ID lists from text, table and JSON files."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

# Header names recognised as the taxonomy ID column
TAXID_COLUMNS = ['taxid', 'tax_id', 'taxon_id', 'taxonomy_id', 'txid']


class InputParser:
    """Parser for taxonomy ID input files."""

    def __init__(self):
        self.last_format = None
        self.last_delimiter = None

    def parse_file(self, file_path: Union[str, Path],
                   delimiter: Optional[str] = None) -> List[str]:
        """
        Parse a file and extract taxonomy IDs.

        Args:
            file_path: Path to input file
            delimiter: Delimiter for CSV files (comma, or tab for .tsv, if None)

        Returns:
            Taxonomy IDs in file order

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File {file_path} not found!")

        suffix = path.suffix.lower()

        if suffix in ['.csv', '.tsv']:
            if delimiter is None:
                delimiter = '\t' if suffix == '.tsv' else ','
            taxids = self._parse_table(pd.read_csv(path, sep=delimiter, dtype=str))
            self.last_format = 'csv'
            self.last_delimiter = delimiter
        elif suffix in ['.xlsx', '.xls']:
            taxids = self._parse_table(pd.read_excel(path, dtype=str))
            self.last_format = 'excel'
        elif suffix == '.json':
            taxids = self._parse_json_file(path)
        else:
            taxids = self._parse_text_file(path)

        return [normalize_taxid(taxid) for taxid in taxids if normalize_taxid(taxid)]

    def _parse_text_file(self, path: Path) -> List[str]:
        """One taxonomy ID per line; blank lines and ``#`` comments skipped."""
        taxids = []
        with open(path, 'r', encoding='utf-8-sig') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#'):
                    taxids.append(line)

        self.last_format = 'text'
        return taxids

    def _parse_table(self, df: pd.DataFrame) -> List[str]:
        """Take the taxid column, or the first column if none is named."""
        if df.empty and len(df.columns) == 0:
            return []

        column = self._find_taxid_column(list(df.columns))
        if column is not None:
            return df[column].dropna().astype(str).str.strip().tolist()

        column = df.columns[0]
        taxids = df[column].dropna().astype(str).str.strip().tolist()
        # Headerless file: the first ID was read as the column name
        if normalize_taxid(column).isdigit():
            taxids.insert(0, str(column))
        return taxids

    def _parse_json_file(self, path: Path) -> List[str]:
        """JSON list of IDs, list of objects, or ``{"taxids": [...]}``."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        taxids = []
        if isinstance(data, dict):
            data = data.get('taxids') or data.get('taxa') or []

        for item in data:
            if isinstance(item, dict):
                key = self._find_taxid_column(list(item.keys()))
                if key is not None:
                    taxids.append(str(item[key]))
            elif item is not None:
                taxids.append(str(item))

        self.last_format = 'json'
        return taxids

    @staticmethod
    def _find_taxid_column(columns: List[Any]) -> Optional[Any]:
        for column in columns:
            if isinstance(column, str) and column.lower().strip() in TAXID_COLUMNS:
                return column
        return None

    def get_format_info(self) -> Dict[str, Any]:
        """Get information about the last parsed file."""
        return {
            'format': self.last_format,
            'delimiter': self.last_delimiter
        }


def normalize_taxid(value: str) -> str:
    """Strip whitespace, a ``txid`` prefix and a spreadsheet ``.0`` suffix."""
    value = str(value).strip()
    if value.lower().startswith('txid'):
        value = value[4:]
    if value.endswith('.0') and value[:-2].isdigit():
        value = value[:-2]
    return value
