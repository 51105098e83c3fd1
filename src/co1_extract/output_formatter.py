"""Run summary table for a retrieval run."""

from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from .models import TaxonSummary

SUMMARY_COLUMNS = [
    "taxid",
    "order_name",
    "sequences_found",
    "sequences_retrieved",
    "co1_extracted_from_genomes",
]


class SummaryReport:
    """Collects one row per taxon and writes them as CSV."""

    def __init__(self):
        self.rows: List[TaxonSummary] = []

    def add(self, summary: TaxonSummary) -> None:
        self.rows.append(summary)

    def to_dataframe(self) -> pd.DataFrame:
        """Summary rows as a DataFrame with the report columns."""
        records = [{column: getattr(row, column) for column in SUMMARY_COLUMNS} for row in self.rows]
        return pd.DataFrame.from_records(records, columns=SUMMARY_COLUMNS)

    def write_csv(self, path: Union[str, Path]) -> Path:
        """Write the summary table without an index column."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.to_dataframe().to_csv(path, index=False)
        return path

    def get_statistics(self) -> Dict[str, Any]:
        """Totals across all processed taxa."""
        df = self.to_dataframe()
        if df.empty:
            return {
                'orders_processed': 0,
                'orders_with_sequences': 0,
                'total_retrieved': 0,
                'total_extracted_from_genomes': 0,
                'orders_failed': 0,
            }

        return {
            'orders_processed': len(df),
            'orders_with_sequences': int((df['sequences_retrieved'] > 0).sum()),
            'total_retrieved': int(df['sequences_retrieved'].sum()),
            'total_extracted_from_genomes': int(df['co1_extracted_from_genomes'].sum()),
            'orders_failed': int((df['order_name'] == 'ERROR').sum()),
        }
