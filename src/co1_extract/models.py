"""Data models for the CO1 extraction tool."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Location:
    """1-based inclusive coordinate range on the record sequence."""

    start: int
    end: int
    complement: bool = False

    @property
    def length(self) -> int:
        """Number of bases covered by the range."""
        return self.end - self.start + 1


@dataclass
class FeatureEntry:
    """One feature table entry: a start line plus its continuation lines."""

    type: str
    lines: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Lines joined with single spaces, as used for matching."""
        return " ".join(self.lines)


@dataclass
class FastaRecord:
    """A FASTA header/sequence pair."""

    header: str
    sequence: str

    def to_lines(self) -> List[str]:
        return [self.header, self.sequence]


@dataclass
class SearchResult:
    """Result of a CO1 search for one taxonomy ID."""

    count: int
    ids: List[str] = field(default_factory=list)


@dataclass
class TaxonSummary:
    """Per-taxon counts reported in the run summary."""

    taxid: str
    order_name: str
    sequences_found: int = 0
    sequences_retrieved: int = 0
    co1_extracted_from_genomes: int = 0
    output_file: str = ""

    @classmethod
    def error(cls, taxid: str) -> 'TaxonSummary':
        """Summary row recorded when a taxon failed entirely."""
        return cls(taxid=taxid, order_name="ERROR")
