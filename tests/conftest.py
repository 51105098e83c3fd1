"""Shared fixtures: GenBank flat-file records built with exact column layout."""

from typing import List, Sequence, Tuple

import pytest

SAMPLE_BLOCKS = [
    "atgcgtacgt", "tagctagcta", "ccggttaacc", "ggttaaccgg", "aattccggaa", "ttccggaatt",
    "gcgcgcatat", "atatgcgcgc", "nnnnacgtac", "gtacgtacgt", "aaaaaccccc", "gggggttttt",
]
SAMPLE_SEQUENCE = "".join(SAMPLE_BLOCKS)

# (type, location, qualifiers)
SAMPLE_FEATURES = [
    ("source", "1..120", ['/organism="Testus exampli"', '/mol_type="genomic DNA"']),
    ("gene", "10..45", ['/gene="COX1"']),
    ("CDS", "10..45", ['/gene="COX1"', '/product="cytochrome c oxidase subunit I"']),
    ("gene", "complement(50..80)", ['/gene="COX2"']),
    ("CDS", "complement(61..90)", ['/gene="COI"', '/product="cytochrome c oxidase subunit 1"']),
    ("CDS", "100..150", ['/gene="CO1"']),
    ("tRNA", "95..110", ['/product="tRNA-Leu"']),
]


def feature_lines(feature_type: str, location: str, qualifiers: Sequence[str] = ()) -> List[str]:
    """Feature table lines: type at column 6, everything else at column 22."""
    lines = [f"     {feature_type:<16}{location}"]
    lines.extend(f"{' ' * 21}{qualifier}" for qualifier in qualifiers)
    return lines


def origin_lines(sequence: str) -> List[str]:
    """ORIGIN block lines with the position ladder and 10-base groups."""
    lines = []
    for i in range(0, len(sequence), 60):
        chunk = sequence[i:i + 60]
        groups = " ".join(chunk[j:j + 10] for j in range(0, len(chunk), 10))
        lines.append(f"{i + 1:>9} {groups}")
    return lines


def make_record(features: Sequence[Tuple[str, str, Sequence[str]]],
                sequence: str,
                accession: str = "NC_TEST01",
                terminated: bool = True) -> str:
    """Assemble a complete GenBank record."""
    lines = [
        f"LOCUS       {accession}              {len(sequence)} bp    DNA     circular INV 01-JAN-2024",
        "DEFINITION  Testus exampli mitochondrion, complete genome.",
        f"ACCESSION   {accession}",
        "FEATURES             Location/Qualifiers",
    ]
    for feature_type, location, qualifiers in features:
        lines.extend(feature_lines(feature_type, location, qualifiers))
    lines.append("ORIGIN      ")
    lines.extend(origin_lines(sequence))
    if terminated:
        lines.append("//")
    return "\n".join(lines) + "\n"


@pytest.fixture
def sample_record() -> str:
    """A mitochondrial-style record with three extractable CO1 features."""
    return make_record(SAMPLE_FEATURES, SAMPLE_SEQUENCE)
