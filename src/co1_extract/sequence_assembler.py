"""Slicing CO1 regions out of an assembled record sequence as FASTA."""

import logging
from typing import Iterable, List, Optional

from .feature_extractor import extract_feature_location, is_co1_feature
from .models import FastaRecord, Location
from .record_scanner import scan_record

logger = logging.getLogger(__name__)

COMPLEMENT_MAP = {"A": "T", "T": "A", "G": "C", "C": "G", "N": "N"}


def reverse_complement(seq: str) -> str:
    """Reverse complement a nucleotide sequence.

    Input is uppercased first; any base outside ACGTN becomes N.
    """
    complement_chars = [COMPLEMENT_MAP.get(base, "N") for base in seq.upper()]
    return "".join(reversed(complement_chars))


def format_header(record_id: str, location: Location) -> str:
    """Build the FASTA header for an extracted CO1 region."""
    header = f">CO1_from_{record_id}_{location.start}..{location.end}"
    if location.complement:
        header += "_complement"
    return header


def slice_location(sequence: str, location: Location) -> Optional[str]:
    """Cut a 1-based inclusive range out of ``sequence``.

    Returns None when the range falls outside the sequence.
    """
    if location.start < 1 or location.end > len(sequence):
        return None

    region = sequence[location.start - 1:location.end]
    if location.complement:
        region = reverse_complement(region)
    return region


def extract_co1_from_genbank(genbank_text: Optional[str], genome_id: str) -> List[FastaRecord]:
    """Extract CO1 coding regions from a GenBank record.

    Args:
        genbank_text: Full text of a single GenBank record
        genome_id: Identifier used in the FASTA headers

    Returns:
        One FastaRecord per qualifying feature, in record order
    """
    scan = scan_record(genbank_text)

    locations = []
    for feature in scan.features:
        if not is_co1_feature(feature.lines):
            continue
        location = extract_feature_location(feature.lines)
        if location is None:
            logger.debug(f"No usable location for {feature.type} feature in {genome_id}")
            continue
        locations.append(location)

    if not locations:
        return []

    full_sequence = scan.sequence
    extracted = []

    for location in locations:
        co1_seq = slice_location(full_sequence, location)
        if co1_seq is None:
            logger.debug(
                f"CO1 location {location.start}..{location.end} outside "
                f"{len(full_sequence)} bp sequence of {genome_id}"
            )
            continue
        logger.debug(f"Extracted {location.length} bp CO1 region {location.start}..{location.end} from {genome_id}")
        extracted.append(FastaRecord(format_header(genome_id, location), co1_seq))

    return extracted


def to_fasta_lines(records: Iterable[FastaRecord]) -> List[str]:
    """Flatten records into alternating header and sequence lines."""
    lines = []
    for record in records:
        lines.extend(record.to_lines())
    return lines
