"""CO1 feature classification and location parsing."""

import re
from typing import Iterable, Optional

from .models import Location

# Gene names and products under which CO1 is annotated
CO1_PATTERNS = [
    "CO1", "COI", "COX1", "COXI",
    "cytochrome c oxidase subunit 1",
    "cytochrome c oxidase subunit I",
    "cytochrome oxidase subunit 1",
    "cytochrome oxidase subunit I",
]

_CO1_PATTERNS_LOWER = [pattern.lower() for pattern in CO1_PATTERNS]

# A leading < or > or a trailing > marks a partial range
SIMPLE_RANGE_RE = re.compile(r'(?<![<>\d])(\d+)\.\.(?!>)(\d+)')
MULTI_SEGMENT_RE = re.compile(r"\b(?:join|order)\(", re.IGNORECASE)


def _join(feature_lines: Iterable[str]) -> str:
    return " ".join(feature_lines)


def is_co1_feature(feature_lines: Iterable[str]) -> bool:
    """Check whether any line of a feature names CO1.

    Matching is a case-insensitive substring search over the joined
    lines; the feature type itself is not considered.
    """
    feature_text = _join(feature_lines).lower()
    return any(pattern in feature_text for pattern in _CO1_PATTERNS_LOWER)


def extract_feature_location(feature_lines: Iterable[str]) -> Optional[Location]:
    """Extract a simple ``start..end`` location from a feature.

    Args:
        feature_lines: Raw lines of the feature entry

    Returns:
        Location, or None if no usable range is present
    """
    location_text = _join(feature_lines)

    # Multi-segment locations are not supported
    if MULTI_SEGMENT_RE.search(location_text):
        return None

    is_complement = "complement" in location_text.lower()

    match = SIMPLE_RANGE_RE.search(location_text)
    if not match:
        return None

    start_pos = int(match.group(1))
    end_pos = int(match.group(2))

    if start_pos > 0 and end_pos > start_pos:
        return Location(start=start_pos, end=end_pos, complement=is_complement)

    return None
