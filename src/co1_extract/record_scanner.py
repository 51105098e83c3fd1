"""Single-pass scanner splitting a GenBank record into features and sequence."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .models import FeatureEntry

# Column layout of the GenBank feature table
FEATURE_INDENT = 5
CONTINUATION_INDENT = 21

FEATURE_START_RE = re.compile(r'^ {%d}[A-Za-z]' % FEATURE_INDENT)
CONTINUATION_RE = re.compile(r'^ {%d}' % CONTINUATION_INDENT)
NON_NUCLEOTIDE_RE = re.compile(r'[^acgtACGTnN]')


class Section(Enum):
    """Scanner position within a record."""
    PRE = "pre"
    FEATURES = "features"
    ORIGIN = "origin"
    DONE = "done"


@dataclass
class ScanResult:
    """Feature entries and sequence fragments collected from one record."""
    features: List[FeatureEntry] = field(default_factory=list)
    fragments: List[str] = field(default_factory=list)

    @property
    def sequence(self) -> str:
        """Assembled nucleotide sequence, in file order."""
        return "".join(self.fragments)


class RecordScanner:
    """Line-oriented state machine over one flat-file record.

    Lines starting with ``FEATURES`` and ``ORIGIN`` switch sections and are
    not content themselves. ``//`` ends the record. Within the feature
    table, a line indented by exactly five spaces and a letter opens a new
    feature, and a line indented by twenty-one spaces continues the open
    one. Every other line is ignored.
    """

    def __init__(self):
        self.section = Section.PRE
        self.current: Optional[FeatureEntry] = None
        self.result = ScanResult()

    def scan(self, text: Optional[str]) -> ScanResult:
        """Scan a whole record and return what it contains."""
        for line in (text or "").splitlines():
            self.feed(line)
            if self.section is Section.DONE:
                break
        self.finish()
        return self.result

    def feed(self, line: str) -> None:
        """Process one line."""
        if self.section is Section.DONE:
            return

        if line.startswith("FEATURES"):
            self.section = Section.FEATURES
            return

        if line.startswith("ORIGIN"):
            self._close_feature()
            self.section = Section.ORIGIN
            return

        if line.startswith("//"):
            self.finish()
            return

        if self.section is Section.ORIGIN:
            fragment = NON_NUCLEOTIDE_RE.sub("", line)
            if fragment:
                self.result.fragments.append(fragment)
        elif self.section is Section.FEATURES:
            self._feed_feature_line(line)

    def finish(self) -> None:
        """Close any open feature and stop accepting lines."""
        self._close_feature()
        self.section = Section.DONE

    def _feed_feature_line(self, line: str) -> None:
        if FEATURE_START_RE.match(line):
            self._close_feature()
            feature_type = line.split()[0]
            self.current = FeatureEntry(type=feature_type, lines=[line])
        elif CONTINUATION_RE.match(line) and self.current is not None:
            self.current.lines.append(line)

    def _close_feature(self) -> None:
        if self.current is not None:
            self.result.features.append(self.current)
            self.current = None


def scan_record(text: Optional[str]) -> ScanResult:
    """Scan one GenBank record with a fresh scanner."""
    return RecordScanner().scan(text)
