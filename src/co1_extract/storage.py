"""Output files: GenBank archive, per-taxon FASTA and combined FASTA."""

import re
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .logging_config import get_logger

logger = get_logger('storage')

UNSAFE_CHARS_RE = re.compile(r'[^A-Za-z0-9]')


def safe_name(name: str) -> str:
    """Replace every non-alphanumeric character with an underscore."""
    return UNSAFE_CHARS_RE.sub('_', name)


class OutputManager:
    """Owns the on-disk layout of one retrieval run."""

    def __init__(self, output_dir: Union[str, Path], genbank_subdir: str = "genbank_records"):
        """
        Create the output directory and its GenBank record subdirectory.

        Args:
            output_dir: Root directory for all output
            genbank_subdir: Subdirectory for archived GenBank records
        """
        self.output_dir = Path(output_dir)
        self.genbank_dir = self.output_dir / genbank_subdir

        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.genbank_dir.mkdir(parents=True, exist_ok=True)

    def genbank_path(self, seq_id: str) -> Path:
        return self.genbank_dir / f"genome_{seq_id}.gb"

    def taxon_fasta_path(self, taxid: str, taxon_name: str) -> Path:
        return self.output_dir / f"taxid_{taxid}_{safe_name(taxon_name)}.fasta"

    def save_genbank_record(self, seq_id: str, text: str) -> Path:
        """Archive the raw GenBank text of a sequence."""
        path = self.genbank_path(seq_id)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text if text.endswith('\n') else text + '\n')
        logger.debug(f"Saved GenBank record {seq_id} to {path}")
        return path

    def write_taxon_fasta(self, taxid: str, taxon_name: str, lines: Iterable[str]) -> Path:
        """Write the FASTA lines collected for one taxon."""
        path = self.taxon_fasta_path(taxid, taxon_name)
        write_lines(path, lines)
        return path


def write_lines(path: Path, lines: Iterable[str]) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        for line in lines:
            f.write(f"{line}\n")


def fasta_text_to_lines(text: str) -> List[str]:
    """Split downloaded FASTA text into non-empty lines."""
    return [line for line in text.splitlines() if line.strip()]


def combine_fasta_files(output_dir: Union[str, Path],
                        combined_file: Optional[Union[str, Path]] = None) -> int:
    """
    Concatenate every ``.fasta`` file in a directory into one file.

    Args:
        output_dir: Directory holding the per-taxon FASTA files
        combined_file: Destination file, defaults to
            ``<output_dir>/co1_sequences.fasta``

    Returns:
        Number of sequences (header lines) in the combined file
    """
    output_dir = Path(output_dir)
    combined_path = Path(combined_file) if combined_file else output_dir / "co1_sequences.fasta"

    fasta_files = sorted(
        path for path in output_dir.glob("*.fasta")
        if path.resolve() != combined_path.resolve()
    )

    if not fasta_files:
        logger.warning(f"No FASTA files found in {output_dir}")
        return 0

    logger.info(f"Combining {len(fasta_files)} FASTA files into {combined_path}")

    all_lines: List[str] = []
    for path in fasta_files:
        with open(path, 'r', encoding='utf-8') as f:
            all_lines.extend(f.read().splitlines())

    combined_path.parent.mkdir(parents=True, exist_ok=True)
    write_lines(combined_path, all_lines)

    total_seqs = sum(1 for line in all_lines if line.startswith('>'))
    logger.info(f"Combined file contains {total_seqs} sequences")
    return total_seqs
