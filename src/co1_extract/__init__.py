"""CO1 extraction tool.

Retrieves cytochrome c oxidase subunit 1 (CO1) sequences from NCBI
GenBank per taxonomic group, cutting the CO1 coding region out of
complete genome records where needed.
"""

from .sequence_assembler import extract_co1_from_genbank, reverse_complement

__version__ = "1.0.0"
__author__ = "Austin P. Morrissey"

__all__ = ["extract_co1_from_genbank", "reverse_complement", "__version__"]
