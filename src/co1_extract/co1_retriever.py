"""Per-taxon CO1 retrieval: search, download, extract and write."""

from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .config import Config
from .entrez_client import EntrezClient, is_complete_genome
from .error_handler import ErrorHandler, get_error_handler
from .logging_config import LogTimer, ProgressLogger, get_logger
from .models import TaxonSummary
from .network_recovery import RetryConfig
from .output_formatter import SummaryReport
from .sequence_assembler import extract_co1_from_genbank, to_fasta_lines
from .storage import OutputManager, combine_fasta_files, fasta_text_to_lines

logger = get_logger('co1_retriever')


class CO1Retriever:
    """Retrieves up to ``max_per_order`` CO1 sequences per taxonomy ID.

    Search hits whose nuccore title marks them as complete genomes are
    downloaded as GenBank records and the annotated CO1 regions are cut
    out of them. Every other hit is downloaded directly as FASTA.
    """

    def __init__(self,
                 config: Optional[Config] = None,
                 client: Optional[EntrezClient] = None,
                 output: Optional[OutputManager] = None,
                 error_handler: Optional[ErrorHandler] = None):
        """Initialize the retriever.

        Args:
            config: Run configuration, defaults to ``Config.default()``
            client: Entrez client, built from ``config.api`` if omitted
            output: Output manager, built from ``config.output`` if omitted
            error_handler: Handler recording per-item failures
        """
        self.config = config or Config.default()
        self.error_handler = error_handler or get_error_handler()

        self.client = client or EntrezClient(
            email=self.config.api.email,
            api_key=self.config.api.ncbi_api_key,
            requests_per_second=self.config.api.rate_limit_per_second,
            retry_config=RetryConfig(
                max_retries=self.config.api.retry_attempts,
                backoff_factor=self.config.api.backoff_factor
            ),
            error_handler=self.error_handler
        )
        self.output = output or OutputManager(
            self.config.output.directory,
            self.config.output.genbank_subdir
        )

    @property
    def max_per_order(self) -> int:
        return self.config.retrieval.max_per_order

    def process_taxid(self, taxid: str) -> TaxonSummary:
        """
        Retrieve CO1 sequences for one taxonomy ID.

        Search and taxonomy lookup failures propagate; failures on
        individual sequences are logged and skipped.

        Args:
            taxid: NCBI taxonomy ID

        Returns:
            Counts for the summary report
        """
        retmax = self.max_per_order * self.config.retrieval.search_multiplier
        search = self.client.search_co1(taxid, retmax=retmax)

        logger.info(f"  Found: {search.count} total CO1 sequences")
        logger.info(f"  Will process: {len(search.ids)} sequences")

        order_name = self.client.get_taxon_name(taxid)
        logger.info(f"  Order name: {order_name}")

        summary = TaxonSummary(
            taxid=taxid,
            order_name=order_name,
            sequences_found=search.count
        )

        final_lines: List[str] = []

        for seq_id in search.ids:
            if summary.sequences_retrieved >= self.max_per_order:
                break

            try:
                lines, retrieved, extracted = self._process_sequence(seq_id)
            except Exception as e:
                self.error_handler.handle_error(e, operation="Processing sequence", item_id=seq_id)
                continue

            final_lines.extend(lines)
            summary.sequences_retrieved += retrieved
            summary.co1_extracted_from_genomes += extracted

        if final_lines:
            path = self.output.write_taxon_fasta(taxid, order_name, final_lines)
            summary.output_file = str(path)
            logger.info(f"  Retrieved {summary.sequences_retrieved} CO1 sequences total")
            logger.info(f"  CO1 features extracted from genomes: {summary.co1_extracted_from_genomes}")
            logger.info(f"  Saved to: {path}")
        else:
            logger.info("  No CO1 sequences obtained")

        return summary

    def _process_sequence(self, seq_id: str) -> Tuple[List[str], int, int]:
        """Fetch one search hit.

        Returns:
            FASTA lines, sequences retrieved, CO1 features extracted
        """
        title = self.client.get_sequence_title(seq_id)

        if is_complete_genome(title, self.config.retrieval.complete_genome_keyword):
            logger.info(f"    Processing complete genome: {seq_id}")

            genbank_text = self.client.fetch_genbank(seq_id)
            if self.config.retrieval.save_genbank_records:
                self.output.save_genbank_record(seq_id, genbank_text)

            records = extract_co1_from_genbank(genbank_text, seq_id)
            if records:
                logger.info(f"      Extracted {len(records)} CO1 features")
            else:
                logger.info(f"      No CO1 feature found in {seq_id}")
            return to_fasta_lines(records), len(records), len(records)

        fasta_text = self.client.fetch_fasta(seq_id)
        lines = fasta_text_to_lines(fasta_text)
        if not lines:
            logger.warning(f"    Empty FASTA returned for {seq_id}")
            return [], 0, 0

        logger.info(f"    Retrieved CO1 sequence: {seq_id}")
        return lines, 1, 0

    def process_taxids(self, taxids: Iterable[str]) -> SummaryReport:
        """
        Process every taxonomy ID and write the summary CSV.

        A taxon that fails entirely is reported as an ``ERROR`` row and
        processing continues with the next one.
        """
        taxids = [taxid.strip() for taxid in taxids if taxid and taxid.strip()]
        report = SummaryReport()

        logger.info(f"Processing {len(taxids)} taxonomic orders")
        logger.info(f"Getting up to {self.max_per_order} CO1 sequences per order")

        progress = ProgressLogger(logger, len(taxids), "Retrieving CO1")

        for i, taxid in enumerate(taxids, 1):
            logger.info(f"Processing taxid {taxid} ({i} of {len(taxids)})")

            try:
                with LogTimer(f"taxid {taxid}"):
                    summary = self.process_taxid(taxid)
            except Exception as e:
                self.error_handler.handle_error(e, operation="Processing taxid", item_id=taxid)
                report.add(TaxonSummary.error(taxid))
                progress.update(taxid, success=False)
                continue

            report.add(summary)
            progress.update(taxid, detail=f"{summary.sequences_retrieved} retrieved")

        progress.complete()

        summary_path = report.write_csv(self.output.output_dir / self.config.output.summary_file)
        self._log_final_summary(report, summary_path)

        return report

    def combine(self, combined_file: Optional[str] = None) -> int:
        """Combine the per-taxon FASTA files of this run."""
        combined = Path(combined_file) if combined_file else self.output.output_dir / self.config.output.combined_file
        return combine_fasta_files(self.output.output_dir, combined)

    def _log_final_summary(self, report: SummaryReport, summary_path: Path) -> None:
        stats = report.get_statistics()
        logger.info("=== FINAL SUMMARY ===")
        logger.info(f"Total orders processed: {stats['orders_processed']}")
        logger.info(f"Orders with sequences: {stats['orders_with_sequences']}")
        logger.info(f"Total CO1 sequences retrieved: {stats['total_retrieved']}")
        logger.info(f"CO1 features extracted from genomes: {stats['total_extracted_from_genomes']}")
        logger.info(f"Files saved in: {self.output.output_dir}")
        logger.info(f"GenBank records saved in: {self.output.genbank_dir}")
        logger.info(f"Summary saved as: {summary_path}")
