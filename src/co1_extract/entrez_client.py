"""NCBI Entrez access for CO1 searches, taxonomy names and record downloads."""

import time
from typing import Any, Callable, Dict, Optional

from Bio import Entrez

from .error_handler import ErrorHandler, get_error_handler
from .logging_config import get_logger, log_api_call
from .models import SearchResult
from .network_recovery import RetryConfig, call_with_retry
from .rate_limiter import RateLimitConfig, TokenBucket

logger = get_logger('entrez_client')

CO1_GENE_TERMS = [
    'CO1[Gene]',
    'COI[Gene]',
    'COX1[Gene]',
    '"cytochrome c oxidase subunit 1"[All Fields]',
    '"cytochrome oxidase subunit I"[All Fields]',
]


def build_co1_query(taxid: str) -> str:
    """Build the nuccore search term for CO1 sequences of a taxon."""
    return f"txid{taxid}[Organism] AND ({' OR '.join(CO1_GENE_TERMS)})"


def is_complete_genome(title: Optional[str], keyword: str = "complete genome") -> bool:
    """Check a nuccore title for the complete genome marker."""
    return bool(title) and keyword.lower() in title.lower()


class EntrezClient:
    """Thin wrapper over Bio.Entrez with throttling and retries."""

    def __init__(self,
                 email: str = "user@example.com",
                 api_key: Optional[str] = None,
                 requests_per_second: Optional[float] = None,
                 retry_config: Optional[RetryConfig] = None,
                 error_handler: Optional[ErrorHandler] = None):
        """Initialize the client.

        Args:
            email: Contact email sent with every request (NCBI requirement)
            api_key: Optional NCBI API key for increased rate limits
            requests_per_second: Override the default request rate
            retry_config: Retry policy for failed requests
            error_handler: Handler recording request failures
        """
        self.email = email
        self.api_key = api_key

        Entrez.email = email
        if api_key:
            Entrez.api_key = api_key
        # call_with_retry is the only retry policy
        Entrez.max_tries = 1

        self.bucket = TokenBucket(RateLimitConfig.for_ncbi(api_key, requests_per_second))
        self.retry_config = retry_config or RetryConfig()
        self.error_handler = error_handler or get_error_handler()

    def _request(self, endpoint: str, item_id: str, func: Callable[[], Any]) -> Any:
        """Run one throttled, retried E-utilities call."""
        def throttled():
            self.bucket.acquire()
            return func()

        start = time.time()
        try:
            result = call_with_retry(
                throttled,
                config=self.retry_config,
                operation=f"Entrez {endpoint}",
                item_id=item_id,
                error_handler=self.error_handler
            )
        except Exception:
            log_api_call('ncbi', endpoint, {'id': item_id}, time.time() - start, success=False)
            raise

        log_api_call('ncbi', endpoint, {'id': item_id}, time.time() - start, success=True)
        return result

    @staticmethod
    def _read(handle) -> Any:
        try:
            return Entrez.read(handle)
        finally:
            handle.close()

    @staticmethod
    def _read_text(handle) -> str:
        try:
            text = handle.read()
        finally:
            handle.close()
        if isinstance(text, bytes):
            text = text.decode('utf-8')
        return text

    def search_co1(self, taxid: str, retmax: int) -> SearchResult:
        """Search nuccore for CO1 sequences of a taxon.

        Args:
            taxid: NCBI taxonomy ID
            retmax: Maximum number of IDs to return

        Returns:
            Total hit count and the returned IDs
        """
        query = build_co1_query(taxid)
        logger.info(f"Query: {query}")

        record = self._request(
            'esearch', taxid,
            lambda: self._read(Entrez.esearch(db="nuccore", term=query, retmax=retmax))
        )

        return SearchResult(count=int(record.get("Count", 0)), ids=list(record.get("IdList", [])))

    def _summary(self, db: str, uid: str) -> Dict[str, Any]:
        records = self._request(
            f'esummary/{db}', uid,
            lambda: self._read(Entrez.esummary(db=db, id=uid))
        )
        if not records:
            return {}
        return records[0]

    def get_taxon_name(self, taxid: str) -> str:
        """Scientific name of a taxon, or ``"Unknown"``."""
        summary = self._summary("taxonomy", taxid)
        return summary.get("ScientificName") or "Unknown"

    def get_sequence_title(self, seq_id: str) -> Optional[str]:
        """Title (definition line) of a nuccore entry."""
        return self._summary("nuccore", seq_id).get("Title")

    def fetch_genbank(self, seq_id: str) -> str:
        """Download a nuccore entry as GenBank flat-file text."""
        return self._request(
            'efetch/gb', seq_id,
            lambda: self._read_text(Entrez.efetch(db="nuccore", id=seq_id, rettype="gb", retmode="text"))
        )

    def fetch_fasta(self, seq_id: str) -> str:
        """Download a nuccore entry as FASTA text."""
        return self._request(
            'efetch/fasta', seq_id,
            lambda: self._read_text(Entrez.efetch(db="nuccore", id=seq_id, rettype="fasta", retmode="text"))
        )

    def get_stats(self) -> Dict[str, float]:
        return self.bucket.get_stats()
