"""Error classification, logging and reporting for retrieval runs."""

import json
import logging
import socket
import time
import traceback
from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.error import HTTPError, URLError


class ErrorType(Enum):
    """Types of errors that can occur."""
    NETWORK_TIMEOUT = "network_timeout"
    API_RATE_LIMIT = "api_rate_limit"
    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"
    FILE_IO_ERROR = "file_io_error"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Shown with the logged error
SUGGESTIONS = {
    ErrorType.NETWORK_TIMEOUT: "Network problem talking to NCBI. The request will be retried.",
    ErrorType.API_RATE_LIMIT: "NCBI rate limit reached. Set an API key or lower the request rate.",
    ErrorType.NOT_FOUND: "Identifier not found at NCBI. Check the taxonomy or sequence ID.",
    ErrorType.PARSE_ERROR: "Unexpected response format. The item is skipped.",
    ErrorType.FILE_IO_ERROR: "Could not write output. Check permissions and free space.",
}


@dataclass
class ErrorContext:
    """Context information for an error."""
    error_type: ErrorType
    severity: ErrorSeverity
    message: str
    timestamp: float
    operation: str
    item_id: Optional[str] = None
    retry_count: int = 0
    max_retries: int = 3
    exception: Optional[Exception] = None
    traceback: Optional[str] = None
    suggestion: Optional[str] = None


class ErrorHandler:
    """Classifies, logs and keeps a history of errors seen during a run."""

    def __init__(self, max_retries: int = 3):
        """
        Initialize error handler.

        Args:
            max_retries: Retry budget used to grade severity
        """
        self.max_retries = max_retries
        self.error_history: List[ErrorContext] = []
        self.logger = logging.getLogger(__name__)

    def handle_error(self,
                     error: Exception,
                     operation: str,
                     item_id: Optional[str] = None,
                     retry_count: int = 0,
                     error_type: Optional[ErrorType] = None) -> ErrorContext:
        """
        Record an error with logging at a severity matching its type.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            item_id: Optional item identifier (taxid or sequence ID)
            retry_count: Current retry attempt
            error_type: Override automatic classification

        Returns:
            ErrorContext with error details and suggestion
        """
        error_type = error_type or self._classify_error(error)
        severity = self._determine_severity(error_type, retry_count)

        context = ErrorContext(
            error_type=error_type,
            severity=severity,
            message=str(error),
            timestamp=time.time(),
            operation=operation,
            item_id=item_id,
            retry_count=retry_count,
            max_retries=self.max_retries,
            exception=error,
            traceback=traceback.format_exc() if severity is ErrorSeverity.CRITICAL else None,
            suggestion=SUGGESTIONS.get(error_type)
        )

        self._log_error(context)
        self.error_history.append(context)

        return context

    def _classify_error(self, error: Exception) -> ErrorType:
        """Classify the error type based on exception."""
        if isinstance(error, HTTPError):
            if error.code == 429:
                return ErrorType.API_RATE_LIMIT
            if error.code in (400, 404):
                return ErrorType.NOT_FOUND
            return ErrorType.NETWORK_TIMEOUT

        if isinstance(error, (URLError, socket.timeout, TimeoutError, ConnectionError)):
            return ErrorType.NETWORK_TIMEOUT

        if isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
            return ErrorType.FILE_IO_ERROR

        error_str = str(error).lower()

        if any(term in error_str for term in ['rate limit', 'too many requests', '429']):
            return ErrorType.API_RATE_LIMIT

        if any(term in error_str for term in ['timeout', 'timed out', 'connection']):
            return ErrorType.NETWORK_TIMEOUT

        if any(term in error_str for term in ['not found', 'no items found', 'invalid uid']):
            return ErrorType.NOT_FOUND

        if isinstance(error, (ValueError, KeyError)) or 'parse' in error_str:
            return ErrorType.PARSE_ERROR

        if isinstance(error, OSError):
            return ErrorType.FILE_IO_ERROR

        return ErrorType.UNKNOWN

    def _determine_severity(self, error_type: ErrorType, retry_count: int) -> ErrorSeverity:
        """Determine error severity based on type and retry count."""
        if retry_count >= self.max_retries:
            return ErrorSeverity.CRITICAL

        if error_type in (ErrorType.NETWORK_TIMEOUT, ErrorType.API_RATE_LIMIT):
            return ErrorSeverity.WARNING if retry_count < 2 else ErrorSeverity.ERROR

        if error_type in (ErrorType.NOT_FOUND, ErrorType.PARSE_ERROR):
            return ErrorSeverity.WARNING

        return ErrorSeverity.ERROR

    def _log_error(self, context: ErrorContext):
        """Log error with appropriate level and details."""
        log_message = f"{context.operation} - {context.error_type.value}: {context.message}"

        if context.item_id:
            log_message += f" (item: {context.item_id})"

        if context.retry_count > 0:
            log_message += f" (retry {context.retry_count}/{context.max_retries})"

        if context.severity is ErrorSeverity.INFO:
            self.logger.info(log_message)
        elif context.severity is ErrorSeverity.WARNING:
            self.logger.warning(log_message)
        elif context.severity is ErrorSeverity.ERROR:
            self.logger.error(log_message)
        else:
            self.logger.critical(log_message)
            if context.traceback:
                self.logger.debug(f"Traceback:\n{context.traceback}")

        if context.suggestion:
            self.logger.debug(f"Suggestion: {context.suggestion}")

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of errors for reporting."""
        by_type: Dict[str, int] = {}
        by_severity: Dict[str, int] = {}
        for error in self.error_history:
            by_type[error.error_type.value] = by_type.get(error.error_type.value, 0) + 1
            by_severity[error.severity.value] = by_severity.get(error.severity.value, 0) + 1

        recent_errors = [
            {
                'type': error.error_type.value,
                'severity': error.severity.value,
                'message': error.message,
                'operation': error.operation,
                'item_id': error.item_id,
                'timestamp': datetime.fromtimestamp(error.timestamp).isoformat(),
            }
            for error in self.error_history[-5:]
        ]

        return {
            'total_errors': len(self.error_history),
            'by_type': by_type,
            'by_severity': by_severity,
            'recent_errors': recent_errors
        }

    def export_error_report(self, output_file: str) -> None:
        """Export detailed error report as JSON."""
        report = {
            'generated_at': datetime.now().isoformat(),
            'summary': self.get_error_summary(),
            'detailed_errors': []
        }

        for error in self.error_history:
            error_dict = {f.name: getattr(error, f.name) for f in fields(error) if f.name != 'exception'}
            error_dict['error_type'] = error.error_type.value
            error_dict['severity'] = error.severity.value
            error_dict['timestamp'] = datetime.fromtimestamp(error.timestamp).isoformat()
            report['detailed_errors'].append(error_dict)

        with open(output_file, 'w') as f:
            json.dump(report, f, indent=2)

        self.logger.info(f"Error report exported to {output_file}")

    def clear(self) -> None:
        self.error_history.clear()


# Global error handler instance
_error_handler = None


def get_error_handler() -> ErrorHandler:
    """Get global error handler instance."""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler


def setup_error_handler(**kwargs) -> ErrorHandler:
    """Replace the global error handler with a newly configured one."""
    global _error_handler
    _error_handler = ErrorHandler(**kwargs)
    return _error_handler
