"""Destinations for per-chunk responses and transfer summaries."""
import structlog

from splunk_integration.models import Chunk, TransferResult

logger = structlog.get_logger()

class ResultSink:
    """Receives the outcome of each chunk and of the whole transfer.

    The base implementation discards everything.
    """

    def chunk_sent(self, chunk_number: int, chunk: Chunk, response: str) -> None:
        pass

    def transfer_complete(self, result: TransferResult) -> None:
        pass

class LoggingResultSink(ResultSink):
    """Report results through structured logging."""

    def chunk_sent(self, chunk_number: int, chunk: Chunk, response: str) -> None:
        logger.info("Chunk sent", chunk_number=chunk_number, size=chunk.size, response=response)

    def transfer_complete(self, result: TransferResult) -> None:
        logger.info(
            "Transfer finished",
            bytes_read=result.total_bytes_read,
            bytes_sent=result.total_bytes_sent,
            chunks=result.chunk_count,
            response=result.last_response,
        )
