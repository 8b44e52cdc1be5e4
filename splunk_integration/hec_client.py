"""Splunk HEC (HTTP Event Collector) uploader."""
import httpx
import structlog
import uuid
from pathlib import Path
from typing import IO, Iterable, Mapping, Optional, Union

from shared.exceptions import (
    ConfigurationError,
    HECResponseError,
    HECTransportError,
    PayloadTooLargeError,
)
from shared.utils import mask_token
from splunk_integration.chunk_reader import iter_chunks
from splunk_integration.config import HECSettings
from splunk_integration.events import EventBuilder, join_events
from splunk_integration.models import MAX_PAYLOAD_BYTES, Chunk, TransferResult
from splunk_integration.sink import ResultSink

logger = structlog.get_logger()

CHANNEL_HEADER = "x-splunk-request-channel"

class HECUploader:
    """Send newline-delimited events to Splunk HEC in bounded chunks.

    One connection is opened per chunk and closed once its response has been
    read. Chunks are sent strictly one after another; the first failure stops
    the transfer and nothing already sent is rolled back.
    """

    def __init__(
        self,
        config: Optional[HECSettings] = None,
        sink: Optional[ResultSink] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config or HECSettings()
        self.destination = self.config.destination()
        self.channel = self.config.channel or str(uuid.uuid4())
        self.sink = sink or ResultSink()
        self._transport = transport
        self.headers = {
            "Authorization": f"Splunk {self.config.token}",
            CHANNEL_HEADER: self.channel,
        }

    def __repr__(self) -> str:
        return (
            f"HECUploader(url={self.destination.url!r}, channel={self.channel!r}, "
            f"token={mask_token(self.config.token)!r})"
        )

    def send_chunk(self, chunk: Union[Chunk, str, bytes]) -> str:
        """POST one chunk and return the response status line, e.g. ``200 OK``.

        Raises:
            PayloadTooLargeError: The chunk is bigger than HEC accepts
            HECTransportError: Connection or I/O failure
            HECResponseError: Error status while ``fail_on_http_error`` is set
        """
        if not isinstance(chunk, Chunk):
            chunk = Chunk(data=chunk)
        payload = chunk.payload
        if len(payload) > MAX_PAYLOAD_BYTES:
            logger.error(
                "Chunk larger than the maximum HEC payload",
                size=len(payload),
                max_size=MAX_PAYLOAD_BYTES,
            )
            raise PayloadTooLargeError(
                f"Payload of {len(payload)} bytes exceeds the {MAX_PAYLOAD_BYTES} byte maximum"
            )

        logger.debug("Sending chunk", url=self.destination.url, size=len(payload))
        try:
            with httpx.Client(transport=self._transport, verify=self.config.verify) as client:
                response = client.post(self.destination.url, content=payload, headers=self.headers)
        except httpx.TransportError as e:
            logger.error(
                "Failed to send chunk to Splunk HEC",
                error=str(e),
                error_type=type(e).__name__,
                url=self.destination.url,
            )
            raise HECTransportError(f"Failed to send chunk to {self.destination.url}: {e}") from e

        status = f"{response.status_code} {response.reason_phrase}".strip()
        logger.debug("HEC response", status=status)
        if response.status_code >= 400:
            # HEC explains the failure in the body (bad token, disabled input, unknown index)
            snippet = (response.text or "").strip()[:2000]
            logger.warning("HEC rejected chunk", status=status, body=snippet)
            if self.config.fail_on_http_error:
                raise HECResponseError(f"{status} from HEC: {snippet}", status_code=response.status_code)
        return status

    def send_all(self, stream: IO, block_size: Optional[int] = None) -> TransferResult:
        """Send everything left in ``stream``, one chunk at a time."""
        block_size = block_size or self.config.block_size
        result = TransferResult()
        for chunk in iter_chunks(stream, block_size, strict=self.config.strict_records):
            response = self.send_chunk(chunk)
            result.record(chunk, response)
            self.sink.chunk_sent(result.chunk_count, chunk, response)

        logger.debug(
            "Transfer complete",
            bytes_read=result.total_bytes_read,
            bytes_sent=result.total_bytes_sent,
            calls=result.chunk_count,
        )
        self.sink.transfer_complete(result)
        return result

    def send_file(self, path: str, block_size: Optional[int] = None) -> TransferResult:
        """Send a file of newline-delimited events."""
        if not path:
            raise ConfigurationError("No input file given")
        file_path = Path(path)
        if not file_path.is_file():
            raise ConfigurationError(f"Input file not found: {path}")

        try:
            f = open(file_path, "rb")
        except OSError as e:
            raise ConfigurationError(f"Input file is not readable: {path}") from e
        with f:
            logger.info("Sending file of events", path=path, uploader=repr(self))
            return self.send_all(f, block_size)

    def send_events(self, events: Union[str, bytes, Iterable[str]]) -> Optional[str]:
        """Send one or more events as a single request.

        A string or bytes body is sent as given. Any other iterable is
        joined with a newline after every event. Returns ``None`` without
        contacting HEC when there is nothing to send.
        """
        if not isinstance(events, (str, bytes)):
            events = join_events(events)
        if not events:
            logger.debug("No events to send")
            return None
        return self.send_chunk(events)

    def send_event(self, event: Union[str, Mapping[str, str]]) -> str:
        """Send a single event.

        A string is sent unmodified. A mapping of field names to values is
        first rendered with a timestamp and ``|`` delimiter.
        """
        if isinstance(event, Mapping):
            event = EventBuilder("|").add_fields(event).build()
        return self.send_chunk(event)
