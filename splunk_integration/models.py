"""HEC uploader models."""
from pydantic import BaseModel
from typing import Optional, Union

# HEC accepts at most 1,000,000 bytes per request; keep 16K back for headers
MAX_PAYLOAD_BYTES = 1_000_000 - 16_384
DEFAULT_BLOCK_SIZE = 524_288

class Chunk(BaseModel):
    """A bounded group of complete events sent as one request body."""
    data: Union[bytes, str]
    bytes_read: int = 0

    class Config:
        frozen = True

    @property
    def length(self) -> int:
        """Length in stream units (characters for text, bytes for binary)."""
        return len(self.data)

    @property
    def size(self) -> int:
        """Encoded size on the wire."""
        return len(self.payload)

    @property
    def payload(self) -> bytes:
        if isinstance(self.data, str):
            return self.data.encode("utf-8")
        return self.data

class TransferResult(BaseModel):
    """Aggregate outcome of one multi-chunk transfer.

    ``total_bytes_read`` is counted in stream units (characters for a text
    stream), ``total_bytes_sent`` in encoded bytes posted to HEC. The two are
    equal for binary and ASCII input.
    """
    total_bytes_read: int = 0
    total_bytes_sent: int = 0
    chunk_count: int = 0
    last_response: Optional[str] = None

    def record(self, chunk: Chunk, response: str) -> None:
        """Account for one chunk that was sent."""
        self.total_bytes_read += chunk.bytes_read
        self.total_bytes_sent += chunk.size
        self.chunk_count += 1
        self.last_response = response
