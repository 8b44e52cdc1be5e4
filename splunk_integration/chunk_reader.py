"""Split a stream of newline-delimited events into bounded chunks."""
from typing import IO, AnyStr, Iterator, Tuple
import structlog

from shared.exceptions import RecordTooLargeError
from splunk_integration.models import Chunk

logger = structlog.get_logger()


def _terminator(buffer: AnyStr) -> AnyStr:
    return b"\n" if isinstance(buffer, (bytes, bytearray)) else "\n"


def _encoded_fit(buffer: AnyStr, max_size: int) -> int:
    """Length of the longest prefix of ``buffer`` whose UTF-8 form fits in ``max_size`` bytes."""
    if isinstance(buffer, (bytes, bytearray)) or len(buffer.encode("utf-8")) <= max_size:
        return len(buffer)
    low, high = 0, min(len(buffer), max_size)
    while low < high:
        mid = (low + high + 1) // 2
        if len(buffer[:mid].encode("utf-8")) <= max_size:
            low = mid
        else:
            high = mid - 1
    return low


def next_chunk(
    stream: IO[AnyStr],
    max_size: int,
    carry: AnyStr = None,
    strict: bool = False,
) -> Tuple[Chunk, AnyStr, bool]:
    """Read the next chunk of whole records from ``stream``.

    The carry-over from the previous call is placed in front of the newly
    read data, and only ``max_size - len(carry)`` units are requested, so a
    chunk is never longer than ``max_size``. For text streams the chunk is
    also held to ``max_size`` bytes once encoded as UTF-8. When the read
    fills the request, the chunk is cut right after the last newline that
    fits and whatever follows it becomes the new carry. A short read means
    end of stream: everything left is emitted and the chunk is final, unless
    the remainder is too large once encoded and has to be sent in pieces.

    Args:
        stream: Text or binary stream positioned at the next unread record
        max_size: Upper bound on chunk length, in stream units and in bytes
        carry: Partial record left over from the previous call
        strict: Raise instead of splitting a record longer than ``max_size``

    Returns:
        Tuple of (chunk, new carry, is_final)

    Raises:
        RecordTooLargeError: In strict mode, when a full block has no newline
    """
    if max_size <= 0:
        raise ValueError(f"max_size must be positive, got {max_size}")

    requested = max_size - (len(carry) if carry else 0)
    data = stream.read(requested)
    bytes_read = len(data)
    buffer = carry + data if carry else data
    empty = buffer[:0]
    limit = _encoded_fit(buffer, max_size)

    if bytes_read < requested and limit == len(buffer):
        return Chunk(data=buffer, bytes_read=bytes_read), empty, True

    last_lf = buffer.rfind(_terminator(buffer), 0, limit)
    if last_lf < 0:
        if strict:
            raise RecordTooLargeError(
                f"No record terminator within {max_size} units; a single record exceeds the block size"
            )
        if limit == 0:
            raise RecordTooLargeError(f"A single character does not fit in {max_size} bytes")
        logger.warning(
            "No record terminator in full block; emitting a partial record",
            block_size=max_size,
        )
        return Chunk(data=buffer[:limit], bytes_read=bytes_read), buffer[limit:], False

    cut = last_lf + 1
    logger.debug(
        "Read block",
        bytes_read=bytes_read,
        chunk_length=cut,
        carry_length=len(buffer) - cut,
    )
    return Chunk(data=buffer[:cut], bytes_read=bytes_read), buffer[cut:], False


def iter_chunks(stream: IO[AnyStr], max_size: int, strict: bool = False) -> Iterator[Chunk]:
    """Yield chunks until the stream is exhausted.

    The empty read that can follow a block ending exactly on a newline does
    not produce a chunk of its own.
    """
    carry = None
    while True:
        chunk, carry, is_final = next_chunk(stream, max_size, carry, strict=strict)
        if chunk.length:
            yield chunk
        if is_final:
            break
