"""Tests for chunk_reader module."""

import io
import random

import pytest

from shared.exceptions import RecordTooLargeError
from splunk_integration.chunk_reader import iter_chunks, next_chunk


class CountingStream(io.StringIO):
    """StringIO that remembers how often and how much it was asked to read."""

    def __init__(self, value):
        super().__init__(value)
        self.requests = []

    def read(self, size=-1):
        self.requests.append(size)
        return super().read(size)


class TestNextChunk:
    def test_cuts_after_last_newline_and_carries_rest(self):
        stream = io.StringIO("aaaaa\nbbbbb\nccc")
        chunk, carry, is_final = next_chunk(stream, 10)
        assert chunk.data == "aaaaa\n"
        assert carry == "bbbb"
        assert is_final is False
        assert chunk.bytes_read == 10

    def test_carry_is_prepended_to_next_read(self):
        stream = io.StringIO("aaaaa\nbbbbb\nccc")
        _, carry, _ = next_chunk(stream, 10)
        chunk, carry, is_final = next_chunk(stream, 10, carry)
        assert chunk.data == "bbbbb\nccc"
        assert carry == ""
        assert is_final is True
        assert chunk.bytes_read == 5

    def test_read_request_shrinks_by_carry_length(self):
        stream = CountingStream("aaaaa\nbbbbb\nccc")
        _, carry, _ = next_chunk(stream, 10)
        next_chunk(stream, 10, carry)
        assert stream.requests == [10, 6]

    def test_short_read_is_final(self):
        stream = io.StringIO("one\ntwo\n")
        chunk, carry, is_final = next_chunk(stream, 100)
        assert chunk.data == "one\ntwo\n"
        assert carry == ""
        assert is_final is True

    def test_full_block_without_newline_is_emitted_whole(self):
        stream = io.StringIO("abcdefghijkl\n")
        chunk, carry, is_final = next_chunk(stream, 5)
        assert chunk.data == "abcde"
        assert carry == ""
        assert is_final is False

    def test_strict_mode_rejects_oversized_record(self):
        stream = io.StringIO("abcdefghijkl\n")
        with pytest.raises(RecordTooLargeError):
            next_chunk(stream, 5, strict=True)

    def test_newline_at_start_of_block(self):
        stream = io.StringIO("\nabcdefgh")
        chunk, carry, is_final = next_chunk(stream, 5)
        assert chunk.data == "\n"
        assert carry == "abcd"
        assert is_final is False

    def test_binary_stream(self):
        stream = io.BytesIO(b"aaaaa\nbbbbb\nccc")
        chunk, carry, is_final = next_chunk(stream, 10)
        assert chunk.data == b"aaaaa\n"
        assert carry == b"bbbb"
        assert is_final is False

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            next_chunk(io.StringIO("x\n"), 0)


class TestIterChunks:
    def test_empty_stream_yields_nothing(self):
        assert list(iter_chunks(io.StringIO(""), 10)) == []

    def test_block_ending_on_newline_has_no_empty_tail_chunk(self):
        chunks = list(iter_chunks(io.StringIO("aaaa\n"), 5))
        assert [c.data for c in chunks] == ["aaaa\n"]

    def test_no_reads_after_final_chunk(self):
        stream = CountingStream("one\ntwo\nthree\n")
        chunks = list(iter_chunks(stream, 100))
        assert len(chunks) == 1
        assert stream.requests == [100]

    def test_records_are_never_split(self):
        rng = random.Random(1234)
        records = ["".join(rng.choice("abcdefgh =\"") for _ in range(rng.randint(1, 40))) for _ in range(500)]
        text = "".join(r + "\n" for r in records)

        chunks = list(iter_chunks(io.StringIO(text), 64))

        assert "".join(c.data for c in chunks) == text
        assert all(c.data.endswith("\n") for c in chunks)
        rebuilt = [line for c in chunks for line in c.data.splitlines()]
        assert rebuilt == records

    def test_chunks_never_exceed_block_size(self):
        rng = random.Random(99)
        text = "".join("x" * rng.randint(0, 30) + "\n" for _ in range(300))
        chunks = list(iter_chunks(io.StringIO(text), 32))
        assert chunks
        assert all(c.length <= 32 for c in chunks)

    def test_bytes_read_adds_up_to_input_length(self):
        text = "".join(f"record-{i}\n" for i in range(200))
        chunks = list(iter_chunks(io.StringIO(text), 50))
        assert sum(c.bytes_read for c in chunks) == len(text)
        assert sum(c.length for c in chunks) == len(text)


class TestMultiByteText:
    def test_chunk_held_to_encoded_size(self):
        # each "é\n" record is 2 characters but 3 bytes
        stream = io.StringIO("é\n" * 10)
        chunk, carry, is_final = next_chunk(stream, 6)
        assert chunk.data == "é\né\n"
        assert chunk.size == 6
        assert carry == "é\n"
        assert is_final is False

    def test_oversized_tail_is_not_final(self):
        stream = io.StringIO("日日\n日日\n")
        chunk, carry, is_final = next_chunk(stream, 10)
        assert chunk.data == "日日\n"
        assert carry == "日日\n"
        assert is_final is False

        chunk, carry, is_final = next_chunk(stream, 10, carry)
        assert chunk.data == "日日\n"
        assert is_final is True

    def test_wide_records_never_exceed_byte_bound(self):
        record = "日志事件" * 25 + "\n"
        text = record * 600
        chunks = list(iter_chunks(io.StringIO(text), 4096))

        assert all(c.size <= 4096 for c in chunks)
        assert all(c.data.endswith("\n") for c in chunks)
        assert "".join(c.data for c in chunks) == text

    def test_record_wider_than_block_in_bytes_is_split_on_characters(self):
        chunks = list(iter_chunks(io.StringIO("日" * 10 + "\n"), 9))
        assert [c.data for c in chunks] == ["日日日", "日日日", "日日日", "日\n"]
