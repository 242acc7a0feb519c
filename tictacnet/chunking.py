"""Fixed-size data packets and acknowledgements for chunked UDP chat."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass
from typing import Iterable, Union

PORT = 8080
MAX_MSG_SIZE = 4096
CHUNK_SIZE = 5

_HEAD = struct.Struct("<ii%ds" % (CHUNK_SIZE + 1))
_WIRE = struct.Struct("<ii%ds2x" % (CHUNK_SIZE + 1))
STRUCT_CHUNK_SIZE = _WIRE.size

_ACK = re.compile(r"ACK <\s*([+-]?\d+)")


@dataclass(frozen=True)
class DataPacket:
    """One chunk of a message with its position and the chunk count."""

    seq_no: int
    num_chunks: int
    chunk: bytes

    def pack(self) -> bytes:
        """Encode as the fixed-size wire record (little-endian integers)."""
        if len(self.chunk) > CHUNK_SIZE:
            raise ValueError(f"chunk longer than {CHUNK_SIZE} bytes")
        return _WIRE.pack(self.seq_no, self.num_chunks, self.chunk)

    @classmethod
    def unpack(cls, data: bytes) -> "DataPacket":
        """Decode a wire record; trailing padding may be missing."""
        if len(data) < _HEAD.size:
            raise ValueError(f"packet too short: {len(data)} bytes")
        seq_no, num_chunks, raw = _HEAD.unpack_from(data)
        chunk = raw[:CHUNK_SIZE].split(b"\0", 1)[0]
        return cls(seq_no, num_chunks, chunk)


def split_into_chunks(message: str, chunk_size: int = CHUNK_SIZE) -> list[DataPacket]:
    """Cut the UTF-8 encoding of ``message`` into numbered packets."""
    if chunk_size <= 0:
        raise ValueError("chunk size must be positive")
    data = message.encode("utf-8")
    pieces = [data[start:start + chunk_size] for start in range(0, len(data), chunk_size)]
    total = len(pieces)
    return [DataPacket(seq_no, total, piece) for seq_no, piece in enumerate(pieces)]


def reassemble(packets: Iterable[DataPacket]) -> str:
    """Join received packets, in any order and with repeats, into the message."""
    storage: dict[int, bytes] = {}
    num_chunks = 0
    for packet in packets:
        if packet.num_chunks <= 0:
            raise ValueError("packet carries no chunk count")
        num_chunks = packet.num_chunks
        storage[packet.seq_no % num_chunks] = packet.chunk
    missing = [index for index in range(num_chunks) if index not in storage]
    if missing:
        raise ValueError(f"missing chunks: {missing}")
    return b"".join(storage[index] for index in range(num_chunks)).decode(
        "utf-8", errors="replace"
    )


def format_ack(seq_no: int) -> str:
    """Acknowledgement text for a chunk."""
    return f"ACK <{seq_no}>"


def parse_ack(text: Union[str, bytes]) -> int:
    """Return the chunk number an acknowledgement refers to."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    text = text.split("\0", 1)[0]
    found = _ACK.match(text)
    if found is None:
        raise ValueError(f"not an acknowledgement: {text!r}")
    return int(found.group(1))