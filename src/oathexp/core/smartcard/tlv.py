"""Simple TLV framing: one tag byte, one length byte, value."""

from __future__ import annotations

from dataclasses import dataclass

from oathexp.core.smartcard.errors import ProtocolError

MAX_LENGTH = 0xFF


@dataclass
class TLV:
    """A single simple-TLV record."""

    tag: int
    value: bytes = b""

    def encode(self) -> bytes:
        if not 0 <= self.tag <= 0xFF:
            raise ValueError(f"tag out of range: {self.tag:#x}")
        if len(self.value) > MAX_LENGTH:
            raise ValueError(
                f"value too long for tag {self.tag:02X}: {len(self.value)} > {MAX_LENGTH}"
            )
        return bytes([self.tag, len(self.value)]) + self.value

    def format(self, tag_names: dict[int, str] | None = None) -> str:
        """Format this record as a single human-readable line."""
        name = (tag_names or {}).get(self.tag, "")
        return f"{self.tag:02X} {name}: {self.value.hex(' ').upper()}".rstrip()

    def __bytes__(self) -> bytes:
        return self.encode()

    def __repr__(self) -> str:
        return f"TLV({self.tag:02X}, {self.value.hex().upper()})"


def encode(*nodes: TLV) -> bytes:
    """Concatenate the encodings of *nodes*."""
    return b"".join(node.encode() for node in nodes)


def parse(data: bytes) -> list[TLV]:
    """Parse a byte sequence into a list of simple-TLV records."""
    nodes: list[TLV] = []
    offset = 0
    while offset < len(data):
        if offset + 2 > len(data):
            raise ProtocolError(f"truncated TLV header at offset {offset}")
        tag = data[offset]
        length = data[offset + 1]
        offset += 2
        if offset + length > len(data):
            raise ProtocolError(
                f"TLV {tag:02X} needs {length} bytes, {len(data) - offset} left"
            )
        nodes.append(TLV(tag=tag, value=bytes(data[offset : offset + length])))
        offset += length
    return nodes
