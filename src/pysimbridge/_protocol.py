"""Wire codec for the fixed 16-byte little-endian message header.

Every message on the wire is a header followed by ``size - 16`` payload
bytes::

    size:u32 | version:u32 | type:u32 | id:u32 | payload...

This module is pure: no I/O, no logging.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from pysimbridge._constants import HEADER_SIZE, PROTOCOL_VERSION
from pysimbridge.exceptions import MalformedHeaderError

_HEADER = struct.Struct("<IIII")
_U32 = struct.Struct("<I")


@dataclass(frozen=True)
class Header:
    """Decoded message header."""

    size: int
    version: int
    type: int
    id: int

    @property
    def payload_size(self) -> int:
        return self.size - HEADER_SIZE


def encode_header(message_type: int, message_id: int, payload_size: int) -> bytes:
    """Build a 16-byte header with ``size = 16 + payload_size``."""
    return _HEADER.pack(HEADER_SIZE + payload_size, PROTOCOL_VERSION, message_type, message_id)


def decode_header(data: bytes) -> Header:
    """Parse the first 16 bytes of *data* into a :class:`Header`.

    Message type and protocol version are not checked here.

    Raises :class:`MalformedHeaderError` when fewer than 16 bytes are given.
    """
    if len(data) < HEADER_SIZE:
        raise MalformedHeaderError(f"header too short: got {len(data)} bytes, need {HEADER_SIZE}")
    size, version, message_type, message_id = _HEADER.unpack_from(data)
    return Header(size=size, version=version, type=message_type, id=message_id)


def encode_message(message_type: int, message_id: int, payload: bytes = b"") -> bytes:
    """Frame *payload* as one contiguous header+payload buffer."""
    return encode_header(message_type, message_id, len(payload)) + payload


def encode_u32(value: int) -> bytes:
    return _U32.pack(value)


def encode_cstring(text: str) -> bytes:
    """UTF-8 encode *text* and append the NUL terminator."""
    return text.encode("utf-8") + b"\x00"
