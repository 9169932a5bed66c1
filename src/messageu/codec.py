"""Binary codec for MessageU request and response headers.

All multi-byte integers on the wire are little-endian.
"""

from dataclasses import dataclass
from typing import Union

from .types import (
    CLIENT_ID_SIZE,
    CLIENT_NAME_SIZE,
    REQUEST_HEADER_SIZE,
    RESPONSE_HEADER_SIZE,
    InvalidNameError,
    MalformedHeaderError,
)


@dataclass(frozen=True)
class RequestHeader:
    """Header prepended to every request frame."""
    client_id: bytes  # 16 bytes, zero-filled before registration
    version: int
    code: int
    payload_size: int


@dataclass(frozen=True)
class ResponseHeader:
    """Header of every response frame."""
    version: int
    code: int
    payload_size: int


def pack_u32(value: int) -> bytes:
    """Encode an unsigned 32-bit integer."""
    return value.to_bytes(4, byteorder="little")


def unpack_u32(data: bytes, offset: int = 0) -> int:
    """Decode an unsigned 32-bit integer at offset."""
    return int.from_bytes(data[offset : offset + 4], byteorder="little")


def _check_range(field: str, value: int, width: int) -> None:
    """Raise MalformedHeaderError unless value fits in width unsigned bytes."""
    if not 0 <= value < 1 << (8 * width):
        raise MalformedHeaderError(f"{field} {value} does not fit in {width} byte(s)")


def pack_header(header: RequestHeader) -> bytes:
    """
    Encode a request header to bytes.

    Format (23 bytes):
        [0-15]   clientId (16 bytes)
        [16]     version
        [17-18]  code (little-endian uint16)
        [19-22]  payloadSize (little-endian uint32)

    Args:
        header: RequestHeader to encode

    Returns:
        Encoded bytes

    Raises:
        MalformedHeaderError: If the client id is not 16 bytes or a field
            does not fit its width
    """
    if len(header.client_id) != CLIENT_ID_SIZE:
        raise MalformedHeaderError(
            f"Client ID must be {CLIENT_ID_SIZE} bytes, got {len(header.client_id)}"
        )
    _check_range("version", header.version, 1)
    _check_range("code", header.code, 2)
    _check_range("payload_size", header.payload_size, 4)

    return (
        bytes(header.client_id)
        + bytes([header.version])
        + header.code.to_bytes(2, byteorder="little")
        + pack_u32(header.payload_size)
    )


def unpack_request_header(data: bytes) -> RequestHeader:
    """
    Decode the 23-byte request header form.

    Args:
        data: Encoded header bytes

    Returns:
        Decoded RequestHeader

    Raises:
        MalformedHeaderError: If data is not exactly 23 bytes
    """
    if len(data) != REQUEST_HEADER_SIZE:
        raise MalformedHeaderError(
            f"Request header must be {REQUEST_HEADER_SIZE} bytes, got {len(data)}"
        )

    offset = CLIENT_ID_SIZE
    return RequestHeader(
        client_id=bytes(data[:offset]),
        version=data[offset],
        code=int.from_bytes(data[offset + 1 : offset + 3], byteorder="little"),
        payload_size=unpack_u32(data, offset + 3),
    )


def pack_response_header(header: ResponseHeader) -> bytes:
    """Encode a response header (server side form, used by tooling and tests)."""
    _check_range("version", header.version, 1)
    _check_range("code", header.code, 2)
    _check_range("payload_size", header.payload_size, 4)
    return (
        bytes([header.version])
        + header.code.to_bytes(2, byteorder="little")
        + pack_u32(header.payload_size)
    )


def unpack_response_header(data: bytes) -> ResponseHeader:
    """
    Decode the 7-byte response header.

    Format:
        [0]    version
        [1-2]  code (little-endian uint16)
        [3-6]  payloadSize (little-endian uint32)

    Args:
        data: Raw header bytes

    Returns:
        Decoded ResponseHeader

    Raises:
        MalformedHeaderError: If data is not exactly 7 bytes
    """
    if len(data) != RESPONSE_HEADER_SIZE:
        raise MalformedHeaderError(
            f"Response header must be {RESPONSE_HEADER_SIZE} bytes, got {len(data)}"
        )

    return ResponseHeader(
        version=data[0],
        code=int.from_bytes(data[1:3], byteorder="little"),
        payload_size=unpack_u32(data, 3),
    )


def pad_field(data: bytes, size: int) -> bytes:
    """Truncate or zero-pad data to exactly size bytes."""
    return bytes(data[:size]).ljust(size, b"\x00")


def pad_name(name: Union[str, bytes]) -> bytes:
    """
    Encode a client name into the fixed 255-byte field.

    Shorter names are zero-padded. Longer names keep their first 254 bytes
    and end with a zero byte.
    """
    raw = name.encode("utf-8") if isinstance(name, str) else bytes(name)
    if len(raw) > CLIENT_NAME_SIZE:
        raw = raw[: CLIENT_NAME_SIZE - 1]
    return pad_field(raw, CLIENT_NAME_SIZE)


def unpad_name(field: bytes) -> str:
    """Decode a NUL-terminated name field."""
    return field.split(b"\x00", 1)[0].decode("utf-8", errors="replace")


def check_name(name: str) -> str:
    """
    Validate a client name for registration and the identity file.

    Returns:
        The name with surrounding whitespace removed

    Raises:
        InvalidNameError: If the name is empty, spans lines, contains a NUL
            or does not fit the 255-byte field with its terminator
    """
    name = name.strip()
    if not name:
        raise InvalidNameError("Name cannot be empty")
    if len(name.splitlines()) != 1 or "\x00" in name:
        raise InvalidNameError("Name must be a single line without NUL characters")
    if len(name.encode("utf-8")) >= CLIENT_NAME_SIZE:
        raise InvalidNameError(f"Name must be shorter than {CLIENT_NAME_SIZE} bytes")
    return name
