"""Response header validation and payload parsers."""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from .codec import ResponseHeader, unpack_response_header, unpack_u32, unpad_name
from .models import ClientDirectory, PeerEntry, SendReceipt
from .transport import Transport
from .types import (
    CLIENT_ID_SIZE,
    CLIENT_LIST_RECORD_SIZE,
    MESSAGE_SENT_RESPONSE_SIZE,
    PUBLIC_KEY_RESPONSE_SIZE,
    RESPONSE_HEADER_SIZE,
    SERVER_ERROR_CODE,
    ServerRejectedError,
    UnexpectedResponseError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Response:
    """A complete response frame."""
    header: ResponseHeader
    payload: bytes

    @property
    def code(self) -> int:
        return self.header.code


def parse_response_header(raw: bytes) -> ResponseHeader:
    """
    Decode and check a raw response header.

    Args:
        raw: The 7 header bytes

    Returns:
        The header; payload_size is the number of bytes to read next

    Raises:
        ServerRejectedError: If the server answered with the error code.
            The payload, if any, carries nothing usable.
    """
    header = unpack_response_header(raw)
    if header.code == SERVER_ERROR_CODE:
        logger.debug("Server rejected request (payload_size=%d)", header.payload_size)
        raise ServerRejectedError(header)
    return header


def read_response(transport: Transport) -> Response:
    """
    Read one response frame from the transport.

    A rejected response's declared payload is read and discarded so the next
    header starts at the right offset.

    Raises:
        ServerRejectedError: On the server error code
        TransportTruncatedError: If the stream closes early
    """
    try:
        header = parse_response_header(transport.read_exact(RESPONSE_HEADER_SIZE))
    except ServerRejectedError as e:
        if e.header.payload_size:
            transport.read_exact(e.header.payload_size)
        raise
    payload = transport.read_exact(header.payload_size) if header.payload_size else b""
    logger.debug("Received response %d with %d payload bytes", header.code, len(payload))
    return Response(header=header, payload=payload)


def expect_code(response: Response, code: int) -> Response:
    """Raise UnexpectedResponseError unless response carries code."""
    if response.code != code:
        raise UnexpectedResponseError(
            f"Expected response code {code}, got {response.code}"
        )
    return response


def parse_registration(payload: bytes) -> bytes:
    """Extract the client id assigned by the server."""
    if len(payload) != CLIENT_ID_SIZE:
        raise UnexpectedResponseError(
            f"Registration payload must be {CLIENT_ID_SIZE} bytes, got {len(payload)}"
        )
    return bytes(payload)


def parse_client_list(payload: bytes) -> ClientDirectory:
    """
    Decode the client list payload: repeated peerId[16] | name[255].

    A trailing partial record is ignored.
    """
    entries: List[PeerEntry] = []
    offset = 0
    while len(payload) - offset >= CLIENT_LIST_RECORD_SIZE:
        peer_id = bytes(payload[offset : offset + CLIENT_ID_SIZE])
        name = unpad_name(payload[offset + CLIENT_ID_SIZE : offset + CLIENT_LIST_RECORD_SIZE])
        entries.append(PeerEntry(peer_id=peer_id, name=name))
        offset += CLIENT_LIST_RECORD_SIZE
    return ClientDirectory(entries)


def parse_public_key(payload: bytes) -> Tuple[bytes, bytes]:
    """Decode peerId[16] | publicKey[160]."""
    if len(payload) != PUBLIC_KEY_RESPONSE_SIZE:
        raise UnexpectedResponseError(
            f"Public key payload must be {PUBLIC_KEY_RESPONSE_SIZE} bytes, got {len(payload)}"
        )
    return bytes(payload[:CLIENT_ID_SIZE]), bytes(payload[CLIENT_ID_SIZE:])


def parse_message_sent(payload: bytes) -> SendReceipt:
    """Decode targetId[16] | messageId:u32."""
    if len(payload) != MESSAGE_SENT_RESPONSE_SIZE:
        raise UnexpectedResponseError(
            f"Message sent payload must be {MESSAGE_SENT_RESPONSE_SIZE} bytes, got {len(payload)}"
        )
    return SendReceipt(
        target_id=bytes(payload[:CLIENT_ID_SIZE]),
        message_id=unpack_u32(payload, CLIENT_ID_SIZE),
    )
