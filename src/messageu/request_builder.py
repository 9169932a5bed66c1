"""Builders for the five outbound request frames."""

import logging
from typing import Union

from .codec import RequestHeader, pack_header, pack_u32, pad_field, pad_name
from .types import (
    CLIENT_ID_SIZE,
    CLIENT_VERSION,
    NULL_CLIENT_ID,
    PUBLIC_KEY_SIZE,
    REQUEST_FETCH_PUBLIC_KEY,
    REQUEST_HEADER_SIZE,
    REQUEST_LIST_CLIENTS,
    REQUEST_LIST_PENDING,
    REQUEST_REGISTER,
    REQUEST_SEND_MESSAGE,
    MalformedHeaderError,
)

logger = logging.getLogger(__name__)

MAX_PAYLOAD_SIZE = 0xFFFFFFFF


def build_frame(client_id: bytes, code: int, payload: bytes = b"") -> bytes:
    """
    Assemble a complete request frame (header + payload).

    Args:
        client_id: The sender's 16-byte client id
        code: Request code
        payload: Serialized payload

    Returns:
        The frame bytes

    Raises:
        MalformedHeaderError: If the header cannot describe the payload
    """
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise MalformedHeaderError(f"Payload too large: {len(payload)} bytes")

    header = RequestHeader(
        client_id=client_id,
        version=CLIENT_VERSION,
        code=code,
        payload_size=len(payload),
    )
    frame = pack_header(header) + payload

    if len(frame) - REQUEST_HEADER_SIZE != header.payload_size:
        raise MalformedHeaderError("Payload size does not match header")

    logger.debug("Built request %d with %d payload bytes", code, header.payload_size)
    return frame


def _check_target(target_id: bytes) -> bytes:
    if len(target_id) != CLIENT_ID_SIZE:
        raise MalformedHeaderError(
            f"Target ID must be {CLIENT_ID_SIZE} bytes, got {len(target_id)}"
        )
    return bytes(target_id)


def build_registration(name: Union[str, bytes], public_key: bytes) -> bytes:
    """
    Build the registration request.

    Payload: name[255] | public_key[160], both zero-padded or truncated.
    The client id is all zeros since the server has not assigned one yet.
    """
    payload = pad_name(name) + pad_field(public_key, PUBLIC_KEY_SIZE)
    return build_frame(NULL_CLIENT_ID, REQUEST_REGISTER, payload)


def build_list_clients(client_id: bytes) -> bytes:
    """Build the client list request (no payload)."""
    return build_frame(client_id, REQUEST_LIST_CLIENTS)


def build_fetch_public_key(client_id: bytes, target_id: bytes) -> bytes:
    """Build the public key request for target_id."""
    return build_frame(client_id, REQUEST_FETCH_PUBLIC_KEY, _check_target(target_id))


def build_send_message(
    client_id: bytes,
    target_id: bytes,
    message_type: int,
    content: bytes,
) -> bytes:
    """
    Build a send-message request.

    Payload format:
        [0-15]   targetId (16 bytes)
        [16]     messageType
        [17-20]  contentSize (little-endian uint32)
        [21+]    content

    Args:
        client_id: Sender's client id
        target_id: Recipient's client id
        message_type: One of the message type constants
        content: Already-encrypted content bytes

    Returns:
        The frame bytes
    """
    if len(content) > MAX_PAYLOAD_SIZE:
        raise MalformedHeaderError(f"Content too large: {len(content)} bytes")
    if not 0 <= message_type <= 0xFF:
        raise MalformedHeaderError(f"Message type {message_type} does not fit in 1 byte")

    payload = (
        _check_target(target_id)
        + bytes([message_type])
        + pack_u32(len(content))
        + bytes(content)
    )
    return build_frame(client_id, REQUEST_SEND_MESSAGE, payload)


def build_list_pending(client_id: bytes) -> bytes:
    """Build the pending messages request (no payload)."""
    return build_frame(client_id, REQUEST_LIST_PENDING)
