"""Decoder for the pending messages response payload."""

import logging
from typing import Iterator, List

from .codec import unpack_u32
from .models import PendingMessageRecord
from .types import CLIENT_ID_SIZE, PENDING_RECORD_PREFIX_SIZE

logger = logging.getLogger(__name__)


def iter_pending_messages(payload: bytes) -> Iterator[PendingMessageRecord]:
    """
    Yield each message record packed back-to-back in payload.

    Record format:
        [0-15]   senderId (16 bytes)
        [16-19]  messageId (little-endian uint32)
        [20]     messageType
        [21-24]  contentSize (little-endian uint32)
        [25+]    content (contentSize bytes)

    Lengths read from the wire are checked against the remaining buffer
    before slicing. A truncated trailing record ends the iteration.

    Args:
        payload: The complete response payload

    Yields:
        PendingMessageRecord for every complete record
    """
    data = memoryview(payload)
    total = len(data)
    offset = 0

    while total - offset >= PENDING_RECORD_PREFIX_SIZE:
        sender_id = bytes(data[offset : offset + CLIENT_ID_SIZE])
        offset += CLIENT_ID_SIZE

        message_id = unpack_u32(data, offset)
        offset += 4

        message_type = data[offset]
        offset += 1

        content_size = unpack_u32(data, offset)
        offset += 4

        if total - offset < content_size:
            logger.debug(
                "Discarding truncated record %d: %d content bytes declared, %d left",
                message_id,
                content_size,
                total - offset,
            )
            return

        content = bytes(data[offset : offset + content_size])
        offset += content_size

        yield PendingMessageRecord(
            sender_id=sender_id,
            message_id=message_id,
            message_type=message_type,
            content=content,
        )

    if offset < total:
        logger.debug("Discarding %d trailing bytes", total - offset)


def decode_pending_messages(payload: bytes) -> List[PendingMessageRecord]:
    """Decode every complete record in payload. Empty payload yields []."""
    return list(iter_pending_messages(payload))
