"""
Key exchange and pending message dispatch.

Per peer the session tracks two facts: whether we know its public key and
whether we share a symmetric key with it. Outbound helpers pick the key
material for each message type; dispatch_record() does the inverse for
received records and reports per-record outcomes as DispatchResult values.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .crypto import (
    DecryptionError,
    aes_decrypt,
    aes_encrypt,
    generate_symmetric_key,
    rsa_decrypt,
    rsa_encrypt,
)
from .models import DispatchResult, DispatchStatus, MessageType, PendingMessageRecord
from .session import ClientSession
from .storage import DirectoryFileStore, ReceivedFileStore, file_name_for
from .types import (
    SYMMETRIC_KEY_REQUEST_TEXT,
    SYMMETRIC_KEY_SIZE,
    NoSharedKeyError,
    PublicKeyNotFoundError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutgoingMessage:
    """Encrypted content ready for build_send_message()."""
    target_id: bytes
    message_type: int
    content: bytes


# MARK: - Outbound

def store_public_key(session: ClientSession, peer_id: bytes, public_key: bytes) -> None:
    """Record a fetched public key. Repeated fetches overwrite."""
    session.public_keys.store(peer_id, public_key)
    logger.info("Stored public key for %s", peer_id.hex())


def _require_public_key(session: ClientSession, peer_id: bytes) -> bytes:
    public_key = session.public_keys.retrieve(peer_id)
    if public_key is None:
        raise PublicKeyNotFoundError(peer_id)
    return public_key


def _require_symmetric_key(session: ClientSession, peer_id: bytes) -> bytes:
    key = session.symmetric_keys.retrieve(peer_id)
    if key is None:
        raise NoSharedKeyError(peer_id)
    return key


def prepare_symmetric_key_request(session: ClientSession, peer_id: bytes) -> OutgoingMessage:
    """
    Encrypt the symmetric key request for peer_id.

    Raises:
        PublicKeyNotFoundError: If the peer's public key was never fetched.
    """
    public_key = _require_public_key(session, peer_id)
    content = rsa_encrypt(public_key, SYMMETRIC_KEY_REQUEST_TEXT.encode("utf-8"))
    return OutgoingMessage(peer_id, MessageType.SYMMETRIC_KEY_REQUEST, content)


def prepare_symmetric_key_send(session: ClientSession, peer_id: bytes) -> OutgoingMessage:
    """
    Generate a fresh symmetric key for peer_id and encrypt it for them.

    The new key replaces any key cached for the peer once encryption succeeds.

    Raises:
        PublicKeyNotFoundError: If the peer's public key was never fetched.
    """
    public_key = _require_public_key(session, peer_id)
    symmetric_key = generate_symmetric_key()
    content = rsa_encrypt(public_key, symmetric_key)

    session.symmetric_keys.store(peer_id, symmetric_key)
    logger.info("Generated symmetric key for %s", peer_id.hex())
    return OutgoingMessage(peer_id, MessageType.SYMMETRIC_KEY_SEND, content)


def prepare_text_message(session: ClientSession, peer_id: bytes, text: str) -> OutgoingMessage:
    """
    Encrypt a text message with the key shared with peer_id.

    Raises:
        NoSharedKeyError: If no symmetric key was exchanged yet.
    """
    key = _require_symmetric_key(session, peer_id)
    content = aes_encrypt(key, text.encode("utf-8"))
    return OutgoingMessage(peer_id, MessageType.TEXT_MESSAGE_SEND, content)


def prepare_file(session: ClientSession, peer_id: bytes, data: bytes) -> OutgoingMessage:
    """
    Encrypt file contents with the key shared with peer_id.

    Raises:
        NoSharedKeyError: If no symmetric key was exchanged yet.
    """
    key = _require_symmetric_key(session, peer_id)
    content = aes_encrypt(key, data)
    return OutgoingMessage(peer_id, MessageType.FILE_SEND, content)


# MARK: - Inbound

def dispatch_record(
    session: ClientSession,
    record: PendingMessageRecord,
    file_store: Optional[ReceivedFileStore] = None,
) -> DispatchResult:
    """
    Decrypt one pending record and apply its effect on the session.

    Never raises for conditions caused by the record's content; those are
    reported through the result status.

    Args:
        session: The receiving client's session.
        record: The decoded record.
        file_store: Destination for received files (default: temp dir).

    Returns:
        DispatchResult describing the outcome.
    """
    sender = record.sender_id.hex()

    if record.message_type == MessageType.SYMMETRIC_KEY_REQUEST:
        try:
            plaintext = rsa_decrypt(session.private_key, record.content)
        except DecryptionError as e:
            return _failed(record, DispatchStatus.DECRYPTION_FAILED, str(e))
        # Replying with a key is a separate user action
        logger.info("Symmetric key requested by %s", sender)
        return DispatchResult(
            record=record,
            status=DispatchStatus.OK,
            text=plaintext.decode("utf-8", errors="replace"),
        )

    if record.message_type == MessageType.SYMMETRIC_KEY_SEND:
        try:
            symmetric_key = rsa_decrypt(session.private_key, record.content)
        except DecryptionError as e:
            return _failed(record, DispatchStatus.DECRYPTION_FAILED, str(e))
        if len(symmetric_key) != SYMMETRIC_KEY_SIZE:
            return _failed(
                record,
                DispatchStatus.INVALID_KEY_LENGTH,
                f"expected {SYMMETRIC_KEY_SIZE} bytes, got {len(symmetric_key)}",
            )
        session.symmetric_keys.store(record.sender_id, symmetric_key)
        logger.info("Received symmetric key from %s", sender)
        return DispatchResult(record=record, status=DispatchStatus.OK)

    if record.message_type in (MessageType.TEXT_MESSAGE_SEND, MessageType.FILE_SEND):
        key = session.symmetric_keys.retrieve(record.sender_id)
        if key is None:
            return _failed(record, DispatchStatus.NO_SHARED_KEY, f"no symmetric key for {sender}")
        try:
            plaintext = aes_decrypt(key, record.content)
        except DecryptionError as e:
            return _failed(record, DispatchStatus.DECRYPTION_FAILED, str(e))

        if record.message_type == MessageType.TEXT_MESSAGE_SEND:
            return DispatchResult(
                record=record,
                status=DispatchStatus.OK,
                text=plaintext.decode("utf-8", errors="replace"),
            )

        store = file_store if file_store is not None else DirectoryFileStore()
        try:
            path = store.save(plaintext, file_name_for(record))
        except OSError as e:
            return _failed(record, DispatchStatus.SAVE_FAILED, str(e))
        return DispatchResult(record=record, status=DispatchStatus.OK, file_path=path)

    return _failed(
        record,
        DispatchStatus.UNKNOWN_MESSAGE_TYPE,
        f"message type {record.message_type}",
    )


def dispatch_pending(
    session: ClientSession,
    records: Iterable[PendingMessageRecord],
    file_store: Optional[ReceivedFileStore] = None,
) -> List[DispatchResult]:
    """Dispatch every record in order; a failed record never stops the rest."""
    return [dispatch_record(session, record, file_store) for record in records]


def _failed(record: PendingMessageRecord, status: DispatchStatus, detail: str) -> DispatchResult:
    logger.warning(
        "Message %d from %s: %s (%s)",
        record.message_id,
        record.sender_id.hex(),
        status.value,
        detail,
    )
    return DispatchResult(record=record, status=status, detail=detail)
