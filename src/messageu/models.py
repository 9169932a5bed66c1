"""Models for MessageU identities, directories and messages."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Iterator, List, Optional

from .types import (
    CLIENT_ID_SIZE,
    FILE_SEND,
    SYMMETRIC_KEY_REQUEST,
    SYMMETRIC_KEY_SEND,
    TEXT_MESSAGE_SEND,
    PeerNotFoundError,
)


class MessageType(IntEnum):
    """Kinds of message carried by send-message and pending records."""
    SYMMETRIC_KEY_REQUEST = SYMMETRIC_KEY_REQUEST
    SYMMETRIC_KEY_SEND = SYMMETRIC_KEY_SEND
    TEXT_MESSAGE_SEND = TEXT_MESSAGE_SEND
    FILE_SEND = FILE_SEND


@dataclass(frozen=True)
class ClientIdentity:
    """The local client's persisted identity."""
    name: str
    id: bytes  # 16 bytes, assigned by the server
    private_key: bytes  # DER-encoded RSA private key

    def __post_init__(self) -> None:
        if len(self.id) != CLIENT_ID_SIZE:
            raise ValueError(f"Client ID must be {CLIENT_ID_SIZE} bytes, got {len(self.id)}")

    @property
    def hex_id(self) -> str:
        return self.id.hex()


@dataclass(frozen=True)
class PendingMessageRecord:
    """One message waiting for us on the server."""
    sender_id: bytes
    message_id: int
    message_type: int
    content: bytes


@dataclass(frozen=True)
class PeerEntry:
    """A registered client as listed by the server."""
    peer_id: bytes
    name: str


class ClientDirectory:
    """
    Snapshot of the server's client list.

    Fetched once per user action and passed to lookups, so resolving a name
    never triggers a network round trip.
    """

    def __init__(self, entries: Optional[List[PeerEntry]] = None) -> None:
        self._entries: List[PeerEntry] = list(entries or [])

    def __iter__(self) -> Iterator[PeerEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[PeerEntry]:
        return list(self._entries)

    def find_by_name(self, name: str) -> PeerEntry:
        """Returns the first client with this name."""
        for entry in self._entries:
            if entry.name == name:
                return entry
        raise PeerNotFoundError(name)

    def name_for(self, peer_id: bytes) -> str:
        """Returns the client's name, or its hex id if it is not listed."""
        for entry in self._entries:
            if entry.peer_id == peer_id:
                return entry.name
        return peer_id.hex()


@dataclass(frozen=True)
class SendReceipt:
    """Server acknowledgement of a stored message."""
    target_id: bytes
    message_id: int


class DispatchStatus(Enum):
    """Outcome of handling one pending message record."""
    OK = "ok"
    UNKNOWN_MESSAGE_TYPE = "unknown_message_type"
    DECRYPTION_FAILED = "decryption_failed"
    INVALID_KEY_LENGTH = "invalid_key_length"
    NO_SHARED_KEY = "no_shared_key"
    SAVE_FAILED = "save_failed"


@dataclass
class DispatchResult:
    """Result of dispatching a pending message record."""
    record: PendingMessageRecord
    status: DispatchStatus
    text: Optional[str] = None
    file_path: Optional[Path] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == DispatchStatus.OK

    def describe(self) -> str:
        """Human-readable content line for the console."""
        if self.status == DispatchStatus.OK:
            if self.record.message_type == SYMMETRIC_KEY_SEND:
                return "symmetric key received"
            if self.record.message_type == FILE_SEND:
                return str(self.file_path)
            return self.text or ""
        if self.status == DispatchStatus.UNKNOWN_MESSAGE_TYPE:
            return f"unknown message type {self.record.message_type}"
        if self.status == DispatchStatus.INVALID_KEY_LENGTH:
            return "invalid symmetric key"
        if self.status == DispatchStatus.SAVE_FAILED:
            return "can't save file"
        return "can't decrypt message"
