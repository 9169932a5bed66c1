"""Protocol constants and exception types for the MessageU client."""

from typing import Optional


# Protocol constants
CLIENT_VERSION = 2
CLIENT_ID_SIZE = 16
CLIENT_NAME_SIZE = 255
PUBLIC_KEY_SIZE = 160
SYMMETRIC_KEY_SIZE = 16
MESSAGE_ID_SIZE = 4
MESSAGE_TYPE_SIZE = 1
CONTENT_SIZE_SIZE = 4

# ClientID(16) + Version(1) + Code(2) + PayloadSize(4)
REQUEST_HEADER_SIZE = CLIENT_ID_SIZE + 1 + 2 + 4
# Version(1) + Code(2) + PayloadSize(4)
RESPONSE_HEADER_SIZE = 1 + 2 + 4

# SenderID(16) + MessageID(4) + MessageType(1) + ContentSize(4)
PENDING_RECORD_PREFIX_SIZE = CLIENT_ID_SIZE + MESSAGE_ID_SIZE + MESSAGE_TYPE_SIZE + CONTENT_SIZE_SIZE
# TargetID(16) + MessageType(1) + ContentSize(4)
SEND_MESSAGE_PREFIX_SIZE = CLIENT_ID_SIZE + MESSAGE_TYPE_SIZE + CONTENT_SIZE_SIZE
CLIENT_LIST_RECORD_SIZE = CLIENT_ID_SIZE + CLIENT_NAME_SIZE
PUBLIC_KEY_RESPONSE_SIZE = CLIENT_ID_SIZE + PUBLIC_KEY_SIZE
MESSAGE_SENT_RESPONSE_SIZE = CLIENT_ID_SIZE + MESSAGE_ID_SIZE

# Request codes
REQUEST_REGISTER = 600
REQUEST_LIST_CLIENTS = 601
REQUEST_FETCH_PUBLIC_KEY = 602
REQUEST_SEND_MESSAGE = 603
REQUEST_LIST_PENDING = 604

# Response codes
RESPONSE_REGISTERED = 2100
RESPONSE_CLIENT_LIST = 2101
RESPONSE_PUBLIC_KEY = 2102
RESPONSE_MESSAGE_SENT = 2103
RESPONSE_PENDING_MESSAGES = 2104
SERVER_ERROR_CODE = 9000

# Message types
SYMMETRIC_KEY_REQUEST = 1
SYMMETRIC_KEY_SEND = 2
TEXT_MESSAGE_SEND = 3
FILE_SEND = 4

SYMMETRIC_KEY_REQUEST_TEXT = "Request for symmetric key"

NULL_CLIENT_ID = bytes(CLIENT_ID_SIZE)


# Exception types
class MessageUError(Exception):
    """Base exception for MessageU errors."""
    pass


class MalformedHeaderError(MessageUError):
    """A frame header could not be packed or unpacked."""
    pass


class TransportTruncatedError(MessageUError):
    """The stream ended before the expected number of bytes arrived."""

    def __init__(self, expected: int, received: int) -> None:
        self.expected = expected
        self.received = received
        super().__init__(
            f"Connection closed after {received} of {expected} bytes"
        )


class ServerRejectedError(MessageUError):
    """The server answered with the general error code."""

    def __init__(self, header: Optional[object] = None) -> None:
        self.header = header
        super().__init__("server responded with an error")


class UnexpectedResponseError(MessageUError):
    """The response code or payload shape does not match the request."""
    pass


class NoSharedKeyError(MessageUError):
    """No symmetric key has been exchanged with the peer."""

    def __init__(self, peer_id: bytes) -> None:
        self.peer_id = peer_id
        super().__init__(f"No symmetric key for client {peer_id.hex()}")


class PublicKeyNotFoundError(MessageUError):
    """The peer's public key has not been fetched yet."""

    def __init__(self, peer_id: bytes) -> None:
        self.peer_id = peer_id
        super().__init__(f"Public key not found for client {peer_id.hex()}")


class PeerNotFoundError(MessageUError):
    """No client with the given name exists in the directory."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Client not found: {name}")


class NotRegisteredError(MessageUError):
    """The operation requires a registered identity."""

    def __init__(self) -> None:
        super().__init__("You must register first")


class AlreadyRegisteredError(MessageUError):
    """An identity already exists for this client."""

    def __init__(self) -> None:
        super().__init__("Already registered")


class InvalidIdentityError(MessageUError):
    """Persisted identity data is missing fields or malformed."""
    pass


class InvalidNameError(MessageUError):
    """A client name cannot be registered or stored."""
    pass
