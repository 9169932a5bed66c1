"""
MessageU - End-to-end encrypted messaging client

Python implementation of the MessageU client protocol using RSA-OAEP for
key exchange and AES-CBC for message content.
"""

from .codec import (
    RequestHeader,
    ResponseHeader,
    pack_header,
    unpack_request_header,
    pack_response_header,
    unpack_response_header,
)
from .request_builder import (
    build_registration,
    build_list_clients,
    build_fetch_public_key,
    build_send_message,
    build_list_pending,
)
from .response_parser import (
    Response,
    parse_response_header,
    read_response,
    parse_client_list,
    parse_public_key,
    parse_message_sent,
)
from .pending import decode_pending_messages, iter_pending_messages
from .crypto import EncryptionError, DecryptionError
from .models import (
    MessageType,
    ClientIdentity,
    PendingMessageRecord,
    PeerEntry,
    ClientDirectory,
    SendReceipt,
    DispatchStatus,
    DispatchResult,
)
from .session import ClientSession
from .dispatch import (
    OutgoingMessage,
    store_public_key,
    prepare_symmetric_key_request,
    prepare_symmetric_key_send,
    prepare_text_message,
    prepare_file,
    dispatch_record,
    dispatch_pending,
)
from .storage import (
    PeerPublicKeyCache,
    PeerSymmetricKeyCache,
    IdentityStorage,
    InMemoryIdentityStorage,
    FileIdentityStorage,
    ReceivedFileStore,
    DirectoryFileStore,
)
from .transport import Transport, SocketTransport, LoopbackTransport
from .config import ClientConfig
from .client import MessageUClient
from .types import (
    CLIENT_VERSION,
    SERVER_ERROR_CODE,
    MessageUError,
    MalformedHeaderError,
    TransportTruncatedError,
    ServerRejectedError,
    UnexpectedResponseError,
    NoSharedKeyError,
    PublicKeyNotFoundError,
    PeerNotFoundError,
    NotRegisteredError,
    AlreadyRegisteredError,
    InvalidIdentityError,
    InvalidNameError,
)

__version__ = "0.1.0"

__all__ = [
    # Codec
    "RequestHeader",
    "ResponseHeader",
    "pack_header",
    "unpack_request_header",
    "pack_response_header",
    "unpack_response_header",
    # Requests
    "build_registration",
    "build_list_clients",
    "build_fetch_public_key",
    "build_send_message",
    "build_list_pending",
    # Responses
    "Response",
    "parse_response_header",
    "read_response",
    "parse_client_list",
    "parse_public_key",
    "parse_message_sent",
    "decode_pending_messages",
    "iter_pending_messages",
    # Crypto
    "EncryptionError",
    "DecryptionError",
    # Models
    "MessageType",
    "ClientIdentity",
    "PendingMessageRecord",
    "PeerEntry",
    "ClientDirectory",
    "SendReceipt",
    "DispatchStatus",
    "DispatchResult",
    # Key exchange
    "ClientSession",
    "OutgoingMessage",
    "store_public_key",
    "prepare_symmetric_key_request",
    "prepare_symmetric_key_send",
    "prepare_text_message",
    "prepare_file",
    "dispatch_record",
    "dispatch_pending",
    # Storage
    "PeerPublicKeyCache",
    "PeerSymmetricKeyCache",
    "IdentityStorage",
    "InMemoryIdentityStorage",
    "FileIdentityStorage",
    "ReceivedFileStore",
    "DirectoryFileStore",
    # Transport
    "Transport",
    "SocketTransport",
    "LoopbackTransport",
    # Client
    "ClientConfig",
    "MessageUClient",
    # Errors
    "MessageUError",
    "MalformedHeaderError",
    "TransportTruncatedError",
    "ServerRejectedError",
    "UnexpectedResponseError",
    "NoSharedKeyError",
    "PublicKeyNotFoundError",
    "PeerNotFoundError",
    "NotRegisteredError",
    "AlreadyRegisteredError",
    "InvalidIdentityError",
    "InvalidNameError",
    # Constants
    "CLIENT_VERSION",
    "SERVER_ERROR_CODE",
]
