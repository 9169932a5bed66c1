"""
MessageU client.

The MessageUClient runs the request/response protocol over a single
transport: one frame out, one complete response back, before the next
request is issued.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .codec import check_name
from .config import ClientConfig
from .dispatch import (
    OutgoingMessage,
    dispatch_pending,
    prepare_file,
    prepare_symmetric_key_request,
    prepare_symmetric_key_send,
    prepare_text_message,
    store_public_key,
)
from .models import ClientDirectory, DispatchResult, SendReceipt
from .pending import decode_pending_messages
from .request_builder import (
    build_fetch_public_key,
    build_list_clients,
    build_list_pending,
    build_registration,
    build_send_message,
)
from .response_parser import (
    Response,
    expect_code,
    parse_client_list,
    parse_message_sent,
    parse_public_key,
    parse_registration,
    read_response,
)
from .session import ClientSession
from .storage import (
    DirectoryFileStore,
    FileIdentityStorage,
    IdentityStorage,
    InMemoryIdentityStorage,
    ReceivedFileStore,
)
from .transport import SocketTransport, Transport
from .types import (
    NULL_CLIENT_ID,
    RESPONSE_CLIENT_LIST,
    RESPONSE_MESSAGE_SENT,
    RESPONSE_PENDING_MESSAGES,
    RESPONSE_PUBLIC_KEY,
    RESPONSE_REGISTERED,
    AlreadyRegisteredError,
    NotRegisteredError,
    UnexpectedResponseError,
)

logger = logging.getLogger(__name__)


class MessageUClient:
    """
    High-level client for the MessageU protocol.

    Example usage:
        ```python
        client = MessageUClient.from_config(ClientConfig.from_server_info())

        directory = client.list_clients()
        bob = directory.find_by_name("bob").peer_id

        client.fetch_public_key(bob)
        client.send_symmetric_key(bob)
        client.send_text(bob, "Hello, Bob!")

        for result in client.pending_messages():
            print(directory.name_for(result.record.sender_id), result.describe())
        ```
    """

    def __init__(
        self,
        transport: Transport,
        identity_storage: Optional[IdentityStorage] = None,
        file_store: Optional[ReceivedFileStore] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            transport: Connected byte stream to the server.
            identity_storage: Where the identity lives (default: in memory).
            file_store: Destination for received files (default: temp dir).
        """
        self.transport = transport
        self.identity_storage = (
            identity_storage if identity_storage is not None else InMemoryIdentityStorage()
        )
        self.file_store = file_store if file_store is not None else DirectoryFileStore()

        identity = self.identity_storage.load()
        self.session: Optional[ClientSession] = ClientSession(identity) if identity else None

    @classmethod
    def from_config(cls, config: ClientConfig) -> "MessageUClient":
        """
        Connect to the configured server and load the stored identity.

        The connection is closed again if the identity cannot be loaded.
        """
        transport = SocketTransport.connect(config.host, config.port, timeout=config.timeout)
        try:
            return cls(
                transport,
                identity_storage=FileIdentityStorage(config.identity_path),
                file_store=DirectoryFileStore(config.download_dir),
            )
        except Exception:
            transport.close()
            raise

    @property
    def is_registered(self) -> bool:
        return self.session is not None

    def close(self) -> None:
        self.transport.close()

    # MARK: - Requests

    def register(self, name: str) -> bytes:
        """
        Register a new identity with the server.

        Args:
            name: Display name, a single line shorter than 255 bytes.

        Returns:
            The 16-byte client id assigned by the server.

        Raises:
            AlreadyRegisteredError: If an identity already exists.
            InvalidNameError: If the name cannot be sent and stored intact.
            ServerRejectedError: If the server refused (e.g. name taken).
        """
        if self.session is not None or self.identity_storage.exists():
            raise AlreadyRegisteredError()
        name = check_name(name)

        # Id is a placeholder until the server assigns one
        pending = ClientSession.create(name, NULL_CLIENT_ID)
        response = self._request(
            build_registration(name, pending.public_key),
            RESPONSE_REGISTERED,
        )
        client_id = parse_registration(response.payload)

        session = pending.with_client_id(client_id)
        self.identity_storage.save(session.identity)
        self.session = session
        logger.info("Registered %r as %s", name, client_id.hex())
        return client_id

    def list_clients(self) -> ClientDirectory:
        """Fetch a snapshot of the registered clients (excluding us)."""
        session = self._require_session()
        response = self._request(build_list_clients(session.client_id), RESPONSE_CLIENT_LIST)
        return parse_client_list(response.payload)

    def fetch_public_key(self, peer_id: bytes) -> bytes:
        """Fetch and cache a peer's public key."""
        session = self._require_session()
        response = self._request(
            build_fetch_public_key(session.client_id, peer_id),
            RESPONSE_PUBLIC_KEY,
        )
        returned_id, public_key = parse_public_key(response.payload)
        if returned_id != peer_id:
            raise UnexpectedResponseError(
                f"Requested key for {peer_id.hex()}, got {returned_id.hex()}"
            )
        store_public_key(session, peer_id, public_key)
        return public_key

    def request_symmetric_key(self, peer_id: bytes) -> SendReceipt:
        """Ask a peer to send us a symmetric key."""
        session = self._require_session()
        return self._send(prepare_symmetric_key_request(session, peer_id))

    def send_symmetric_key(self, peer_id: bytes) -> SendReceipt:
        """Generate a symmetric key and send it to a peer."""
        session = self._require_session()
        return self._send(prepare_symmetric_key_send(session, peer_id))

    def send_text(self, peer_id: bytes, text: str) -> SendReceipt:
        """Send an encrypted text message."""
        session = self._require_session()
        return self._send(prepare_text_message(session, peer_id, text))

    def send_file(self, peer_id: bytes, source: Union[str, Path, bytes]) -> SendReceipt:
        """Send an encrypted file, given its path or its contents."""
        session = self._require_session()
        data = source if isinstance(source, bytes) else Path(source).read_bytes()
        return self._send(prepare_file(session, peer_id, data))

    def pending_messages(self) -> List[DispatchResult]:
        """Pull, decrypt and apply every message waiting on the server."""
        session = self._require_session()
        response = self._request(build_list_pending(session.client_id), RESPONSE_PENDING_MESSAGES)
        records = decode_pending_messages(response.payload)
        logger.debug("Decoded %d pending messages", len(records))
        return dispatch_pending(session, records, self.file_store)

    # MARK: - Private Helpers

    def _require_session(self) -> ClientSession:
        if self.session is None:
            raise NotRegisteredError()
        return self.session

    def _request(self, frame: bytes, expected_code: int) -> Response:
        self.transport.send_all(frame)
        return expect_code(read_response(self.transport), expected_code)

    def _send(self, message: OutgoingMessage) -> SendReceipt:
        session = self._require_session()
        frame = build_send_message(
            session.client_id,
            message.target_id,
            message.message_type,
            message.content,
        )
        response = self._request(frame, RESPONSE_MESSAGE_SENT)
        return parse_message_sent(response.payload)
