"""Tests for request frame builders."""

import pytest
from messageu.codec import unpack_request_header, unpack_u32
from messageu.request_builder import (
    build_fetch_public_key,
    build_list_clients,
    build_list_pending,
    build_registration,
    build_send_message,
)
from messageu.types import (
    CLIENT_VERSION,
    PUBLIC_KEY_SIZE,
    REQUEST_FETCH_PUBLIC_KEY,
    REQUEST_HEADER_SIZE,
    REQUEST_LIST_CLIENTS,
    REQUEST_LIST_PENDING,
    REQUEST_REGISTER,
    REQUEST_SEND_MESSAGE,
    MalformedHeaderError,
)
from .vectors import ALICE_ID, BOB_ID


def split(frame: bytes):
    header = unpack_request_header(frame[:REQUEST_HEADER_SIZE])
    return header, frame[REQUEST_HEADER_SIZE:]


class TestRegistration:
    """Test the registration request."""

    def test_layout(self) -> None:
        """Payload is name[255] + public key[160] with a zero client id."""
        public_key = bytes(range(140))

        header, payload = split(build_registration("alice", public_key))

        assert header.client_id == bytes(16)
        assert header.version == CLIENT_VERSION
        assert header.code == REQUEST_REGISTER
        assert header.payload_size == 255 + 160 == len(payload)
        assert payload[:5] == b"alice"
        assert payload[5:255] == bytes(250)
        assert payload[255:395] == public_key
        assert payload[395:] == bytes(20)

    def test_long_public_key_is_truncated(self) -> None:
        """Public keys longer than 160 bytes are cut."""
        _, payload = split(build_registration("alice", b"k" * 200))

        assert payload[255:] == b"k" * PUBLIC_KEY_SIZE


class TestSimpleRequests:
    """Test the requests without variable content."""

    def test_list_clients(self) -> None:
        """Client list has no payload."""
        header, payload = split(build_list_clients(ALICE_ID))

        assert header.client_id == ALICE_ID
        assert header.code == REQUEST_LIST_CLIENTS
        assert header.payload_size == 0
        assert payload == b""

    def test_list_pending(self) -> None:
        """Pending list has no payload."""
        header, payload = split(build_list_pending(ALICE_ID))

        assert header.code == REQUEST_LIST_PENDING
        assert header.payload_size == 0
        assert payload == b""

    def test_fetch_public_key(self) -> None:
        """Payload is the target id."""
        header, payload = split(build_fetch_public_key(ALICE_ID, BOB_ID))

        assert header.code == REQUEST_FETCH_PUBLIC_KEY
        assert header.payload_size == 16
        assert payload == BOB_ID

    def test_rejects_bad_target(self) -> None:
        """Target ids must be 16 bytes."""
        with pytest.raises(MalformedHeaderError):
            build_fetch_public_key(ALICE_ID, b"short")

    def test_rejects_bad_client_id(self) -> None:
        """Client ids must be 16 bytes."""
        with pytest.raises(MalformedHeaderError):
            build_list_clients(b"")


class TestSendMessage:
    """Test the send-message request."""

    @pytest.mark.parametrize("length", [0, 1, 16, 1000, 70000])
    def test_payload_size(self, length: int) -> None:
        """payload_size == 16 + 1 + 4 + L."""
        frame = build_send_message(ALICE_ID, BOB_ID, 3, b"x" * length)
        header, payload = split(frame)

        assert header.payload_size == 16 + 1 + 4 + length
        assert len(payload) == header.payload_size

    def test_layout(self) -> None:
        """Target, type, little-endian content length, content."""
        header, payload = split(build_send_message(ALICE_ID, BOB_ID, 4, b"hello"))

        assert header.code == REQUEST_SEND_MESSAGE
        assert payload[:16] == BOB_ID
        assert payload[16] == 4
        assert payload[17:21] == bytes([5, 0, 0, 0])
        assert unpack_u32(payload, 17) == 5
        assert payload[21:] == b"hello"

    @pytest.mark.parametrize("message_type", [-1, 256, 1000])
    def test_rejects_wide_message_type(self, message_type: int) -> None:
        """Message types must fit in one byte."""
        with pytest.raises(MalformedHeaderError):
            build_send_message(ALICE_ID, BOB_ID, message_type, b"x")
