"""Tests for the console client."""

import pytest
from messageu.cli import Console, main
from messageu.client import MessageUClient
from messageu.codec import pad_name
from messageu.crypto import aes_encrypt
from messageu.storage import InMemoryIdentityStorage
from messageu.transport import LoopbackTransport
from messageu.types import RESPONSE_CLIENT_LIST, RESPONSE_PENDING_MESSAGES, SERVER_ERROR_CODE
from .frames import pending_record, response_frame
from .vectors import BOB_ID, CAROL_ID


@pytest.fixture
def console(alice, monkeypatch):
    transport = LoopbackTransport()
    client = MessageUClient(transport, identity_storage=InMemoryIdentityStorage(alice.identity))

    def answer(*choices: str) -> None:
        replies = iter(choices)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))

    return Console(client), transport, answer


class TestConsole:
    """Test the interactive menu."""

    def test_show_pending(self, console, capsys) -> None:
        """Messages are printed with the sender's name."""
        shell, transport, answer = console
        shell.client.session.symmetric_keys.store(BOB_ID, b"S" * 16)
        transport.feed(response_frame(RESPONSE_CLIENT_LIST, BOB_ID + pad_name("bob")))
        transport.feed(response_frame(
            RESPONSE_PENDING_MESSAGES,
            pending_record(BOB_ID, 1, 3, aes_encrypt(b"S" * 16, b"hi alice"))
            + pending_record(CAROL_ID, 2, 3, bytes(16)),
        ))
        answer("140", "0")

        shell.run()

        out = capsys.readouterr().out
        assert "From: bob\nContent:\nhi alice\n-----<EOM>-----" in out
        assert f"From: {CAROL_ID.hex()}\nContent:\ncan't decrypt message" in out

    def test_errors_keep_the_menu_running(self, console, capsys) -> None:
        """A rejected request is reported and the loop continues."""
        shell, transport, answer = console
        transport.feed(response_frame(SERVER_ERROR_CODE))
        answer("120", "999", "0")

        shell.run()

        out = capsys.readouterr().out
        assert "Error:" in out
        assert "Invalid option." in out

    def test_unknown_recipient(self, console, capsys) -> None:
        """Names missing from the directory are reported."""
        shell, transport, answer = console
        transport.feed(response_frame(RESPONSE_CLIENT_LIST, BOB_ID + pad_name("bob")))
        answer("150", "mallory", "0")

        shell.run()

        assert "mallory" in capsys.readouterr().out
        assert len(transport.sent) == 1


class TestMain:
    """Test the command-line entry point."""

    def test_without_server_info(self, tmp_path) -> None:
        """A missing server.info fails startup."""
        assert main(["--server-info", str(tmp_path / "server.info")]) == 1
