"""Tests for key caches, identity storage and received files."""

import os
import sys

import pytest
from messageu.crypto import encode_text
from messageu.models import ClientIdentity, PendingMessageRecord
from messageu.storage import (
    DirectoryFileStore,
    FileIdentityStorage,
    InMemoryIdentityStorage,
    PeerPublicKeyCache,
    PeerSymmetricKeyCache,
    file_name_for,
)
from messageu.types import InvalidIdentityError, InvalidNameError
from .vectors import ALICE_ID, BOB_ID


class TestKeyCaches:
    """Test the per-peer key caches."""

    def test_store_and_retrieve(self) -> None:
        """Stored keys come back by peer id."""
        cache = PeerPublicKeyCache()
        key = bytes(range(160))

        cache.store(BOB_ID, key)

        assert cache.retrieve(BOB_ID) == key
        assert cache.has_key(BOB_ID)
        assert cache.retrieve(ALICE_ID) is None
        assert len(cache) == 1

    def test_compared_by_value(self) -> None:
        """Lookups use the id's value, not its identity or type."""
        cache = PeerSymmetricKeyCache()
        cache.store(bytearray(BOB_ID), b"k" * 16)

        assert cache.retrieve(bytes(BOB_ID)) == b"k" * 16
        assert cache.has_key(bytearray(BOB_ID))

    def test_later_key_overwrites(self) -> None:
        """A newer symmetric key replaces the old one."""
        cache = PeerSymmetricKeyCache()
        cache.store(BOB_ID, b"1" * 16)
        cache.store(BOB_ID, b"2" * 16)

        assert cache.retrieve(BOB_ID) == b"2" * 16
        assert len(cache) == 1

    def test_rejects_wrong_sizes(self) -> None:
        """Keys and ids must have their fixed sizes."""
        with pytest.raises(ValueError):
            PeerPublicKeyCache().store(BOB_ID, bytes(159))
        with pytest.raises(ValueError):
            PeerSymmetricKeyCache().store(BOB_ID, bytes(15))
        with pytest.raises(ValueError):
            PeerSymmetricKeyCache().store(b"short", bytes(16))


class TestInMemoryIdentityStorage:
    """Test the in-memory identity store."""

    def test_save_and_load(self) -> None:
        """Identities are kept until the process exits."""
        storage = InMemoryIdentityStorage()
        identity = ClientIdentity(name="alice", id=ALICE_ID, private_key=b"key")

        assert not storage.exists()
        assert storage.load() is None

        storage.save(identity)

        assert storage.exists()
        assert storage.load() == identity


class TestFileIdentityStorage:
    """Test the my.info identity file."""

    def test_round_trip(self, tmp_path) -> None:
        """Three lines: name, hex id, base64 private key."""
        path = tmp_path / "my.info"
        storage = FileIdentityStorage(path)
        identity = ClientIdentity(name="alice", id=ALICE_ID, private_key=bytes(range(200)))

        storage.save(identity)

        lines = path.read_text().splitlines()
        assert lines == ["alice", ALICE_ID.hex(), encode_text(bytes(range(200)))]
        assert FileIdentityStorage(path).load() == identity

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_restrictive_permissions(self, tmp_path) -> None:
        """The identity file is readable by its owner only."""
        path = tmp_path / "my.info"
        FileIdentityStorage(path).save(ClientIdentity(name="a", id=ALICE_ID, private_key=b"k"))

        assert os.stat(path).st_mode & 0o777 == 0o600

    @pytest.mark.parametrize("name", ["ali\nce", " alice", "n" * 255])
    def test_refuses_names_it_cannot_load(self, tmp_path, name: str) -> None:
        """Only names that read back unchanged are written."""
        storage = FileIdentityStorage(tmp_path / "my.info")

        with pytest.raises(InvalidNameError):
            storage.save(ClientIdentity(name=name, id=ALICE_ID, private_key=b"k"))

        assert not storage.exists()

    def test_missing_file(self, tmp_path) -> None:
        """No file means no identity."""
        storage = FileIdentityStorage(tmp_path / "my.info")

        assert not storage.exists()
        assert storage.load() is None

    def test_wrapped_base64(self, tmp_path) -> None:
        """Base64 split across several lines is joined."""
        path = tmp_path / "my.info"
        encoded = encode_text(bytes(range(100)))
        path.write_text(f"alice\n{ALICE_ID.hex()}\n{encoded[:40]}\n{encoded[40:]}\n")

        assert FileIdentityStorage(path).load().private_key == bytes(range(100))

    @pytest.mark.parametrize(
        "content",
        [
            "alice\n",
            f"alice\nnothex\n{encode_text(b'k')}\n",
            f"alice\n{ALICE_ID.hex()[:30]}\n{encode_text(b'k')}\n",
            f"alice\n{ALICE_ID.hex()}\n***\n",
            f"\n{ALICE_ID.hex()}\n{encode_text(b'k')}\n",
        ],
    )
    def test_malformed(self, tmp_path, content: str) -> None:
        """Malformed files are reported as invalid identities."""
        path = tmp_path / "my.info"
        path.write_text(content)

        with pytest.raises(InvalidIdentityError):
            FileIdentityStorage(path).load()


class TestDirectoryFileStore:
    """Test received file persistence."""

    def test_save(self, tmp_path) -> None:
        """Files land in the configured directory."""
        store = DirectoryFileStore(tmp_path / "downloads")

        path = store.save(b"contents", "report.bin")

        assert path == tmp_path / "downloads" / "report.bin"
        assert path.read_bytes() == b"contents"

    def test_name_cannot_escape_directory(self, tmp_path) -> None:
        """Only the final path component of a name is used."""
        store = DirectoryFileStore(tmp_path)

        path = store.save(b"x", "../../etc/evil")

        assert path.parent == tmp_path

    def test_generated_name(self) -> None:
        """Names identify sender and message."""
        record = PendingMessageRecord(sender_id=BOB_ID, message_id=42, message_type=4, content=b"")

        assert file_name_for(record) == f"messageu-{BOB_ID.hex()[:8]}-42.bin"
