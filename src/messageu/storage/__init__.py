"""MessageU storage module."""

from .key_cache import PeerPublicKeyCache, PeerSymmetricKeyCache
from .identity_storage import IdentityStorage, InMemoryIdentityStorage
from .file_identity_storage import FileIdentityStorage
from .received_files import (
    ReceivedFileStore,
    DirectoryFileStore,
    InMemoryFileStore,
    file_name_for,
)

__all__ = [
    "PeerPublicKeyCache",
    "PeerSymmetricKeyCache",
    "IdentityStorage",
    "InMemoryIdentityStorage",
    "FileIdentityStorage",
    "ReceivedFileStore",
    "DirectoryFileStore",
    "InMemoryFileStore",
    "file_name_for",
]
