"""Per-peer key caches owned by a client session."""

from typing import Dict, Optional

from ..types import CLIENT_ID_SIZE, PUBLIC_KEY_SIZE, SYMMETRIC_KEY_SIZE


class _PeerKeyCache:
    """In-memory mapping from 16-byte peer id to fixed-size key bytes."""

    KEY_SIZE = 0

    def __init__(self) -> None:
        self._cache: Dict[bytes, bytes] = {}

    def store(self, peer_id: bytes, key: bytes) -> None:
        """Store a key for a peer, replacing any earlier one."""
        if len(peer_id) != CLIENT_ID_SIZE:
            raise ValueError(f"Peer ID must be {CLIENT_ID_SIZE} bytes, got {len(peer_id)}")
        if len(key) != self.KEY_SIZE:
            raise ValueError(f"Key must be {self.KEY_SIZE} bytes, got {len(key)}")
        self._cache[bytes(peer_id)] = bytes(key)

    def retrieve(self, peer_id: bytes) -> Optional[bytes]:
        """Retrieve the key for a peer (None if not known)."""
        return self._cache.get(bytes(peer_id))

    def has_key(self, peer_id: bytes) -> bool:
        return bytes(peer_id) in self._cache

    def __len__(self) -> int:
        return len(self._cache)


class PeerPublicKeyCache(_PeerKeyCache):
    """Cache of peers' 160-byte public keys."""

    KEY_SIZE = PUBLIC_KEY_SIZE


class PeerSymmetricKeyCache(_PeerKeyCache):
    """Cache of 16-byte symmetric keys shared with peers."""

    KEY_SIZE = SYMMETRIC_KEY_SIZE
