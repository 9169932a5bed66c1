"""Client session state: identity, private key and per-peer key caches."""

from dataclasses import replace
from typing import Optional

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .keys import generate_keypair, private_key_from_bytes, private_key_to_bytes, public_key_to_bytes
from .models import ClientIdentity
from .storage import PeerPublicKeyCache, PeerSymmetricKeyCache


class ClientSession:
    """
    Everything the key exchange needs for one registered client.

    The session exclusively owns both key caches; only the dispatch
    functions mutate them.
    """

    def __init__(
        self,
        identity: ClientIdentity,
        public_keys: Optional[PeerPublicKeyCache] = None,
        symmetric_keys: Optional[PeerSymmetricKeyCache] = None,
    ) -> None:
        """
        Initialize a session.

        Args:
            identity: The registered identity (its private key is loaded once).
            public_keys: Optional pre-populated public key cache.
            symmetric_keys: Optional pre-populated symmetric key cache.
        """
        self.identity = identity
        self.private_key: RSAPrivateKey = private_key_from_bytes(identity.private_key)
        self.public_keys = public_keys if public_keys is not None else PeerPublicKeyCache()
        self.symmetric_keys = symmetric_keys if symmetric_keys is not None else PeerSymmetricKeyCache()

    @classmethod
    def create(cls, name: str, client_id: bytes) -> "ClientSession":
        """Create a session with a freshly generated key pair."""
        private_key = generate_keypair()
        identity = ClientIdentity(
            name=name,
            id=client_id,
            private_key=private_key_to_bytes(private_key),
        )
        return cls(identity)

    def with_client_id(self, client_id: bytes) -> "ClientSession":
        """Same keys and caches under the id the server assigned."""
        return ClientSession(
            replace(self.identity, id=client_id),
            public_keys=self.public_keys,
            symmetric_keys=self.symmetric_keys,
        )

    @property
    def client_id(self) -> bytes:
        return self.identity.id

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def public_key(self) -> bytes:
        """Our public key in its 160-byte wire form."""
        return public_key_to_bytes(self.private_key.public_key())
