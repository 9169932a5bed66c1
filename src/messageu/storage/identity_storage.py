"""Identity storage interface and in-memory implementation."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import ClientIdentity


class IdentityStorage(ABC):
    """Interface for persisting the local client's identity."""

    @abstractmethod
    def load(self) -> Optional[ClientIdentity]:
        """Load the stored identity, or None if there is none."""
        ...

    @abstractmethod
    def save(self, identity: ClientIdentity) -> None:
        """Persist the identity."""
        ...

    @abstractmethod
    def exists(self) -> bool:
        """Check if an identity has been stored."""
        ...


class InMemoryIdentityStorage(IdentityStorage):
    """
    In-memory implementation of IdentityStorage (for testing).

    The identity is lost when the process exits.
    """

    def __init__(self, identity: Optional[ClientIdentity] = None) -> None:
        self._identity = identity

    def load(self) -> Optional[ClientIdentity]:
        return self._identity

    def save(self, identity: ClientIdentity) -> None:
        self._identity = identity

    def exists(self) -> bool:
        return self._identity is not None
