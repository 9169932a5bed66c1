"""
File-based identity storage.

The identity file (`my.info` by default) holds three lines:
- The client's display name
- The 16-byte client id as 32 hex characters
- The private key as base64-encoded DER

The file is written with 600 permissions where the platform allows.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from ..codec import check_name
from ..crypto import decode_text, encode_text
from ..models import ClientIdentity
from ..types import CLIENT_ID_SIZE, InvalidIdentityError, InvalidNameError
from .identity_storage import IdentityStorage

logger = logging.getLogger(__name__)


class FileIdentityStorage(IdentityStorage):
    """
    Stores the client identity in a text file.

    Example usage:
        ```python
        storage = FileIdentityStorage("my.info")
        identity = storage.load()
        ```
    """

    DEFAULT_FILENAME = "my.info"

    def __init__(self, path: Union[str, Path, None] = None) -> None:
        self._path = Path(path) if path is not None else Path(self.DEFAULT_FILENAME)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> Optional[ClientIdentity]:
        """
        Load the identity from disk.

        Returns:
            The identity, or None if the file does not exist.

        Raises:
            InvalidIdentityError: If the file is malformed.
        """
        if not self._path.exists():
            return None

        lines = self._path.read_text(encoding="utf-8").splitlines()
        if len(lines) < 3:
            raise InvalidIdentityError(f"{self._path}: expected 3 lines, found {len(lines)}")

        try:
            name = check_name(lines[0])
        except InvalidNameError as e:
            raise InvalidIdentityError(f"{self._path}: invalid client name: {e}") from e

        try:
            client_id = bytes.fromhex(lines[1].strip())
        except ValueError as e:
            raise InvalidIdentityError(f"{self._path}: client id is not hex") from e
        if len(client_id) != CLIENT_ID_SIZE:
            raise InvalidIdentityError(
                f"{self._path}: client id must be {CLIENT_ID_SIZE} bytes, got {len(client_id)}"
            )

        # Some encoders wrap base64 output across lines
        try:
            private_key = decode_text("".join(line.strip() for line in lines[2:]))
        except ValueError as e:
            raise InvalidIdentityError(f"{self._path}: private key is not base64") from e

        logger.debug("Loaded identity %s from %s", client_id.hex(), self._path)
        return ClientIdentity(name=name, id=client_id, private_key=private_key)

    def save(self, identity: ClientIdentity) -> None:
        """
        Write the identity file, replacing any existing one.

        Raises:
            InvalidNameError: If the name could not be loaded back
        """
        if check_name(identity.name) != identity.name:
            raise InvalidNameError(f"Name {identity.name!r} has surrounding whitespace")

        content = "\n".join([
            identity.name,
            identity.id.hex(),
            encode_text(identity.private_key),
        ]) + "\n"

        self._path.write_text(content, encoding="utf-8")
        self._set_restrictive_permissions()
        logger.info("Saved identity to %s", self._path)

    def _set_restrictive_permissions(self) -> None:
        """Set restrictive file permissions (600 on Unix)."""
        try:
            os.chmod(self._path, 0o600)
        except OSError:
            pass  # Ignore permission errors on some platforms
