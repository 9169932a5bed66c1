"""Destinations for files received from peers."""

import logging
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from ..models import PendingMessageRecord

logger = logging.getLogger(__name__)


def file_name_for(record: PendingMessageRecord) -> str:
    """Generated destination name for a received file."""
    return f"messageu-{record.sender_id.hex()[:8]}-{record.message_id}.bin"


class ReceivedFileStore(ABC):
    """Interface for persisting decrypted file contents."""

    @abstractmethod
    def save(self, data: bytes, name: str) -> Path:
        """Persist data under name and return where it was written."""
        ...


class DirectoryFileStore(ReceivedFileStore):
    """Writes received files into a directory (default: the temp dir)."""

    def __init__(self, directory: Union[str, Path, None] = None) -> None:
        self._directory = Path(directory) if directory is not None else Path(tempfile.gettempdir())

    @property
    def directory(self) -> Path:
        return self._directory

    def save(self, data: bytes, name: str) -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._directory / Path(name).name
        path.write_bytes(data)
        logger.info("Saved %d bytes to %s", len(data), path)
        return path


class InMemoryFileStore(ReceivedFileStore):
    """Keeps received files in memory (for testing)."""

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}

    def save(self, data: bytes, name: str) -> Path:
        self.files[name] = bytes(data)
        return Path(name)
