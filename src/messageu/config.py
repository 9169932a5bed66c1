"""Client configuration."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


DEFAULT_SERVER_INFO = "server.info"
DEFAULT_IDENTITY_FILE = "my.info"
DEFAULT_PORT = 1357


@dataclass
class ClientConfig:
    """Connection and file locations for a MessageU client."""

    host: str
    """Server host name or address."""

    port: int
    """Server TCP port."""

    identity_path: Path = Path(DEFAULT_IDENTITY_FILE)
    """Where the registered identity is persisted."""

    download_dir: Optional[Path] = None
    """Where received files are written (None: system temp dir)."""

    timeout: Optional[float] = None
    """Socket timeout in seconds (None: block)."""

    @classmethod
    def localhost(cls, port: int = DEFAULT_PORT) -> "ClientConfig":
        """Creates configuration for a server on this machine."""
        return cls(host="127.0.0.1", port=port)

    @classmethod
    def from_server_info(cls, path: Union[str, Path] = DEFAULT_SERVER_INFO) -> "ClientConfig":
        """
        Read `host:port` from the first line of a server.info file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the line is not a valid host:port pair.
        """
        path = Path(path)
        lines = path.read_text(encoding="utf-8").splitlines()
        line = lines[0].strip() if lines else ""

        host, sep, port_text = line.rpartition(":")
        if not sep or not host:
            raise ValueError(f"Invalid {path.name} format: expected host:port, got {line!r}")

        try:
            port = int(port_text)
        except ValueError:
            raise ValueError(f"Invalid port in {path.name}: {port_text!r}") from None
        if not 0 < port < 65536:
            raise ValueError(f"Port out of range in {path.name}: {port}")

        return cls(host=host, port=port)

    def with_identity(self, path: Union[str, Path]) -> "ClientConfig":
        """Sets the identity file location."""
        return ClientConfig(
            host=self.host,
            port=self.port,
            identity_path=Path(path),
            download_dir=self.download_dir,
            timeout=self.timeout,
        )
