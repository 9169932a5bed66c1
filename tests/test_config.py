"""Tests for client configuration."""

from pathlib import Path

import pytest
from messageu.config import ClientConfig


class TestServerInfo:
    """Test parsing server.info."""

    def test_parse(self, tmp_path) -> None:
        """First line is host:port."""
        path = tmp_path / "server.info"
        path.write_text("127.0.0.1:1234\n")

        config = ClientConfig.from_server_info(path)

        assert config.host == "127.0.0.1"
        assert config.port == 1234
        assert config.identity_path == Path("my.info")

    def test_hostname(self, tmp_path) -> None:
        """Host names are accepted."""
        path = tmp_path / "server.info"
        path.write_text("messageu.example.com:8080")

        assert ClientConfig.from_server_info(path).host == "messageu.example.com"

    @pytest.mark.parametrize("content", ["", "localhost", ":1234", "localhost:port", "localhost:70000"])
    def test_invalid(self, tmp_path, content: str) -> None:
        """Malformed lines are rejected."""
        path = tmp_path / "server.info"
        path.write_text(content)

        with pytest.raises(ValueError):
            ClientConfig.from_server_info(path)

    def test_missing_file(self, tmp_path) -> None:
        """A missing file is reported."""
        with pytest.raises(FileNotFoundError):
            ClientConfig.from_server_info(tmp_path / "server.info")

    def test_with_identity(self) -> None:
        """The identity location can be overridden."""
        config = ClientConfig.localhost().with_identity("/tmp/alice.info")

        assert config.port == 1357
        assert config.identity_path == Path("/tmp/alice.info")
