"""Interactive console for the MessageU client."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from .client import MessageUClient
from .config import DEFAULT_IDENTITY_FILE, DEFAULT_SERVER_INFO, ClientConfig
from .models import ClientDirectory
from .types import MessageUError

logger = logging.getLogger(__name__)

MENU = """
MessageU client at your service.

110) Register
120) Request for clients list
130) Request for public key
140) Request for waiting messages
150) Send a text message
151) Send a request for symmetric key
152) Send your symmetric key
153) Send a file
0) Exit client
?"""


class Console:
    """Menu loop driving a MessageUClient."""

    def __init__(self, client: MessageUClient) -> None:
        self.client = client
        self._actions: Dict[str, Callable[[], None]] = {
            "110": self.register,
            "120": self.show_clients,
            "130": self.fetch_public_key,
            "140": self.show_pending,
            "150": self.send_text,
            "151": self.request_symmetric_key,
            "152": self.send_symmetric_key,
            "153": self.send_file,
        }

    def run(self) -> None:
        while True:
            print(MENU)
            choice = input().strip()
            if choice == "0":
                return

            action = self._actions.get(choice)
            if action is None:
                print("Invalid option.")
                continue

            try:
                action()
            except MessageUError as e:
                print(f"Error: {e}")
            except OSError as e:
                print(f"I/O error: {e}")

    # MARK: - Actions

    def register(self) -> None:
        name = input("Enter your name: ").strip()
        if not name:
            print("Name cannot be empty.")
            return
        client_id = self.client.register(name)
        print(f"Registration successful. Your client ID: {client_id.hex()}")

    def show_clients(self) -> None:
        directory = self.client.list_clients()
        if not len(directory):
            print("No other clients registered.")
        for entry in directory:
            print(f"{entry.name} ({entry.peer_id.hex()})")

    def fetch_public_key(self) -> None:
        directory, peer_id = self._choose_peer()
        self.client.fetch_public_key(peer_id)
        print(f"Public key of {directory.name_for(peer_id)} received.")

    def show_pending(self) -> None:
        directory = self.client.list_clients()
        results = self.client.pending_messages()
        if not results:
            print("No waiting messages.")
        for result in results:
            print(f"From: {directory.name_for(result.record.sender_id)}")
            print("Content:")
            print(result.describe())
            print("-----<EOM>-----\n")

    def send_text(self) -> None:
        _, peer_id = self._choose_peer()
        text = input("Enter message: ")
        self.client.send_text(peer_id, text)
        print("Message sent.")

    def request_symmetric_key(self) -> None:
        _, peer_id = self._choose_peer()
        self.client.request_symmetric_key(peer_id)
        print("Symmetric key request sent.")

    def send_symmetric_key(self) -> None:
        _, peer_id = self._choose_peer()
        self.client.send_symmetric_key(peer_id)
        print("Symmetric key sent.")

    def send_file(self) -> None:
        _, peer_id = self._choose_peer()
        path = input("Enter file path: ").strip().strip('"')
        self.client.send_file(peer_id, path)
        print("File sent.")

    def _choose_peer(self) -> Tuple[ClientDirectory, bytes]:
        # Fresh snapshot per action
        directory = self.client.list_clients()
        name = input("Enter recipient name: ").strip()
        return directory, directory.find_by_name(name).peer_id


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="messageu", description="MessageU console client")
    parser.add_argument("--server-info", default=DEFAULT_SERVER_INFO, help="file holding host:port")
    parser.add_argument("--identity", default=DEFAULT_IDENTITY_FILE, help="identity file")
    parser.add_argument("--download-dir", default=None, help="where received files are saved")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        config = ClientConfig.from_server_info(args.server_info).with_identity(args.identity)
        if args.download_dir:
            config.download_dir = Path(args.download_dir)
        client = MessageUClient.from_config(config)
    except (OSError, ValueError, MessageUError) as e:
        logger.error("Cannot start client: %s", e)
        return 1

    try:
        Console(client).run()
    except (EOFError, KeyboardInterrupt):
        pass
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
