"""Shared fixtures for MessageU tests."""

import pytest

from messageu.session import ClientSession

from .vectors import ALICE_ID, BOB_ID


@pytest.fixture(scope="session")
def _alice_template() -> ClientSession:
    return ClientSession.create("alice", ALICE_ID)


@pytest.fixture(scope="session")
def _bob_template() -> ClientSession:
    return ClientSession.create("bob", BOB_ID)


@pytest.fixture
def alice(_alice_template) -> ClientSession:
    """Alice's session with empty caches (key pair generated once)."""
    return ClientSession(_alice_template.identity)


@pytest.fixture
def bob(_bob_template) -> ClientSession:
    """Bob's session with empty caches (key pair generated once)."""
    return ClientSession(_bob_template.identity)
