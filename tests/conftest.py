"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

import random
from typing import Callable, Generator

import pytest

from src.chess.oracle import ChessOracle
from src.services.session import Session
from src.sync.transport import InMemoryRelay

SEED = 20240611


@pytest.fixture
def oracle() -> ChessOracle:
    return ChessOracle()


@pytest.fixture
def rng() -> random.Random:
    """Seeded, so that the bot's tie-breaks are reproducible"""
    return random.Random(SEED)


@pytest.fixture
def relay() -> Generator[InMemoryRelay, None, None]:
    relay = InMemoryRelay()
    try:
        yield relay
    finally:
        relay.rooms.clear()
        relay.pending.clear()


@pytest.fixture
def make_session(
    oracle: ChessOracle, relay: InMemoryRelay
) -> Callable[..., Session]:
    """Call the inner function to create a session. Sessions are online-capable (sharing one relay) unless told otherwise"""

    def _create_session(online: bool = True, seed: int = SEED) -> Session:
        return Session(
            oracle, transport=relay if online else None, rng=random.Random(seed)
        )

    return _create_session
