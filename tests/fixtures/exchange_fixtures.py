"""Fixtures for exercising the exchange orchestrator directly."""

import random
from typing import List
from typing import Tuple

import pytest

from tests.fixtures.app_fixtures import TEST_AES_IV
from tests.fixtures.app_fixtures import TEST_AES_KEY


def make_identity(user_id: str, role: str = "USER", email: str = None):
    from santa_api.workflow.models import Identity

    return Identity(user_id=user_id, role=role, email=email or f"{user_id}@example.com", name=user_id.title())


@pytest.fixture
def codec():
    """Codec with the fixed test key/IV."""
    from santa_api.workflow.crypto import SecretCodec

    return SecretCodec(TEST_AES_KEY, TEST_AES_IV)


@pytest.fixture
def admin_identity():
    return make_identity("admin", role="ADMIN")


@pytest.fixture
def orchestrator(memory_store, codec, recording_notifier):
    """Orchestrator over a fresh in-memory store with a seeded shuffle."""
    from santa_api.workflow.orchestrator import ExchangeOrchestrator

    return ExchangeOrchestrator(
        store=memory_store,
        codec=codec,
        notifier=recording_notifier,
        rng=random.Random(2024),
    )


@pytest.fixture
def build_group(orchestrator):
    """
    Return a coroutine function creating a group of ``size`` members.

    The first member owns the group; the rest join with the code.
    Returns (group, [member identities]).
    """

    async def _build(size: int = 5, name: str = "Office Party") -> Tuple[object, List[object]]:
        members = [make_identity(f"user-{i}") for i in range(size)]
        group = await orchestrator.create_group(members[0], name)
        for member in members[1:]:
            await orchestrator.join_group(member, group.join_code)
        return group, members

    return _build
