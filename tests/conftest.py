import pytest
from fastapi.testclient import TestClient

from parallelid import AuthorityKey, ManualClock, ParallelIDRegistry
from parallelid.api import create_app

T0 = 1_700_000_000
COST = 1000
REGISTRY_ADDRESS = "0x" + "cc" * 20
CHAIN_ID = 5


@pytest.fixture
def clock():
    return ManualClock(T0)


@pytest.fixture
def authority():
    return AuthorityKey.generate()


@pytest.fixture
def registry(authority, clock):
    return ParallelIDRegistry(
        authority=authority.address,
        registry_address=REGISTRY_ADDRESS,
        chain_id=CHAIN_ID,
        mint_cost=COST,
        clock=clock
    )


@pytest.fixture
def client(registry):
    return TestClient(create_app(registry))
