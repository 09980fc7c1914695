"""Pytest fixtures: a fresh local chain with IOweYou deployed against a reverse registry."""

from types import SimpleNamespace

import pytest

from ioweyou.iou import IOweYou
from ioweyou.local import LocalChain
from ioweyou.reverse_records import ReverseRecords

PROMISE = "I promise to do something."


@pytest.fixture
def chain() -> LocalChain:
    return LocalChain()


@pytest.fixture
def signers(chain) -> SimpleNamespace:
    """Named views of the Hardhat accounts, in the order the suites use them."""
    a = chain.accounts
    return SimpleNamespace(
        owner=a[0],
        creator=a[0],
        receiver=a[1],
        uninvolved=a[2],
        receiver1=a[1],
        receiver2=a[2],
        all=a,
    )


@pytest.fixture
def reverse_records(chain) -> ReverseRecords:
    return chain.deploy(ReverseRecords)


@pytest.fixture
def ioweyou(chain, reverse_records) -> IOweYou:
    return chain.deploy(IOweYou, reverse_records.address)
