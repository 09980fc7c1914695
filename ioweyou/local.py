"""
local.py

A tiny deterministic chain for running the IOweYou model in-process.

Accounts are the ones a Hardhat node hands out (derived from Hardhat's
default mnemonic), and contract addresses are derived from the deployer
address and its deployment nonce, so a fresh chain always produces the
same addresses in the same order.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar
import logging

from eth_account import Account
from eth_hash.auto import keccak
from web3 import Web3

from .config import NULL_ADDRESS

logger = logging.getLogger(__name__)

HARDHAT_MNEMONIC = "test test test test test test test test test test test junk"

C = TypeVar("C", bound="LocalContract")


def to_address(value: str) -> str:
    """Checksum an address; raises ValueError on malformed input."""
    return Web3.to_checksum_address(value)


def is_null(address: str) -> bool:
    return int(address, 16) == 0


@lru_cache(maxsize=None)
def _derive_accounts(count: int) -> Tuple[Any, ...]:
    Account.enable_unaudited_hdwallet_features()
    return tuple(
        Account.from_mnemonic(HARDHAT_MNEMONIC, account_path=f"m/44'/60'/0'/0/{i}")
        for i in range(count)
    )


class LocalContract:
    """Base for contracts living on a LocalChain. Filled in by LocalChain.deploy."""

    address: str = NULL_ADDRESS
    deployer: str = NULL_ADDRESS
    chain: Optional["LocalChain"] = None


class LocalChain:
    def __init__(self, num_accounts: int = 10):
        self.signers = list(_derive_accounts(num_accounts))
        self._contracts: Dict[str, LocalContract] = {}
        self._nonces: Dict[str, int] = {}

    @property
    def accounts(self) -> List[str]:
        return [s.address for s in self.signers]

    def _next_address(self, sender: str) -> str:
        nonce = self._nonces.get(sender, 0)
        self._nonces[sender] = nonce + 1
        digest = keccak(bytes.fromhex(sender[2:]) + nonce.to_bytes(32, "big"))
        return to_address("0x" + digest[12:].hex())

    def deploy(self, contract_cls: Type[C], *args: Any, sender: Optional[str] = None, **kwargs: Any) -> C:
        sender = to_address(sender or self.accounts[0])
        contract = contract_cls(*args, **kwargs)
        contract.address = self._next_address(sender)
        contract.deployer = sender
        contract.chain = self
        self._contracts[contract.address] = contract
        logger.debug("[IOU] Deployed %s at %s", contract_cls.__name__, contract.address)
        return contract

    def contract_at(self, address: str) -> Optional[LocalContract]:
        return self._contracts.get(to_address(address))

    def is_contract(self, address: str) -> bool:
        return self.contract_at(address) is not None
