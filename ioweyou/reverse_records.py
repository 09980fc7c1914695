"""
Reverse name resolution (address -> ENS name).

Mirrors the ENS ReverseRecords contract (https://github.com/ensdomains/reverse-records),
whose only method we rely on is getNames(address[]) -> string[], returning an
empty string for every address without a valid reverse record.
"""

from typing import Dict, List, Sequence

from web3 import Web3

from .local import LocalContract, is_null, to_address

GET_NAMES_ABI = [
    {
        "inputs": [{"internalType": "address[]", "name": "addresses", "type": "address[]"}],
        "name": "getNames",
        "outputs": [{"internalType": "string[]", "name": "r", "type": "string[]"}],
        "stateMutability": "view",
        "type": "function",
    }
]


def address_to_string(address: str) -> str:
    """Lowercase 0x-prefixed hex form of an address."""
    return to_address(address).lower()


class ReverseRecords(LocalContract):
    def __init__(self):
        self._names: Dict[str, str] = {}

    def set_name(self, name: str, *, sender: str) -> None:
        self._names[to_address(sender)] = name

    def get_names(self, addresses: Sequence[str]) -> List[str]:
        return [self._names.get(to_address(a), "") for a in addresses]


class RemoteReverseRecords:
    def __init__(self, w3: Web3, address: str):
        self.contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=GET_NAMES_ABI)

    def get_names(self, addresses: Sequence[str]) -> List[str]:
        checksummed = [Web3.to_checksum_address(a) for a in addresses]
        return list(self.contract.functions.getNames(checksummed).call())


def names_for(w3: Web3, registry: str, addresses: Sequence[str]) -> List[str]:
    """
    Reverse names for `addresses` in one getNames call against `registry`.

    Addresses without a record, and every address when the network has no
    registry (null address), come back as lowercase hex.
    """
    if is_null(registry):
        return [address_to_string(a) for a in addresses]
    names = RemoteReverseRecords(w3, registry).get_names(addresses)
    return [name or address_to_string(a) for a, name in zip(addresses, names)]
