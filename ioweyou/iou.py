"""
iou.py

Executable model of the IOweYou contract: an enumerable NFT where every
token is an IOU minted to its receiver. Each party marks its side complete;
once both have, the token is burned.

Lifecycle of a token:

    CREATED --creator--> CREATOR_DONE --receiver--> BURNED
    CREATED --receiver-> RECEIVER_DONE --creator--> BURNED

Anyone else calling complete() reverts, and so does every read of a burned
token except the creator-side enumeration, which keeps the full history of
what an address has created.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from threading import RLock
from typing import Dict, List
import logging

from . import errors
from .config import NULL_ADDRESS
from .errors import (
    IndexOutOfBoundsError,
    InvalidAddressError,
    IOUNotFoundError,
    NonexistentTokenError,
    NotOwnerError,
    NotPartyError,
    SelfIOUError,
)
from .local import LocalContract, is_null, to_address
from .reverse_records import address_to_string

logger = logging.getLogger(__name__)

DEFAULT_BASE_URI = "test://"


@dataclass(frozen=True)
class IOU:
    owed: str
    creator: str
    receiver: str
    creator_completed: bool = False
    receiver_completed: bool = False


@dataclass(frozen=True)
class TransferEvent:
    from_address: str
    to_address: str
    token_id: int


class IOUState(Enum):
    CREATED = "created"
    CREATOR_DONE = "creator_done"
    RECEIVER_DONE = "receiver_done"
    BURNED = "burned"


class IOweYou(LocalContract):
    name = "IOweYou"
    symbol = "IOU"

    def __init__(self, reverse_records: str = NULL_ADDRESS, *, base_uri: str = DEFAULT_BASE_URI):
        self.reverse_records = to_address(reverse_records)
        self.base_uri = base_uri
        self.token_uri_address = NULL_ADDRESS

        self._lock = RLock()
        self._next_token_id = 0
        self._ious: Dict[int, IOU] = {}
        self._owners: Dict[int, str] = {}
        # ERC721Enumerable bookkeeping
        self._owned_tokens: Dict[str, List[int]] = {}
        self._owned_index: Dict[int, int] = {}
        self._all_tokens: List[int] = []
        self._all_index: Dict[int, int] = {}
        # append-only, survives burns
        self._created_tokens: Dict[str, List[int]] = {}
        self.events: List[TransferEvent] = []

    @property
    def owner(self) -> str:
        return self.deployer

    # ----- IOU lifecycle -----

    def create(self, receiver: str, owed: str, *, sender: str) -> int:
        sender = to_address(sender)
        receiver = to_address(receiver)
        with self._lock:
            if receiver == sender:
                raise SelfIOUError(errors.SELF_IOU)
            if is_null(receiver):
                raise InvalidAddressError(errors.MINT_ZERO_ADDRESS)

            token_id = self._next_token_id
            self._next_token_id += 1

            self._ious[token_id] = IOU(owed=owed, creator=sender, receiver=receiver)
            self._created_tokens.setdefault(sender, []).append(token_id)
            self._mint(receiver, token_id)

        logger.info("[IOU] Created #%d: %s owes %s", token_id, sender, receiver)
        return token_id

    def complete(self, token_id: int, *, sender: str) -> None:
        sender = to_address(sender)
        with self._lock:
            iou = self._iou(token_id)
            if sender == iou.creator:
                iou = IOU(iou.owed, iou.creator, iou.receiver, True, iou.receiver_completed)
            elif sender == iou.receiver:
                iou = IOU(iou.owed, iou.creator, iou.receiver, iou.creator_completed, True)
            else:
                raise NotPartyError(errors.NOT_PARTY)

            if iou.creator_completed and iou.receiver_completed:
                del self._ious[token_id]
                self._burn(token_id)
                logger.info("[IOU] Completed and burned #%d", token_id)
            else:
                self._ious[token_id] = iou
                logger.info("[IOU] #%d completed by %s", token_id, sender)

    def get_iou(self, token_id: int) -> IOU:
        return self._iou(token_id)

    def state(self, token_id: int) -> IOUState:
        if token_id not in self._ious:
            if 0 <= token_id < self._next_token_id:
                return IOUState.BURNED
            raise IOUNotFoundError(errors.IOU_NOT_FOUND)
        iou = self._ious[token_id]
        if iou.creator_completed:
            return IOUState.CREATOR_DONE
        if iou.receiver_completed:
            return IOUState.RECEIVER_DONE
        return IOUState.CREATED

    def _iou(self, token_id: int) -> IOU:
        try:
            return self._ious[token_id]
        except KeyError:
            raise IOUNotFoundError(errors.IOU_NOT_FOUND) from None

    # ----- metadata -----

    def token_uri(self, token_id: int) -> str:
        if token_id not in self._owners:
            raise NonexistentTokenError(errors.URI_NONEXISTENT)
        if is_null(self.token_uri_address):
            return f"{self.base_uri}{token_id}"
        return self.chain.contract_at(self.token_uri_address).token_uri(token_id)

    def set_token_uri_address(self, address: str, *, sender: str) -> None:
        address = to_address(address)
        if to_address(sender) != self.owner:
            raise NotOwnerError(errors.NOT_OWNER)
        if not is_null(address) and (self.chain is None or not self.chain.is_contract(address)):
            raise InvalidAddressError(errors.NOT_A_CONTRACT)
        with self._lock:
            self.token_uri_address = address
        logger.info("[IOU] Token URI address set to %s", address)

    def addr_to_string(self, address: str) -> str:
        if not is_null(self.reverse_records) and self.chain is not None:
            registry = self.chain.contract_at(self.reverse_records)
            if registry is not None:
                name = registry.get_names([address])[0]
                if name:
                    return name
        return address_to_string(address)

    # ----- ERC721 / ERC721Enumerable views -----

    def balance_of(self, owner: str) -> int:
        owner = to_address(owner)
        if is_null(owner):
            raise InvalidAddressError(errors.BALANCE_ZERO_ADDRESS)
        return len(self._owned_tokens.get(owner, ()))

    def owner_of(self, token_id: int) -> str:
        try:
            return self._owners[token_id]
        except KeyError:
            raise NonexistentTokenError(errors.OWNER_NONEXISTENT) from None

    def token_of_owner_by_index(self, owner: str, index: int) -> int:
        tokens = self._owned_tokens.get(to_address(owner), [])
        if not 0 <= index < len(tokens):
            raise IndexOutOfBoundsError(errors.OWNER_INDEX)
        return tokens[index]

    def total_supply(self) -> int:
        return len(self._all_tokens)

    def token_by_index(self, index: int) -> int:
        if not 0 <= index < len(self._all_tokens):
            raise IndexOutOfBoundsError(errors.GLOBAL_INDEX)
        return self._all_tokens[index]

    def created_balance_of(self, creator: str) -> int:
        return len(self._created_tokens.get(to_address(creator), ()))

    def token_of_creator_by_index(self, creator: str, index: int) -> int:
        tokens = self._created_tokens.get(to_address(creator), [])
        if not 0 <= index < len(tokens):
            raise IndexOutOfBoundsError(errors.CREATOR_INDEX)
        return tokens[index]

    # ----- mint / burn -----

    def _mint(self, to: str, token_id: int) -> None:
        tokens = self._owned_tokens.setdefault(to, [])
        self._owned_index[token_id] = len(tokens)
        tokens.append(token_id)
        self._all_index[token_id] = len(self._all_tokens)
        self._all_tokens.append(token_id)
        self._owners[token_id] = to
        self.events.append(TransferEvent(NULL_ADDRESS, to, token_id))

    def _burn(self, token_id: int) -> None:
        owner = self._owners.pop(token_id)
        _swap_and_pop(self._owned_tokens[owner], self._owned_index, token_id)
        _swap_and_pop(self._all_tokens, self._all_index, token_id)
        self.events.append(TransferEvent(owner, NULL_ADDRESS, token_id))


def _swap_and_pop(tokens: List[int], index: Dict[int, int], token_id: int) -> None:
    """Remove token_id by moving the last entry into its slot."""
    pos = index.pop(token_id)
    last = tokens.pop()
    if last != token_id:
        tokens[pos] = last
        index[last] = pos
