from typing import Any, Iterator, Optional
import logging

from eth_account import Account
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3RPCError
from web3.logs import DISCARD

from .artifacts import load_abi, load_deployed_address
from .config import (
    ACCOUNT_INDEX,
    CONTRACT_ADDRESS,
    GAS_LIMIT,
    NULL_ADDRESS,
    get_network,
    private_key_for,
)
from .errors import ConfigError, ContractRevertError, TransactionFailedError, revert_error_for
from .iou import IOU

logger = logging.getLogger(__name__)


def revert_from(exc: Exception) -> ContractRevertError:
    """Translate a web3 revert into the matching IOweYou error."""
    message = getattr(exc, "message", None) or str(exc)
    return revert_error_for(message)


def get_w3(url: str) -> Web3:
    w3 = Web3(Web3.HTTPProvider(url))
    if not w3.is_connected():
        raise RuntimeError(f"Could not connect to RPC: {url}")
    return w3


def send_transaction(w3: Web3, func, account: str, private_key: Optional[str] = None):
    """
    Send through the node's unlocked account, or sign locally when a key is given.

    The transaction is dry-run with eth_estimateGas first, so a revert surfaces
    with its reason string before anything is broadcast. Reverts are raised as
    ContractRevertError subclasses.
    """
    try:
        func.estimate_gas({"from": account})
        if not private_key:
            return func.transact({"from": account, "gas": GAS_LIMIT})
        return _send_signed(w3, func, account, private_key)
    except ContractLogicError as e:
        raise revert_from(e) from e
    except Web3RPCError as e:
        # node-side revert of eth_sendTransaction (Hardhat reports the reason string)
        if "revert" not in str(e):
            raise
        raise revert_from(e) from e


def _send_signed(w3: Web3, func, account: str, private_key: str):
    tx = func.build_transaction(
        {
            "from": account,
            "nonce": w3.eth.get_transaction_count(account),
            "gas": GAS_LIMIT,
            "chainId": w3.eth.chain_id,
        }
    )
    signed = w3.eth.account.sign_transaction(tx, private_key=private_key)
    return w3.eth.send_raw_transaction(signed.raw_transaction)


class IOweYouClient:
    """Talks to a deployed IOweYou contract on behalf of one account."""

    def __init__(self, w3: Web3, contract: Any, account: str, private_key: Optional[str] = None):
        self.w3 = w3
        self.contract = contract
        self.account = Web3.to_checksum_address(account)
        self.private_key = private_key

    @classmethod
    def from_config(cls, network: Optional[str] = None, contract_address: Optional[str] = None) -> "IOweYouClient":
        net = get_network(network)
        w3 = get_w3(net.url)

        address = contract_address or CONTRACT_ADDRESS or load_deployed_address(net.name)
        if not address:
            raise ConfigError(
                f"No IOweYou address for '{net.name}'. Set IOWEYOU_CONTRACT_ADDRESS or run scripts/deploy.py."
            )
        contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=load_abi())

        private_key = private_key_for(net)
        if private_key:
            account = Account.from_key(private_key).address
        else:
            accounts = w3.eth.accounts
            if len(accounts) == 0:
                raise RuntimeError("No unlocked accounts available from RPC. Is the Hardhat node running?")
            account = accounts[ACCOUNT_INDEX]

        logger.info("[IOU] Using account %s on %s", account, net.name)
        return cls(w3, contract, account, private_key)

    def connect(self, account: str, private_key: Optional[str] = None) -> "IOweYouClient":
        """Same contract, different signer (ethers' contract.connect)."""
        return IOweYouClient(self.w3, self.contract, account, private_key)

    # -------- plumbing -------- #

    def _call(self, func) -> Any:
        try:
            return func.call({"from": self.account})
        except ContractLogicError as e:
            raise revert_from(e) from e

    def _send(self, func) -> Any:
        tx_hash = send_transaction(self.w3, func, self.account, self.private_key)

        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt["status"] != 1:
            raise TransactionFailedError(Web3.to_hex(tx_hash))
        logger.debug("[IOU] tx %r mined in block %s", tx_hash, receipt["blockNumber"])
        return receipt

    # -------- IOU lifecycle -------- #

    def create(self, receiver: str, owed: str) -> int:
        """Create an IOU to `receiver` and return the minted token id."""
        receipt = self._send(self.contract.functions.create(Web3.to_checksum_address(receiver), owed))
        for event in self.contract.events.Transfer().process_receipt(receipt, errors=DISCARD):
            if int(event["args"]["from"], 16) == 0:
                token_id = int(event["args"]["tokenId"])
                logger.info("[IOU] Created #%d for %s", token_id, receiver)
                return token_id
        raise TransactionFailedError(Web3.to_hex(receipt["transactionHash"]))

    def complete(self, token_id: int) -> None:
        self._send(self.contract.functions.complete(int(token_id)))
        logger.info("[IOU] #%d completed by %s", token_id, self.account)

    def get_iou(self, token_id: int) -> IOU:
        owed, creator, receiver, creator_completed, receiver_completed = self._call(
            self.contract.functions.getIOU(int(token_id))
        )
        return IOU(
            owed=owed,
            creator=creator,
            receiver=receiver,
            creator_completed=bool(creator_completed),
            receiver_completed=bool(receiver_completed),
        )

    # -------- metadata -------- #

    def token_uri(self, token_id: int) -> str:
        return self._call(self.contract.functions.tokenURI(int(token_id)))

    def set_token_uri_address(self, address: str) -> None:
        self._send(self.contract.functions.setTokenURIAddress(Web3.to_checksum_address(address)))

    def reset_token_uri_address(self) -> None:
        self.set_token_uri_address(NULL_ADDRESS)

    def addr_to_string(self, address: str) -> str:
        return self._call(self.contract.functions.addrToString(Web3.to_checksum_address(address)))

    # -------- enumeration -------- #

    def balance_of(self, owner: str) -> int:
        return int(self._call(self.contract.functions.balanceOf(Web3.to_checksum_address(owner))))

    def token_of_owner_by_index(self, owner: str, index: int) -> int:
        return int(
            self._call(self.contract.functions.tokenOfOwnerByIndex(Web3.to_checksum_address(owner), int(index)))
        )

    def created_balance_of(self, creator: str) -> int:
        return int(self._call(self.contract.functions.createdBalanceOf(Web3.to_checksum_address(creator))))

    def token_of_creator_by_index(self, creator: str, index: int) -> int:
        return int(
            self._call(
                self.contract.functions.tokenOfCreatorByIndex(Web3.to_checksum_address(creator), int(index))
            )
        )

    def tokens_of_owner(self, owner: str) -> Iterator[int]:
        for i in range(self.balance_of(owner)):
            yield self.token_of_owner_by_index(owner, i)

    def tokens_of_creator(self, creator: str) -> Iterator[int]:
        for i in range(self.created_balance_of(creator)):
            yield self.token_of_creator_by_index(creator, i)
