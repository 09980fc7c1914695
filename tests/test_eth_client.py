from unittest.mock import MagicMock

import pytest
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3RPCError

from ioweyou.config import GAS_LIMIT, NULL_ADDRESS
from ioweyou.errors import IOUNotFoundError, NotPartyError, SelfIOUError, TransactionFailedError
from ioweyou.eth_client import IOweYouClient, revert_from
from ioweyou.iou import IOU

CREATOR = Web3.to_checksum_address("0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266")
RECEIVER = Web3.to_checksum_address("0x70997970c51812dc3a010c7d01b50e0d17dc79c8")
TX_HASH = b"\x12" * 32
# Hardhat account #0
HARDHAT_KEY_0 = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"


def reverted(reason):
    return ContractLogicError(f"execution reverted: {reason}")


@pytest.fixture
def w3():
    w3 = MagicMock()
    w3.eth.wait_for_transaction_receipt.return_value = {
        "status": 1,
        "blockNumber": 7,
        "transactionHash": TX_HASH,
    }
    return w3


@pytest.fixture
def contract():
    contract = MagicMock()
    for name in ("create", "complete", "setTokenURIAddress"):
        getattr(contract.functions, name).return_value.transact.return_value = TX_HASH
    return contract


@pytest.fixture
def client(w3, contract):
    return IOweYouClient(w3, contract, CREATOR)


def test_revert_from_keeps_reason():
    err = revert_from(reverted("IOU does not exist."))
    assert isinstance(err, IOUNotFoundError)
    assert "IOU does not exist." in str(err)


def test_create_returns_minted_token_id(client, contract, w3):
    contract.events.Transfer.return_value.process_receipt.return_value = [
        {"args": {"from": NULL_ADDRESS, "to": RECEIVER, "tokenId": 3}},
    ]

    assert client.create(RECEIVER, "I promise to do something.") == 3

    contract.functions.create.assert_called_once_with(RECEIVER, "I promise to do something.")
    contract.functions.create.return_value.transact.assert_called_once_with({"from": CREATOR, "gas": GAS_LIMIT})
    w3.eth.wait_for_transaction_receipt.assert_called_once_with(TX_HASH)


def test_create_to_yourself(client, contract):
    contract.functions.create.return_value.estimate_gas.side_effect = reverted("You cannot make an IOU to yourself.")
    with pytest.raises(SelfIOUError):
        client.create(CREATOR, "I promise to do something.")


def test_failed_receipt(client, w3):
    w3.eth.wait_for_transaction_receipt.return_value = {"status": 0, "blockNumber": 7, "transactionHash": TX_HASH}
    with pytest.raises(TransactionFailedError):
        client.complete(1)


def test_complete_as_uninvolved(client, contract):
    contract.functions.complete.return_value.estimate_gas.side_effect = reverted("You can only complete your own IOU")
    with pytest.raises(NotPartyError):
        client.complete(1)
    contract.functions.complete.return_value.transact.assert_not_called()


def test_node_side_revert_on_send(client, contract):
    # Hardhat rejects eth_sendTransaction itself with the revert reason
    contract.functions.complete.return_value.transact.side_effect = Web3RPCError(
        "{'code': -32603, 'message': \"Error: VM Exception while processing transaction: "
        "reverted with reason string 'IOU does not exist.'\"}"
    )
    with pytest.raises(IOUNotFoundError, match="IOU does not exist."):
        client.complete(9)


def test_other_rpc_errors_propagate(client, contract):
    contract.functions.complete.return_value.transact.side_effect = Web3RPCError("nonce too low")
    with pytest.raises(Web3RPCError):
        client.complete(9)


def test_get_iou(client, contract):
    contract.functions.getIOU.return_value.call.return_value = ("owed", CREATOR, RECEIVER, True, False)
    assert client.get_iou(5) == IOU("owed", CREATOR, RECEIVER, True, False)
    contract.functions.getIOU.assert_called_once_with(5)


def test_get_iou_burned(client, contract):
    contract.functions.getIOU.return_value.call.side_effect = reverted("IOU does not exist.")
    with pytest.raises(IOUNotFoundError):
        client.get_iou(5)


def test_connect_switches_signer(client, contract):
    other = client.connect(RECEIVER)
    assert other.account == RECEIVER
    assert other.contract is contract

    other.complete(1)
    contract.functions.complete.return_value.transact.assert_called_once_with({"from": RECEIVER, "gas": GAS_LIMIT})


def test_signs_locally_with_private_key(w3, contract):
    w3.eth.get_transaction_count.return_value = 4
    w3.eth.chain_id = 31337
    w3.eth.send_raw_transaction.return_value = TX_HASH
    client = IOweYouClient(w3, contract, CREATOR, private_key=HARDHAT_KEY_0)

    client.complete(2)

    func = contract.functions.complete.return_value
    func.estimate_gas.assert_called_once_with({"from": CREATOR})
    func.transact.assert_not_called()
    func.build_transaction.assert_called_once_with(
        {"from": CREATOR, "nonce": 4, "gas": GAS_LIMIT, "chainId": 31337}
    )
    signed = w3.eth.account.sign_transaction.return_value
    w3.eth.send_raw_transaction.assert_called_once_with(signed.raw_transaction)


def test_reset_token_uri_address(client, contract):
    client.reset_token_uri_address()
    contract.functions.setTokenURIAddress.assert_called_once_with(NULL_ADDRESS)


def test_enumeration(client, contract):
    contract.functions.balanceOf.return_value.call.return_value = 2
    contract.functions.tokenOfOwnerByIndex.side_effect = lambda owner, i: MagicMock(
        call=MagicMock(return_value=[10, 11][i])
    )
    contract.functions.createdBalanceOf.return_value.call.return_value = 1
    contract.functions.tokenOfCreatorByIndex.return_value.call.return_value = 10

    assert list(client.tokens_of_owner(RECEIVER)) == [10, 11]
    assert list(client.tokens_of_creator(CREATOR)) == [10]


def test_views(client, contract):
    contract.functions.tokenURI.return_value.call.return_value = "test://0"
    contract.functions.addrToString.return_value.call.return_value = "alice.eth"

    assert client.token_uri(0) == "test://0"
    assert client.addr_to_string(RECEIVER) == "alice.eth"
    contract.functions.addrToString.assert_called_once_with(RECEIVER)
