"""
deploy.py

Deploy IOweYou to the active network.

The constructor takes the address of the ENS reverse-records contract of the
target network (used by addrToString). Networks without one get the null
address, so names fall back to hex.

Usage:
    IOWEYOU_NETWORK=rinkeby python scripts/deploy.py
"""

from pathlib import Path
from typing import Optional
import logging
import sys

from eth_account import Account
from web3 import Web3

from .artifacts import compiler_settings, load_artifact, save_deployed_address
from .config import (
    ACCOUNT_INDEX,
    ARTIFACTS_DIR,
    CONTRACT_NAME,
    LOG_LEVEL,
    SOLIDITY,
    active_network,
    get_network,
    private_key_for,
    reverse_registry_for,
)
from .errors import TransactionFailedError
from .eth_client import get_w3, send_transaction

logger = logging.getLogger(__name__)


def deploy(
    w3: Web3,
    account: str,
    network: Optional[str] = None,
    artifacts_dir: Path = ARTIFACTS_DIR,
    private_key: Optional[str] = None,
) -> str:
    """Deploy IOweYou and return its address once the deployment is mined."""
    network = network or active_network()
    registry = reverse_registry_for(network)
    logger.info("[IOU] Deploying %s to %s (reverse registry %s)", CONTRACT_NAME, network or "default", registry)

    built_with = compiler_settings(CONTRACT_NAME, artifacts_dir)
    if built_with is not None and built_with != SOLIDITY:
        logger.warning("[IOU] Artifact built with %s, expected %s (run `npx hardhat compile --force`)", built_with, SOLIDITY)

    artifact = load_artifact(CONTRACT_NAME, artifacts_dir)
    factory = w3.eth.contract(abi=artifact["abi"], bytecode=artifact["bytecode"])
    constructor = factory.constructor(Web3.to_checksum_address(registry))

    tx_hash = send_transaction(w3, constructor, account, private_key)

    receipt = w3.eth.wait_for_transaction_receipt(tx_hash)
    if receipt["status"] != 1 or not receipt["contractAddress"]:
        raise TransactionFailedError(Web3.to_hex(tx_hash))

    address = receipt["contractAddress"]
    logger.info("[IOU] Deployed at %s (block=%s, gas=%s)", address, receipt["blockNumber"], receipt["gasUsed"])
    return address


def main() -> int:
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    try:
        net = get_network()
        network = active_network()
        w3 = get_w3(net.url)

        private_key = private_key_for(net)
        if private_key:
            account = Account.from_key(private_key).address
        else:
            account = w3.eth.accounts[ACCOUNT_INDEX]

        address = deploy(w3, account, network=network, private_key=private_key)
        save_deployed_address(net.name, address)
    except Exception as e:
        print(f"[ERR] {e}", file=sys.stderr)
        return 1

    print(f"IOweYou deployed to {net.name}:{address}")
    return 0
