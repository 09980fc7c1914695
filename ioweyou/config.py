from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional
import os

from dotenv import load_dotenv

from .errors import ConfigError

# Load environment variables from .env
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

CONTRACT_NAME = "IOweYou"

NULL_ADDRESS = "0x0000000000000000000000000000000000000000"

# ENS reverse-records contract per network:
# https://github.com/ensdomains/reverse-records
REVERSE_REGISTRY_ADDRESS: Dict[str, str] = {
    "default": NULL_ADDRESS,
    "ropsten": "0x72c33B247e62d0f1927E8d325d0358b8f9971C68",
    "rinkeby": "0x196eC7109e127A353B709a20da25052617295F6f",
    "goerli": "0x333Fc8f550043f239a2CF79aEd5e9cF4A20Eb41e",
    "mainnet": "0x3671aE578E63FdF66ad4F3E12CC0c0d71Ac7510C",
}

# Compiler settings the artifacts must be built with; deploy warns on a mismatch
SOLIDITY = {
    "version": "0.8.9",
    "settings": {
        "optimizer": {
            "enabled": True,
            "runs": 200,
        },
    },
}

LOCAL_RPC_URL = "http://127.0.0.1:8545"
ALCHEMY_URL = "https://eth-{network}.alchemyapi.io/v2/{key}"
FORK_BLOCK_NUMBER = 11133070

ARTIFACTS_DIR = BASE_DIR / "artifacts"
DEPLOYMENTS_DIR = BASE_DIR / "deployments"

# Use the first unlocked account of the node
ACCOUNT_INDEX = 0

# Reasonable default gas limit
GAS_LIMIT = 3_000_000


@dataclass
class NetworkConfig:
    name: str
    url: str
    accounts: List[str] = field(default_factory=list)
    fork_url: Optional[str] = None
    fork_block_number: Optional[int] = None


def _alchemy(network: str, env: Mapping[str, str]) -> str:
    key = env.get(f"ALCHEMY_{network.upper()}", "")
    return ALCHEMY_URL.format(network=network, key=key)


def build_networks(env: Mapping[str, str] = os.environ) -> Dict[str, NetworkConfig]:
    rinkeby_key = env.get("RINKEBY_KEY", "")
    return {
        "localhost": NetworkConfig(name="localhost", url=LOCAL_RPC_URL),
        # `npx hardhat node` forking ropsten, served locally
        "hardhat": NetworkConfig(
            name="hardhat",
            url=LOCAL_RPC_URL,
            fork_url=_alchemy("ropsten", env),
            fork_block_number=FORK_BLOCK_NUMBER,
        ),
        "ropsten": NetworkConfig(name="ropsten", url=_alchemy("ropsten", env)),
        "rinkeby": NetworkConfig(
            name="rinkeby",
            url=_alchemy("rinkeby", env),
            accounts=[rinkeby_key] if rinkeby_key else [],
        ),
    }


def active_network(env: Mapping[str, str] = os.environ) -> Optional[str]:
    """Network selected through IOWEYOU_NETWORK, or HARDHAT_NETWORK."""
    return env.get("IOWEYOU_NETWORK") or env.get("HARDHAT_NETWORK") or None


def get_network(name: Optional[str] = None, env: Mapping[str, str] = os.environ) -> NetworkConfig:
    name = name or active_network(env) or "localhost"
    networks = build_networks(env)
    if name not in networks:
        raise ConfigError(f"Unknown network '{name}'. Known: {', '.join(sorted(networks))}")
    return networks[name]


def reverse_registry_for(network: Optional[str]) -> str:
    return REVERSE_REGISTRY_ADDRESS.get(network or "default", REVERSE_REGISTRY_ADDRESS["default"])


def private_key_for(network: NetworkConfig, env: Mapping[str, str] = os.environ) -> Optional[str]:
    """Explicit IOWEYOU_PRIVATE_KEY wins over the network's configured accounts."""
    key = env.get("IOWEYOU_PRIVATE_KEY", "")
    if key:
        return key
    if network.accounts:
        return network.accounts[0]
    return None


NETWORK = active_network()
CONTRACT_ADDRESS = os.getenv("IOWEYOU_CONTRACT_ADDRESS", "")
LOG_LEVEL = os.getenv("IOWEYOU_LOG_LEVEL", "INFO")
