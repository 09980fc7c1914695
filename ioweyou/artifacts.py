from pathlib import Path
from typing import Any, Dict, List, Optional
import json

from .config import ARTIFACTS_DIR, CONTRACT_NAME, DEPLOYMENTS_DIR


def artifact_path(name: str = CONTRACT_NAME, artifacts_dir: Path = ARTIFACTS_DIR) -> Path:
    """Hardhat layout: artifacts/contracts/<Name>.sol/<Name>.json"""
    return Path(artifacts_dir) / "contracts" / f"{name}.sol" / f"{name}.json"


def load_artifact(name: str = CONTRACT_NAME, artifacts_dir: Path = ARTIFACTS_DIR) -> Dict[str, Any]:
    path = artifact_path(name, artifacts_dir)
    if not path.exists():
        raise FileNotFoundError(f"Artifact not found at: {path} (run `npx hardhat compile`)")
    artifact = json.loads(path.read_text(encoding="utf-8"))
    return {"abi": artifact["abi"], "bytecode": artifact.get("bytecode", "0x")}


def compiler_settings(name: str = CONTRACT_NAME, artifacts_dir: Path = ARTIFACTS_DIR) -> Optional[Dict[str, Any]]:
    """
    Compiler version and optimizer settings an artifact was built with.

    Hardhat writes <Name>.dbg.json next to the artifact, pointing at the
    build-info file that holds the solc input. Returns None when either file
    is missing (artifacts copied without build-info).
    """
    dbg_path = artifact_path(name, artifacts_dir).with_suffix(".dbg.json")
    if not dbg_path.exists():
        return None
    build_info_path = dbg_path.parent / json.loads(dbg_path.read_text(encoding="utf-8"))["buildInfo"]
    if not build_info_path.exists():
        return None
    build_info = json.loads(build_info_path.read_text(encoding="utf-8"))
    return {
        "version": build_info["solcVersion"],
        "settings": {"optimizer": build_info["input"]["settings"].get("optimizer", {})},
    }


def load_abi(name: str = CONTRACT_NAME, artifacts_dir: Path = ARTIFACTS_DIR) -> List[Dict[str, Any]]:
    return load_artifact(name, artifacts_dir)["abi"]


def address_path(network: str, name: str = CONTRACT_NAME, deployments_dir: Path = DEPLOYMENTS_DIR) -> Path:
    return Path(deployments_dir) / f"{name}_{network}.txt"


def save_deployed_address(
    network: str,
    address: str,
    name: str = CONTRACT_NAME,
    deployments_dir: Path = DEPLOYMENTS_DIR,
) -> Path:
    path = address_path(network, name, deployments_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(address + "\n", encoding="utf-8")
    return path


def load_deployed_address(
    network: str,
    name: str = CONTRACT_NAME,
    deployments_dir: Path = DEPLOYMENTS_DIR,
) -> Optional[str]:
    path = address_path(network, name, deployments_dir)
    if not path.exists():
        return None
    address = path.read_text(encoding="utf-8").strip()
    return address or None
