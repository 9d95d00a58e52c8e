import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .contract_loader import DEFAULT_ROUTER_ABI

load_dotenv()


class NetworkConfig(BaseModel):
    name: str
    rpc_url: str
    chain_id: int


NETWORKS = {
    "testnet": NetworkConfig(name="testnet", rpc_url="https://api.s0.b.hmny.io", chain_id=1666700000),
    "mainnet": NetworkConfig(name="mainnet", rpc_url="https://api.s0.t.hmny.io", chain_id=1666600000),
    "localnet": NetworkConfig(name="localnet", rpc_url="http://localhost:9500", chain_id=1666700000),
}

NETWORK = os.getenv("NETWORK", "testnet")
RPC_URL = os.getenv("RPC_URL")
RPC_TIMEOUT = float(os.getenv("RPC_TIMEOUT", "10"))
ROUTER_ADDRESS = os.getenv("ROUTER_ADDRESS", "")
ROUTER_ABI_PATH = Path(os.getenv("ROUTER_ABI_PATH", str(DEFAULT_ROUTER_ABI)))
TOKEN_LIST_PATH = os.getenv("TOKEN_LIST_PATH")
NATIVE_ASSET_LABEL = os.getenv("NATIVE_ASSET_LABEL", "ONE/wONE")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_network(name: str, rpc_url: Optional[str] = None) -> NetworkConfig:
    """Look up a network by name, with an optional RPC URL override"""
    try:
        network = NETWORKS[name]
    except KeyError:
        raise ValueError(f"Unknown network {name!r}, expected one of {', '.join(NETWORKS)}") from None

    if rpc_url:
        network = network.model_copy(update={"rpc_url": rpc_url})
    return network
