"""
Unit tests for ABI loading and configuration.
"""
import json

import pytest

from router_helper import config
from router_helper.contract_loader import DEFAULT_ROUTER_ABI, load_abi, load_router_table

TRANSFER_ABI = [{
    "name": "transfer",
    "type": "function",
    "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
    "outputs": [{"name": "", "type": "bool"}],
}]


class TestLoadAbi:
    def test_bare_list(self, tmp_path):
        path = tmp_path / "erc20.json"
        path.write_text(json.dumps(TRANSFER_ABI))
        assert load_abi(path) == TRANSFER_ABI

    def test_build_artifact(self, tmp_path):
        path = tmp_path / "Token.json"
        path.write_text(json.dumps({"contractName": "Token", "abi": TRANSFER_ABI}))
        assert load_abi(str(path)) == TRANSFER_ABI

    def test_not_an_abi(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"contractName": "Token"}))
        with pytest.raises(ValueError):
            load_abi(path)

    def test_bundled_router_abi(self):
        abi = load_abi(DEFAULT_ROUTER_ABI)
        assert {entry["type"] for entry in abi} == {"constructor", "function", "receive"}


class TestLoadRouterTable:
    def test_default(self):
        table = load_router_table()
        assert table.resolve("0x38ed1739").name == "swapExactTokensForTokens"

    def test_custom_path(self, tmp_path):
        path = tmp_path / "erc20.json"
        path.write_text(json.dumps(TRANSFER_ABI))
        table = load_router_table(path)
        assert [m.signature for m in table] == ["transfer(address,uint256)"]


class TestNetworks:
    def test_known_network(self):
        network = config.get_network("mainnet")
        assert network.chain_id == 1666600000
        assert network.rpc_url.startswith("https://")

    def test_rpc_override(self):
        network = config.get_network("testnet", "http://127.0.0.1:8545")
        assert network.rpc_url == "http://127.0.0.1:8545"
        assert config.NETWORKS["testnet"].rpc_url != "http://127.0.0.1:8545"

    def test_unknown_network(self):
        with pytest.raises(ValueError):
            config.get_network("moonnet")
