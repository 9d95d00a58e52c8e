"""
Tests for the router-tx command line tool.
"""
import json

from router_helper import cli

from conftest import DEADLINE, RECIPIENT, TOKEN_A, TOKEN_B, TOKEN_C

ROUTER = "0x" + "12" * 20


def write_tokens(tmp_path):
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps({"tokens": [
        {"address": TOKEN_A, "symbol": "TKA", "decimals": 18, "chainId": 1666700000},
        {"address": TOKEN_C, "symbol": "TKC", "decimals": 18, "chainId": 1666700000},
    ]}))
    return str(path)


def test_decode_input(capsys, tmp_path, encode_call):
    raw = encode_call("swapExactTokensForTokens", [10**18, 0, [TOKEN_A, TOKEN_B, TOKEN_C], RECIPIENT, DEADLINE])

    code = cli.main(["--input", "0x" + raw.hex(), "--tokens", write_tokens(tmp_path), "--network", "testnet"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Method: swapExactTokensForTokens" in out
    assert "swapExactTokensForTokens(uint256,uint256,address[],address,uint256)" in out
    assert f"1 TKA ({TOKEN_A}) for TKC ({TOKEN_C})" in out


def test_unrecognized_call(capsys):
    code = cli.main(["--input", "0xa9059cbb" + "00" * 64])
    assert code == 1
    assert "Unrecognized call" in capsys.readouterr().out


def test_malformed_calldata(capsys, encode_call):
    raw = encode_call("swapExactETHForTokens", [0, [TOKEN_A, TOKEN_B], RECIPIENT, DEADLINE])
    code = cli.main(["--input", raw[:-1].hex()])
    assert code == 1
    assert "Malformed calldata" in capsys.readouterr().out


def test_router_required(capsys):
    assert cli.main(["--router", "", "--tx", "0x01"]) == 0
    assert "You must supply a router address" in capsys.readouterr().out


def test_tx_required(capsys):
    assert cli.main(["--router", ROUTER]) == 0
    assert "You must supply a tx hash" in capsys.readouterr().out


def test_fetches_transaction(capsys, monkeypatch, encode_call):
    raw = encode_call("swapETHForExactTokens", [10**18, [TOKEN_B, TOKEN_C], RECIPIENT, DEADLINE])
    requested = []

    async def get_transaction(self, tx_hash):
        requested.append((self.rpc_url, tx_hash))
        return {"hash": tx_hash, "to": ROUTER, "input": "0x" + raw.hex()}

    monkeypatch.setattr(cli.TransactionFetcher, "get_transaction", get_transaction)

    code = cli.main(["--router", ROUTER, "--tx", "0xfeed", "--rpc-url", "http://node"])

    assert code == 0
    assert requested == [("http://node", "0xfeed")]
    assert "Method: swapETHForExactTokens" in capsys.readouterr().out


def test_unknown_network(capsys):
    assert cli.main(["--network", "moonnet", "--input", "0x38ed1739"]) == 1
