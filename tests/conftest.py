"""
Shared fixtures: the bundled router table, a synthetic token table and a
reference encoder for router calls.
"""
import pytest
from eth_abi import encode
from eth_utils import to_checksum_address

from router_helper.contract_loader import load_router_table
from router_helper.tokens import Token, TokenTable

TOKEN_A = to_checksum_address("0x" + "a1" * 20)
TOKEN_B = to_checksum_address("0x" + "b2" * 20)
TOKEN_C = to_checksum_address("0x" + "c3" * 20)
UNKNOWN_TOKEN = to_checksum_address("0x" + "d4" * 20)
RECIPIENT = to_checksum_address("0x" + "e5" * 20)
DEADLINE = 1700000000


@pytest.fixture(scope="session")
def router_table():
    return load_router_table()


@pytest.fixture
def token_table():
    return TokenTable([
        Token(TOKEN_A, "TKA", 18, "Token A"),
        Token(TOKEN_B, "TKB", 6, "Token B"),
        Token(TOKEN_C, "TKC", 18, "Token C"),
    ])


@pytest.fixture
def encode_call(router_table):
    """Encode a router call with eth_abi as the reference encoder"""

    def _encode(name, args):
        method = router_table.by_name(name)[0]
        types = [t.canonical for t in method.input_types]
        return method.selector + encode(types, args)

    return _encode
