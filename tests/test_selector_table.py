"""
Unit tests for selector computation and the selector table.
"""
import pytest

from router_helper.exceptions import InvalidTypeSyntax, SelectorCollision, UnknownMethod
from router_helper.selector_table import (
    MethodDescriptor,
    SelectorTable,
    method_selector,
    normalize_selector,
)

ROUTER_SELECTORS = {
    "0xe8e33700": "addLiquidity",
    "0xf305d719": "addLiquidityETH",
    "0xbaa2abde": "removeLiquidity",
    "0x02751cec": "removeLiquidityETH",
    "0x38ed1739": "swapExactTokensForTokens",
    "0x8803dbee": "swapTokensForExactTokens",
    "0x7ff36ab5": "swapExactETHForTokens",
    "0x4a25d94a": "swapTokensForExactETH",
    "0x18cbafe5": "swapExactTokensForETH",
    "0xfb3bdb41": "swapETHForExactTokens",
}


class TestMethodSelector:
    def test_erc20_transfer(self):
        assert method_selector("transfer(address,uint256)").hex() == "a9059cbb"

    def test_router_swap(self):
        signature = "swapExactTokensForTokens(uint256,uint256,address[],address,uint256)"
        assert method_selector(signature).hex() == "38ed1739"


class TestMethodDescriptor:
    def test_from_abi(self):
        entry = {
            "name": "swapExactETHForTokens",
            "type": "function",
            "inputs": [
                {"name": "amountOutMin", "type": "uint256"},
                {"name": "path", "type": "address[]"},
                {"name": "to", "type": "address"},
                {"name": "deadline", "type": "uint256"},
            ],
            "outputs": [{"name": "amounts", "type": "uint256[]"}],
        }
        method = MethodDescriptor.from_abi(entry)

        assert method.signature == "swapExactETHForTokens(uint256,address[],address,uint256)"
        assert method.selector_hex == "0x7ff36ab5"
        assert [p.name for p in method.inputs] == ["amountOutMin", "path", "to", "deadline"]
        assert method.output_types[0].canonical == "uint256[]"

    def test_unnamed_parameters_get_positional_names(self):
        method = MethodDescriptor.from_abi({
            "name": "f",
            "inputs": [{"name": "", "type": "uint"}, {"type": "bool"}],
        })
        assert [p.name for p in method.inputs] == ["param0", "param1"]
        assert method.signature == "f(uint256,bool)"

    def test_from_signature(self):
        method = MethodDescriptor.from_signature("approve(address, uint256)")
        assert method.name == "approve"
        assert method.signature == "approve(address,uint256)"
        assert method.selector_hex == "0x095ea7b3"

    def test_from_signature_without_parameters(self):
        method = MethodDescriptor.from_signature("totalSupply()")
        assert method.inputs == ()
        assert method.selector_hex == "0x18160ddd"

    @pytest.mark.parametrize("signature", ["transfer", "(address)", "f(uint7)", "f(address"])
    def test_from_signature_invalid(self, signature):
        with pytest.raises(InvalidTypeSyntax):
            MethodDescriptor.from_signature(signature)

    def test_to_dict(self):
        method = MethodDescriptor.from_signature("transfer(address,uint256)")
        result = method.to_dict()
        assert result["selector"] == "0xa9059cbb"
        assert result["inputs"][1] == {"name": "param1", "type": "uint256"}


class TestSelectorTable:
    def test_router_methods_resolve(self, router_table):
        for selector, name in ROUTER_SELECTORS.items():
            assert router_table.resolve(selector).name == name

    def test_only_functions_are_included(self, router_table):
        # Constructor and receive entries are skipped
        assert len(router_table) == 23
        assert all(method.name for method in router_table)

    def test_resolve_accepts_raw_bytes(self, router_table):
        assert router_table.resolve(bytes.fromhex("38ed1739")).name == "swapExactTokensForTokens"

    def test_resolve_accepts_unprefixed_and_uppercase_hex(self, router_table):
        assert router_table.resolve("38ED1739").name == "swapExactTokensForTokens"

    @pytest.mark.parametrize("selector", [
        "0xdeadbeef",
        "0x38ed17",
        "0x38ed173900",
        "0x",
        "not hex",
        b"\x38\xed\x17",
        b"\x38\xed\x17\x39\x00",
    ])
    def test_unknown_selector(self, router_table, selector):
        with pytest.raises(UnknownMethod):
            router_table.resolve(selector)

    def test_unknown_selector_reports_hex(self, router_table):
        with pytest.raises(UnknownMethod) as exc_info:
            router_table.resolve(b"\xde\xad\xbe\xef")
        assert exc_info.value.selector == "0xdeadbeef"

    def test_contains(self, router_table):
        assert "0x38ed1739" in router_table
        assert "0xdeadbeef" not in router_table
        assert "garbage" not in router_table

    def test_by_name(self, router_table):
        methods = router_table.by_name("swapETHForExactTokens")
        assert len(methods) == 1
        assert methods[0].selector_hex == "0xfb3bdb41"
        assert router_table.by_name("transfer") == []

    def test_invalid_type_aborts_build(self):
        abi = [{"name": "f", "type": "function", "inputs": [{"name": "x", "type": "uint7"}]}]
        with pytest.raises(InvalidTypeSyntax):
            SelectorTable.from_abi(abi)

    def test_collision_aborts_build(self):
        with pytest.raises(SelectorCollision) as exc_info:
            SelectorTable.from_signatures(["burn(uint256)", "collate_propagate_storage(bytes16)"])
        assert exc_info.value.selector == "0x42966c68"

    def test_duplicate_signatures_are_merged(self):
        table = SelectorTable.from_signatures(["transfer(address,uint256)", "transfer(address,uint)"])
        assert len(table) == 1

    def test_build_is_order_independent(self):
        signatures = ["transfer(address,uint256)", "approve(address,uint256)", "totalSupply()"]
        forward = SelectorTable.from_signatures(signatures)
        backward = SelectorTable.from_signatures(reversed(signatures))
        for method in forward:
            assert backward.resolve(method.selector) == method


class TestNormalizeSelector:
    def test_round_trip(self):
        assert normalize_selector("0xA9059CBB") == bytes.fromhex("a9059cbb")

    def test_wrong_length(self):
        with pytest.raises(UnknownMethod):
            normalize_selector("0xa9059c")
