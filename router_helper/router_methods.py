"""
Router Methods - Interpret decoded router calls as liquidity and swap actions

Each supported UniswapV2Router02 method has its own action class. Arguments
are taken by position and checked against the method's fixed shape.
"""
import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional, Sequence, Tuple, Type, Union

from .abi_types import AbiType, AddressType, DynamicArrayType, IntegerType
from .exceptions import MethodShapeMismatch
from .tokens import DEFAULT_DECIMALS, TokenTable, format_amount

if TYPE_CHECKING:
    from .calldata_decoder import DecodedCall

logger = logging.getLogger(__name__)

DEFAULT_NATIVE_LABEL = "ONE/wONE"

UINT = IntegerType(256, False)
ADDRESS = AddressType()
PATH = DynamicArrayType(ADDRESS)


def _shape(types: Sequence[AbiType]) -> str:
    return ",".join(t.canonical for t in types)


def _token_label(tokens: TokenTable, address: Optional[str]) -> str:
    if address is None:
        return "(empty path)"
    token = tokens.resolve_symbol(address)
    if token is None or not token.symbol:
        return f"({address})"
    return f"{token.symbol} ({address})"


def _amount(tokens: TokenTable, address: Optional[str], raw: int) -> str:
    token = tokens.resolve_symbol(address)
    return format_amount(raw, token.decimals if token else DEFAULT_DECIMALS)


class RouterAction:
    """Base class for interpreted router calls"""

    METHOD: ClassVar[str]
    SHAPE: ClassVar[Tuple[AbiType, ...]]

    @classmethod
    def from_call(cls, call: "DecodedCall") -> "RouterAction":
        actual = tuple(argument.type for argument in call.arguments)
        if actual != cls.SHAPE:
            raise MethodShapeMismatch(call.name, _shape(cls.SHAPE), _shape(actual))

        values = []
        for argument in call.arguments:
            value = argument.to_python()
            values.append(tuple(value) if isinstance(value, list) else value)
        return cls(*values)

    def token_addresses(self) -> List[str]:
        raise NotImplementedError

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        result = {"method": self.METHOD, "supported": True}
        result.update(asdict(self))
        return result


class _PathSwap(RouterAction):
    path: Tuple[str, ...]

    @property
    def from_token(self) -> Optional[str]:
        return self.path[0] if self.path else None

    @property
    def to_token(self) -> Optional[str]:
        return self.path[-1] if self.path else None

    def token_addresses(self) -> List[str]:
        return list(self.path)


@dataclass(frozen=True)
class AddLiquidity(RouterAction):
    METHOD: ClassVar[str] = "addLiquidity"
    SHAPE: ClassVar[Tuple[AbiType, ...]] = (ADDRESS, ADDRESS, UINT, UINT, UINT, UINT, ADDRESS, UINT)

    token_a: str
    token_b: str
    amount_a_desired: int
    amount_b_desired: int
    amount_a_min: int
    amount_b_min: int
    to: str
    deadline: int

    def token_addresses(self) -> List[str]:
        return [self.token_a, self.token_b]

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        return (
            f"Added Liquidity (method: '{self.METHOD}') "
            f"for token A {_token_label(tokens, self.token_a)} "
            f"(amount desired: {_amount(tokens, self.token_a, self.amount_a_desired)}, "
            f"amount minimum: {_amount(tokens, self.token_a, self.amount_a_min)}) "
            f"and token B {_token_label(tokens, self.token_b)} "
            f"(amount desired: {_amount(tokens, self.token_b, self.amount_b_desired)}, "
            f"amount minimum: {_amount(tokens, self.token_b, self.amount_b_min)})"
        )


@dataclass(frozen=True)
class AddLiquidityETH(RouterAction):
    METHOD: ClassVar[str] = "addLiquidityETH"
    SHAPE: ClassVar[Tuple[AbiType, ...]] = (ADDRESS, UINT, UINT, UINT, ADDRESS, UINT)

    token: str
    amount_token_desired: int
    amount_token_min: int
    amount_eth_min: int
    to: str
    deadline: int

    def token_addresses(self) -> List[str]:
        return [self.token]

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        return (
            f"Added Liquidity (method: '{self.METHOD}') "
            f"for {native_label} (amount minimum: {format_amount(self.amount_eth_min)}) "
            f"and token {_token_label(tokens, self.token)} "
            f"(amount desired: {_amount(tokens, self.token, self.amount_token_desired)}, "
            f"amount minimum: {_amount(tokens, self.token, self.amount_token_min)})"
        )


@dataclass(frozen=True)
class RemoveLiquidity(RouterAction):
    METHOD: ClassVar[str] = "removeLiquidity"
    SHAPE: ClassVar[Tuple[AbiType, ...]] = (ADDRESS, ADDRESS, UINT, UINT, UINT, ADDRESS, UINT)

    token_a: str
    token_b: str
    liquidity: int
    amount_a_min: int
    amount_b_min: int
    to: str
    deadline: int

    def token_addresses(self) -> List[str]:
        return [self.token_a, self.token_b]

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        return (
            f"Removed {format_amount(self.liquidity)} liquidity (method: '{self.METHOD}') "
            f"for token A {_token_label(tokens, self.token_a)} "
            f"(amount minimum: {_amount(tokens, self.token_a, self.amount_a_min)}) "
            f"and token B {_token_label(tokens, self.token_b)} "
            f"(amount minimum: {_amount(tokens, self.token_b, self.amount_b_min)})"
        )


@dataclass(frozen=True)
class RemoveLiquidityETH(RouterAction):
    METHOD: ClassVar[str] = "removeLiquidityETH"
    SHAPE: ClassVar[Tuple[AbiType, ...]] = (ADDRESS, UINT, UINT, UINT, ADDRESS, UINT)

    token: str
    liquidity: int
    amount_token_min: int
    amount_eth_min: int
    to: str
    deadline: int

    def token_addresses(self) -> List[str]:
        return [self.token]

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        return (
            f"Removed {format_amount(self.liquidity)} liquidity (method: '{self.METHOD}') "
            f"for {native_label} (amount minimum: {format_amount(self.amount_eth_min)}) "
            f"and token {_token_label(tokens, self.token)} "
            f"(amount minimum: {_amount(tokens, self.token, self.amount_token_min)})"
        )


@dataclass(frozen=True)
class SwapExactTokensForTokens(_PathSwap):
    METHOD: ClassVar[str] = "swapExactTokensForTokens"
    SHAPE: ClassVar[Tuple[AbiType, ...]] = (UINT, UINT, PATH, ADDRESS, UINT)

    amount_in: int
    amount_out_min: int
    path: Tuple[str, ...]
    to: str
    deadline: int

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        return (
            f"Swapped (method: '{self.METHOD}') "
            f"{_amount(tokens, self.from_token, self.amount_in)} {_token_label(tokens, self.from_token)} "
            f"for {_token_label(tokens, self.to_token)} "
            f"(amount minimum: {_amount(tokens, self.to_token, self.amount_out_min)})"
        )


@dataclass(frozen=True)
class SwapTokensForExactTokens(_PathSwap):
    METHOD: ClassVar[str] = "swapTokensForExactTokens"
    SHAPE: ClassVar[Tuple[AbiType, ...]] = (UINT, UINT, PATH, ADDRESS, UINT)

    amount_out: int
    amount_in_max: int
    path: Tuple[str, ...]
    to: str
    deadline: int

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        return (
            f"Swapped (method: '{self.METHOD}') {_token_label(tokens, self.from_token)} "
            f"(amount maximum: {_amount(tokens, self.from_token, self.amount_in_max)}) "
            f"for {_amount(tokens, self.to_token, self.amount_out)} {_token_label(tokens, self.to_token)}"
        )


@dataclass(frozen=True)
class SwapExactETHForTokens(_PathSwap):
    METHOD: ClassVar[str] = "swapExactETHForTokens"
    SHAPE: ClassVar[Tuple[AbiType, ...]] = (UINT, PATH, ADDRESS, UINT)

    amount_out_min: int
    path: Tuple[str, ...]
    to: str
    deadline: int

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        return (
            f"Swapped (method: '{self.METHOD}') {native_label} "
            f"for {_token_label(tokens, self.to_token)} "
            f"(amount minimum: {_amount(tokens, self.to_token, self.amount_out_min)})"
        )


@dataclass(frozen=True)
class SwapTokensForExactETH(_PathSwap):
    METHOD: ClassVar[str] = "swapTokensForExactETH"
    SHAPE: ClassVar[Tuple[AbiType, ...]] = (UINT, UINT, PATH, ADDRESS, UINT)

    amount_out: int
    amount_in_max: int
    path: Tuple[str, ...]
    to: str
    deadline: int

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        return (
            f"Swapped (method: '{self.METHOD}') {_token_label(tokens, self.from_token)} "
            f"(amount maximum: {_amount(tokens, self.from_token, self.amount_in_max)}) "
            f"for {format_amount(self.amount_out)} {native_label}"
        )


@dataclass(frozen=True)
class SwapExactTokensForETH(_PathSwap):
    METHOD: ClassVar[str] = "swapExactTokensForETH"
    SHAPE: ClassVar[Tuple[AbiType, ...]] = (UINT, UINT, PATH, ADDRESS, UINT)

    amount_in: int
    amount_out_min: int
    path: Tuple[str, ...]
    to: str
    deadline: int

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        return (
            f"Swapped (method: '{self.METHOD}') "
            f"{_amount(tokens, self.from_token, self.amount_in)} {_token_label(tokens, self.from_token)} "
            f"for {native_label} (amount minimum: {format_amount(self.amount_out_min)})"
        )


@dataclass(frozen=True)
class SwapETHForExactTokens(_PathSwap):
    METHOD: ClassVar[str] = "swapETHForExactTokens"
    SHAPE: ClassVar[Tuple[AbiType, ...]] = (UINT, PATH, ADDRESS, UINT)

    amount_out: int
    path: Tuple[str, ...]
    to: str
    deadline: int

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> str:
        return (
            f"Swapped (method: '{self.METHOD}') {native_label} "
            f"for {_amount(tokens, self.to_token, self.amount_out)} {_token_label(tokens, self.to_token)}"
        )


@dataclass(frozen=True)
class UnsupportedMethod:
    """A decoded call with no router interpretation"""

    name: str

    def token_addresses(self) -> List[str]:
        return []

    def describe(self, tokens: TokenTable, native_label: str = DEFAULT_NATIVE_LABEL) -> None:
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.name, "supported": False}


ROUTER_ACTIONS: Dict[str, Type[RouterAction]] = {
    action.METHOD: action
    for action in (
        AddLiquidity,
        AddLiquidityETH,
        RemoveLiquidity,
        RemoveLiquidityETH,
        SwapExactTokensForTokens,
        SwapTokensForExactTokens,
        SwapExactETHForTokens,
        SwapTokensForExactETH,
        SwapExactTokensForETH,
        SwapETHForExactTokens,
    )
}


def interpret(call: "DecodedCall") -> Union[RouterAction, UnsupportedMethod]:
    """
    Map a decoded call to its router action

    Raises:
        MethodShapeMismatch: if a supported method has unexpected arguments
    """
    action = ROUTER_ACTIONS.get(call.name)
    if action is None:
        logger.debug(f"No router interpretation for {call.name}")
        return UnsupportedMethod(call.name)

    try:
        return action.from_call(call)
    except MethodShapeMismatch:
        logger.error(f"Router method {call.method.signature} does not match its expected shape", exc_info=True)
        raise


def describe(
    call: Union["DecodedCall", RouterAction, UnsupportedMethod],
    tokens: Optional[TokenTable] = None,
    native_label: str = DEFAULT_NATIVE_LABEL
) -> Optional[str]:
    """
    Produce a one-line summary of a router call

    Returns:
        The summary, or None for methods without a router interpretation
    """
    if not isinstance(call, (RouterAction, UnsupportedMethod)):
        call = interpret(call)
    return call.describe(tokens or TokenTable.empty(), native_label)
