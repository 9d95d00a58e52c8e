"""
Selector Table - Map 4-byte function selectors to method descriptors
"""
import logging
from dataclasses import dataclass
from functools import cached_property
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Tuple, Union

from eth_utils import keccak, to_hex

from .abi_types import AbiType, TupleType, parse_type, type_from_abi
from .exceptions import InvalidTypeSyntax, SelectorCollision, UnknownMethod

logger = logging.getLogger(__name__)

SELECTOR_SIZE = 4


def method_selector(signature: str) -> bytes:
    """
    Calculate function selector from a canonical signature

    Args:
        signature: e.g., "transfer(address,uint256)"

    Returns:
        First 4 bytes of the keccak256 hash
    """
    return keccak(text=signature)[:SELECTOR_SIZE]


@dataclass(frozen=True)
class Parameter:
    name: str
    type: AbiType


@dataclass(frozen=True)
class MethodDescriptor:
    """A contract method: name, typed inputs and outputs"""

    name: str
    inputs: Tuple[Parameter, ...]
    outputs: Tuple[Parameter, ...] = ()

    @cached_property
    def signature(self) -> str:
        return f"{self.name}({','.join(p.type.canonical for p in self.inputs)})"

    @cached_property
    def selector(self) -> bytes:
        return method_selector(self.signature)

    @property
    def selector_hex(self) -> str:
        return to_hex(self.selector)

    @property
    def input_types(self) -> Tuple[AbiType, ...]:
        return tuple(p.type for p in self.inputs)

    @property
    def output_types(self) -> Tuple[AbiType, ...]:
        return tuple(p.type for p in self.outputs)

    @classmethod
    def from_abi(cls, entry: Dict[str, Any]) -> "MethodDescriptor":
        """Build from an ABI JSON function entry"""
        name = entry.get("name")
        if not name:
            raise InvalidTypeSyntax(repr(entry), "function entry has no name")

        return cls(
            name=name,
            inputs=_parameters(entry.get("inputs", [])),
            outputs=_parameters(entry.get("outputs", [])),
        )

    @classmethod
    def from_signature(cls, signature: str) -> "MethodDescriptor":
        """Build from a text signature such as "approve(address,uint256)" """
        signature = signature.replace(" ", "")
        if "(" not in signature or not signature.endswith(")"):
            raise InvalidTypeSyntax(signature, "not a function signature")

        name, _, params = signature.partition("(")
        if not name:
            raise InvalidTypeSyntax(signature, "not a function signature")
        if params == ")":
            return cls(name=name, inputs=())

        params_type = parse_type("(" + params)
        if not isinstance(params_type, TupleType):
            raise InvalidTypeSyntax(signature, "not a function signature")

        inputs = tuple(
            Parameter(f"param{i}", t) for i, t in enumerate(params_type.components)
        )
        return cls(name=name, inputs=inputs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "signature": self.signature,
            "selector": self.selector_hex,
            "inputs": [{"name": p.name, "type": p.type.canonical} for p in self.inputs],
            "outputs": [{"name": p.name, "type": p.type.canonical} for p in self.outputs],
        }


def _parameters(entries: Iterable[Dict[str, Any]]) -> Tuple[Parameter, ...]:
    return tuple(
        Parameter(entry.get("name") or f"param{i}", type_from_abi(entry))
        for i, entry in enumerate(entries)
    )


def normalize_selector(selector: Union[bytes, str]) -> bytes:
    """
    Convert a selector given as raw bytes or hex text to 4 raw bytes

    Raises:
        UnknownMethod: if the value cannot be a selector
    """
    if isinstance(selector, (bytes, bytearray)):
        raw = bytes(selector)
    else:
        text = str(selector).strip().lower()
        if text.startswith("0x"):
            text = text[2:]
        try:
            raw = bytes.fromhex(text)
        except ValueError:
            raise UnknownMethod(str(selector)) from None

    if len(raw) != SELECTOR_SIZE:
        raise UnknownMethod(to_hex(raw))
    return raw


class SelectorTable:
    """Read-only lookup from selector to method, built once per contract"""

    def __init__(self, methods: Iterable[MethodDescriptor]):
        entries: Dict[bytes, MethodDescriptor] = {}
        for method in methods:
            existing = entries.get(method.selector)
            if existing is None:
                entries[method.selector] = method
            elif existing.signature != method.signature:
                raise SelectorCollision(
                    method.selector_hex, existing.signature, method.signature
                )

        self._methods = MappingProxyType(entries)
        logger.info(f"Built selector table with {len(entries)} methods")

    @classmethod
    def from_abi(cls, abi: Iterable[Dict[str, Any]]) -> "SelectorTable":
        """Build from ABI JSON, keeping function entries only"""
        return cls(
            MethodDescriptor.from_abi(entry)
            for entry in abi
            if entry.get("type", "function") == "function"
        )

    @classmethod
    def from_signatures(cls, signatures: Iterable[str]) -> "SelectorTable":
        return cls(MethodDescriptor.from_signature(s) for s in signatures)

    def resolve(self, selector: Union[bytes, str]) -> MethodDescriptor:
        """
        Look up the method for a selector

        Raises:
            UnknownMethod: if no method of this table has that exact selector
        """
        raw = normalize_selector(selector)
        method = self._methods.get(raw)
        if method is None:
            raise UnknownMethod(to_hex(raw))
        return method

    def by_name(self, name: str) -> List[MethodDescriptor]:
        return [m for m in self._methods.values() if m.name == name]

    def __contains__(self, selector: object) -> bool:
        try:
            return normalize_selector(selector) in self._methods  # type: ignore[arg-type]
        except UnknownMethod:
            return False

    def __iter__(self) -> Iterator[MethodDescriptor]:
        return iter(self._methods.values())

    def __len__(self) -> int:
        return len(self._methods)
