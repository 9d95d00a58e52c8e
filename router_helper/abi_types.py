"""
ABI Types - Parse Solidity type strings into type descriptors

Every descriptor knows whether it is static (encoded inline in its head
slot) or dynamic (encoded in the tail and reached through an offset).
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .exceptions import InvalidTypeSyntax

WORD_SIZE = 32

_ELEMENTARY_RE = re.compile(r"[a-z]+[0-9]*")
_DIMENSION_RE = re.compile(r"\[([0-9]*)\]")
_SIZED_RE = re.compile(r"(uint|int|bytes)([1-9][0-9]*)")


class AbiType:
    """Base class for type descriptors"""

    is_dynamic = False

    @property
    def head_size(self) -> int:
        """Bytes taken in the enclosing head: one word for dynamic types"""
        return WORD_SIZE

    @property
    def canonical(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True)
class IntegerType(AbiType):
    bits: int = 256
    signed: bool = False

    @property
    def canonical(self) -> str:
        return f"{'int' if self.signed else 'uint'}{self.bits}"


@dataclass(frozen=True)
class AddressType(AbiType):
    @property
    def canonical(self) -> str:
        return "address"


@dataclass(frozen=True)
class BoolType(AbiType):
    @property
    def canonical(self) -> str:
        return "bool"


@dataclass(frozen=True)
class FixedBytesType(AbiType):
    size: int

    @property
    def canonical(self) -> str:
        return f"bytes{self.size}"


@dataclass(frozen=True)
class BytesType(AbiType):
    is_dynamic = True

    @property
    def canonical(self) -> str:
        return "bytes"


@dataclass(frozen=True)
class StringType(AbiType):
    is_dynamic = True

    @property
    def canonical(self) -> str:
        return "string"


@dataclass(frozen=True)
class FixedArrayType(AbiType):
    element: AbiType
    length: int

    @property
    def is_dynamic(self) -> bool:
        return self.element.is_dynamic

    @property
    def head_size(self) -> int:
        if self.is_dynamic:
            return WORD_SIZE
        return self.element.head_size * self.length

    @property
    def canonical(self) -> str:
        return f"{self.element.canonical}[{self.length}]"


@dataclass(frozen=True)
class DynamicArrayType(AbiType):
    element: AbiType
    is_dynamic = True

    @property
    def canonical(self) -> str:
        return f"{self.element.canonical}[]"


@dataclass(frozen=True)
class TupleType(AbiType):
    components: Tuple[AbiType, ...]

    @property
    def is_dynamic(self) -> bool:
        return any(component.is_dynamic for component in self.components)

    @property
    def head_size(self) -> int:
        if self.is_dynamic:
            return WORD_SIZE
        return sum(component.head_size for component in self.components)

    @property
    def canonical(self) -> str:
        return "(" + ",".join(c.canonical for c in self.components) + ")"


_KEYWORDS = {
    "address": AddressType(),
    "bool": BoolType(),
    "bytes": BytesType(),
    "string": StringType(),
    "uint": IntegerType(256, False),
    "int": IntegerType(256, True),
}


def parse_type(type_str: str) -> AbiType:
    """
    Parse a Solidity type string

    Args:
        type_str: e.g. "uint256", "address[]", "(address,uint256)[2]"

    Returns:
        The matching AbiType

    Raises:
        InvalidTypeSyntax: if the string is not a valid ABI type
    """
    if not isinstance(type_str, str):
        raise InvalidTypeSyntax(repr(type_str), "type must be a string")

    text = type_str.strip()
    abi_type, pos = _parse(text, 0, type_str)
    if pos != len(text):
        raise InvalidTypeSyntax(type_str, f"unexpected trailing {text[pos:]!r}")
    return abi_type


def type_from_abi(param: Dict[str, Any]) -> AbiType:
    """Build a type from an ABI JSON parameter, expanding tuple components"""
    type_str = param.get("type")
    if not isinstance(type_str, str):
        raise InvalidTypeSyntax(repr(type_str), "parameter has no type")

    if type_str.startswith("tuple"):
        components = param.get("components")
        if components is None:
            raise InvalidTypeSyntax(type_str, "tuple without components")
        inner = ",".join(type_from_abi(c).canonical for c in components)
        type_str = f"({inner}){type_str[len('tuple'):]}"

    return parse_type(type_str)


def _parse(text: str, pos: int, original: str) -> Tuple[AbiType, int]:
    if text.startswith("(", pos):
        components = []
        pos += 1
        if text.startswith(")", pos):
            raise InvalidTypeSyntax(original, "empty tuple")
        while True:
            component, pos = _parse(text, pos, original)
            components.append(component)
            if pos >= len(text):
                raise InvalidTypeSyntax(original, "unterminated tuple")
            if text[pos] == ",":
                pos += 1
            elif text[pos] == ")":
                pos += 1
                break
            else:
                raise InvalidTypeSyntax(original, f"unexpected {text[pos]!r} in tuple")
        base: AbiType = TupleType(tuple(components))
    else:
        match = _ELEMENTARY_RE.match(text, pos)
        if not match:
            raise InvalidTypeSyntax(original)
        base = _elementary(match.group(0), original)
        pos = match.end()

    # Array suffixes apply left to right: uint256[2][] is a dynamic array of uint256[2]
    while True:
        match = _DIMENSION_RE.match(text, pos)
        if not match:
            return base, pos
        size = match.group(1)
        if size == "":
            base = DynamicArrayType(base)
        elif size.startswith("0"):
            raise InvalidTypeSyntax(original, f"invalid array length {size}")
        else:
            base = FixedArrayType(base, int(size))
        pos = match.end()


def _elementary(name: str, original: str) -> AbiType:
    if name in _KEYWORDS:
        return _KEYWORDS[name]

    match = _SIZED_RE.fullmatch(name)
    if not match:
        raise InvalidTypeSyntax(original, f"unknown type {name!r}")

    kind, size = match.group(1), int(match.group(2))
    if kind == "bytes":
        if size > 32:
            raise InvalidTypeSyntax(original, f"bytes{size} exceeds 32 bytes")
        return FixedBytesType(size)

    if size > 256 or size % 8:
        raise InvalidTypeSyntax(original, f"invalid integer width {size}")
    return IntegerType(size, kind == "int")
