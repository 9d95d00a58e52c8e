"""
Calldata Decoder - Decode transaction calldata into typed values

The payload after the 4-byte selector is a sequence of 32-byte head slots,
one per parameter, followed by a tail. Static values sit in their head
slot; dynamic values are reached through an offset stored in the head,
counted from the start of the enclosing region.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from eth_utils import to_checksum_address, to_hex

from .abi_types import (
    WORD_SIZE,
    AbiType,
    AddressType,
    BoolType,
    BytesType,
    DynamicArrayType,
    FixedArrayType,
    FixedBytesType,
    IntegerType,
    StringType,
    TupleType,
    parse_type,
)
from .exceptions import DecodingError, OffsetOutOfRange, TruncatedPayload, UnknownMethod
from .router_methods import DEFAULT_NATIVE_LABEL, interpret
from .selector_table import SELECTOR_SIZE, MethodDescriptor, SelectorTable
from .tokens import TokenTable

logger = logging.getLogger(__name__)

_COMPOSITE_TYPES = (FixedArrayType, DynamicArrayType, TupleType)


@dataclass(frozen=True)
class DecodedValue:
    """A decoded value tagged with its ABI type"""

    type: AbiType
    value: Any

    @property
    def is_composite(self) -> bool:
        return isinstance(self.type, _COMPOSITE_TYPES)

    def to_python(self) -> Any:
        """Unwrap to plain values: lists for arrays, tuples for tuples"""
        if isinstance(self.type, TupleType):
            return tuple(item.to_python() for item in self.value)
        if self.is_composite:
            return [item.to_python() for item in self.value]
        return self.value

    def to_json(self) -> Any:
        if self.is_composite:
            return [item.to_json() for item in self.value]
        if isinstance(self.value, bytes):
            return to_hex(self.value)
        return self.value


@dataclass(frozen=True)
class DecodedCall:
    """A method call with its ordered, decoded arguments"""

    method: MethodDescriptor
    arguments: Tuple[DecodedValue, ...]

    @property
    def name(self) -> str:
        return self.method.name

    def values(self) -> List[Any]:
        return [argument.to_python() for argument in self.arguments]

    def named_arguments(self) -> Dict[str, Any]:
        return {
            param.name: argument.to_python()
            for param, argument in zip(self.method.inputs, self.arguments)
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "function_selector": self.method.selector_hex,
            "function_name": self.method.name,
            "signature": self.method.signature,
            "parameters": [
                {
                    "name": param.name,
                    "type": param.type.canonical,
                    "value": argument.to_json(),
                }
                for param, argument in zip(self.method.inputs, self.arguments)
            ],
        }


def decode_parameters(
    types: Sequence[Union[AbiType, str]],
    payload: bytes
) -> Tuple[DecodedValue, ...]:
    """
    Decode an ABI-encoded parameter list

    Args:
        types: Parameter types, as AbiType or type strings
        payload: Encoded bytes following the selector

    Returns:
        Decoded values, in parameter order

    Raises:
        TruncatedPayload: if a read runs past the end of the payload
        OffsetOutOfRange: if an offset points outside the payload
    """
    resolved = [parse_type(t) if isinstance(t, str) else t for t in types]
    return _decode_sequence(resolved, bytes(payload), 0)


def decode_transaction_input(
    interface: Union[SelectorTable, Iterable[Dict[str, Any]]],
    raw: Union[bytes, str]
) -> DecodedCall:
    """
    Decode transaction input against a contract interface

    Args:
        interface: A SelectorTable, or ABI JSON to build one from
        raw: Calldata as bytes or hex text

    Raises:
        UnknownMethod: if the selector is not part of the interface
        DecodingError: if the calldata is malformed
    """
    table = interface if isinstance(interface, SelectorTable) else SelectorTable.from_abi(interface)
    data = calldata_bytes(raw)
    if len(data) < SELECTOR_SIZE:
        raise TruncatedPayload(0, SELECTOR_SIZE, len(data))

    method = table.resolve(data[:SELECTOR_SIZE])
    arguments = decode_parameters(method.input_types, data[SELECTOR_SIZE:])
    return DecodedCall(method, arguments)


def decode_output(method: MethodDescriptor, data: Union[bytes, str]) -> Tuple[DecodedValue, ...]:
    """Decode return data of a method call"""
    return decode_parameters(method.output_types, calldata_bytes(data))


def calldata_bytes(raw: Union[bytes, str]) -> bytes:
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw)

    text = raw.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise DecodingError("Calldata is not valid hex") from None


def _read(data: bytes, position: int, size: int) -> bytes:
    end = position + size
    if end > len(data):
        raise TruncatedPayload(position, size, len(data))
    return data[position:end]


def _read_word(data: bytes, position: int) -> int:
    return int.from_bytes(_read(data, position, WORD_SIZE), "big")


def _decode_sequence(
    types: Sequence[AbiType],
    data: bytes,
    base: int
) -> Tuple[DecodedValue, ...]:
    """Decode a head/tail encoded sequence whose region starts at base"""
    values = []
    head = base
    for abi_type in types:
        if abi_type.is_dynamic:
            offset = _read_word(data, head)
            start = base + offset
            if start >= len(data):
                raise OffsetOutOfRange(offset, base, len(data))
            values.append(_decode_value(abi_type, data, start))
        else:
            values.append(_decode_value(abi_type, data, head))
        head += abi_type.head_size
    return tuple(values)


def _decode_value(abi_type: AbiType, data: bytes, position: int) -> DecodedValue:
    if isinstance(abi_type, DynamicArrayType):
        count = _read_word(data, position)
        start = position + WORD_SIZE
        needed = count * abi_type.element.head_size
        if start + needed > len(data):
            raise TruncatedPayload(start, needed, len(data))
        # Elements form their own region: offsets count from just after the length
        return DecodedValue(abi_type, _decode_sequence([abi_type.element] * count, data, start))

    if isinstance(abi_type, FixedArrayType):
        elements = [abi_type.element] * abi_type.length
        return DecodedValue(abi_type, _decode_sequence(elements, data, position))

    if isinstance(abi_type, TupleType):
        return DecodedValue(abi_type, _decode_sequence(abi_type.components, data, position))

    if isinstance(abi_type, (BytesType, StringType)):
        length = _read_word(data, position)
        padded = -(-length // WORD_SIZE) * WORD_SIZE
        content = _read(data, position + WORD_SIZE, padded)[:length]
        if isinstance(abi_type, StringType):
            return DecodedValue(abi_type, content.decode("utf-8", errors="replace"))
        return DecodedValue(abi_type, content)

    word = _read(data, position, WORD_SIZE)
    return DecodedValue(abi_type, _decode_scalar(abi_type, word))


def _decode_scalar(abi_type: AbiType, word: bytes) -> Any:
    if isinstance(abi_type, AddressType):
        return to_checksum_address("0x" + word[-20:].hex())

    if isinstance(abi_type, BoolType):
        return any(word)

    if isinstance(abi_type, FixedBytesType):
        return word[:abi_type.size]

    if isinstance(abi_type, IntegerType):
        value = int.from_bytes(word, "big") & ((1 << abi_type.bits) - 1)
        if abi_type.signed and value >> (abi_type.bits - 1):
            value -= 1 << abi_type.bits
        return value

    raise TypeError(f"Unsupported ABI type: {abi_type!r}")


class CalldataDecoder:
    """Decode router transaction calldata"""

    def __init__(
        self,
        selector_table: SelectorTable,
        token_table: Optional[TokenTable] = None,
        native_label: str = DEFAULT_NATIVE_LABEL
    ):
        self.selector_table = selector_table
        self.token_table = token_table or TokenTable.empty()
        self.native_label = native_label

    def decode(self, calldata: Union[bytes, str]) -> DecodedCall:
        return decode_transaction_input(self.selector_table, calldata)

    def decode_calldata(self, calldata: str) -> Dict:
        """
        Decode transaction calldata

        Args:
            calldata: Hex-encoded calldata (e.g., "0x38ed1739000...")

        Returns:
            Dict with decoded information
        """
        if not calldata or len(calldata.strip()) < 8:
            return {
                "decoded": False,
                "error": "Invalid calldata - too short"
            }

        try:
            call = self.decode(calldata)
        except UnknownMethod as e:
            logger.warning(f"Unrecognized call: {e}")
            return {
                "function_selector": e.selector,
                "signature": "unknown",
                "decoded": False,
                "warning": "Function selector not found in router interface"
            }
        except DecodingError as e:
            logger.error(f"Failed to decode parameters: {e}")
            return {
                "decoded": False,
                "error": f"Parameter decoding failed: {e}"
            }

        action = interpret(call)
        result = call.to_dict()
        result.update({
            "decoded": True,
            "action": action.to_dict(),
            "summary": action.describe(self.token_table, self.native_label),
        })
        return result
