"""
Exceptions raised while building router tables and decoding calldata
"""
from typing import Optional


class RouterHelperError(Exception):
    """Base class for every error raised by router_helper"""


class InvalidTypeSyntax(RouterHelperError):
    """A type string in the interface description could not be parsed"""

    def __init__(self, type_str: str, reason: str = "unrecognized type"):
        self.type_str = type_str
        self.reason = reason
        super().__init__(f"Invalid ABI type {type_str!r}: {reason}")


class SelectorCollision(RouterHelperError):
    """Two different signatures hash to the same 4-byte selector"""

    def __init__(self, selector: str, first: str, second: str):
        self.selector = selector
        self.signatures = (first, second)
        super().__init__(f"Selector {selector} is shared by {first} and {second}")


class UnknownMethod(RouterHelperError):
    """The calldata selector does not match any method of the interface"""

    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f"No method found for selector {selector}")


class DecodingError(RouterHelperError):
    """Base class for malformed calldata"""


class TruncatedPayload(DecodingError):
    def __init__(self, position: int, needed: int, available: int):
        self.position = position
        self.needed = needed
        self.available = available
        super().__init__(
            f"Payload truncated: need {needed} bytes at position {position}, "
            f"payload is {available} bytes"
        )


class OffsetOutOfRange(DecodingError):
    def __init__(self, offset: int, base: int, available: int):
        self.offset = offset
        self.base = base
        self.available = available
        super().__init__(
            f"Offset {offset} from region at {base} points outside "
            f"the {available} byte payload"
        )


class MethodShapeMismatch(RouterHelperError):
    """Decoded arguments do not have the shape a router interpreter expects"""

    def __init__(self, method: str, expected: str, actual: str):
        self.method = method
        self.expected = expected
        self.actual = actual
        super().__init__(f"{method}: expected arguments ({expected}), got ({actual})")


class RpcError(RouterHelperError):
    """The JSON-RPC endpoint failed or returned an error object"""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class TransactionNotFound(RouterHelperError):
    def __init__(self, tx_hash: str):
        self.tx_hash = tx_hash
        super().__init__(f"Transaction {tx_hash} not found")
