"""
Tokens - Token reference table and amount formatting
"""
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Optional, Union

from eth_utils import is_address, to_checksum_address

logger = logging.getLogger(__name__)

DEFAULT_DECIMALS = 18


@dataclass(frozen=True)
class Token:
    address: str
    symbol: str
    decimals: int = DEFAULT_DECIMALS
    name: Optional[str] = None


class TokenTable:
    """Read-only address -> token lookup, case-insensitive on addresses"""

    def __init__(self, tokens: Iterable[Token] = ()):
        self._tokens = MappingProxyType({t.address.lower(): t for t in tokens})

    @classmethod
    def empty(cls) -> "TokenTable":
        return cls()

    @classmethod
    def from_token_list(
        cls,
        data: Union[Dict[str, Any], Iterable[Dict[str, Any]]],
        chain_id: Optional[int] = None
    ) -> "TokenTable":
        """
        Build from token list JSON

        Args:
            data: {"tokens": [...]} or a bare list of token entries
            chain_id: Keep only entries for this chain, if given

        Returns:
            TokenTable with every entry that has a valid hex address
        """
        entries = data.get("tokens", []) if isinstance(data, dict) else data

        tokens = []
        for entry in entries:
            if chain_id is not None and entry.get("chainId") not in (None, chain_id):
                continue

            address = entry.get("address", "")
            if not is_address(address):
                logger.warning(f"Skipping token {entry.get('symbol')} with unsupported address {address!r}")
                continue

            tokens.append(Token(
                address=to_checksum_address(address),
                symbol=entry.get("symbol", ""),
                decimals=int(entry.get("decimals", DEFAULT_DECIMALS)),
                name=entry.get("name"),
            ))

        logger.info(f"Loaded {len(tokens)} tokens")
        return cls(tokens)

    @classmethod
    def from_file(cls, path: Union[str, Path], chain_id: Optional[int] = None) -> "TokenTable":
        with open(path, encoding="utf-8") as f:
            return cls.from_token_list(json.load(f), chain_id)

    def resolve_symbol(self, address: Any) -> Optional[Token]:
        """Find the token for an address; None when unknown"""
        if not isinstance(address, str):
            return None
        return self._tokens.get(address.lower())

    def __contains__(self, address: object) -> bool:
        return self.resolve_symbol(address) is not None

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens.values())

    def __len__(self) -> int:
        return len(self._tokens)


def format_amount(raw: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """
    Convert an amount in a token's minor unit to a decimal string

    Args:
        raw: Integer amount, e.g. 1500000000000000000
        decimals: Token decimal exponent, e.g. 18

    Returns:
        Exact decimal string without trailing zeros, e.g. "1.5"
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    # Built from a string so no context precision applies
    amount = Decimal(f"{int(raw)}e-{int(decimals)}")
    text = format(amount, "f")
    return text.rstrip("0").rstrip(".") if "." in text else text
