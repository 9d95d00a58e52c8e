"""
Transaction Fetcher - Retrieve transactions over JSON-RPC
"""
import asyncio
import logging
from typing import Any, Dict, List

import aiohttp

from .exceptions import RpcError, TransactionNotFound

logger = logging.getLogger(__name__)


class TransactionFetcher:
    """Fetch transactions from an Ethereum-compatible JSON-RPC endpoint"""

    def __init__(self, rpc_url: str, timeout: float = 10):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._request_id = 0

    async def get_transaction(self, tx_hash: str) -> Dict[str, Any]:
        """
        Fetch a transaction by hash

        Args:
            tx_hash: 0x-prefixed transaction hash

        Returns:
            Transaction object as returned by the node

        Raises:
            TransactionNotFound: if the node does not know the hash
            RpcError: on transport or RPC errors
        """
        logger.info(f"Fetching transaction {tx_hash} from {self.rpc_url}")
        result = await self._call("eth_getTransactionByHash", [tx_hash])
        if not result:
            raise TransactionNotFound(tx_hash)
        return result

    async def _call(self, method: str, params: List[Any]) -> Any:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.rpc_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as response:
                    if response.status != 200:
                        raise RpcError(f"{method} failed with HTTP {response.status}")
                    data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RpcError(f"{method} request failed: {e}") from e

        error = data.get("error")
        if isinstance(error, dict):
            raise RpcError(f"{method} returned error: {error.get('message')}", error.get("code"))
        if error:
            raise RpcError(f"{method} returned error: {error}")
        return data.get("result")


def transaction_input(tx: Dict[str, Any]) -> str:
    """Calldata of a transaction object; nodes name it "input" or "data" """
    return tx.get("input") or tx.get("data") or "0x"
