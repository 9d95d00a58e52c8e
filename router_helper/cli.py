#!/usr/bin/env python3
"""
Inspect an exchange router transaction from the command line.

Fetches the transaction by hash (or takes raw calldata with --input),
decodes it against the router ABI and prints a one-line summary.
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from . import config
from .calldata_decoder import DecodedCall, decode_transaction_input
from .contract_loader import load_router_table
from .exceptions import DecodingError, RouterHelperError, UnknownMethod
from .router_methods import describe
from .tokens import TokenTable
from .transaction_fetcher import TransactionFetcher, transaction_input

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="router-tx",
        description="Decode a UniswapV2Router02 transaction",
    )
    parser.add_argument("-n", "--network", default=config.NETWORK, help="Which network to use")
    parser.add_argument("-r", "--router", default=config.ROUTER_ADDRESS, help="The contract address for the UniswapV2Router02")
    parser.add_argument("-t", "--tx", help="The tx hash of a contract to inspect")
    parser.add_argument("-i", "--input", help="Raw calldata to decode instead of fetching a transaction")
    parser.add_argument("--abi", default=str(config.ROUTER_ABI_PATH), help="Path to the router ABI JSON")
    parser.add_argument("--tokens", default=config.TOKEN_LIST_PATH, help="Path to a token list JSON")
    parser.add_argument("--rpc-url", default=config.RPC_URL, help="Override the network RPC URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def print_call(call: DecodedCall, tokens: TokenTable, native_label: str) -> None:
    print(f"Method: {call.name}")
    print("Method signature:")
    print(call.method.signature)
    print("Method parameters:")
    print(json.dumps(call.to_dict()["parameters"], indent=2))

    summary = describe(call, tokens, native_label)
    if summary:
        print(summary)


async def run(args: argparse.Namespace) -> int:
    network = config.get_network(args.network, args.rpc_url)
    table = load_router_table(args.abi)
    tokens = TokenTable.from_file(args.tokens, network.chain_id) if args.tokens else TokenTable.empty()

    calldata = args.input
    if calldata is None:
        fetcher = TransactionFetcher(network.rpc_url, config.RPC_TIMEOUT)
        tx = await fetcher.get_transaction(args.tx)
        if args.router and (tx.get("to") or "").lower() != args.router.lower():
            logger.warning(f"Transaction {args.tx} was sent to {tx.get('to')}, not router {args.router}")
        calldata = transaction_input(tx)

    try:
        call = decode_transaction_input(table, calldata)
    except UnknownMethod as e:
        print(f"Unrecognized call: {e}")
        return 1
    except DecodingError as e:
        print(f"Malformed calldata: {e}")
        return 1

    print_call(call, tokens, config.NATIVE_ASSET_LABEL)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format=config.LOG_FORMAT,
    )

    if args.input is None:
        if not args.router:
            print("You must supply a router address using --router CONTRACT_ADDRESS or -r CONTRACT_ADDRESS!")
            return 0
        if not args.tx:
            print("You must supply a tx hash using --tx TX_HASH or -t TX_HASH!")
            return 0

    try:
        return asyncio.run(run(args))
    except (RouterHelperError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
