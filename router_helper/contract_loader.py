"""
Contract Loader - Load router interface descriptions from ABI JSON files
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .selector_table import SelectorTable

logger = logging.getLogger(__name__)

DEFAULT_ROUTER_ABI = Path(__file__).parent / "data" / "UniswapV2Router02.json"


def load_abi(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read an ABI from a JSON file

    Accepts a bare ABI list or a build artifact with an "abi" key.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("abi")
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain an ABI list")
    return data


def load_router_table(path: Optional[Union[str, Path]] = None) -> SelectorTable:
    """Build the selector table for a router ABI, the bundled one by default"""
    abi_path = Path(path) if path else DEFAULT_ROUTER_ABI
    logger.info(f"Loading router ABI from {abi_path}")
    return SelectorTable.from_abi(load_abi(abi_path))
