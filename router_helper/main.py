"""
Router Transaction Helper - Decode and describe exchange router calls

HTTP service over the router calldata decoder
"""
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import config
from .calldata_decoder import CalldataDecoder
from .contract_loader import load_router_table
from .exceptions import RpcError, TransactionNotFound, UnknownMethod
from .tokens import TokenTable
from .transaction_fetcher import TransactionFetcher, transaction_input

# Configure logging
logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

# Initialize FastAPI
app = FastAPI(
    title="Router Transaction Helper",
    description="Decode exchange router transactions into human-readable summaries",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
network = config.get_network(config.NETWORK, config.RPC_URL)
selector_table = load_router_table(config.ROUTER_ABI_PATH)
if config.TOKEN_LIST_PATH:
    token_table = TokenTable.from_file(config.TOKEN_LIST_PATH, network.chain_id)
else:
    logger.warning("No TOKEN_LIST_PATH configured - token symbols will be empty")
    token_table = TokenTable.empty()

calldata_decoder = CalldataDecoder(selector_table, token_table, config.NATIVE_ASSET_LABEL)
transaction_fetcher = TransactionFetcher(network.rpc_url, config.RPC_TIMEOUT)

logger.info("Router Helper initialized")
logger.info(f"Network: {network.name} ({network.rpc_url})")
logger.info(f"Router address: {config.ROUTER_ADDRESS or 'not configured'}")


# Request/Response Models
class DecodeRequest(BaseModel):
    """Decode calldata request"""
    calldata: str = Field(..., description="Hex-encoded router calldata to decode")

    model_config = {
        "json_schema_extra": {
            "example": {
                "calldata": "0x38ed1739..."
            }
        }
    }


class TransactionRequest(BaseModel):
    """Decode a transaction by hash"""
    tx_hash: str = Field(..., description="Hash of the transaction to inspect")


class SignatureLookupRequest(BaseModel):
    """Selector lookup request"""
    selector: str = Field(..., description="4-byte function selector (e.g., '0x38ed1739')")


def _decode_response(result: dict) -> JSONResponse:
    if result["decoded"]:
        return JSONResponse(content=result)
    status_code = 404 if "warning" in result else 422
    return JSONResponse(status_code=status_code, content=result)


# API Endpoints
@app.get("/health")
async def health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "router-helper",
        "version": "1.0.0",
        "network": network.name,
        "methods": len(selector_table),
        "tokens": len(token_table),
    }


@app.get("/methods")
async def list_methods():
    """Methods of the loaded router interface"""
    return [method.to_dict() for method in selector_table]


@app.post(
    "/entrypoints/decode/invoke",
    summary="Decode Router Calldata",
    description="Decode router calldata and summarize the liquidity or swap operation"
)
async def decode_calldata(request: DecodeRequest):
    """
    Decode router calldata

    Returns:
    - Function name, selector and signature
    - Decoded parameters with names and types
    - The interpreted router action and a one-line summary
    """
    logger.info(f"Decoding calldata: {request.calldata[:20]}...")
    return _decode_response(calldata_decoder.decode_calldata(request.calldata))


@app.post(
    "/entrypoints/transaction/invoke",
    summary="Decode Router Transaction",
    description="Fetch a transaction by hash and decode its input"
)
async def decode_transaction(request: TransactionRequest):
    """Fetch a transaction from the configured network and decode its input"""
    logger.info(f"Decoding transaction: {request.tx_hash}")

    try:
        tx = await transaction_fetcher.get_transaction(request.tx_hash)
    except TransactionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RpcError as e:
        logger.error(f"RPC error: {e}")
        raise HTTPException(status_code=502, detail=f"RPC request failed: {e}")

    result = calldata_decoder.decode_calldata(transaction_input(tx))
    result.update({
        "tx_hash": request.tx_hash,
        "from": tx.get("from"),
        "to": tx.get("to"),
    })

    router = config.ROUTER_ADDRESS.lower()
    if router and (tx.get("to") or "").lower() != router:
        logger.warning(f"Transaction {request.tx_hash} was not sent to router {config.ROUTER_ADDRESS}")
        result["router_warning"] = f"Transaction was not sent to router {config.ROUTER_ADDRESS}"

    return _decode_response(result)


@app.post(
    "/entrypoints/lookup/invoke",
    summary="Lookup Router Method",
    description="Look up a router method by 4-byte selector"
)
async def lookup_signature(request: SignatureLookupRequest):
    """Look up a router method by selector"""
    logger.info(f"Looking up selector: {request.selector}")

    try:
        method = selector_table.resolve(request.selector)
    except UnknownMethod:
        raise HTTPException(
            status_code=404,
            detail=f"Signature not found for selector: {request.selector}"
        )

    return method.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
