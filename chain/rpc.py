from __future__ import annotations

from web3 import Web3


class Web3RPCError(RuntimeError):
    pass


def connect(rpc_url: str, *, timeout_s: float = 30.0) -> Web3:
    """
    Build a fresh Web3 HTTP provider for one request.
    """
    w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout_s}))

    if not w3.is_connected():
        raise Web3RPCError(f"Unable to connect to RPC at {rpc_url}")

    return w3


def get_native_balance(w3: Web3, address: str) -> int:
    """
    Return native token balance in wei.
    """
    try:
        return int(w3.eth.get_balance(Web3.to_checksum_address(address)))
    except Exception as e:
        raise Web3RPCError(f"get_native_balance failed: {e}") from e
