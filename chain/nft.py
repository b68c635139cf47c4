from __future__ import annotations

import base64
import json
from typing import Any

from chain.wallet import is_valid_address

TOKEN_URI_PREFIX = "data:application/json;base64,"


def _field(nft: Any, name: str) -> Any:
    if nft is None:
        return None
    if isinstance(nft, dict):
        return nft.get(name)
    return getattr(nft, name, None)


def is_mintable(nft: Any) -> bool:
    image = _field(nft, "image")
    prompt = _field(nft, "prompt")
    wallet = _field(nft, "wallet")
    if not image or not prompt or not wallet:
        return False
    return is_valid_address(wallet)


def build_metadata(nft: Any) -> dict[str, str]:
    prompt = _field(nft, "prompt") or ""
    return {
        "name": prompt,
        "image": _field(nft, "image") or "",
        "description": f'AI-generated NFT created from prompt: "{prompt}"',
    }


def encode_token_uri(nft: Any) -> str:
    """On-chain, self-contained metadata: base64 JSON in a data URI."""
    raw = json.dumps(build_metadata(nft), ensure_ascii=False).encode("utf-8")
    return TOKEN_URI_PREFIX + base64.b64encode(raw).decode("ascii")


def decode_token_uri(token_uri: str) -> dict[str, Any]:
    if not token_uri.startswith(TOKEN_URI_PREFIX):
        raise ValueError("not a base64 JSON data URI")
    return json.loads(base64.b64decode(token_uri[len(TOKEN_URI_PREFIX):]))
