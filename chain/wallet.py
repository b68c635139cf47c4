from __future__ import annotations

import re
from typing import Any, Sequence

from web3 import Web3

# whole-token match: a 39- or 41-hex-char run never qualifies
ETHEREUM_ADDRESS_RE = re.compile(r"\b0x[a-fA-F0-9]{40}\b")
_FULL_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_valid_address(value: Any) -> bool:
    if not value or not isinstance(value, str):
        return False
    if not _FULL_ADDRESS_RE.fullmatch(value):
        return False
    # enforces the EIP-55 checksum on mixed-case input
    return Web3.is_address(value)


def find_addresses(text: Any) -> list[str]:
    if not isinstance(text, str):
        return []
    return ETHEREUM_ADDRESS_RE.findall(text)


def _content(message: Any) -> Any:
    if isinstance(message, dict):
        return message.get("content")
    return getattr(message, "content", None)


def extract_wallet_address(messages: Sequence[Any]) -> str | None:
    """
    Return the wallet address mentioned in the latest message, or None.

    Only the most recent message is scanned; within it the last valid-looking
    mention wins.
    """
    if not messages:
        return None

    matches = find_addresses(_content(messages[-1]))
    if not matches:
        return None

    address = matches[-1]
    return address if is_valid_address(address) else None
