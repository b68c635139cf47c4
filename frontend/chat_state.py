from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from chain.nft import is_mintable
from chain.wallet import is_valid_address

logger = logging.getLogger(__name__)

Transport = Callable[[dict[str, Any]], tuple[bool, Any]]

CHAT_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."
NO_CONTENT_MESSAGE = "No response content"
MINT_SUCCESS_MESSAGE = "NFT minted into your wallet with hash: {hash}"

MINT_IDLE = "idle"
MINT_LOADING = "loading"
MINT_SUCCESS = "success"
MINT_ERROR = "error"


def empty_nft() -> dict[str, Any]:
    return {"image": "", "prompt": "", "wallet": ""}


def extract_response_content(output: Any) -> str:
    """Pick the reply text out of whichever response shape the backend used."""
    if not output:
        return NO_CONTENT_MESSAGE
    if isinstance(output, str):
        return output
    if isinstance(output, dict):
        if isinstance(output.get("message"), str) and output["message"]:
            return output["message"]
        if isinstance(output.get("content"), str) and output["content"]:
            return output["content"]
    return json.dumps(output)


@dataclass
class ChatSession:
    """
    Client-side conversation state.

    Messages are append-only; the single exception is attach_mint_hash,
    which records the transaction hash on the message that carried the image.
    """

    messages: list[dict[str, Any]] = field(default_factory=list)
    input_value: str = ""
    is_sending: bool = False
    nft: dict[str, Any] = field(default_factory=empty_nft)
    mint_status: dict[int, str] = field(default_factory=dict)
    mint_errors: dict[int, str] = field(default_factory=dict)

    # ---------------------------
    # Sending
    # ---------------------------

    def begin_send(self, text: str | None = None) -> dict[str, Any] | None:
        text = self.input_value if text is None else text
        if not text or not text.strip() or self.is_sending:
            return None

        history = [{"role": m["role"], "content": m["content"]} for m in self.messages]
        history.append({"role": "user", "content": text})

        self.messages.append({"role": "user", "content": text})
        self.input_value = ""
        self.is_sending = True
        return {"messages": history, "nft": dict(self.nft)}

    def complete_send(self, data: Any) -> None:
        result = data.get("result") if isinstance(data, dict) else None
        if not isinstance(result, dict):
            self.fail_send()
            return

        output = result.get("output")
        message: dict[str, Any] = {"role": "assistant", "content": extract_response_content(output)}
        if isinstance(output, dict) and isinstance(output.get("nft"), dict):
            message["nft"] = dict(output["nft"])

        latest = data.get("latestNFT")
        if isinstance(latest, dict):
            self.nft = {**empty_nft(), **latest}

        self.messages.append(message)
        self.is_sending = False

    def fail_send(self) -> None:
        self.messages.append({"role": "assistant", "content": CHAT_ERROR_MESSAGE})
        self.is_sending = False

    def send(self, text: str | None, transport: Transport) -> bool:
        payload = self.begin_send(text)
        if payload is None:
            return False
        try:
            ok, data = transport(payload)
        except Exception:
            logger.exception("chat transport failed")
            ok, data = False, None

        if ok:
            self.complete_send(data)
        else:
            self.fail_send()
        return ok

    # ---------------------------
    # Wallet / minting
    # ---------------------------

    def set_wallet(self, address: str) -> bool:
        address = (address or "").strip()
        if address and not is_valid_address(address):
            return False
        self.nft["wallet"] = address
        return True

    def _message_nft(self, index: int) -> dict[str, Any] | None:
        if not 0 <= index < len(self.messages):
            return None
        nft = self.messages[index].get("nft")
        return nft if isinstance(nft, dict) else None

    def mint_payload(self, index: int) -> dict[str, Any] | None:
        nft = self._message_nft(index)
        if not nft or nft.get("hash"):
            return None
        payload = {
            "image": nft.get("image", ""),
            "prompt": nft.get("prompt", ""),
            "wallet": self.nft.get("wallet", ""),
        }
        return payload if is_mintable(payload) else None

    def can_mint(self, index: int) -> bool:
        return self.mint_payload(index) is not None and self.mint_status.get(index) != MINT_LOADING

    def attach_mint_hash(self, index: int, tx_hash: str) -> bool:
        nft = self._message_nft(index)
        if not nft or nft.get("hash") or not tx_hash:
            return False

        nft["hash"] = tx_hash
        if self.nft.get("image") == nft.get("image"):
            self.nft["hash"] = tx_hash
        self.mint_status[index] = MINT_SUCCESS
        self.mint_errors.pop(index, None)
        self.messages.append({"role": "assistant", "content": MINT_SUCCESS_MESSAGE.format(hash=tx_hash)})
        return True

    def mint(self, index: int, transport: Transport) -> bool:
        payload = self.mint_payload(index)
        if payload is None or self.mint_status.get(index) == MINT_LOADING:
            return False

        self.mint_status[index] = MINT_LOADING
        try:
            ok, data = transport(payload)
        except Exception as exc:
            logger.exception("mint transport failed")
            ok, data = False, {"error": str(exc)}

        tx_hash = (data.get("txHash") or data.get("hash")) if ok and isinstance(data, dict) else None
        if tx_hash:
            return self.attach_mint_hash(index, tx_hash)

        self.mint_status[index] = MINT_ERROR
        self.mint_errors[index] = _describe_error(data)
        return False


def _describe_error(data: Any) -> str:
    if isinstance(data, dict):
        error = data.get("error") or "Minting failed"
        details = data.get("details")
        return f"{error}: {details}" if details else str(error)
    return "Minting failed"
