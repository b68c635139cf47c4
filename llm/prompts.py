from __future__ import annotations

from typing import Any


IMAGE_GENERATION_CHECK_PROMPT = (
    "Your task is to determine whether the user is asking for an image to be generated "
    "in their latest message.\n\n"
    "If the user is requesting or implying that they want an image "
    '(e.g., "draw me", "generate an image", "show me a picture", "can you make an image of..."), '
    "return:\n\n"
    "{\n"
    '  "generate": true,\n'
    '  "prompt": "<short clear prompt to generate the image>"\n'
    "}\n\n"
    "If the message does NOT request or imply image generation, return:\n\n"
    "{\n"
    '  "generate": false\n'
    "}\n"
)

WALLET_UPDATE_MESSAGE = (
    "We updated your wallet address to: {address}. You can now mint NFTs to this wallet."
)

IMAGE_GENERATION_FAILED_MESSAGE = (
    "Sorry, I couldn't generate the image this time ({reason}). Please try again."
)


def _field(nft: Any, name: str) -> str:
    if nft is None:
        return ""
    if isinstance(nft, dict):
        value = nft.get(name)
    else:
        value = getattr(nft, name, None)
    return value or ""


def build_nft_assistant_prompt(nft: Any, is_mintable: bool) -> str:
    image = _field(nft, "image")
    prompt = _field(nft, "prompt")
    wallet = _field(nft, "wallet")

    missing = [name for name, value in (("image", image), ("prompt", prompt), ("wallet", wallet)) if not value]
    missing_line = ", ".join(missing) if missing else "nothing"

    return (
        "You are a helpful assistant that can help the user mint an NFT.\n"
        "To mint the NFT, you need to use the following information:\n"
        "- Image: Link to the image\n"
        "- Prompt: The prompt used to generate the image\n"
        "- Wallet: The wallet address of the user (valid Ethereum address)\n"
        f"-> isMintable: {str(is_mintable).lower()} should return true if the image, "
        "prompt and wallet are valid.\n\n"
        "The user has provided the following information:\n"
        f"- Image: {image} -> if provided the image will be shown to the user.\n"
        f"- Prompt: {prompt}\n"
        f"- Wallet: {wallet}\n"
        f"Missing information: {missing_line}\n\n"
        "If the user hasn't provided all the information, let them know which information "
        f"is missing. Additionally, tell the user that we generated the image for them, the "
        f"prompt is: {prompt} and that they can mint it. Do not show them the image link."
    )
