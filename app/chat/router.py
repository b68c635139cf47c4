from __future__ import annotations

import logging
from dataclasses import dataclass

from app.chat.contracts import ChatRequest, ChatResponse, ChatResult, NFTDescriptor
from app.chat.intent import classify_image_intent
from chain.nft import is_mintable
from chain.wallet import extract_wallet_address
from imagegen.errors import ImageGenerationError
from imagegen.poller import ImageJobPoller
from llm.client import LLMClient, LLMResult, strip_nft
from llm.prompts import (
    IMAGE_GENERATION_FAILED_MESSAGE,
    WALLET_UPDATE_MESSAGE,
    build_nft_assistant_prompt,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatServices:
    llm: LLMClient
    poller: ImageJobPoller


def _empty_nft() -> NFTDescriptor:
    return NFTDescriptor(image="", prompt="", wallet="")


def _generate_image(poller: ImageJobPoller, prompt: str) -> tuple[str | None, str | None]:
    try:
        return poller.generate(prompt), None
    except ImageGenerationError as e:
        logger.warning("image generation failed prompt=%r: %s", prompt, e)
        return None, str(e)


def route_chat(req: ChatRequest, *, services: ChatServices) -> ChatResponse:
    """
    One chat turn:
    1. image intent -> generate -> NFT minting assistant reply
    2. else wallet address in the latest message -> fixed acknowledgement
    3. else plain completion
    """
    messages = req.messages
    current_nft = req.nft.model_copy() if req.nft else _empty_nft()
    new_nft: NFTDescriptor | None = None

    decision = classify_image_intent(services.llm, messages)

    if decision.generate:
        image_url, failure = _generate_image(services.poller, decision.prompt)
        if image_url:
            new_nft = NFTDescriptor(
                image=image_url,
                prompt=decision.prompt,
                wallet=current_nft.wallet or "",
            )
            prompt = build_nft_assistant_prompt(new_nft, is_mintable(new_nft))
            completion = services.llm.complete_with_prompt(messages, prompt)
        else:
            completion = LLMResult(
                output={"message": IMAGE_GENERATION_FAILED_MESSAGE.format(reason=failure)},
                input=strip_nft(messages),
            )
    else:
        wallet = extract_wallet_address(messages)
        if wallet:
            logger.info("wallet address detected in latest message")
            current_nft = current_nft.model_copy(update={"wallet": wallet})
            completion = LLMResult(
                output={"message": WALLET_UPDATE_MESSAGE.format(address=wallet)},
                input=strip_nft(messages),
            )
        else:
            completion = services.llm.complete(messages)

    output = dict(completion.output)
    if new_nft:
        output["nft"] = {"image": new_nft.image, "prompt": new_nft.prompt}

    return ChatResponse(
        success=True,
        result=ChatResult(output=output, input=completion.input),
        latestNFT=new_nft or current_nft,
    )
