from __future__ import annotations

from app.chat.router import ChatServices
from app.config import get_settings
from chain.minter import NFTMinter, build_minter
from imagegen.poller import build_image_poller
from llm.client import build_llm_client


def get_chat_services() -> ChatServices:
    settings = get_settings()
    return ChatServices(
        llm=build_llm_client(settings),
        poller=build_image_poller(settings),
    )


def get_minter() -> NFTMinter:
    return build_minter(get_settings())
