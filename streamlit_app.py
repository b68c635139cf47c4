from __future__ import annotations

import logging
import time

import streamlit as st

from app.config import get_settings
from chain.wallet import is_valid_address
from frontend.api_client import BackendClient
from frontend.chat_state import MINT_ERROR, MINT_LOADING, ChatSession

logger = logging.getLogger(__name__)

WALLET_QUERY_PARAM = "wallet"


def _short_address(value: str | None) -> str:
    if not value:
        return "not set"
    if len(value) <= 10:
        return value
    return f"{value[:6]}...{value[-4:]}"


def _init_state() -> None:
    settings = get_settings()
    st.session_state.setdefault("base_url", settings.backend_url)
    st.session_state.setdefault("pending_payload", None)
    st.session_state.setdefault("chat_input", "")
    st.session_state.setdefault("clear_input", False)
    st.session_state.setdefault("editing_wallet", False)

    if "chat" not in st.session_state:
        session = ChatSession()
        # the wallet survives reloads through the page URL
        stored = st.query_params.get(WALLET_QUERY_PARAM)
        if stored:
            session.set_wallet(stored)
        st.session_state["chat"] = session


def _session() -> ChatSession:
    return st.session_state["chat"]


def _client() -> BackendClient:
    return BackendClient(st.session_state["base_url"])


def _persist_wallet(address: str) -> None:
    if address:
        st.query_params[WALLET_QUERY_PARAM] = address
    elif WALLET_QUERY_PARAM in st.query_params:
        del st.query_params[WALLET_QUERY_PARAM]


def _on_send() -> None:
    session = _session()
    payload = session.begin_send(st.session_state.get("chat_input", ""))
    if payload is None:
        return
    st.session_state["pending_payload"] = payload
    st.session_state["clear_input"] = True


def _on_mint(index: int) -> None:
    _session().mint(index, _client().post_mint)


def _on_save_wallet() -> None:
    value = st.session_state.get("wallet_input", "")
    if _session().set_wallet(value):
        _persist_wallet(value.strip())
        st.session_state["editing_wallet"] = False
        st.session_state.pop("wallet_error", None)
    else:
        st.session_state["wallet_error"] = (
            "Please enter a valid wallet address (0x followed by 40 hex characters)"
        )


def _on_clear_chat() -> None:
    wallet = _session().nft.get("wallet", "")
    session = ChatSession()
    session.set_wallet(wallet)
    st.session_state["chat"] = session
    st.session_state["pending_payload"] = None


def _flush_pending() -> None:
    payload = st.session_state.get("pending_payload")
    if not payload:
        return
    session = _session()
    with st.spinner("Thinking..."):
        ok, data = _client().post_chat(payload)
    if ok:
        session.complete_send(data)
        wallet = session.nft.get("wallet", "")
        if wallet and st.query_params.get(WALLET_QUERY_PARAM) != wallet:
            _persist_wallet(wallet)
    else:
        logger.warning("chat request failed: %s", data)
        session.fail_send()
    st.session_state["pending_payload"] = None
    st.rerun()


def _render_wallet(minting_active: bool) -> None:
    if not minting_active:
        return
    session = _session()
    wallet = session.nft.get("wallet", "")

    st.subheader("Wallet")
    if st.session_state.get("editing_wallet"):
        st.text_input("Wallet Address", value=wallet, key="wallet_input", placeholder="0x...")
        col_save, col_cancel = st.columns(2)
        with col_save:
            st.button("Save", on_click=_on_save_wallet, use_container_width=True)
        with col_cancel:
            if st.button("Cancel", use_container_width=True):
                st.session_state["editing_wallet"] = False
                st.rerun()
        if st.session_state.get("wallet_error"):
            st.error(st.session_state["wallet_error"])
    else:
        st.code(_short_address(wallet))
        if st.button("Edit wallet", use_container_width=True):
            st.session_state["editing_wallet"] = True
            st.rerun()
        if wallet and not is_valid_address(wallet):
            st.warning("The stored wallet address is not valid.")


def _render_message(index: int, message: dict, minting_active: bool, explorer_url: str) -> None:
    session = _session()
    with st.chat_message(message["role"]):
        st.markdown(message["content"])

        nft = message.get("nft")
        if not nft:
            return
        if nft.get("image"):
            st.image(nft["image"], caption=nft.get("prompt"), width=400)
        if not minting_active:
            return

        if nft.get("hash"):
            st.success("NFT minted successfully!")
            st.markdown(f"[View transaction]({explorer_url.rstrip('/')}/{nft['hash']})")
            return

        status = session.mint_status.get(index)
        if status == MINT_ERROR:
            st.error(session.mint_errors.get(index, "Minting failed"))
        label = "Retry mint" if status == MINT_ERROR else "Mint NFT"
        st.button(
            label,
            key=f"mint_{index}",
            on_click=_on_mint,
            args=(index,),
            disabled=not session.can_mint(index) or status == MINT_LOADING,
            help=None if session.can_mint(index) else "Set a valid wallet address to mint",
        )


settings = get_settings()

st.set_page_config(page_title="AI to NFT Workshop", layout="wide")

_init_state()
if st.session_state.get("clear_input"):
    st.session_state["chat_input"] = ""
    st.session_state["clear_input"] = False

with st.sidebar:
    st.header("Settings")
    st.text_input("Backend URL", key="base_url")
    if st.button("Check backend", use_container_width=True):
        ok, data = _client().health()
        if ok:
            st.success(f"{data.get('service')} is up ({time.strftime('%H:%M:%S')})")
        else:
            st.error(data.get("error"))
    st.button("New chat", on_click=_on_clear_chat, use_container_width=True)
    _render_wallet(settings.is_minting_active)

st.title("AI to NFT Workshop")

chat = _session()
if not chat.messages:
    st.markdown(
        "**Welcome to AI to NFT Workshop!** Start a conversation and when an image is "
        "generated, you can mint it as an NFT."
    )

for idx, msg in enumerate(chat.messages):
    _render_message(idx, msg, settings.is_minting_active, settings.explorer_tx_url)

_flush_pending()

st.text_area(
    "Message",
    key="chat_input",
    placeholder="Type your message...",
    disabled=chat.is_sending,
    label_visibility="collapsed",
)
st.button("Send", on_click=_on_send, disabled=chat.is_sending, type="primary")
