import pytest

from frontend.chat_state import (
    CHAT_ERROR_MESSAGE,
    MINT_ERROR,
    MINT_LOADING,
    MINT_SUCCESS,
    NO_CONTENT_MESSAGE,
    ChatSession,
    extract_response_content,
)

WALLET = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
IMAGE_REPLY = {
    "success": True,
    "result": {
        "output": {"message": "Here it is", "nft": {"image": "https://img/1.png", "prompt": "red bicycle"}},
        "input": None,
    },
    "latestNFT": {"image": "https://img/1.png", "prompt": "red bicycle", "wallet": ""},
}


def reply(message):
    return {"success": True, "result": {"output": {"message": message}}, "latestNFT": {}}


def session_with_image(wallet=WALLET):
    session = ChatSession()
    session.set_wallet(wallet)

    def backend(payload):
        latest = {"image": "https://img/1.png", "prompt": "red bicycle", "wallet": payload["nft"]["wallet"]}
        return True, {**IMAGE_REPLY, "latestNFT": latest}

    session.send("draw a red bicycle", backend)
    return session


def test_send_appends_user_then_assistant():
    session = ChatSession()
    payloads = []

    ok = session.send("hello", lambda p: payloads.append(p) or (True, reply("Hi!")))

    assert ok is True
    assert session.messages == [
        {"role": "user", "content": "hello"},
        {"role": "assistant", "content": "Hi!"},
    ]
    assert session.is_sending is False
    assert payloads[0]["messages"] == [{"role": "user", "content": "hello"}]
    assert payloads[0]["nft"] == {"image": "", "prompt": "", "wallet": ""}


def test_history_excludes_attached_nfts():
    session = session_with_image()
    payloads = []

    session.send("thanks", lambda p: payloads.append(p) or (True, reply("welcome")))

    assert all(set(m) == {"role", "content"} for m in payloads[0]["messages"])
    assert payloads[0]["nft"]["image"] == "https://img/1.png"


@pytest.mark.parametrize("text", ["", "   ", None])
def test_blank_input_is_ignored(text):
    session = ChatSession()
    assert session.begin_send(text) is None
    assert session.messages == []


def test_only_one_send_in_flight():
    session = ChatSession()
    assert session.begin_send("first") is not None
    assert session.begin_send("second") is None
    assert [m["content"] for m in session.messages] == ["first"]


def test_begin_send_uses_and_clears_input_value():
    session = ChatSession(input_value="typed")
    payload = session.begin_send()
    assert payload["messages"][-1]["content"] == "typed"
    assert session.input_value == ""


def test_transport_failure_appends_error_message():
    session = ChatSession()

    assert session.send("hello", lambda p: (False, {"error": "Server error"})) is False

    assert session.messages[-1] == {"role": "assistant", "content": CHAT_ERROR_MESSAGE}
    assert session.is_sending is False


def test_transport_exception_appends_error_message():
    def boom(payload):
        raise ConnectionError("down")

    session = ChatSession()
    session.send("hello", boom)

    assert session.messages[-1]["content"] == CHAT_ERROR_MESSAGE


def test_malformed_success_body_is_treated_as_failure():
    session = ChatSession()
    session.send("hello", lambda p: (True, {"unexpected": 1}))
    assert session.messages[-1]["content"] == CHAT_ERROR_MESSAGE


def test_image_reply_attaches_nft_and_updates_descriptor():
    session = session_with_image(wallet="")

    assert session.messages[-1]["nft"] == {"image": "https://img/1.png", "prompt": "red bicycle"}
    assert session.nft["image"] == "https://img/1.png"


@pytest.mark.parametrize(
    "output, expected",
    [
        ({"message": "m"}, "m"),
        ({"content": "c"}, "c"),
        ("plain", "plain"),
        (None, NO_CONTENT_MESSAGE),
        ({"other": 1}, '{"other": 1}'),
    ],
)
def test_extract_response_content(output, expected):
    assert extract_response_content(output) == expected


def test_set_wallet_validates():
    session = ChatSession()
    assert session.set_wallet("0x123") is False
    assert session.nft["wallet"] == ""
    assert session.set_wallet(f"  {WALLET} ") is True
    assert session.nft["wallet"] == WALLET


def test_cannot_mint_without_wallet():
    session = session_with_image(wallet="")
    index = len(session.messages) - 1

    assert session.can_mint(index) is False
    assert session.mint(index, lambda p: (True, {"txHash": "0x1"})) is False


def test_mint_success_attaches_hash_once():
    session = session_with_image()
    index = len(session.messages) - 1
    sent = []

    assert session.mint(index, lambda p: sent.append(p) or (True, {"success": True, "txHash": "0xabc"})) is True

    assert sent == [{"image": "https://img/1.png", "prompt": "red bicycle", "wallet": WALLET}]
    assert session.messages[index]["nft"]["hash"] == "0xabc"
    assert session.mint_status[index] == MINT_SUCCESS
    assert session.messages[-1]["content"] == "NFT minted into your wallet with hash: 0xabc"
    assert session.can_mint(index) is False
    assert session.attach_mint_hash(index, "0xdef") is False
    assert session.messages[index]["nft"]["hash"] == "0xabc"


def test_mint_failure_can_be_retried():
    session = session_with_image()
    index = len(session.messages) - 1

    failed = session.mint(
        index,
        lambda p: (False, {"error": "Minting failed", "details": "Insufficient balance for gas fees"}),
    )

    assert failed is False
    assert session.mint_status[index] == MINT_ERROR
    assert session.mint_errors[index] == "Minting failed: Insufficient balance for gas fees"
    assert session.can_mint(index) is True

    assert session.mint(index, lambda p: (True, {"txHash": "0x99"})) is True
    assert index not in session.mint_errors


def test_mint_in_flight_is_not_repeated():
    session = session_with_image()
    index = len(session.messages) - 1
    session.mint_status[index] = MINT_LOADING

    assert session.can_mint(index) is False
    assert session.mint(index, lambda p: (True, {"txHash": "0x1"})) is False


def test_attach_hash_to_message_without_image():
    session = ChatSession(messages=[{"role": "assistant", "content": "hi"}])
    assert session.attach_mint_hash(0, "0x1") is False
    assert session.attach_mint_hash(5, "0x1") is False
