from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

from app.config import ConfigurationError, Settings
from chain import rpc
from chain.nft import encode_token_uri, is_mintable

logger = logging.getLogger(__name__)


class MintError(RuntimeError):
    code = "MINT_ERROR"


class NotMintableError(MintError):
    code = "INCOMPLETE_NFT_DATA"


class CredentialError(MintError):
    code = "WALLET_NOT_FOUND"


class InsufficientBalanceError(MintError):
    code = "INSUFFICIENT_BALANCE"


class TransactionError(MintError):
    code = "TRANSACTION_FAILED"


@dataclass(frozen=True)
class MintConfig:
    rpc_url: str = ""
    contract_address: str = ""
    contract_abi: str = ""
    wallet_path: str = ""
    wallet_password: str = ""
    mint_function: str = "safeMint"
    confirmation_timeout_s: int = 120

    @classmethod
    def from_settings(cls, settings: Settings) -> "MintConfig":
        return cls(
            rpc_url=settings.rpc_url,
            contract_address=settings.nft_contract,
            contract_abi=settings.contract_abi,
            wallet_path=settings.wallet_path,
            wallet_password=settings.wallet_password,
            mint_function=settings.nft_mint_function,
            confirmation_timeout_s=settings.mint_confirmation_timeout_s,
        )


_REQUIRED_FIELDS = (
    ("rpc_url", "RPC_URL"),
    ("contract_address", "NFT_CONTRACT"),
    ("contract_abi", "CONTRACT_ABI"),
    ("wallet_path", "WALLET_PATH"),
    ("wallet_password", "WALLET_PASSWORD"),
)


class NFTMinter:
    """
    Mints one NFT per call through the configured contract.

    Preconditions are checked in order and each has its own error:
    configuration -> credential -> balance. Nothing is sent to the chain
    until all three pass.
    """

    def __init__(
        self,
        config: MintConfig,
        *,
        web3_factory: Callable[[str], Web3] = rpc.connect,
    ) -> None:
        self.config = config
        self.web3_factory = web3_factory

    def check_config(self) -> list[dict[str, Any]]:
        for attr, env_name in _REQUIRED_FIELDS:
            if not getattr(self.config, attr):
                raise ConfigurationError(env_name)
        try:
            abi = json.loads(self.config.contract_abi)
        except ValueError as e:
            raise ConfigurationError("CONTRACT_ABI", "Invalid contract ABI format") from e
        if not isinstance(abi, list):
            raise ConfigurationError("CONTRACT_ABI", "Invalid contract ABI format")
        return abi

    def load_account(self) -> LocalAccount:
        try:
            keystore = json.loads(Path(self.config.wallet_path).read_text(encoding="utf-8"))
            private_key = Account.decrypt(keystore, self.config.wallet_password)
        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.warning("keystore load failed path=%s: %s", self.config.wallet_path, e)
            raise CredentialError("Wallet not found") from e
        return Account.from_key(private_key)

    def mint(self, nft: Any) -> str:
        if not is_mintable(nft):
            raise NotMintableError("Missing required fields: image, prompt, or valid wallet address")

        abi = self.check_config()
        account = self.load_account()

        try:
            w3 = self.web3_factory(self.config.rpc_url)
            balance = rpc.get_native_balance(w3, account.address)
        except rpc.Web3RPCError as e:
            raise TransactionError(str(e)) from e

        if balance <= 0:
            raise InsufficientBalanceError("Insufficient balance for gas fees")

        recipient = _field(nft, "wallet")
        token_uri = encode_token_uri(nft)
        logger.info(
            "minting to=%s contract=%s fn=%s",
            recipient,
            self.config.contract_address,
            self.config.mint_function,
        )

        try:
            contract = w3.eth.contract(
                address=Web3.to_checksum_address(self.config.contract_address),
                abi=abi,
            )
            fn = getattr(contract.functions, self.config.mint_function)
            tx = fn(Web3.to_checksum_address(recipient), token_uri).build_transaction(
                {
                    "from": account.address,
                    "nonce": w3.eth.get_transaction_count(account.address),
                    "chainId": w3.eth.chain_id,
                }
            )
            signed = account.sign_transaction(tx)
            tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.config.confirmation_timeout_s
            )
        except Exception as e:
            logger.warning("mint transaction failed: %s", e)
            raise TransactionError(f"Mint transaction failed: {e}") from e

        tx_hex = Web3.to_hex(tx_hash)
        if receipt["status"] != 1:
            raise TransactionError(f"Mint transaction reverted: {tx_hex}")

        logger.info("mint confirmed", extra={"tx_hash": tx_hex, "block": receipt.get("blockNumber")})
        return tx_hex


def _field(nft: Any, name: str) -> Any:
    if isinstance(nft, dict):
        return nft.get(name)
    return getattr(nft, name, None)


def build_minter(settings: Settings) -> NFTMinter:
    timeout_s = settings.request_timeout_s
    return NFTMinter(
        MintConfig.from_settings(settings),
        web3_factory=lambda url: rpc.connect(url, timeout_s=timeout_s),
    )
