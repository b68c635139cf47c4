from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """A required setting is missing or unusable."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"{field} environment variable is not set")


class Settings(BaseSettings):
    # server
    host: str = "0.0.0.0"
    port: int = 4000
    log_level: str = "INFO"
    log_json: bool = False
    cors_origins: str = "*"

    # LLM endpoint
    llm_url: str = ""
    on_demand_api_access_token: str = ""
    temperature: float = 0.7
    top_p: float = 0.9
    max_tokens: int = 1000
    llm_stream: bool = False
    request_timeout_s: float = 30.0

    # image generation
    image_url: str = "https://ondemand.thetaedgecloud.com/infer_request/flux"
    image_status_url_base: str = "https://ondemand.thetaedgecloud.com/infer_request"
    image_guidance: float = 3.5
    image_height: int = 512
    image_width: int = 512
    image_num_steps: int = 4
    image_poll_interval: int = 2000  # ms
    image_max_attempts: int = 30

    # chain / minting
    rpc_url: str = ""
    nft_contract: str = ""
    contract_abi: str = ""
    wallet_path: str = ""
    wallet_password: str = ""
    nft_mint_function: str = "safeMint"
    mint_confirmation_timeout_s: int = 120
    is_minting_active: bool = False

    # streamlit frontend
    backend_url: str = "http://localhost:4000"
    explorer_tx_url: str = "https://testnet-explorer.thetatoken.org/txs"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @property
    def API_TOKEN(self) -> str:
        return self.on_demand_api_access_token

    @property
    def IMAGE_POLL_INTERVAL_S(self) -> float:
        return self.image_poll_interval / 1000.0

    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader (process-level).
    """
    return Settings()
