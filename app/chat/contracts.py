from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


Role = Literal["system", "user", "assistant"]


class MessageNFT(BaseModel):
    model_config = ConfigDict(extra="ignore")

    image: str
    prompt: str
    hash: str | None = None


class ConversationMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: Role
    content: str
    nft: MessageNFT | None = None


class NFTDescriptor(BaseModel):
    model_config = ConfigDict(extra="ignore")

    image: str = ""
    prompt: str = ""
    wallet: str = ""
    hash: str | None = None


class IntentDecision(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    generate: bool
    prompt: str | None = None

    @model_validator(mode="after")
    def _prompt_iff_generate(self) -> "IntentDecision":
        if self.generate and not (self.prompt and self.prompt.strip()):
            raise ValueError("prompt is required when generate is true")
        if not self.generate and self.prompt is not None:
            raise ValueError("prompt must be omitted when generate is false")
        return self


class ChatRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    messages: list[ConversationMessage]
    nft: NFTDescriptor | None = None


class ChatResult(BaseModel):
    output: dict[str, Any] = Field(default_factory=dict)
    input: Any = None


class ChatResponse(BaseModel):
    success: bool = True
    result: ChatResult
    latestNFT: NFTDescriptor
