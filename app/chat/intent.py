from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Iterable, Optional, Sequence

from app.chat.contracts import IntentDecision
from app.core.http import TransportError, UpstreamError
from llm.client import LLMClient
from llm.prompts import IMAGE_GENERATION_CHECK_PROMPT

logger = logging.getLogger(__name__)

Parser = Callable[[str], Optional[IntentDecision]]

POSITIVE_INDICATORS = ("generate", "create", "make", "draw", "image", "picture", "yes", "true")

_EMBEDDED_JSON_RE = re.compile(r'\{[^}]*"generate"[^}]*\}')
_PROMPT_RE = re.compile(r"""\bprompt["']?(?:\s*:\s*|\s+)["']?([^"'\n.!?]+)["']?""", re.IGNORECASE)

NO_IMAGE = IntentDecision(generate=False)


class IntentParseError(ValueError):
    pass


def clean_llm_output(raw: str) -> str:
    # models sometimes emit the escaped form "\\n" instead of real newlines
    return re.sub(r"\s+", " ", raw.replace("\\n", "")).strip()


def _truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes"}
    return False


def to_decision(obj: Any) -> IntentDecision:
    """
    Coerce a parsed JSON value into an IntentDecision.

    A positive decision without a usable prompt degrades to generate=false.
    """
    if not isinstance(obj, dict) or "generate" not in obj:
        raise IntentParseError("object has no 'generate' key")

    prompt = obj.get("prompt")
    prompt = prompt.strip() if isinstance(prompt, str) else ""
    if _truthy(obj.get("generate")) and prompt:
        return IntentDecision(generate=True, prompt=prompt)
    return NO_IMAGE


def parse_strict_json(text: str) -> IntentDecision | None:
    try:
        return to_decision(json.loads(clean_llm_output(text)))
    except (ValueError, TypeError):
        return None


def parse_embedded_json(text: str) -> IntentDecision | None:
    match = _EMBEDDED_JSON_RE.search(text)
    if not match:
        return None
    try:
        return to_decision(json.loads(match.group(0)))
    except (ValueError, TypeError):
        return None


def parse_keyword_heuristic(text: str) -> IntentDecision | None:
    lowered = text.lower()
    if not any(word in lowered for word in POSITIVE_INDICATORS):
        return NO_IMAGE

    match = _PROMPT_RE.search(text)
    extracted = match.group(1).strip() if match else ""
    if not extracted:
        return NO_IMAGE
    return IntentDecision(generate=True, prompt=extracted)


PARSERS: tuple[Parser, ...] = (parse_strict_json, parse_embedded_json, parse_keyword_heuristic)


def first_success(parsers: Sequence[Parser], text: str) -> IntentDecision | None:
    for parser in parsers:
        decision = parser(text)
        if decision is not None:
            return decision
    return None


def try_parse_image_generation_response(text: Any) -> IntentDecision:
    """Never raises; anything unparseable means no image was requested."""
    if not isinstance(text, str) or not text.strip():
        return NO_IMAGE
    try:
        return first_success(PARSERS, text) or NO_IMAGE
    except Exception:
        logger.warning("intent parsing failed unexpectedly; defaulting to no image", exc_info=True)
        return NO_IMAGE


def classify_image_intent(llm: LLMClient, messages: Iterable[Any]) -> IntentDecision:
    try:
        result = llm.complete_with_prompt(messages, IMAGE_GENERATION_CHECK_PROMPT)
    except (UpstreamError, TransportError) as e:
        logger.warning("image intent check failed, treating as no image: %s", e)
        return NO_IMAGE

    decision = try_parse_image_generation_response(result.message)
    logger.info("image intent generate=%s", decision.generate)
    return decision
