from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_minter
from api.errors import INCOMPLETE_NFT_DATA, MINTING_FAILED, error_response
from api.schemas.mint import ErrorResponse, MintResponse
from app.chat.contracts import NFTDescriptor
from app.config import ConfigurationError
from chain.minter import MintError, NFTMinter
from chain.nft import is_mintable

router = APIRouter(tags=["mint"])
logger = logging.getLogger(__name__)


@router.post(
    "/mint",
    response_model=MintResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def mint(nft: NFTDescriptor, minter: NFTMinter = Depends(get_minter)):
    logger.info("mint called")

    if not is_mintable(nft):
        return error_response(
            400,
            INCOMPLETE_NFT_DATA,
            "Missing required fields: image, prompt, or valid wallet address",
        )

    try:
        tx_hash = minter.mint(nft)
    except MintError as e:
        logger.warning("mint failed code=%s: %s", e.code, e)
        return error_response(500, MINTING_FAILED, str(e), code=e.code)
    except ConfigurationError as e:
        logger.error("mint misconfigured: %s", e)
        return error_response(500, MINTING_FAILED, str(e), code="CONFIGURATION_ERROR")
    except Exception as e:
        logger.exception("mint endpoint error")
        return error_response(500, MINTING_FAILED, str(e) or type(e).__name__)

    return MintResponse(success=True, txHash=tx_hash)
