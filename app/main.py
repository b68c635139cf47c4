from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.errors import configuration_error_handler, validation_error_handler
from api.schemas.mint import HealthResponse
from api.v1.chat import router as chat_router
from api.v1.mint import router as mint_router
from app.config import ConfigurationError, get_settings
from app.core.logging import configure_logging
from app.core.middleware import RequestContextMiddleware

SERVICE_NAME = "AI to NFT Workshop Backend"


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(title=SERVICE_NAME, version="0.1.0")
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)

    app.include_router(chat_router)
    app.include_router(mint_router)

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            timestamp=datetime.now(timezone.utc).isoformat(),
            service=SERVICE_NAME,
        )

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
