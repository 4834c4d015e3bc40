import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.chat.router import router as chat_router
from api.generate.router import router as generate_router
from api.generate.schemas import HealthResponse
from config import Settings, load_settings, setup_logging
from errors import AppError, app_error_handler, request_validation_handler
from gemini_chat import GeminiClient
from normalizer import MAX_JSON_BYTES
from utils import JsonBodyLimitMiddleware

logger = logging.getLogger(__name__)


def _mount_static(app: FastAPI, settings: Settings) -> None:
    if not settings.static_dir.is_dir():
        logger.warning("Static directory %s not found; static files are not served", settings.static_dir)
        return
    app.mount("/public", StaticFiles(directory=settings.static_dir), name="public")
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


def create_app(settings: Settings | None = None, client: GeminiClient | None = None) -> FastAPI:
    settings = settings or load_settings()
    client = client or GeminiClient.from_settings(settings)

    app = FastAPI(title="Gemini Gateway", version="1.0.0")
    app.state.settings = settings
    app.state.gemini_client = client

    app.add_middleware(JsonBodyLimitMiddleware, max_bytes=MAX_JSON_BYTES)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[],
        allow_origin_regex=".*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(ok=True, model=settings.model_name)

    app.include_router(generate_router)
    app.include_router(chat_router)

    _mount_static(app, settings)
    return app


def main() -> int:
    try:
        settings = load_settings()
    except RuntimeError as exc:
        setup_logging()
        logger.error("Startup error: %s", exc)
        return 1

    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Server ready on http://localhost:%d model=%s", settings.port, settings.model_name)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
