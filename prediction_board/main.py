import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prediction_board.config import Settings, get_settings
from prediction_board.errors import register_exception_handlers
from prediction_board.middlewares.logging import RequestLoggingMiddleware
from prediction_board.repositories.document_store import (
    DocumentStore,
    make_firestore_document_store,
)
from prediction_board.repositories.opinion import make_opinion_repository
from prediction_board.repositories.prediction import make_prediction_repository
from prediction_board.routers.opinion import make_opinion_router
from prediction_board.routers.prediction import make_prediction_router
from prediction_board.services.opinion import make_opinion_service
from prediction_board.services.prediction import make_prediction_service


# ------------------ App Factory ------------------
def create_app(
    settings: Settings, document_store: Optional[DocumentStore] = None
) -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    log = logging.getLogger(__name__)

    if document_store is None:
        document_store = make_firestore_document_store(settings)

    prediction_repo = make_prediction_repository(document_store)
    opinion_repo = make_opinion_repository(document_store)
    prediction_service = make_prediction_service(prediction_repo)
    opinion_service = make_opinion_service(prediction_repo, opinion_repo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info(
            f"Server running on port {settings.PORT} (environment={settings.APP_ENV})"
        )
        yield
        log.info("Server stopped")

    app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app, expose_errors=settings.is_development)

    app.include_router(make_prediction_router(prediction_service))
    app.include_router(make_opinion_router(opinion_service))

    @app.get("/health")
    async def health():
        if await document_store.ping():
            return {"status": "ok"}
        return {"status": "fail"}

    return app


# ------------------ Uvicorn Runner ------------------
def run_uvicorn(app: FastAPI, settings: Settings):
    uvicorn.run(
        app,
        host=settings.APP_HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


# ------------------ Main ------------------
def main():
    settings = get_settings()
    app = create_app(settings)
    run_uvicorn(app, settings)


if __name__ == "__main__":
    main()
