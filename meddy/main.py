from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from meddy.api import chat_api, fast_api, pages
from meddy.api.ai_models import custom_model
from meddy.api.llm_pipeline import ChatPipeline
from meddy.database.config.config import settings
from meddy.database.core.database import init_db
from meddy.utils.logger import get_logger

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.INIT_MODE in ("dev", "test"):
        init_db()
    logger.info(f"Meddy started (mode={settings.INIT_MODE})")
    yield


def create_app(pipeline: ChatPipeline | None = None) -> FastAPI:
    """Assemble the application: routers, CORS, error handling and the chat pipeline."""
    app = FastAPI(title="Meddy", debug=settings.APP_DEBUG, lifespan=lifespan)
    app.state.pipeline = pipeline or ChatPipeline(model_factory=custom_model, max_steps=settings.MAX_STEPS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(fast_api.router, prefix="/api")
    app.include_router(chat_api.router, prefix="/api")
    app.include_router(pages.router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTP {exc.status_code}: {exc.detail} - Path: {request.url.path}")
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    return app


app = create_app()


def main():
    uvicorn.run("meddy.main:app", host="0.0.0.0", port=8000, reload=settings.INIT_MODE == "dev")


if __name__ == "__main__":
    main()
