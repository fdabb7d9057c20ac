"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from microlearn.core.config import Settings, get_settings
from microlearn.core.database import Database
from microlearn.api.quizzes import router as quizzes_router
from microlearn.api.materials import router as materials_router
from microlearn.api.leaderboard import router as leaderboard_router
from microlearn.api.analytics import router as analytics_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s %s...", settings.APP_NAME, settings.APP_VERSION)
        db = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        db.create_all()
        app.state.db = db
        yield
        logger.info("Shutting down %s...", settings.APP_NAME)
        db.dispose()

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.dependency_overrides[get_settings] = lambda: settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Student-ID"],
        max_age=600,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation error", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
        message = "An internal error occurred" if settings.is_production() else str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": message})

    app.include_router(materials_router, prefix="/materials", tags=["materials"])
    app.include_router(quizzes_router, prefix="/quizzes", tags=["quizzes"])
    app.include_router(leaderboard_router, prefix="/leaderboard", tags=["leaderboard"])
    app.include_router(analytics_router, prefix="/analytics", tags=["analytics"])

    @app.get("/health")
    def health(): return {"status": "ok"}

    @app.post("/submit-quiz", include_in_schema=False)
    def submit_quiz_alias(): return RedirectResponse("/quizzes/submit-quiz", status_code=307)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
