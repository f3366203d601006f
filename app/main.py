"""
FastAPI application entry point for the feedback and support backend
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.database import db_manager
from app.exceptions import FeedbackServiceError
from app.logging_config import setup_logging
from app.routes import ai_router, comments_router, complaints_router, posts_router, users_router

logger = logging.getLogger("app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    setup_logging()
    logger.info("Feedback Desk starting up")
    await db_manager.initialize()

    yield

    # Shutdown
    await db_manager.close()
    logger.info("Feedback Desk shutting down")


# Initialize FastAPI app
app = FastAPI(
    title="Feedback Desk",
    description="Posts, sentiment-tagged comments and complaint tracking",
    version="1.0.0",
    lifespan=lifespan
)


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@app.exception_handler(FeedbackServiceError)
async def feedback_error_handler(request: Request, exc: FeedbackServiceError):
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return _envelope(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        field = ".".join(str(part) for part in error.get("loc", ())[1:])
        messages.append(f"{field}: {message}" if message == "Field required" and field else message)
    return _envelope(400, ", ".join(messages) or "Invalid request")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _envelope(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _envelope(500, "Server Error")


app.include_router(posts_router)
app.include_router(comments_router)
app.include_router(complaints_router)
app.include_router(ai_router)
app.include_router(users_router)


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"success": True, "message": "Feedback Desk is running", "status": "healthy"}


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    database_ok = await db_manager.health_check()
    return {
        "success": database_ok,
        "status": "healthy" if database_ok else "degraded",
        "service": "feedback-desk",
    }
