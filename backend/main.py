from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import uuid

from config import settings
from init_db import init_database
from api import products
from utils.logging_utils import configure_logging, set_logging_context, clear_logging_context

# Configure logging with rotating file handler
LOG_FILE = configure_logging(settings.LOG_DIR, settings.LOG_LEVEL)

logger = logging.getLogger(__name__)
logger.info(f"Logging initialized: {LOG_FILE}")

settings.validate_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown"""
    logger.info("Starting product catalog service...")
    init_database()
    yield
    logger.info("Product catalog service stopped")


app = FastAPI(
    title="Product Catalog API",
    description="Create and look up catalog products",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log record of a request with its request id."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    set_logging_context(request_id=request_id)
    try:
        response = await call_next(request)
    finally:
        clear_logging_context()
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(products.router, prefix="/api", tags=["products"])


@app.get("/health")
def health():
    """Liveness probe"""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
