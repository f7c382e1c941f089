import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from arq import create_pool
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .call_queue import OutboundCallQueue
from .config import ALLOWED_ORIGINS, LOG_LEVEL
from .database import Database
from .domain.appointments.router import router as appointments_router
from .exceptions import CallbookError, callbook_error_handler, validation_exception_handler
from .worker import get_redis_settings

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    database = Database()
    database.init_db()
    app.state.database = database

    pool = await create_pool(get_redis_settings())
    app.state.redis_pool = pool
    app.state.call_queue = OutboundCallQueue(pool)
    logger.info("Redis connection established")

    yield

    logger.info("Application shutting down...")
    await pool.aclose()
    database.dispose()


app = FastAPI(title="Callbook API", version="0.1.0", lifespan=lifespan)

app.add_exception_handler(CallbookError, callbook_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(appointments_router)


@app.get("/ping")
def ping():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/health")
def health():
    return {"status": "healthy", "uptime": round(time.monotonic() - STARTED_AT, 3)}


@app.get("/health/redis")
async def redis_health_check(request: Request):
    """Check Redis connectivity for monitoring"""
    pool = getattr(request.app.state, "redis_pool", None)
    if pool is None:
        return {"status": "unhealthy", "redis": {"connected": False, "error": "not initialized"}}

    try:
        start_time = time.time()
        await pool.ping()
        response_time = (time.time() - start_time) * 1000

        info = await pool.info()
        return {
            "status": "healthy",
            "redis": {
                "connected": True,
                "response_time_ms": round(response_time, 2),
                "version": info.get("redis_version", "unknown"),
                "used_memory_human": info.get("used_memory_human", "unknown"),
            },
        }
    except Exception as e:
        return {"status": "unhealthy", "redis": {"connected": False, "error": str(e)}}
