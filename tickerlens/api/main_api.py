"""
Main API entrypoint for TickerLens.

Initializes the FastAPI app, configures request logging and CORS, and
registers the news proxy router.

Usage:
    uvicorn tickerlens.api.main_api:app --reload --port 8000
"""

import time
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tickerlens import __version__
from tickerlens.api.news_api import router as news_router
from tickerlens.utils.config_loader import NewsConfig, get_secret
from tickerlens.utils.logger import get_logger

logger = get_logger("main_api")


# ------------------------------------------------------------
# FastAPI App Initialization
# ------------------------------------------------------------
app = FastAPI(
    title="TickerLens API",
    description="Server-side news proxy for the TickerLens dashboard.",
    version=__version__,
)


# ------------------------------------------------------------
# Middleware
# ------------------------------------------------------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Log each incoming request with its status and response time.
    """
    start_time = time.time()
    logger.info(f"Incoming request: {request.method} {request.url}")

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Request failed: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    logger.info(
        f"Completed request: {request.method} {request.url} "
        f"Status: {response.status_code} Time: {process_time:.2f}s"
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------
# Health Check Endpoint
# ------------------------------------------------------------
@app.get("/health", response_model=Dict[str, str])
async def health_check() -> Dict[str, str]:
    """
    Liveness plus whether the NewsAPI key is present (never its value).
    """
    news_config = NewsConfig()
    return {
        "status": "ok",
        "version": __version__,
        "news_api_key": "configured" if get_secret(news_config.api_key_env) else "missing",
        "timestamp": str(time.time()),
    }


# ------------------------------------------------------------
# Register Routers
# ------------------------------------------------------------
app.include_router(news_router, prefix="/api", tags=["News"])
