"""
Main-API entrypoint for the BTC DCA & sentiment engine.

This module initializes the FastAPI app, configures middleware for
request logging and error handling, and registers the sentiment and
simulation routers.

Usage:
    uvicorn btc_dca.api.main_api:app --reload --port 8000
"""

import time
from typing import Dict

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from btc_dca import __version__
from btc_dca.api.sentiment_api import router as sentiment_router
from btc_dca.api.simulation_api import router as simulation_router
from btc_dca.utils.logger import get_logger

logger = get_logger("main_api")


# ------------------------------------------------------------
# FastAPI App Initialization
# ------------------------------------------------------------
app = FastAPI(
    title="BTC DCA & Sentiment API",
    description="Dollar-cost-averaging simulation and headline sentiment index.",
    version=__version__,
)


# ------------------------------------------------------------
# Middleware
# ------------------------------------------------------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log each incoming request and its response time.
    """
    start_time = time.time()
    logger.info(f"Incoming request: {request.method} {request.url}")

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Request failed: {e}")
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    process_time = time.time() - start_time
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
    Health check endpoint for monitoring systems.
    """
    logger.info("Health check requested")
    return {
        "status": "ok",
        "version": __version__,
        "timestamp": str(time.time()),
    }


# ------------------------------------------------------------
# Register Routers
# ------------------------------------------------------------
app.include_router(sentiment_router, prefix="/sentiment", tags=["Sentiment"])
app.include_router(simulation_router, prefix="/simulate", tags=["Simulation"])


def start_api(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    """
    Starts the FastAPI server using Uvicorn.

    Args:
        host (str): Host address to bind.
        port (int): Port number to listen on.
        reload (bool): Auto-reload on code changes (development only).
    """
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("btc_dca.api.main_api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    start_api()
