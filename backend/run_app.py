#!/usr/bin/env python3
"""
Shoe Store FastAPI Application Startup Script
Runs the API locally under uvicorn
"""

import os
import logging

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def start_application():
    """Start the FastAPI application"""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("ENVIRONMENT", "development") == "development"
    log_level = "debug" if reload else "info"

    if reload:
        logger.info("Development mode: Auto-reload enabled")
    logger.info(f"Starting server on {host}:{port}")

    uvicorn.run(
        "shoestore.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level
    )


if __name__ == "__main__":
    start_application()
