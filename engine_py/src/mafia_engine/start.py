#!/usr/bin/env python3
"""Startup script for the Mafia game backend"""

import logging
import os

import uvicorn
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def main():
    load_dotenv()
    port = int(os.getenv("PORT", 8000))
    host = os.getenv("HOST", "0.0.0.0")
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    logging.basicConfig(level=log_level.upper())
    logger.info(f"Starting Mafia Game Backend on {host}:{port}")
    logger.info(f"WebSocket endpoint: ws://{host}:{port}/ws/<user_id>?name=<name>")

    uvicorn.run(
        "mafia_engine.main:app",
        host=host,
        port=port,
        reload=os.getenv("RELOAD", "false").lower() == "true",
        log_level=log_level
    )


if __name__ == "__main__":
    main()
