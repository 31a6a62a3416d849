#!/usr/bin/env python3
"""
Run the TaskHub API under uvicorn.

HOST, PORT and RELOAD come from the environment (or .env); the log level
follows LOG_LEVEL like the rest of the app.
"""

import os

import uvicorn

from taskhub.config.settings import AppConfig


def main():
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "false" if AppConfig.is_production() else "true").lower() == "true"

    print(f"Starting TaskHub ({AppConfig.ENVIRONMENT}) on {host}:{port}, reload={reload}")
    print("=" * 50)

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=AppConfig.LOGGING['level'].lower(),
    )


if __name__ == "__main__":
    main()
