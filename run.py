#!/usr/bin/env python3
"""Startup script for the Jamonería backend."""
import uvicorn

from jamoneria.config import settings

if __name__ == "__main__":
    print(f"Starting Jamonería on http://{settings.host}:{settings.port}")
    uvicorn.run(
        "jamoneria.main:app",
        host=settings.host,
        port=settings.port,
        log_level="info"
    )
