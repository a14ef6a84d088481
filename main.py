# main.py
"""Fridge Chef API - local runner."""

from __future__ import annotations

import uvicorn

from app.config import settings

# =============================================================================
# Entrypoint
# =============================================================================
if __name__ == "__main__":
    # Single worker: the kitchen session lives in process memory
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, workers=1, log_config=None)
