#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Creates missing tables, then serves the API with auto-reload.
"""
import logging
import os
from pathlib import Path
import sys

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn

from app.init_db import init_db

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting BookAPro API on http://localhost:{port} (docs at /docs)")
    uvicorn.run("app.main:app", host="0.0.0.0", port=port, reload=True, log_level="info")
