#!/usr/bin/env python
"""Script to run the task board server."""
import os

import uvicorn

from taskcards.config import LOG_FILE, LOG_LEVEL
from taskcards.logging_setup import setup_logging

if __name__ == "__main__":
    setup_logging(LOG_LEVEL, LOG_FILE or None)
    uvicorn.run(
        "taskcards.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "0") == "1",
        log_config=None,
    )
