"""
Uvicorn entry point.

Run with:
  uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

import os

import uvicorn

from api.app import create_app, setup_logging
from core.settings import load_settings

settings = load_settings()
setup_logging(settings.log_level)

app = create_app(settings)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
