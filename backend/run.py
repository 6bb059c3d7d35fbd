#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Run from the backend directory: ``python run.py``.
"""

import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    print(f"Starting Courtside API ({settings.environment}) at http://localhost:8000")
    print("API Docs: http://localhost:8000/docs")

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
