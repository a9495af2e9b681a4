#!/usr/bin/env python3
"""
Run script for the dictation backend
"""
import uvicorn

from dictation_api.config.settings import settings
from dictation_api.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
