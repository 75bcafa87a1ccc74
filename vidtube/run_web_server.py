#!/usr/bin/env python3
"""
Development server runner for the VidTube API.
"""
import os

import uvicorn
from dotenv import load_dotenv

if __name__ == "__main__":
    load_dotenv()

    from vidtube.web.app.config import get_settings
    from vidtube.web.app.main import create_app

    settings = get_settings()
    app = create_app(settings)

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    print(f"Starting {settings.APP_NAME} API on http://{host}:{port}")
    print(f"API prefix: {settings.API_PREFIX}")
    print(f"Health check: http://{host}:{port}/health")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None
    )
