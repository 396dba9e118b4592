"""
CORS (Cross-Origin Resource Sharing) middleware configuration.

The league site calls the preview service from the browser, so its origin
must be allowed explicitly. Credentials are allowed because the session
cookie is forwarded to the Couchlytics backend.
"""

from typing import List, Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


def setup_cors(app: FastAPI, allowed_origins: Optional[List[str]] = None):
    """
    Configure CORS middleware for the FastAPI application.

    Args:
        app: FastAPI application instance
        allowed_origins: List of allowed origins. Defaults to local dev origins.
    """

    if allowed_origins is None:
        allowed_origins = [
            "http://localhost:3000",    # Next.js dev server
            "http://127.0.0.1:3000",
        ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Accept",
            "Accept-Language",
            "Content-Language",
            "Content-Type",
            "Authorization",
        ],
        expose_headers=["X-Process-Time"],  # Expose our custom timing header
    )
