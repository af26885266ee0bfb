"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.routes import health, verify
from api.errors import APIError, api_error_handler, generic_error_handler


# Configure logging, respecting LEDGERPROOF_LOG_LEVEL
logging.basicConfig(
    level=getattr(logging, os.getenv("LEDGERPROOF_LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Ledger Proof Verification API",
        description="""
HTTP API for verifying ledger proofs offline.

## Endpoints

- **POST /verify** - Verify forward links, the trie root and optionally a key
- **GET /health** - Health check

## Trust

The genesis id is always supplied by the caller. The genesis roster is
taken from the request or, when omitted, from the server's configured
trust anchors.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(verify.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
