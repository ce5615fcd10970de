"""FastAPI application factory for the token verification service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jwksgate.api.middleware import HTTPLogMiddleware
from jwksgate.api.routes_verify import router as verify_router
from jwksgate.verify.verifier import TokenVerifier


def create_app(verifier: TokenVerifier) -> FastAPI:
    """Build the application around an already-loaded verifier."""
    app = FastAPI(
        title="jwksgate",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
    )
    app.state.verifier = verifier

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(HTTPLogMiddleware)

    app.include_router(verify_router)

    return app
