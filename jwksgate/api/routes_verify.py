"""Bearer token verification endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from starlette.responses import JSONResponse

from jwksgate.verify.errors import HTTP_BAD_REQUEST, VerifyError
from jwksgate.verify.verifier import TokenVerifier

router = APIRouter()

BEARER_PREFIX = "Bearer "


def get_verifier(request: Request) -> TokenVerifier:
    """Return the verifier installed by the application factory."""
    return request.app.state.verifier


def _is_visible_ascii(value: str) -> bool:
    return all(c == "\t" or " " <= c <= "~" for c in value)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(message, status_code=HTTP_BAD_REQUEST)


@router.get("/verify")
def verify(
    request: Request,
    verifier: Annotated[TokenVerifier, Depends(get_verifier)],
) -> JSONResponse:
    """GET /verify -- validate the Bearer token and return its claims."""
    auth = request.headers.get("Authorization")
    if auth is None:
        return _bad_request("Missing Authorization header")
    if not _is_visible_ascii(auth):
        return _bad_request("Invalid Authorization header")
    # HTTP parsers strip trailing whitespace, so "Bearer " may arrive bare.
    if auth == BEARER_PREFIX.rstrip():
        return _bad_request("Empty Bearer token")
    if not auth.startswith(BEARER_PREFIX):
        return _bad_request("Invalid or missing Bearer token")

    token = auth[len(BEARER_PREFIX) :]
    if not token:
        return _bad_request("Empty Bearer token")

    try:
        claims = verifier.verify(token)
    except VerifyError as exc:
        return JSONResponse(exc.detail, status_code=exc.status_code)
    return JSONResponse(claims.model_dump())
