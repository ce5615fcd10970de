"""Shared test fixtures for jwksgate."""

import base64
import hashlib
import hmac
import json
import time
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path

import jwt
import pytest
import structlog
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from httpx import ASGITransport, AsyncClient

from jwksgate.core.app import create_app
from jwksgate.keys.types import KeyRecord
from jwksgate.verify.verifier import TokenVerifier

KID = "test-key-1"
CLIENT_ID = "test-client"

TokenFactory = Callable[..., str]


def _b64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _int_to_base64url(value: int) -> str:
    byte_length = (value.bit_length() + 7) // 8
    return _b64url(value.to_bytes(byte_length, byteorder="big"))


@pytest.fixture(autouse=True)
def _set_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate settings from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("JWKS_CLIENT_ID", CLIENT_ID)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo any structlog configuration applied by the code under test."""
    yield
    structlog.reset_defaults()


@pytest.fixture(scope="session")
def private_key() -> RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_pem(private_key: RSAPrivateKey) -> str:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope="session")
def key_record(private_key: RSAPrivateKey) -> KeyRecord:
    numbers = private_key.public_key().public_numbers()
    return KeyRecord(
        modulus=_int_to_base64url(numbers.n),
        exponent=_int_to_base64url(numbers.e),
        kid=KID,
    )


@pytest.fixture
def jwks_document(key_record: KeyRecord) -> dict:
    """Provider-style JWKS containing the test key."""
    return {
        "keys": [
            {
                "alg": "RS256",
                "kty": "RSA",
                "use": "sig",
                "n": key_record.modulus,
                "e": key_record.exponent,
                "kid": key_record.kid,
            }
        ]
    }


@pytest.fixture
def make_token(private_pem: str) -> TokenFactory:
    """Sign RS256 tokens with the test key."""

    def _make(
        sub: str = "user-1",
        ttl: int = 3600,
        kid: str | None = KID,
        pem: str | None = None,
        extra: dict | None = None,
    ) -> str:
        payload = {"sub": sub, "exp": int(time.time()) + ttl}
        if extra:
            payload.update(extra)
        headers = {"kid": kid} if kid is not None else None
        return jwt.encode(
            payload, pem or private_pem, algorithm="RS256", headers=headers
        )

    return _make


@pytest.fixture
def forge_token() -> Callable[[dict, dict, bytes | None], str]:
    """Hand-build tokens with arbitrary algorithms (HS256 or none)."""

    def _forge(header: dict, payload: dict, secret: bytes | None) -> str:
        signing_input = (
            _b64url(json.dumps(header).encode())
            + "."
            + _b64url(json.dumps(payload).encode())
        )
        if secret is None:
            return signing_input + "."
        digest = hmac.new(secret, signing_input.encode(), hashlib.sha256).digest()
        return signing_input + "." + _b64url(digest)

    return _forge


@pytest.fixture
def verifier(key_record: KeyRecord) -> TokenVerifier:
    return TokenVerifier(key_record)


@pytest.fixture
async def client(verifier: TokenVerifier) -> AsyncIterator[AsyncClient]:
    """Create an httpx test client bound to the ASGI app."""
    app = create_app(verifier)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
