"""RS256 bearer token verification against the cached key record."""

import base64
import re

import jwt
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from pydantic import ValidationError

from jwksgate.core.logging import get_logger
from jwksgate.keys.types import Claims, KeyRecord, TokenHeader
from jwksgate.verify.errors import (
    InvalidKeyMaterialError,
    InvalidTokenError,
    KeyMismatchError,
    MalformedHeaderError,
)

ALGORITHM = "RS256"
REQUIRED_CLAIMS = ["exp", "sub"]
LEEWAY_DEFAULT = 60

_BASE64URL = re.compile(r"[A-Za-z0-9_-]+")

logger = get_logger("verify")


def _base64url_to_int(value: str) -> int:
    """Decode an unpadded base64url string into a big-endian integer."""
    if not _BASE64URL.fullmatch(value):
        raise ValueError("key component is not unpadded base64url")
    raw = base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
    if not raw:
        raise ValueError("empty key component")
    return int.from_bytes(raw, byteorder="big")


def public_key_from_record(record: KeyRecord) -> RSAPublicKey:
    """Build an RSA public key from the record's modulus and exponent."""
    n = _base64url_to_int(record.modulus)
    e = _base64url_to_int(record.exponent)
    return rsa.RSAPublicNumbers(e=e, n=n).public_key()


class TokenVerifier:
    """Verifies RS256 tokens issued for the single trusted key."""

    def __init__(self, key_record: KeyRecord, leeway: int = LEEWAY_DEFAULT) -> None:
        self._key_record = key_record
        self._leeway = leeway

    @property
    def key_record(self) -> KeyRecord:
        return self._key_record

    def read_header(self, token: str) -> TokenHeader:
        """Decode the token header without checking the signature."""
        try:
            raw = jwt.get_unverified_header(token)
            return TokenHeader.model_validate(raw)
        except (jwt.PyJWTError, ValidationError) as exc:
            raise MalformedHeaderError(str(exc)) from exc

    def verify(self, token: str) -> Claims:
        """Verify ``token`` and return its claims.

        Raises a VerifyError subclass naming the failed stage.
        """
        header = self.read_header(token)

        if header.kid != self._key_record.kid:
            logger.warning(
                "token_kid_mismatch",
                token_kid=header.kid,
                expected_kid=self._key_record.kid,
            )
            raise KeyMismatchError()

        try:
            public_key = public_key_from_record(self._key_record)
        except ValueError as exc:
            logger.error("decoding_key_invalid", error=str(exc))
            raise InvalidKeyMaterialError(str(exc)) from exc

        try:
            payload = jwt.decode(
                token,
                public_key,
                algorithms=[ALGORITHM],
                leeway=self._leeway,
                options={"require": REQUIRED_CLAIMS, "verify_aud": False},
            )
            claims = Claims.model_validate(payload)
        except (jwt.PyJWTError, ValidationError) as exc:
            logger.warning("token_rejected", alg=header.alg, error=str(exc))
            raise InvalidTokenError(str(exc)) from exc

        logger.info("token_verified", sub=claims.sub)
        return claims
