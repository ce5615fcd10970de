"""Type definitions for the cached signing key and verified token data."""

from pydantic import BaseModel, ConfigDict, Field


class KeyRecord(BaseModel):
    """The single RSA public key trusted for the lifetime of the process."""

    model_config = ConfigDict(frozen=True)

    modulus: str = Field(min_length=1)
    exponent: str = Field(min_length=1)
    kid: str = Field(min_length=1)


class TokenHeader(BaseModel):
    """Unverified JOSE header of a presented token."""

    alg: str
    kid: str | None = None


class Claims(BaseModel):
    """Claims returned for a verified token."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    exp: int
