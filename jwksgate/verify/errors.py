"""Classified token verification failures."""

HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_INTERNAL_ERROR = 500


class VerifyError(Exception):
    """Base class for verification failures; carries the HTTP mapping."""

    status_code = HTTP_UNAUTHORIZED
    prefix = ""

    def __init__(self, cause: str = "") -> None:
        super().__init__(cause)
        self.cause = cause

    @property
    def detail(self) -> str:
        """Client-facing description of the failure."""
        if self.prefix and self.cause:
            return f"{self.prefix}: {self.cause}"
        return self.prefix or self.cause


class MalformedHeaderError(VerifyError):
    """The token header could not be decoded."""

    status_code = HTTP_BAD_REQUEST
    prefix = "Invalid token header"


class KeyMismatchError(VerifyError):
    """The token's kid is absent or does not name the trusted key."""

    status_code = HTTP_UNAUTHORIZED

    @property
    def detail(self) -> str:
        return "Token key ID does not match"


class InvalidKeyMaterialError(VerifyError):
    """The cached modulus/exponent do not form a usable RSA key."""

    status_code = HTTP_INTERNAL_ERROR
    prefix = "Failed to create decoding key"


class InvalidTokenError(VerifyError):
    """Signature, expiry or claims validation failed."""

    status_code = HTTP_UNAUTHORIZED
    prefix = "Invalid token"
