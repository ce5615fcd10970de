"""Startup sequence: make the key set available and build the verifier."""

import httpx

from jwksgate.core.logging import get_logger
from jwksgate.core.settings import VerifierSettings
from jwksgate.keys.source import ensure_key_document
from jwksgate.keys.store import load_key_record
from jwksgate.verify.verifier import TokenVerifier

logger = get_logger("bootstrap")


def prepare_verifier(
    settings: VerifierSettings,
    client: httpx.Client | None = None,
) -> TokenVerifier:
    """Fetch (if needed) and load the JWKS, returning a ready verifier.

    Raises KeySourceError when the key set cannot be obtained or parsed.
    """
    path = settings.cache_path
    ensure_key_document(
        path,
        settings.client_id,
        base_url=settings.provider_url,
        timeout=settings.fetch_timeout,
        client=client,
    )
    record = load_key_record(path)
    logger.info("signing_key_loaded", kid=record.kid, path=str(path))
    return TokenVerifier(record, leeway=settings.leeway)
