"""Download-once cache for the provider's JWKS document."""

import os
from pathlib import Path

import httpx

from jwksgate.core.logging import get_logger
from jwksgate.keys.errors import KeyFetchError

JWKS_PATH_TEMPLATE = "/sso/jwks/{client_id}"
TMP_SUFFIX = ".tmp"

logger = get_logger("keys.source")


def ensure_key_document(
    path: Path,
    client_id: str,
    *,
    base_url: str,
    timeout: float,
    client: httpx.Client | None = None,
) -> None:
    """Make sure the JWKS document for ``client_id`` exists at ``path``.

    An existing file is trusted as-is. Otherwise the document is fetched once
    from the provider, following redirects, and written verbatim through a
    temporary file. Raises KeyFetchError on any network, HTTP status or
    filesystem failure.
    """
    if path.exists():
        logger.info("jwks_cache_hit", path=str(path))
        return

    url = base_url.rstrip("/") + JWKS_PATH_TEMPLATE.format(client_id=client_id)
    owns_client = client is None
    http = client if client is not None else httpx.Client(timeout=timeout)
    try:
        with http.stream(
            "GET", url, timeout=timeout, follow_redirects=True
        ) as response:
            if not response.is_success:
                raise KeyFetchError(
                    f"Failed to download JWKS: provider returned "
                    f"{response.status_code}"
                )
            try:
                body = response.read()
            except httpx.HTTPError as exc:
                raise KeyFetchError(
                    f"Failed to read JWKS response: {exc}"
                ) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise KeyFetchError(f"Failed to download JWKS: {exc}") from exc
    finally:
        if owns_client:
            http.close()

    _write_atomically(path, body)
    logger.info("jwks_downloaded", url=url, path=str(path), size=len(body))


def _write_atomically(path: Path, body: bytes) -> None:
    """Write ``body`` so that ``path`` is either complete or absent."""
    tmp = path.with_name(path.name + TMP_SUFFIX)
    try:
        tmp.write_bytes(body)
        os.replace(tmp, path)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise KeyFetchError(f"Failed to write JWKS file: {exc}") from exc
