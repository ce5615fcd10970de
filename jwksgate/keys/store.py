"""Parse the cached JWKS document into the trusted key record."""

import json
from pathlib import Path

from jwksgate.keys.errors import KeyParseError
from jwksgate.keys.types import KeyRecord

_REQUIRED_FIELDS = (
    ("n", "RSA modulus"),
    ("e", "RSA exponent"),
    ("kid", "key ID"),
)


def load_key_record(path: Path) -> KeyRecord:
    """Load the first key of the JWKS document at ``path``.

    Only ``keys[0]`` is considered; additional keys are ignored.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise KeyParseError(f"Failed to read JWKS file: {exc}") from exc

    try:
        document = json.loads(content)
    except json.JSONDecodeError as exc:
        raise KeyParseError(f"Failed to parse JWKS JSON: {exc}") from exc

    keys = document.get("keys") if isinstance(document, dict) else None
    if not isinstance(keys, list) or not keys or not isinstance(keys[0], dict):
        raise KeyParseError("No keys found in JWKS")
    key = keys[0]

    values: dict[str, str] = {}
    for field, label in _REQUIRED_FIELDS:
        value = key.get(field)
        if not isinstance(value, str) or not value:
            raise KeyParseError(f"Missing {label} in JWKS")
        values[field] = value

    return KeyRecord(modulus=values["n"], exponent=values["e"], kid=values["kid"])
