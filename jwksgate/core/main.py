"""Process entry point: load settings, prepare keys, serve HTTP."""

import sys

import uvicorn
from pydantic import ValidationError

from jwksgate.core.app import create_app
from jwksgate.core.bootstrap import prepare_verifier
from jwksgate.core.logging import configure_logging, get_logger
from jwksgate.core.settings import VerifierSettings
from jwksgate.keys.errors import KeySourceError

EXIT_STARTUP_FAILURE = 1

logger = get_logger("main")


def _load_settings() -> VerifierSettings:
    try:
        return VerifierSettings()
    except ValidationError as exc:
        missing = [
            "JWKS_" + str(err["loc"][0]).upper()
            for err in exc.errors()
            if err["type"] == "missing"
        ]
        if missing:
            print(
                f"{', '.join(missing)} environment variable not set",
                file=sys.stderr,
            )
        else:
            print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(EXIT_STARTUP_FAILURE)


def main() -> None:
    """Run the verification service; exits non-zero if startup fails."""
    settings = _load_settings()
    configure_logging(settings.log_level, settings.log_json)

    try:
        verifier = prepare_verifier(settings)
    except KeySourceError as exc:
        logger.error("startup_failed", error=str(exc))
        sys.exit(EXIT_STARTUP_FAILURE)

    uvicorn.run(
        create_app(verifier),
        host=settings.host,
        port=settings.port,
        access_log=False,
    )


if __name__ == "__main__":
    main()
