"""Helper for running the fitcart ASGI application with uvicorn."""

from __future__ import annotations

import os

import uvicorn

from fitcart.config import get_settings


def _port_from_env(value: str | None) -> int:
    if not value:
        return 8000
    try:
        port = int(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid FITCART_SERVER_PORT '{value}': {exc}") from exc
    if not 0 < port < 65536:
        raise SystemExit("FITCART_SERVER_PORT must be between 1 and 65535.")
    return port


def main() -> None:
    """Entry point for the ``fitcart-server`` script."""

    settings = get_settings()
    uvicorn.run(
        "fitcart.server.app:app",
        host=os.environ.get("FITCART_SERVER_HOST", "127.0.0.1"),
        port=_port_from_env(os.environ.get("FITCART_SERVER_PORT")),
        reload=os.environ.get("RELOAD") == "1",
        log_level=settings.log_level.lower(),
        # logging is configured by create_app()
        log_config=None,
    )


if __name__ == "__main__":
    main()
