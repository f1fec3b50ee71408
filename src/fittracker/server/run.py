"""Entry point for running the fittracker ASGI application with uvicorn."""

from __future__ import annotations

import os

import uvicorn


def _parse_port(value: str | None) -> int:
    if not value:
        return 8000
    try:
        port = int(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid FITTRACKER_SERVER_PORT '{value}': {exc}") from exc
    if not 0 < port < 65536:
        raise SystemExit("FITTRACKER_SERVER_PORT must be between 1 and 65535.")
    return port


def main() -> None:
    """Serve ``fittracker.server.app:app``; RELOAD=1 enables auto-reload."""

    host = os.environ.get("FITTRACKER_SERVER_HOST", "127.0.0.1")
    port = _parse_port(os.environ.get("FITTRACKER_SERVER_PORT"))
    uvicorn.run(
        "fittracker.server.app:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD") == "1",
    )


if __name__ == "__main__":
    main()
