"""Entry point for the Carbovid service."""

import argparse
import uvicorn

from carbovid.config import config


def main() -> None:
    """Run the Carbovid service."""
    parser = argparse.ArgumentParser(description="Carbovid carbon intensity / COVID correlation service")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("--host", default=config.server.host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=config.server.port, help="Port to bind to")

    args = parser.parse_args()

    uvicorn.run(
        "carbovid.app:app",
        host=args.host,
        port=args.port,
        reload=args.debug,
        log_level="debug" if args.debug else config.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
