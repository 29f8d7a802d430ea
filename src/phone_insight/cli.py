from __future__ import annotations

import argparse
import logging

import uvicorn

from .config import get_settings
from .nexmo_client import get_nexmo_client

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def serve(host: str, port: int) -> None:
    """Run the web app with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "phone_insight.main:app",
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


def lookup(number: str, callback_url: str) -> None:
    """
    Fire a single lookup from the terminal.

    Handy for checking credentials; Nexmo still delivers the insight to
    `callback_url`, so point it at a running server (or a request bin).
    """
    configure_logging(get_settings().log_level)
    print(get_nexmo_client().lookup(number, callback_url))


def main() -> None:
    parser = argparse.ArgumentParser(prog="phone-insight")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="run the web form and callback receiver")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=4567)

    lookup_parser = subparsers.add_parser("lookup", help="submit one number to Nexmo")
    lookup_parser.add_argument("number", type=str)
    lookup_parser.add_argument("callback_url", type=str)

    args = parser.parse_args()

    if args.command == "serve":
        serve(args.host, args.port)
    else:
        lookup(args.number, args.callback_url)


if __name__ == "__main__":
    main()
