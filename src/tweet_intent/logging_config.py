"""Configure logging for the application."""

import logging
import sys


def setup_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger("tweet_intent")
    root.setLevel(level)
    # Replace rather than stack handlers when called more than once
    root.handlers = [handler]

    # Suppress asyncio debug chatter unless in debug mode
    asyncio_level = logging.DEBUG if debug else logging.WARNING
    logging.getLogger("asyncio").setLevel(asyncio_level)
