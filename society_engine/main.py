"""Main application entry point: serve the engine API with uvicorn."""

import argparse
import logging

import uvicorn
from dotenv import load_dotenv

from society_engine.api.app import create_app
from society_engine.config import get_settings
from society_engine.services import get_store
from society_engine.services.logging import setup_server_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Configure logging, make sure the schema exists and start the server."""
    parser = argparse.ArgumentParser(description="Society operations engine API server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)

    load_dotenv()
    settings = get_settings()
    setup_server_logging(settings.log_file, settings.log_level, settings.database_echo)

    store = get_store()
    store.create_all()
    logger.info("Ledger store ready at %s", store.engine.url.render_as_string(hide_password=True))

    logger.info("Starting API on %s:%d", args.host, args.port)
    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
