"""Main application entry point.

Serves the chat API and the NiceGUI page from one uvicorn process.
The UI calls the API over HTTP, so API_BASE_URL defaults to this server.
"""

import logging
import os
import sys

import uvicorn
from dotenv import load_dotenv
from nicegui import ui

# Load environment variables before any other imports that might need them
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Send log records to stdout at LOG_LEVEL."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def run() -> None:
    """Mount NiceGUI onto the FastAPI app and serve both.

    Reads HOST, PORT and LOG_LEVEL from the environment.
    """
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    os.environ.setdefault("API_BASE_URL", f"http://localhost:{port}")

    from chatbridge.api.app import create_app
    from chatbridge.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(app, title="AI Chat Assistant", favicon="🤖")

    logger.info(f"Chat UI on http://localhost:{port}/, API docs on /docs")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def main() -> None:
    """Application entry point."""
    configure_logging()
    run()


if __name__ == "__main__":
    main()
