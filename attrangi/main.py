"""Main application entry point.

Runs the NiceGUI chat client. With RUN_MODE=integrated the in-memory
reference backend is mounted on the same FastAPI server, so the client
works without an external backend.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_integrated() -> None:
    """Run the reference backend with NiceGUI mounted on the same server.

    FastAPI serves the backend contract, NiceGUI serves the chat UI.
    The client talks to the backend on the same port unless
    ATTRANGI_API_URL points elsewhere.
    """
    import uvicorn
    from nicegui import ui

    from attrangi.api.app import create_app
    from attrangi.config import get_client_config

    config = get_client_config()
    os.environ.setdefault("ATTRANGI_API_URL", f"http://localhost:{config.port}")

    from attrangi.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()

    # Mount NiceGUI onto FastAPI
    ui.run_with(
        app,
        title="Hey Attrangi",
        storage_secret=config.storage_secret,
        dark=True,
    )

    logger.info(f"Starting integrated server on http://localhost:{config.port}")
    logger.info(f"Reference backend docs at http://localhost:{config.port}/docs")

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_client() -> None:
    """Run the NiceGUI client against an external backend."""
    from attrangi.config import get_client_config
    from attrangi.ui.chat_page import main as run_ui

    config = get_client_config()
    logger.info(f"Chat UI available at http://localhost:{config.port}/ (backend {config.api_base_url})")
    run_ui()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=integrated to serve the reference backend alongside the UI.
    Default is client mode against ATTRANGI_API_URL.
    """
    from attrangi.config import get_client_config

    mode = get_client_config().run_mode

    logger.info(f"Starting Attrangi in {mode} mode")

    if mode == "integrated":
        run_integrated()
    else:
        run_client()


if __name__ in {"__main__", "__mp_main__"}:
    main()
