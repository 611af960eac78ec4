"""Webhook service for the WhatsApp job application tracker."""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Form, Response
from twilio.twiml.messaging_response import MessagingResponse

from .bot import handle_message
from .config import Config, ConfigError, load_config
from .models import IncomingMessage
from .sheets import SheetsStore
from .storage import ApplicationStore, MemoryStore, StorageError

LOG_DIR = Path(__file__).parent.parent / "logs"

logger = logging.getLogger(__name__)


def setup_logging(config: Config) -> None:
    """Configure logging for the application."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = LOG_DIR / "app.log"

    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout),
        ],
    )


def create_store(config: Config) -> ApplicationStore:
    """Use the configured Google Sheet, or keep records in memory."""
    if config.sheet_configured:
        return SheetsStore(config)
    logger.warning(
        "Google Sheets not configured, applications will only be kept in memory. "
        "Set GOOGLE_SHEET_ID to persist them."
    )
    return MemoryStore()


def check_sheet_connection(store: ApplicationStore) -> None:
    """Log whether the sheet can be read at start-up."""
    try:
        store.list_all()
    except StorageError as e:
        logger.error(f"Google Sheets connection failed: {e}")
    else:
        logger.info("Google Sheets connection successful")


def create_app(config: Config, store: Optional[ApplicationStore] = None) -> FastAPI:
    """Build the FastAPI app around an explicit config and store."""
    if store is None:
        store = create_store(config)

    app = FastAPI(title="Job Tracker Bot")

    @app.post("/webhook")
    async def webhook(
        body: str = Form("", alias="Body"),
        sender: str = Form("", alias="From"),
    ) -> Response:
        message = IncomingMessage(text=body, sender_id=sender)
        reply = await handle_message(message, store, config)

        twiml = MessagingResponse()
        twiml.message(reply)
        return Response(content=str(twiml), media_type="text/xml")

    @app.get("/health")
    async def health() -> dict:
        return {
            "status": "Bot is running!",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "google_sheet": "Configured" if config.sheet_configured else "Not configured",
        }

    return app


def main() -> int:
    """Main entry point: load config, then serve the webhook."""
    try:
        config = load_config()
        setup_logging(config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    store = create_store(config)
    if config.sheet_configured:
        check_sheet_connection(store)
    app = create_app(config, store)

    logger.info(f"WhatsApp Job Tracker Bot running on port {config.port}")
    logger.info(f"Webhook URL: http://localhost:{config.port}/webhook")
    logger.info(
        f"Google Sheet ID: {'Configured' if config.sheet_configured else 'NOT CONFIGURED'}"
    )

    uvicorn.run(app, host="0.0.0.0", port=config.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
