"""Message handling: turns one incoming chat message into one reply."""

import asyncio
import logging

from . import replies
from .config import Config
from .extractor import extract_job_info
from .models import IncomingMessage, Intent
from .parser import UnrecognizedFormat, classify_intent, parse_manual, tokenize
from .records import VIA_MANUAL, VIA_URL, build_record, compute_stats, submit_application
from .storage import ApplicationStore, StorageError

logger = logging.getLogger(__name__)


async def handle_message(
    message: IncomingMessage, store: ApplicationStore, config: Config
) -> str:
    """Run the pipeline for one message and return the reply text."""
    text = message.text.strip()
    logger.info(f"Received message from {message.sender_id}: {text}")

    if not text:
        return replies.EMPTY_MESSAGE

    intent = classify_intent(text)
    logger.debug(f"Classified message from {message.sender_id} as {intent.value}")

    if intent is Intent.HELP:
        return replies.HELP
    if intent is Intent.STATUS:
        return await handle_status(store)
    if intent is Intent.SHEET_LINK:
        return replies.sheet_link(config.sheet_url)
    return await handle_submit(text, store, config)


async def handle_status(store: ApplicationStore) -> str:
    try:
        records = await asyncio.to_thread(store.list_all)
    except StorageError as e:
        logger.error(f"Error getting application stats: {e}")
        return replies.READ_FAILED
    return replies.status(compute_stats(records))


async def handle_submit(text: str, store: ApplicationStore, config: Config) -> str:
    parsed = tokenize(text)

    if parsed.urls:
        job_url = parsed.urls[0]
        info = await extract_job_info(job_url, timeout=config.fetch_timeout)
        record = build_record(
            company=info.company,
            role=info.title,
            job_link=job_url,
            notes=parsed.residual_text,
            applied_via=VIA_URL,
        )
    else:
        try:
            entry = parse_manual(text)
        except UnrecognizedFormat as e:
            logger.info(f"Could not parse manual entry: {e}")
            return replies.format_error(e)
        record = build_record(
            company=entry.company,
            role=entry.role,
            notes=entry.notes,
            applied_via=VIA_MANUAL,
        )

    if not await asyncio.to_thread(submit_application, store, record):
        return replies.SAVE_FAILED
    return replies.tracked(record)
