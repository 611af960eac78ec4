"""Tests for the message pipeline."""

from unittest.mock import AsyncMock, patch

import pytest

from jobbot import replies
from jobbot.bot import handle_message
from jobbot.config import Config
from jobbot.models import IncomingMessage, JobInfo
from jobbot.records import VIA_MANUAL, VIA_URL, build_record
from jobbot.sheets import SheetsStore


def message(text: str) -> IncomingMessage:
    return IncomingMessage(text=text, sender_id="whatsapp:+15550001111")


@pytest.mark.asyncio
async def test_empty_message(store, config):
    reply = await handle_message(message("   "), store, config)
    assert reply == replies.EMPTY_MESSAGE
    assert store.list_all() == []


@pytest.mark.asyncio
async def test_help(store, config):
    reply = await handle_message(message("Help!"), store, config)
    assert reply == replies.HELP


@pytest.mark.asyncio
async def test_sheet_link(store, config):
    reply = await handle_message(message("sheet"), store, config)
    assert "https://docs.google.com/spreadsheets/d/sheet-123" in reply


@pytest.mark.asyncio
async def test_sheet_link_not_configured(store, unconfigured):
    reply = await handle_message(message("sheet"), store, unconfigured)
    assert reply == replies.SHEET_NOT_CONFIGURED


@pytest.mark.asyncio
async def test_status(store, config):
    store.append(build_record("Acme", "Engineer"))
    store.append(build_record("Initech", "Analyst"))

    reply = await handle_message(message("status"), store, config)

    assert "Total Applications: *2*" in reply
    assert "This Week: *2*" in reply
    assert reply.index("Initech") < reply.index("Acme")


@pytest.mark.asyncio
async def test_status_read_failure(failing_store, config):
    reply = await handle_message(message("status"), failing_store, config)
    assert reply == replies.READ_FAILED


@pytest.mark.asyncio
async def test_url_submission(store, config):
    extract = AsyncMock(return_value=JobInfo(company="Acme", title="Engineer"))
    with patch("jobbot.bot.extract_job_info", extract):
        reply = await handle_message(
            message("https://jobs.acme.com/1 https://jobs.acme.com/2\nreferred by Sam"),
            store,
            config,
        )

    extract.assert_awaited_once_with("https://jobs.acme.com/1", timeout=config.fetch_timeout)
    [record] = store.list_all()
    assert record.company == "Acme"
    assert record.role == "Engineer"
    assert record.job_link == "https://jobs.acme.com/1"
    assert record.notes == "referred by Sam"
    assert record.applied_via == VIA_URL
    assert "Job Application Tracked!" in reply
    assert "*Notes:* referred by Sam" in reply


@pytest.mark.asyncio
async def test_url_submission_with_unknown_page_is_still_stored(store, config):
    with patch("jobbot.bot.extract_job_info", AsyncMock(return_value=JobInfo())):
        reply = await handle_message(message("https://example.com/job/1"), store, config)

    [record] = store.list_all()
    assert (record.company, record.role) == ("Unknown Company", "Unknown Position")
    assert "*Notes:* None" in reply


@pytest.mark.asyncio
async def test_manual_submission(store, config):
    reply = await handle_message(
        message("Google - Software Engineer\nReferral, remote"), store, config
    )

    [record] = store.list_all()
    assert record.company == "Google"
    assert record.role == "Software Engineer"
    assert record.notes == "Referral, remote"
    assert record.job_link == ""
    assert record.applied_via == VIA_MANUAL
    assert "*Company:* Google" in reply


@pytest.mark.asyncio
async def test_unrecognized_format(store, config):
    reply = await handle_message(message("just one line no separator"), store, config)
    assert reply == replies.MISSING_SEPARATOR
    assert store.list_all() == []


@pytest.mark.asyncio
async def test_empty_role(store, config):
    reply = await handle_message(message("Acme - \nnotes"), store, config)
    assert reply == replies.EMPTY_PART
    assert store.list_all() == []


@pytest.mark.asyncio
async def test_storage_failure(failing_store, config):
    reply = await handle_message(message("Acme - Engineer"), failing_store, config)
    assert reply == replies.SAVE_FAILED
    assert failing_store.attempts == 1


@pytest.mark.asyncio
async def test_sheet_credential_error_still_replies():
    config = Config(
        spreadsheet_id="sheet-123",
        service_account_email="bot@project.iam.gserviceaccount.com",
        private_key="garbage",
    )
    store = SheetsStore(config)

    assert await handle_message(message("Acme - Engineer"), store, config) == replies.SAVE_FAILED
    assert await handle_message(message("status"), store, config) == replies.READ_FAILED
