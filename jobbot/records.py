"""Building application records and summarising stored ones."""

import calendar
import logging
from datetime import date, timedelta
from typing import Optional

from .models import ApplicationRecord, ApplicationStats
from .storage import ApplicationStore

logger = logging.getLogger(__name__)

VIA_URL = "WhatsApp Bot"
VIA_MANUAL = "WhatsApp Bot (Manual)"

RECENT_LIMIT = 5


def build_record(
    company: str,
    role: str,
    job_link: str = "",
    notes: str = "",
    applied_via: str = VIA_URL,
    today: Optional[date] = None,
) -> ApplicationRecord:
    """Assemble a new application record dated today."""
    return ApplicationRecord(
        date_applied=today or date.today(),
        company=company,
        role=role,
        job_link=job_link,
        notes=notes,
        applied_via=applied_via,
    )


def submit_application(store: ApplicationStore, record: ApplicationRecord) -> bool:
    """Hand a record to the store. A failed write is reported, not retried."""
    success = store.append(record)
    if success:
        logger.info(f"Tracked application: {record.company} - {record.role}")
    else:
        logger.error(f"Could not store application: {record.company} - {record.role}")
    return success


def one_month_before(day: date) -> date:
    """Same day of the previous month, clamped to that month's last day."""
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def compute_stats(
    records: list[ApplicationRecord], today: Optional[date] = None
) -> ApplicationStats:
    """Count applications overall, in the last week and in the last month."""
    today = today or date.today()
    week_ago = today - timedelta(days=7)
    month_ago = one_month_before(today)

    return ApplicationStats(
        total=len(records),
        this_week=sum(1 for r in records if r.date_applied >= week_ago),
        this_month=sum(1 for r in records if r.date_applied >= month_ago),
        recent=list(reversed(records[-RECENT_LIMIT:])),
    )
