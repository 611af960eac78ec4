"""Tests for record building, storage round-trips and statistics."""

from datetime import date

import pytest
from pydantic import ValidationError

from jobbot.models import SHEET_HEADERS, ApplicationRecord
from jobbot.records import (
    VIA_MANUAL,
    build_record,
    compute_stats,
    one_month_before,
    submit_application,
)

TODAY = date(2026, 10, 19)


def record_on(day: date, company: str = "Acme") -> ApplicationRecord:
    return build_record(company=company, role="Engineer", today=day)


class TestBuildRecord:

    def test_defaults(self):
        record = build_record("Acme", "Engineer", today=TODAY)
        assert record.date_applied == TODAY
        assert record.status == "Applied"
        assert record.job_link == ""
        assert record.display_date == "10/19/2026"

    def test_uses_process_clock(self):
        assert build_record("Acme", "Engineer").date_applied == date.today()

    def test_is_immutable(self):
        record = build_record("Acme", "Engineer")
        with pytest.raises(ValidationError):
            record.company = "Other"

    def test_row_layout_matches_headers(self):
        record = build_record(
            "Acme", "Engineer", "https://x.com/1", "referral", VIA_MANUAL, today=TODAY
        )
        row = record.to_row()
        assert len(row) == len(SHEET_HEADERS)
        assert row == [
            "2026-10-19",
            "Acme",
            "Engineer",
            "https://x.com/1",
            "Applied",
            "referral",
            "WhatsApp Bot (Manual)",
        ]
        assert ApplicationRecord.from_row(row) == record

    def test_from_row_accepts_legacy_dates_and_short_rows(self):
        record = ApplicationRecord.from_row(["10/02/2026", "Initech", "Analyst"])
        assert record.date_applied == date(2026, 10, 2)
        assert record.status == "Applied"
        assert record.notes == ""

    def test_from_row_rejects_bad_date(self):
        with pytest.raises(ValueError):
            ApplicationRecord.from_row(["yesterday", "Initech", "Analyst"])


class TestSubmitApplication:

    def test_round_trip_through_store(self, store):
        record = build_record(
            company="Acme", role="Engineer", job_link="", notes="", applied_via="Manual"
        )
        assert submit_application(store, record) is True

        [stored] = store.list_all()
        assert stored.status == "Applied"
        assert (stored.company, stored.role) == ("Acme", "Engineer")

    def test_failed_write_is_not_retried(self, failing_store):
        assert submit_application(failing_store, build_record("Acme", "Engineer")) is False
        assert failing_store.attempts == 1


class TestStats:

    @pytest.mark.parametrize(
        "day,expected",
        [
            (date(2026, 10, 19), date(2026, 9, 19)),
            (date(2026, 3, 31), date(2026, 2, 28)),
            (date(2028, 3, 30), date(2028, 2, 29)),
            (date(2026, 1, 15), date(2025, 12, 15)),
        ],
    )
    def test_one_month_before(self, day, expected):
        assert one_month_before(day) == expected

    def test_counts_use_inclusive_lower_bounds(self):
        records = [
            record_on(date(2026, 9, 18), "Too Old"),
            record_on(date(2026, 9, 19), "Month Edge"),
            record_on(date(2026, 10, 11), "Last Month"),
            record_on(date(2026, 10, 12), "Week Edge"),
            record_on(date(2026, 10, 19), "Today"),
        ]
        stats = compute_stats(records, today=TODAY)
        assert stats.total == 5
        assert stats.this_week == 2
        assert stats.this_month == 4

    def test_recent_is_last_five_newest_first(self):
        records = [record_on(TODAY, f"Company {i}") for i in range(7)]
        stats = compute_stats(records, today=TODAY)
        assert [r.company for r in stats.recent] == [
            "Company 6",
            "Company 5",
            "Company 4",
            "Company 3",
            "Company 2",
        ]

    def test_empty(self):
        stats = compute_stats([], today=TODAY)
        assert (stats.total, stats.this_week, stats.this_month, stats.recent) == (0, 0, 0, [])
