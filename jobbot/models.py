"""Data models for job application tracking."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_POSITION = "Unknown Position"

SHEET_HEADERS = [
    "Date Applied",
    "Company",
    "Role/Position",
    "Job Link",
    "Status",
    "Notes",
    "Applied Via",
]

DISPLAY_DATE_FORMAT = "%m/%d/%Y"


class Intent(str, Enum):
    """What the sender wants from the bot."""

    HELP = "help"
    STATUS = "status"
    SHEET_LINK = "sheet"
    SUBMIT = "submit"


class IncomingMessage(BaseModel):
    """A single message delivered by the webhook."""

    text: str
    sender_id: str = ""


class ParsedMessage(BaseModel):
    """URLs found in a message plus whatever text is left around them."""

    urls: list[str] = Field(default_factory=list)
    residual_text: str = ""


class JobInfo(BaseModel):
    """Employer and title recovered from a job posting page."""

    company: str = UNKNOWN_COMPANY
    title: str = UNKNOWN_POSITION


class ManualEntry(BaseModel):
    """A "Company - Role" headline with optional notes."""

    company: str
    role: str
    notes: str = ""


class ApplicationRecord(BaseModel):
    """One tracked job application, as stored in the sheet."""

    model_config = ConfigDict(frozen=True)

    date_applied: date
    company: str
    role: str
    job_link: str = ""
    notes: str = ""
    applied_via: str = "WhatsApp Bot"
    status: str = "Applied"

    @property
    def display_date(self) -> str:
        return self.date_applied.strftime(DISPLAY_DATE_FORMAT)

    def to_row(self) -> list[str]:
        """Convert to spreadsheet row format, in SHEET_HEADERS order."""
        return [
            self.date_applied.isoformat(),
            self.company,
            self.role,
            self.job_link,
            self.status,
            self.notes,
            self.applied_via,
        ]

    @classmethod
    def from_row(cls, row: list[str]) -> "ApplicationRecord":
        """Build a record from a spreadsheet row; short rows are padded."""
        cells = [str(cell).strip() for cell in row]
        cells += [""] * (len(SHEET_HEADERS) - len(cells))
        date_cell, company, role, job_link, status, notes, applied_via = cells[:7]
        return cls(
            date_applied=parse_sheet_date(date_cell),
            company=company,
            role=role,
            job_link=job_link,
            status=status or "Applied",
            notes=notes,
            applied_via=applied_via,
        )


class ApplicationStats(BaseModel):
    """Summary returned for the status command."""

    total: int
    this_week: int
    this_month: int
    recent: list[ApplicationRecord] = Field(default_factory=list)


def parse_sheet_date(value: str) -> date:
    """Parse a stored date cell.

    New rows are written as ISO-8601; rows typed by hand or written by older
    versions of the bot use MM/DD/YYYY.
    """
    for fmt in ("%Y-%m-%d", DISPLAY_DATE_FORMAT):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date in sheet: {value!r}")
