"""Reply texts sent back over WhatsApp. *text* renders as bold."""

from typing import Optional

from .models import ApplicationRecord, ApplicationStats
from .parser import UnrecognizedFormat

EMPTY_MESSAGE = "Please send a job posting URL or company/role information."

HELP = """*Job Tracker Bot Help* 📝

Send me job information in these formats:

1️⃣ *Just a URL:*
   https://linkedin.com/jobs/view/123456

2️⃣ *URL with notes:*
   https://linkedin.com/jobs/view/123456
   Applied through referral

3️⃣ *Company and role:*
   Google - Software Engineer

4️⃣ *Company, role, and notes:*
   Apple - iOS Developer
   Remote position, 120k salary

Commands:
• *help* - Show this help
• *status* - Get summary of applications
• *sheet* - Get Google Sheet link"""

SAVE_FAILED = "❌ Error saving to Google Sheet. Please check your configuration."

READ_FAILED = "Error reading application data. Please check your Google Sheet configuration."

SHEET_NOT_CONFIGURED = "No Google Sheet is configured for this bot yet."

EMPTY_PART = 'Please use format: "Company - Role" or send a job URL.'

MISSING_SEPARATOR = """❓ I didn't understand that format.

Try:
• Job URL: https://linkedin.com/jobs/view/123
• Manual entry: Google - Software Engineer
• Send "help" for more options"""


def status(stats: ApplicationStats) -> str:
    lines = [
        "📊 *Application Summary*",
        "",
        "📈 *Statistics:*",
        f"• Total Applications: *{stats.total}*",
        f"• This Week: *{stats.this_week}*",
        f"• This Month: *{stats.this_month}*",
        "",
        "🕒 *Recent Applications:*",
    ]
    for record in stats.recent:
        lines.append(f"• {record.display_date} - {record.company} - {record.role}")
    lines.append("")
    lines.append('Send "sheet" to get the Google Sheet link! 📊')
    return "\n".join(lines)


def sheet_link(url: Optional[str]) -> str:
    if not url:
        return SHEET_NOT_CONFIGURED
    return (
        f"📊 *Your Job Applications Google Sheet:*\n\n{url}\n\n"
        "You can view, edit, and share this sheet from anywhere!"
    )


def tracked(record: ApplicationRecord) -> str:
    """Confirmation for a stored application."""
    return f"""✅ *Job Application Tracked!*

*Company:* {record.company}
*Role:* {record.role}
*Date:* {record.display_date}
*Notes:* {record.notes or 'None'}

Added to your Google Sheet! 📊
Send "sheet" to view it."""


def format_error(error: UnrecognizedFormat) -> str:
    if error.reason == UnrecognizedFormat.EMPTY_PART:
        return EMPTY_PART
    return MISSING_SEPARATOR
