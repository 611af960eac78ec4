"""Chat message parsing: intent, URLs and manual "Company - Role" entries."""

import logging
import re

from .models import Intent, ManualEntry, ParsedMessage

logger = logging.getLogger(__name__)

# Checked in order; the first keyword found decides the intent
INTENT_KEYWORDS = [
    ("help", Intent.HELP),
    ("status", Intent.STATUS),
    ("sheet", Intent.SHEET_LINK),
]

URL_PATTERN = re.compile(r"https?://\S+")

# ASCII form wins even when an en-dash appears earlier in the headline
MANUAL_SEPARATORS = [" - ", " – "]


class ParseFailure(Exception):
    """Base class for messages the bot cannot turn into an application."""


class UnrecognizedFormat(ParseFailure):
    """The text is not in "Company - Role" form."""

    MISSING_SEPARATOR = "missing_separator"
    EMPTY_PART = "empty_part"

    def __init__(self, reason: str, text: str = ""):
        self.reason = reason
        self.text = text
        super().__init__(f"Unrecognized manual entry ({reason}): {text[:50]!r}")


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and trim."""
    return re.sub(r"\s+", " ", text).strip()


def classify_intent(text: str) -> Intent:
    """Work out what the sender wants from the message body."""
    text_lower = text.lower()
    for keyword, intent in INTENT_KEYWORDS:
        if keyword in text_lower:
            return intent
    return Intent.SUBMIT


def tokenize(text: str) -> ParsedMessage:
    """Split a message into its URLs and the text left around them."""
    urls = URL_PATTERN.findall(text)
    residual = URL_PATTERN.sub("", text)
    return ParsedMessage(urls=urls, residual_text=collapse_whitespace(residual))


def parse_manual(text: str) -> ManualEntry:
    """Parse a "Company - Role" headline followed by optional note lines.

    The headline is split once, at the first separator, so any further
    separators stay in the role: "Acme - Sr Eng - Platform" gives the role
    "Sr Eng - Platform".

    Raises:
        UnrecognizedFormat: if the headline has no separator, or either side
            of it is blank.
    """
    lines = text.strip().split("\n")
    headline = lines[0]
    notes = " ".join(lines[1:]).strip()

    separator = next((sep for sep in MANUAL_SEPARATORS if sep in headline), None)
    if separator is None:
        raise UnrecognizedFormat(UnrecognizedFormat.MISSING_SEPARATOR, headline)

    company, _, role = headline.partition(separator)
    company = company.strip()
    role = role.strip()
    if not company or not role:
        raise UnrecognizedFormat(UnrecognizedFormat.EMPTY_PART, headline)

    logger.debug(f"Parsed manual entry: {company} - {role}")
    return ManualEntry(company=company, role=role, notes=notes)
