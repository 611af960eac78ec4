"""Job posting scraper: recovers company and title from a job page URL.

Each known job board has a SiteProfile listing CSS lookups per field, tried
in order until one yields text. Pages from unknown hosts use GENERIC_PROFILE.
Scraping is best effort: any failure yields the "Unknown" placeholders so a
broken page never blocks a submission.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from .models import UNKNOWN_COMPANY, UNKNOWN_POSITION, JobInfo
from .parser import collapse_whitespace

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 10.0

# Some boards refuse requests that don't look like a browser
REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


@dataclass(frozen=True)
class Select:
    """Text of the elements matching a CSS selector.

    With ``first`` only the first match is read; otherwise the text of every
    match is concatenated.
    """

    selector: str
    first: bool = False

    def extract(self, soup: BeautifulSoup) -> str:
        if self.first:
            element = soup.select_one(self.selector)
            return element.get_text() if element is not None else ""
        return "".join(element.get_text() for element in soup.select(self.selector))


@dataclass(frozen=True)
class DocumentTitle:
    """First segment of the page <title> split on a separator."""

    separator: str

    def extract(self, soup: BeautifulSoup) -> str:
        title = soup.find("title")
        if title is None:
            return ""
        return title.get_text().split(self.separator)[0]


ExtractionRule = Union[Select, DocumentTitle]


@dataclass(frozen=True)
class SiteProfile:
    name: str
    hosts: tuple[str, ...]
    title_rules: tuple[ExtractionRule, ...]
    company_rules: tuple[ExtractionRule, ...]

    def matches(self, host: str) -> bool:
        return any(pattern in host for pattern in self.hosts)


SITE_PROFILES = [
    SiteProfile(
        name="linkedin",
        hosts=("linkedin.com",),
        title_rules=(Select("h1", first=True),),
        company_rules=(
            Select(".topcard__org-name-link"),
            Select(".job-details-jobs-unified-top-card__company-name"),
            Select('[data-test-id="job-details-company-name"]'),
        ),
    ),
    SiteProfile(
        name="indeed",
        hosts=("indeed.com",),
        title_rules=(
            Select('[data-testid="jobsearch-JobInfoHeader-title"]'),
            Select("h1.jobsearch-JobInfoHeader-title"),
            Select("h1", first=True),
        ),
        company_rules=(
            Select('[data-testid="inlineHeader-companyName"]'),
            Select(".icl-u-lg-mr--sm"),
            Select('[data-testid="company-name"]'),
        ),
    ),
    SiteProfile(
        name="glassdoor",
        hosts=("glassdoor.com",),
        title_rules=(
            Select('[data-test="job-title"]'),
            Select("h1", first=True),
        ),
        company_rules=(
            Select('[data-test="employer-name"]'),
            Select('[data-test="employer-short-name"]'),
        ),
    ),
    SiteProfile(
        name="lever",
        hosts=("lever.co",),
        title_rules=(
            Select(".posting-headline h2"),
            Select("h1", first=True),
        ),
        company_rules=(
            Select(".main-header-text a"),
            Select(".company-name"),
        ),
    ),
    SiteProfile(
        name="greenhouse",
        hosts=("greenhouse.io", "greenhouge.io"),
        title_rules=(
            Select("#header h1"),
            Select("h1", first=True),
        ),
        company_rules=(
            Select("#header .company-name"),
            Select('[data-mapped="true"]', first=True),
        ),
    ),
]

GENERIC_PROFILE = SiteProfile(
    name="generic",
    hosts=(),
    title_rules=(
        Select("h1", first=True),
        DocumentTitle("|"),
        DocumentTitle("-"),
    ),
    company_rules=(
        Select('[class*="company"]', first=True),
        Select('[class*="employer"]', first=True),
        Select('[class*="organization"]', first=True),
    ),
)


def select_profile(url: str) -> SiteProfile:
    """Pick the profile for the URL's host, falling back to GENERIC_PROFILE."""
    host = (urlparse(url).hostname or "").lower()
    for profile in SITE_PROFILES:
        if profile.matches(host):
            return profile
    return GENERIC_PROFILE


def apply_rules(soup: BeautifulSoup, rules: tuple[ExtractionRule, ...]) -> str:
    """Return the first non-empty text produced by the rules, in order."""
    for rule in rules:
        text = rule.extract(soup).strip()
        if text:
            return text
    return ""


def extract_from_html(html: str, url: str) -> JobInfo:
    """Extract company and title from already-fetched markup."""
    soup = BeautifulSoup(html, "html.parser")
    profile = select_profile(url)

    title = collapse_whitespace(apply_rules(soup, profile.title_rules))
    company = collapse_whitespace(apply_rules(soup, profile.company_rules))

    logger.debug(f"Extracted with {profile.name} profile: {company!r} / {title!r}")
    return JobInfo(
        company=company or UNKNOWN_COMPANY,
        title=title or UNKNOWN_POSITION,
    )


def fetch_page(url: str, timeout: float = FETCH_TIMEOUT) -> str:
    """Download a job page. Raises requests exceptions on failure."""
    response = requests.get(url, headers=REQUEST_HEADERS, timeout=timeout)
    response.raise_for_status()
    return response.text


async def extract_job_info(url: str, timeout: Optional[float] = None) -> JobInfo:
    """Fetch a job posting and recover its company and title.

    Never raises: fetch or parse problems return the placeholder JobInfo.
    """
    try:
        html = await asyncio.to_thread(fetch_page, url, timeout or FETCH_TIMEOUT)
        info = extract_from_html(html, url)
    except requests.RequestException as e:
        logger.warning(f"Failed to fetch job page {url}: {e}")
        return JobInfo()
    except Exception as e:
        logger.warning(f"Failed to extract job info from {url}: {e}")
        return JobInfo()

    logger.info(f"Extracted job info from {url}: {info.company} - {info.title}")
    return info
