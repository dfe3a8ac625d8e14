"""
stdledger — Release date resolution.

Major releases: the live release-history index first, then a static
table, then a fixed default. Minor revisions (x.y.z) imported from
JSON: their own static table, then an estimate of the major release
date plus z months, then today.
"""

from __future__ import annotations

import calendar
import re
import time
from datetime import date
from typing import Callable

from stdledger.scraper.document import parse_document
from stdledger.scraper.fetcher import DocumentFetcher, Offline
from stdledger.utils.logging import logger

RELEASE_DATES: dict[str, date] = {
    "1.18": date(2022, 3, 15),
    "1.19": date(2022, 8, 2),
    "1.20": date(2023, 2, 1),
    "1.21": date(2023, 8, 8),
    "1.22": date(2024, 2, 6),
    "1.23": date(2024, 8, 13),
    "1.24": date(2025, 2, 1),
    "1.25": date(2025, 8, 1),
}

DEFAULT_RELEASE_DATE = date(2023, 8, 8)

MINOR_RELEASE_DATES: dict[str, date] = {
    "1.23.1": date(2024, 9, 5),
    "1.23.2": date(2024, 10, 1),
    "1.23.3": date(2024, 11, 6),
    "1.23.4": date(2024, 12, 3),
    "1.23.5": date(2025, 1, 7),
    "1.23.6": date(2025, 2, 4),
    "1.23.7": date(2025, 3, 4),
    "1.23.8": date(2025, 4, 1),
    "1.23.9": date(2025, 5, 6),
    "1.23.10": date(2025, 6, 3),
    "1.23.11": date(2025, 7, 1),
    "1.23.12": date(2025, 8, 5),
    "1.24.1": date(2025, 3, 4),
    "1.24.2": date(2025, 4, 1),
    "1.24.3": date(2025, 5, 6),
    "1.24.4": date(2025, 6, 5),
    "1.24.5": date(2025, 7, 8),
    "1.24.6": date(2025, 8, 6),
}


def add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def history_pattern(version: str, prefix: str = "go") -> re.Pattern[str]:
    return re.compile(re.escape(f"{prefix}{version}.0") + r"\s*\(released\s+(\d{4}-\d{2}-\d{2})\)")


def find_release_date(history_text: str, version: str, prefix: str = "go") -> date | None:
    match = history_pattern(version, prefix).search(history_text)
    if not match:
        return None
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return None


class ReleaseDateResolver:
    """
    Resolves release dates, fetching the history index at most once.

    Pass fetcher=None to resolve from the static tables only. With a
    delay, the history fetch waits like any other fetch in a harvest.
    """

    def __init__(
        self,
        fetcher: DocumentFetcher | None = None,
        prefix: str = "go",
        delay: float = 0.0,
        sleep: Callable[[float], None] | None = None,
    ):
        self.fetcher = fetcher
        self.prefix = prefix
        self.delay = delay
        self.sleep = sleep or time.sleep
        self._history_text: str | None = None

    def _history(self) -> str:
        if self._history_text is None:
            self._history_text = ""
            if self.fetcher is not None:
                if self.delay > 0:
                    self.sleep(self.delay)
                body = self.fetcher.fetch_history()
                if isinstance(body, Offline):
                    logger.warning("  Release history unavailable: %s", body.reason)
                else:
                    self._history_text = parse_document(body).text
        return self._history_text

    def resolve(self, version: str) -> date:
        found = find_release_date(self._history(), version, self.prefix)
        if found is not None:
            logger.info("  Go %s: release date %s (history)", version, found)
            return found
        if version in RELEASE_DATES:
            return RELEASE_DATES[version]
        logger.debug("  Go %s: no known release date, using %s", version, DEFAULT_RELEASE_DATE)
        return DEFAULT_RELEASE_DATE


def minor_release_date(version: str, today: date | None = None) -> date:
    """Date of a minor revision such as "1.23.4"."""
    if version in MINOR_RELEASE_DATES:
        return MINOR_RELEASE_DATES[version]

    parts = version.split(".")
    if len(parts) == 3 and parts[2].isdigit():
        major = RELEASE_DATES.get(f"{parts[0]}.{parts[1]}")
        if major is not None:
            return add_months(major, int(parts[2]))

    return today or date.today()
