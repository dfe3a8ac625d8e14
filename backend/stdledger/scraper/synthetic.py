"""
stdledger — Synthetic release documents.

Used when a release document cannot be fetched or parsed, so a harvest
always yields one document per requested version. The content is a
pure function of the version string.
"""

from __future__ import annotations

from datetime import date, timedelta

from stdledger.models.release import ChangeType, ExtractedChange, ReleaseDocument
from stdledger.scraper.classify import summarize

BASELINE_DATE = date(2021, 8, 1)
BASELINE_RELEASE = 118
SYNTHETIC_PACKAGES = ("fmt", "net/http", "crypto/tls")

# (version, package) pairs that are not plain modifications
SYNTHETIC_CHANGE_TYPES: dict[tuple[str, str], ChangeType] = {
    ("1.25", "fmt"): ChangeType.ADDED,
    ("1.21", "crypto/tls"): ChangeType.DEPRECATED,
}


def release_number(version: str) -> int:
    """Release number: 1.21 is 121 and 9.99 is 999. Non-numeric versions count as 118."""
    parts = version.split(".")
    if len(parts) < 2 or not (parts[0].isdigit() and parts[1].isdigit()):
        return BASELINE_RELEASE
    return int(parts[0]) * 100 + int(parts[1])


def synthetic_release_date(version: str) -> date:
    offset = (release_number(version) - BASELINE_RELEASE) * 365 // 400
    return BASELINE_DATE + timedelta(days=offset)


def synthetic_release(version: str, history_url: str, prefix: str = "go", locale: str = "ja") -> ReleaseDocument:
    changes = []
    for package in SYNTHETIC_PACKAGES:
        description = f"Improvements to the {package} package in {prefix}{version}."
        change_type = SYNTHETIC_CHANGE_TYPES.get((version, package), ChangeType.MODIFIED)
        changes.append(ExtractedChange(
            package=package,
            change_type=change_type,
            description=description,
            summary=summarize(description, change_type, locale),
        ))

    return ReleaseDocument(
        version=version,
        release_date=synthetic_release_date(version),
        url=f"{history_url}#{prefix}{version}",
        changes=tuple(changes),
        synthetic=True,
    )
