"""
stdledger — Base entries for packages first seen in minor revisions.

A package that only shows up in 1.23.x revision notes still belongs on
the 1.23 timeline. For every major release stored in the ledger, each
package that appears in one of its minor revisions but not in the major
release itself gets a "Base" change on the major release.
"""

from __future__ import annotations

from stdledger.models.release import ChangeType, ExtractedChange
from stdledger.scraper.classify import summarize
from stdledger.storage.database import Database
from stdledger.utils.logging import logger


def minor_versions_by_major(versions: list[str]) -> dict[str, list[str]]:
    """{"1.23": ["1.23.1", "1.23.2"], ...} for every x.y.z version given."""
    grouped: dict[str, list[str]] = {}
    for version in versions:
        parts = version.split(".")
        if len(parts) == 3:
            grouped.setdefault(f"{parts[0]}.{parts[1]}", []).append(version)
    return grouped


def base_entry(package: str, locale: str = "ja") -> ExtractedChange:
    description = f"Base package entry for {package} (introduced in minor versions)"
    return ExtractedChange(
        package=package,
        change_type=ChangeType.BASE,
        description=description,
        summary=summarize(description, ChangeType.BASE, locale),
    )


def create_base_versions(db: Database, locale: str = "ja") -> dict[str, list[str]]:
    """Add missing Base entries; returns the packages added per major release."""
    versions = [release.version for release in db.all_releases()]
    created: dict[str, list[str]] = {}

    for major, minors in minor_versions_by_major(versions).items():
        release_id = db.release_id(major)
        if release_id is None:
            logger.info("  Major version %s not stored, skipping base entries", major)
            continue

        in_minors: dict[str, None] = {}
        for minor in minors:
            for package in db.packages_in_version(minor):
                in_minors.setdefault(package, None)

        existing = set(db.packages_in_version(major))
        for package in in_minors:
            if package in existing:
                continue
            db.save_change(release_id, base_entry(package, locale))
            created.setdefault(major, []).append(package)
            logger.info("  Created base entry for %s in Go %s", package, major)

    return created
