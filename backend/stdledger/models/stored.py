"""
stdledger — Rows as read back from storage.

These are what the API and the analyzer see; the scraper and importer
never construct them directly.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class StoredRelease(BaseModel):
    id: int
    version: str
    release_date: date
    url: str = ""
    created_at: str | None = None


class StoredChange(BaseModel):
    id: int
    release_id: int
    package: str
    change_type: str
    description: str = ""
    summary: str = ""
    source_url: str = ""
    created_at: str | None = None


class TimelineEntry(BaseModel):
    """One change of a package, placed on its release."""

    version: str
    release_date: date
    change_type: str
    description: str = ""
    summary: str = ""
    source_url: str = ""


class LedgerStats(BaseModel):
    releases: int = 0
    packages: int = 0
    changes: int = 0
    by_change_type: dict[str, int] = Field(default_factory=dict)
    changes_per_release: dict[str, int] = Field(default_factory=dict)
