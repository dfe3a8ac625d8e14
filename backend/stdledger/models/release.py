"""
stdledger — Typed release ledger model.

The scraper, the bulk importer and the storage layer all exchange
ReleaseDocument / ExtractedChange. No raw dicts leak across boundaries.
"""

from __future__ import annotations

import enum
import re
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

PACKAGE_PATTERN = re.compile(r"^[a-z][a-z0-9]*(?:/[a-z][a-z0-9]*)*(?:/v[0-9]+)?$")
PACKAGE_MAX_LENGTH = 200


class ChangeType(str, enum.Enum):
    ADDED = "Added"
    MODIFIED = "Modified"
    DEPRECATED = "Deprecated"
    REMOVED = "Removed"
    SECURITY_FIX = "Security Fix"
    BUG_FIX = "Bug Fix"
    TEST_FIX = "Test Fix"
    COMPATIBILITY = "Compatibility"
    SECURITY_ENHANCEMENT = "Security Enhancement"
    BASE = "Base"


class ExtractedChange(BaseModel):
    """One (package, change type, description, summary) record."""

    model_config = ConfigDict(frozen=True)

    package: str = Field(min_length=1, max_length=PACKAGE_MAX_LENGTH)
    change_type: ChangeType = ChangeType.MODIFIED
    description: str = Field(default="", max_length=5000)
    summary: str = ""
    source_url: str = Field(default="", max_length=2000)

    @field_validator("package")
    @classmethod
    def _package_grammar(cls, value: str) -> str:
        if not PACKAGE_PATTERN.match(value):
            raise ValueError(f"not a package identifier: {value!r}")
        return value


class ReleaseDocument(BaseModel):
    """
    One release and the changes extracted for it.

    Built once per fetch-and-extract cycle and handed to storage whole.
    `synthetic` marks documents produced by the offline fallback.
    """

    model_config = ConfigDict(frozen=True)

    version: str = Field(min_length=1, max_length=50)
    release_date: date
    url: str = Field(default="", max_length=2000)
    changes: tuple[ExtractedChange, ...] = ()
    synthetic: bool = False

    def packages(self) -> list[str]:
        """Distinct packages in extraction order."""
        seen: dict[str, None] = {}
        for change in self.changes:
            seen.setdefault(change.package, None)
        return list(seen)
