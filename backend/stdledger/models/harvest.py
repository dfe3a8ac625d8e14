"""
stdledger — Harvest run bookkeeping.

Every harvest returns a HarvestReport with one VersionOutcome per
requested version (live or synthetic) plus per-stage timings.
"""

from __future__ import annotations

import enum
from datetime import date

from pydantic import BaseModel, Field


class DocumentSource(str, enum.Enum):
    LIVE = "live"
    SYNTHETIC = "synthetic"


class StepTiming(BaseModel):
    step: str
    duration_ms: int
    status: str = "ok"  # ok | fallback | skipped
    detail: str = ""


class VersionOutcome(BaseModel):
    version: str
    source: DocumentSource
    release_date: date
    change_count: int = 0
    duration_ms: int = 0
    detail: str = ""


class HarvestReport(BaseModel):
    """Complete output contract for one harvest run."""

    run_id: str
    outcomes: list[VersionOutcome] = Field(default_factory=list)
    timings: list[StepTiming] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def synthetic_versions(self) -> list[str]:
        return [o.version for o in self.outcomes if o.source == DocumentSource.SYNTHETIC]

    @property
    def total_changes(self) -> int:
        return sum(o.change_count for o in self.outcomes)
