"""stdledger data models — typed contracts for the entire ledger."""

from stdledger.models.release import (
    PACKAGE_MAX_LENGTH,
    PACKAGE_PATTERN,
    ChangeType,
    ExtractedChange,
    ReleaseDocument,
)
from stdledger.models.harvest import (
    DocumentSource,
    StepTiming,
    VersionOutcome,
    HarvestReport,
)
from stdledger.models.stored import (
    StoredRelease,
    StoredChange,
    TimelineEntry,
    LedgerStats,
)

__all__ = [
    "PACKAGE_MAX_LENGTH",
    "PACKAGE_PATTERN",
    "ChangeType",
    "ExtractedChange",
    "ReleaseDocument",
    "DocumentSource",
    "StepTiming",
    "VersionOutcome",
    "HarvestReport",
    "StoredRelease",
    "StoredChange",
    "TimelineEntry",
    "LedgerStats",
]
