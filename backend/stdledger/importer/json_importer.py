"""
stdledger — Minor-revision JSON importer.

Accepts two layouts of the same data:

  nested  [{"version": "go1.23.1", "changes": [{"package", "change", "links"}]}]
  flat    [{"version": "go1.23.1", "package", "change", "links"}]

The nested layout is tried first, the flat one second; a file matching
neither raises SchemaMismatchError. Records are grouped per version and
each version is persisted as one ReleaseDocument.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from stdledger.core.config import settings
from stdledger.errors import ImportFileError, SchemaMismatchError
from stdledger.models.release import ExtractedChange, ReleaseDocument
from stdledger.scraper.classify import classify_revision_note, summarize
from stdledger.scraper.dates import minor_release_date
from stdledger.scraper.packages import is_valid_package_name
from stdledger.storage.database import Database
from stdledger.utils.logging import logger

EMPTY_PACKAGES = {"", "(none)"}


class RevisionChange(BaseModel):
    package: str
    change: str = ""
    links: list[str] = Field(default_factory=list)


class RevisionEntry(BaseModel):
    version: str
    changes: list[RevisionChange]


class FlatRevisionChange(RevisionChange):
    version: str


NESTED_SCHEMA = TypeAdapter(list[RevisionEntry])
FLAT_SCHEMA = TypeAdapter(list[FlatRevisionChange])


def _error_lines(label: str, exc: ValidationError) -> list[str]:
    return [
        f"{label}: {'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
        for err in exc.errors()[:5]
    ]


def normalize_version(raw: str, prefix: str = "go") -> str:
    return raw.strip().removeprefix(prefix)


def parse_revisions(
    data: object, source: str = "<data>", prefix: str = "go"
) -> dict[str, list[RevisionChange]]:
    """Group revision notes by version ("go1.23.1" and "1.23.1" are one), in file order."""
    try:
        entries = NESTED_SCHEMA.validate_python(data)
    except ValidationError as nested_exc:
        try:
            flat = FLAT_SCHEMA.validate_python(data)
        except ValidationError as flat_exc:
            errors = _error_lines("nested", nested_exc) + _error_lines("flat", flat_exc)
            raise SchemaMismatchError(source, errors) from flat_exc
        logger.info("  %s: flat schema (%d records)", source, len(flat))
        grouped: dict[str, list[RevisionChange]] = {}
        for record in flat:
            grouped.setdefault(normalize_version(record.version, prefix), []).append(record)
        return grouped

    logger.info("  %s: nested schema (%d versions)", source, len(entries))
    grouped = {}
    for entry in entries:
        grouped.setdefault(normalize_version(entry.version, prefix), []).extend(entry.changes)
    return grouped


def minor_release_url(history_url: str, version: str, prefix: str = "go") -> str:
    """history#go1231.minor style anchor for a minor revision."""
    return f"{history_url}#{prefix}{version.replace('.', '', 1)}.minor"


class JSONImporter:
    def __init__(
        self,
        db: Database,
        history_url: str | None = None,
        prefix: str | None = None,
        locale: str | None = None,
        today: date | None = None,
    ):
        self.db = db
        self.history_url = history_url or settings.scraper.history_url
        self.prefix = prefix or settings.scraper.version_prefix
        self.locale = locale or settings.scraper.summary_locale
        self.today = today

    def _change(self, record: RevisionChange, version: str) -> ExtractedChange | None:
        package = record.package.strip()
        if package in EMPTY_PACKAGES:
            return None
        if not is_valid_package_name(package):
            logger.warning("  Go %s: skipped invalid package %r (import)", version, package)
            return None

        note = record.change.strip()
        change_type = classify_revision_note(note)
        try:
            return ExtractedChange(
                package=package,
                change_type=change_type,
                description=note,
                summary=summarize(note, change_type, self.locale),
                source_url=record.links[0] if record.links else "",
            )
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors())
            logger.warning("  Go %s: skipped %s record with invalid %s (import)", version, package, fields)
            return None

    def build_documents(self, data: object, source: str = "<data>") -> list[ReleaseDocument]:
        documents: list[ReleaseDocument] = []
        for version, records in parse_revisions(data, source, self.prefix).items():
            changes = [c for c in (self._change(r, version) for r in records) if c is not None]
            documents.append(ReleaseDocument(
                version=version,
                release_date=minor_release_date(version, self.today),
                url=minor_release_url(self.history_url, version, self.prefix),
                changes=tuple(changes),
            ))
        return documents

    def load(self, path: str | Path) -> list[ReleaseDocument]:
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise ImportFileError(str(path), str(exc)) from exc
        except json.JSONDecodeError as exc:
            raise ImportFileError(str(path), f"invalid JSON: {exc}") from exc
        return self.build_documents(data, str(path))

    def import_file(self, path: str | Path) -> list[ReleaseDocument]:
        """Load a revision file and persist one release per version."""
        documents = self.load(path)
        for document in documents:
            self.db.persist(document)
        logger.info(
            "  Imported %d revisions, %d changes from %s",
            len(documents), sum(len(d.changes) for d in documents), path,
        )
        return documents
