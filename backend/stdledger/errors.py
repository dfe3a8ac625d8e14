"""
stdledger — Structured error catalog.

Every error has a code, human message, and suggested fix.
Recoverable conditions are logged and absorbed by the scraper;
the rest surface to the CLI and the API as structured payloads.
"""

from __future__ import annotations

from typing import Any


class StdLedgerError(Exception):
    """Base error with structured code + suggestion."""

    def __init__(self, code: str, message: str, suggestion: str = "", detail: Any = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "error_code": self.code,
            "message": self.message,
        }
        if self.suggestion:
            d["suggestion"] = self.suggestion
        if self.detail:
            d["detail"] = self.detail
        return d


class TransportFailure(StdLedgerError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(
            code="TRANSPORT_FAILURE",
            message=f"Could not fetch {url}: {reason}",
            suggestion="Check network access or raise STDLEDGER_HTTP_TIMEOUT.",
        )


class DocumentParseError(StdLedgerError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(
            code="PARSE_FAILURE",
            message=f"Could not parse document from {url}: {reason}",
            suggestion="The page may be a placeholder or an error page; retry later.",
        )


class PackageNameRejected(StdLedgerError):
    def __init__(self, candidate: str, stage: str):
        self.candidate = candidate
        self.stage = stage
        super().__init__(
            code="VALIDATION_REJECTED",
            message=f"Rejected package candidate {candidate!r} ({stage})",
            suggestion="Package identifiers are lowercase slash paths with an optional /vN suffix.",
        )


class SchemaMismatchError(StdLedgerError):
    def __init__(self, path: str, errors: list[str]):
        self.errors = errors
        super().__init__(
            code="SCHEMA_MISMATCH",
            message=f"{path} matches neither the nested nor the flat revision schema",
            suggestion="Expected [{version, changes: [...]}] or [{version, package, change, links}].",
            detail=errors,
        )


class ImportFileError(StdLedgerError):
    def __init__(self, path: str, reason: str):
        super().__init__(
            code="IMPORT_FILE_UNREADABLE",
            message=f"Cannot read import file {path}: {reason}",
            suggestion="Check that the path exists and contains UTF-8 JSON.",
        )


class ReleaseNotFoundError(StdLedgerError):
    def __init__(self, version: str):
        super().__init__(
            code="RELEASE_NOT_FOUND",
            message=f"No release stored for version {version}",
            suggestion="Run `stdledger harvest` or `stdledger import-json` first.",
        )


class StorageError(StdLedgerError):
    def __init__(self, operation: str, message: str):
        super().__init__(
            code="STORAGE_ERROR",
            message=f"{operation} failed: {message}",
            suggestion="Check that the database file is writable and not locked.",
        )


class ConfigError(StdLedgerError):
    def __init__(self, variable: str, value: str, expected: str):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Invalid value for {variable}: {value!r}",
            suggestion=f"Expected {expected}.",
        )
