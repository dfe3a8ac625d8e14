"""
stdledger — FastAPI read API

Endpoints:
  GET /health                          — Liveness check
  GET /api/health                      — Ledger health (release and package counts)
  GET /api/releases                    — All stored releases, oldest first
  GET /api/packages                    — Distinct package identifiers
  GET /api/package/{name}              — One package's timeline
  GET /api/releases/{version}/changes  — Changes recorded for one release
  GET /api/visualization               — Releases + packages + per-package timelines
  GET /api/stats                       — Counts by change type and release
"""

from datetime import datetime, timezone
from typing import Iterator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stdledger.core.config import settings
from stdledger.errors import ReleaseNotFoundError, StdLedgerError
from stdledger.storage.database import Database
from stdledger.utils.logging import logger

API_VERSION = "1.0.0"

app = FastAPI(
    title="stdledger API",
    description="Per-package change history of the standard library, mined from release documents.",
    version=API_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

_database: Database | None = None


def get_database() -> Iterator[Database]:
    """One shared connection per process, opened on first use."""
    global _database
    if _database is None:
        _database = Database(settings.db_path)
        logger.info("Opened ledger %s", settings.db_path)
    yield _database


@app.exception_handler(StdLedgerError)
async def _ledger_error(request: Request, exc: StdLedgerError) -> JSONResponse:
    logger.error("%s %s failed: [%s] %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=500, content=exc.to_dict())


# ──────────────────────────────────────────────────────────
# Endpoints
# ──────────────────────────────────────────────────────────

@app.get("/health")
def health():
    return {"status": "ok", "service": "stdledger-api", "version": API_VERSION}


@app.get("/api/health")
def api_health(db: Database = Depends(get_database)):
    try:
        release_count = len(db.all_releases())
        package_count = len(db.unique_packages())
    except StdLedgerError as exc:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": "ledger unavailable", "error": exc.to_dict()},
        )
    return {
        "status": "ok",
        "message": "API server is running",
        "release_count": release_count,
        "package_count": package_count,
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
    }


@app.get("/api/releases")
def list_releases(db: Database = Depends(get_database)):
    return [r.model_dump(mode="json") for r in db.all_releases()]


@app.get("/api/packages")
def list_packages(db: Database = Depends(get_database)):
    return db.unique_packages()


@app.get("/api/package/{name:path}")
def package_timeline(name: str, db: Database = Depends(get_database)):
    """Timeline of one package, e.g. /api/package/net/http."""
    name = name.strip("/")
    if not name:
        raise HTTPException(status_code=400, detail="Package name required")
    return [entry.model_dump(mode="json") for entry in db.package_evolution(name)]


@app.get("/api/releases/{version}/changes")
def release_changes(version: str, db: Database = Depends(get_database)):
    try:
        release = db.release(version)
    except ReleaseNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.to_dict())
    return {
        "release": release.model_dump(mode="json"),
        "changes": [c.model_dump(mode="json") for c in db.package_changes(release.id)],
    }


@app.get("/api/visualization")
def visualization(db: Database = Depends(get_database)):
    return db.visualization_data()


@app.get("/api/stats")
def stats(db: Database = Depends(get_database)):
    return db.stats().model_dump()
