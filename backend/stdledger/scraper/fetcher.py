"""
stdledger — Release document fetcher.

Transport and parse failures never escape this module: callers receive
an Offline sentinel describing what went wrong and fall back to a
synthetic document. One GET per call, bounded by the configured
timeout, no retries.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from bs4 import ParserRejectedMarkup

from stdledger.core.config import ScraperConfig, settings
from stdledger.errors import DocumentParseError, TransportFailure
from stdledger.scraper.document import DocumentBlock, looks_like_html, parse_document
from stdledger.utils.logging import logger

USER_AGENT = "stdledger/1.0 (+release-notes harvester)"


@dataclass(frozen=True)
class Offline:
    """Returned instead of a document when the source could not be used."""
    url: str
    reason: str
    code: str = "TRANSPORT_FAILURE"


class DocumentFetcher:
    def __init__(self, config: ScraperConfig | None = None, client: httpx.Client | None = None):
        self.config = config or settings.scraper
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=self.config.http_timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    def __enter__(self) -> DocumentFetcher:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _get(self, url: str) -> str:
        try:
            resp = self.client.get(url)
        except httpx.HTTPError as exc:
            raise TransportFailure(url, f"{type(exc).__name__}: {exc}") from exc

        if resp.status_code >= 400:
            raise TransportFailure(url, f"HTTP {resp.status_code}")

        body = resp.text
        if not looks_like_html(body):
            raise DocumentParseError(url, "response is not an HTML document")
        return body

    def fetch_text(self, url: str) -> str | Offline:
        try:
            return self._get(url)
        except (TransportFailure, DocumentParseError) as exc:
            logger.warning("  Fetch %s failed [%s]: %s", url, exc.code, exc.reason)
            return Offline(url=url, reason=exc.reason, code=exc.code)

    def fetch_document(self, version: str) -> tuple[str, DocumentBlock | Offline]:
        """The release document URL for a version and its parsed tree (or Offline)."""
        url = self.config.document_url(version)
        body = self.fetch_text(url)
        if isinstance(body, Offline):
            return url, body
        logger.info("  Go %s: fetched %d bytes from %s", version, len(body), url)
        try:
            return url, parse_document(body)
        except ParserRejectedMarkup as exc:
            failure = DocumentParseError(url, str(exc))
            logger.warning("  Go %s: [%s] %s", version, failure.code, failure.message)
            return url, Offline(url=url, reason=failure.reason, code=failure.code)

    def fetch_history(self) -> str | Offline:
        """Raw HTML of the release-history index."""
        return self.fetch_text(self.config.history_url)
