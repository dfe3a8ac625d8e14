"""
stdledger — Release scraper (harvest orchestrator).

Runs each requested version through

  FETCH → LOCATE SECTION → CLASSIFY LAYOUT → EXTRACT → DATE

strictly one version at a time, sleeping a fixed delay between
versions. A version whose document cannot be fetched or parsed gets a
synthetic document instead, so N requested versions always produce N
documents. Every version is timed and recorded in the HarvestReport.
"""

from __future__ import annotations

import time
import uuid
from typing import Callable, Iterable

from stdledger.core.config import ScraperConfig, settings
from stdledger.errors import DocumentParseError
from stdledger.models.harvest import DocumentSource, HarvestReport, StepTiming, VersionOutcome
from stdledger.models.release import ReleaseDocument
from stdledger.scraper.dates import ReleaseDateResolver
from stdledger.scraper.extractor import extract_changes
from stdledger.scraper.fetcher import DocumentFetcher, Offline
from stdledger.scraper.rules import DEFAULT_RULES, ExtractionRules
from stdledger.scraper.synthetic import synthetic_release
from stdledger.utils.logging import logger


class ReleaseScraper:
    """
    Turns release documents into ReleaseDocument values.

    The fetcher, the date resolver and the sleep function are injectable
    so a harvest can run against canned responses without waiting.
    """

    def __init__(
        self,
        config: ScraperConfig | None = None,
        fetcher: DocumentFetcher | None = None,
        resolver: ReleaseDateResolver | None = None,
        rules: ExtractionRules = DEFAULT_RULES,
        sleep: Callable[[float], None] | None = None,
    ):
        self.config = config or settings.scraper
        self.fetcher = fetcher or DocumentFetcher(self.config)
        self.sleep = sleep or time.sleep
        self.resolver = resolver or ReleaseDateResolver(
            self.fetcher,
            self.config.version_prefix,
            delay=self.config.fetch_delay,
            sleep=self.sleep,
        )
        self.rules = rules
        self.last_failure: Offline | None = None

    def close(self) -> None:
        self.fetcher.close()

    def synthetic(self, version: str) -> ReleaseDocument:
        return synthetic_release(
            version,
            history_url=self.config.history_url,
            prefix=self.config.version_prefix,
            locale=self.config.summary_locale,
        )

    def scrape(self, version: str) -> ReleaseDocument:
        """Fetch and mine one version; falls back to a synthetic document."""
        self.last_failure = None
        url, root = self.fetcher.fetch_document(version)
        if isinstance(root, Offline):
            logger.warning("  Go %s: %s at %s, using synthetic document", version, root.code, url)
            self.last_failure = root
            return self.synthetic(version)

        try:
            changes = extract_changes(
                root,
                version,
                source_url=url,
                locale=self.config.summary_locale,
                rules=self.rules,
            )
        except ValueError as exc:
            failure = DocumentParseError(url, f"extraction failed: {exc}")
            logger.warning("  Go %s: %s, using synthetic document", version, failure.message)
            self.last_failure = Offline(url, failure.reason, failure.code)
            return self.synthetic(version)

        return ReleaseDocument(
            version=version,
            release_date=self.resolver.resolve(version),
            url=url,
            changes=tuple(changes),
        )

    def harvest(self, versions: Iterable[str] | None = None) -> tuple[list[ReleaseDocument], HarvestReport]:
        """Scrape every version in order. Always one document per version."""
        targets = list(versions) if versions is not None else list(self.config.target_versions)
        report = HarvestReport(run_id=uuid.uuid4().hex[:12])
        documents: list[ReleaseDocument] = []

        logger.info("=" * 60)
        logger.info("[%s] Harvest starting (%d versions)", report.run_id, len(targets))
        logger.info("=" * 60)
        harvest_start = time.perf_counter()

        for index, version in enumerate(targets):
            if index > 0 and self.config.fetch_delay > 0:
                self.sleep(self.config.fetch_delay)

            start = time.perf_counter()
            document = self.scrape(version)
            ms = int((time.perf_counter() - start) * 1000)
            documents.append(document)

            source = DocumentSource.SYNTHETIC if document.synthetic else DocumentSource.LIVE
            detail = self.last_failure.reason if self.last_failure else ""
            report.outcomes.append(VersionOutcome(
                version=version,
                source=source,
                release_date=document.release_date,
                change_count=len(document.changes),
                duration_ms=ms,
                detail=detail,
            ))
            status = "fallback" if document.synthetic else "ok"
            report.timings.append(StepTiming(step=f"scrape {version}", duration_ms=ms, status=status, detail=detail))
            if document.synthetic:
                report.warnings.append(f"Go {version}: synthetic document ({detail})")

            symbol = "✓" if status == "ok" else "⊘"
            logger.info("  %s Go %s — %d changes, %dms %s", symbol, version, len(document.changes), ms, detail)

        total_ms = int((time.perf_counter() - harvest_start) * 1000)
        logger.info("=" * 60)
        logger.info(
            "[%s] Harvest complete — %d documents, %d changes, %d synthetic, %dms",
            report.run_id, len(documents), report.total_changes, len(report.synthetic_versions), total_ms,
        )
        logger.info("=" * 60)
        return documents, report
