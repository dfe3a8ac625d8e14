"""
stdledger — Layout strategies for the minor-changes block.

Release documents have used several structures for per-package notes
over the years. Each structure is a strategy with a probe (does this
block look like me?) and an extractor. Versions list the strategies
they may use in VERSION_LAYOUTS; the first strategy whose probe accepts
a block handles it.

Adding a layout = writing a strategy, registering it, and listing it
for the versions that use it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from stdledger.models.release import ExtractedChange
from stdledger.scraper.aggregate import aggregate_description, truncate_description
from stdledger.scraper.classify import classify_scraped, summarize
from stdledger.scraper.document import DocumentBlock
from stdledger.scraper.packages import (
    BRACKETED,
    package_from_brackets,
    package_from_header,
    package_from_term,
)
from stdledger.scraper.rules import DEFAULT_RULES, ExtractionRules
from stdledger.utils.logging import logger


@dataclass(frozen=True)
class ExtractionContext:
    version: str
    source_url: str = ""
    locale: str = "ja"
    rules: ExtractionRules = DEFAULT_RULES

    def record(self, package: str, description: str) -> ExtractedChange:
        change_type = classify_scraped(description)
        return ExtractedChange(
            package=package,
            change_type=change_type,
            description=description,
            summary=summarize(description, change_type, self.locale),
            source_url=self.source_url,
        )


class LayoutStrategy(Protocol):
    name: str

    def probe(self, block: DocumentBlock) -> bool: ...

    def extract(self, block: DocumentBlock, context: ExtractionContext) -> list[ExtractedChange]: ...


class DefinitionListLayout:
    """<dl><dt><a href="/pkg/archive/tar/">archive/tar</a></dt><dd>...</dd></dl>"""

    name = "definition-list"

    def probe(self, block: DocumentBlock) -> bool:
        return block.is_("dl")

    def extract(self, block: DocumentBlock, context: ExtractionContext) -> list[ExtractedChange]:
        changes: list[ExtractedChange] = []
        for term in block.find_all("dt"):
            package = package_from_term(term, context.rules)
            if not package:
                continue

            description = self._describe(term, package, context.rules)
            if not description:
                logger.warning("  Go %s: empty description for %s (dt), skipped", context.version, package)
                continue

            changes.append(context.record(package, description))
            logger.debug("  Go %s: %s extracted (dl->dt)", context.version, package)
        return changes

    @staticmethod
    def _describe(term: DocumentBlock, package: str, rules: ExtractionRules) -> str:
        following = term.next_sibling()
        if following is not None and following.is_("dd") and following.text:
            return truncate_description(following.text, rules)
        return aggregate_description(term, package, rules=rules, best_effort=True)


class BracketParagraphLayout:
    """<p>[crypto/tls]: improved handshake performance.</p>"""

    name = "bracket-paragraph"

    def probe(self, block: DocumentBlock) -> bool:
        return block.is_("p") and BRACKETED.search(block.text) is not None

    def extract(self, block: DocumentBlock, context: ExtractionContext) -> list[ExtractedChange]:
        package = package_from_brackets(block.text, context.rules)
        if not package:
            return []
        logger.debug("  Go %s: %s extracted (p)", context.version, package)
        return [context.record(package, truncate_description(block.text, context.rules))]


class HeaderLayout:
    """<h4 id="fmt"><code>fmt</code></h4><p>...</p>"""

    name = "header"

    def probe(self, block: DocumentBlock) -> bool:
        return block.is_("h4")

    def extract(self, block: DocumentBlock, context: ExtractionContext) -> list[ExtractedChange]:
        package = package_from_header(block, context.rules)
        if not package:
            logger.debug("  Go %s: no package in h4 %r", context.version, block.text)
            return []

        description = aggregate_description(block, package, rules=context.rules)
        if not description:
            description = aggregate_description(block, package, rules=context.rules, best_effort=True)
        logger.debug("  Go %s: %s extracted (h4)", context.version, package)
        return [context.record(package, description)]


LAYOUTS: dict[str, LayoutStrategy] = {}


def register_layout(strategy: LayoutStrategy) -> LayoutStrategy:
    LAYOUTS[strategy.name] = strategy
    return strategy


register_layout(DefinitionListLayout())
register_layout(BracketParagraphLayout())
register_layout(HeaderLayout())

DEFAULT_LAYOUTS = ("definition-list", "header")

VERSION_LAYOUTS: dict[str, tuple[str, ...]] = {
    "1.22": ("definition-list", "bracket-paragraph", "header"),
}


def layouts_for_version(version: str) -> tuple[LayoutStrategy, ...]:
    """Strategies enabled for a version, in probe order."""
    release_line = ".".join(version.split(".")[:2])
    names = VERSION_LAYOUTS.get(release_line, DEFAULT_LAYOUTS)
    return tuple(LAYOUTS[name] for name in names)


def select_layout(block: DocumentBlock, strategies: tuple[LayoutStrategy, ...]) -> LayoutStrategy | None:
    for strategy in strategies:
        if strategy.probe(block):
            return strategy
    return None
