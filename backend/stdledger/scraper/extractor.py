"""
stdledger — Change extraction over a parsed release document.

Walks the standard-library section and turns each h3 block into change
records:

  "Minor changes to the library" h3 -> every following block is handed
      to the first layout strategy enabled for the version that accepts it.
  any other h3 -> a single-package feature block; the package comes from
      the heading text and further packages are picked up from the prose.
"""

from __future__ import annotations

from stdledger.models.release import ExtractedChange
from stdledger.scraper.aggregate import aggregate_description
from stdledger.scraper.document import DocumentBlock
from stdledger.scraper.layouts import ExtractionContext, layouts_for_version, select_layout
from stdledger.scraper.packages import package_from_heading, scan_packages
from stdledger.scraper.rules import DEFAULT_RULES, ExtractionRules
from stdledger.scraper.section import locate_library_section
from stdledger.utils.logging import logger


def is_minor_changes_heading(heading: DocumentBlock) -> bool:
    lowered = heading.text.lower()
    return "minor" in lowered and "library" in lowered


def block_run(heading: DocumentBlock) -> list[DocumentBlock]:
    """Siblings after an h3 up to the next h1-h3."""
    run: list[DocumentBlock] = []
    for sibling in heading.next_siblings():
        if sibling.is_("h1", "h2", "h3"):
            break
        run.append(sibling)
    return run


def extract_minor_changes(blocks: list[DocumentBlock], context: ExtractionContext) -> list[ExtractedChange]:
    strategies = layouts_for_version(context.version)
    changes: list[ExtractedChange] = []
    for block in blocks:
        strategy = select_layout(block, strategies)
        if strategy is None:
            continue
        changes.extend(strategy.extract(block, context))
    return changes


def extract_feature_block(heading: DocumentBlock, context: ExtractionContext) -> list[ExtractedChange]:
    package = package_from_heading(heading.text, context.rules)
    description = aggregate_description(heading, package, rules=context.rules)

    changes: list[ExtractedChange] = []
    if package:
        changes.append(context.record(package, description))
        logger.debug("  Go %s: %s extracted (h3)", context.version, package)

    for extra in scan_packages(description, exclude=package, rules=context.rules):
        changes.append(context.record(extra, description))
        logger.debug("  Go %s: %s extracted from %s prose", context.version, extra, package or "h3")
    return changes


def extract_changes(
    root: DocumentBlock,
    version: str,
    *,
    source_url: str = "",
    locale: str = "ja",
    rules: ExtractionRules = DEFAULT_RULES,
) -> list[ExtractedChange]:
    """
    All change records in a release document, in document order.

    Pure over the parsed tree: the same tree always yields the same list.
    """
    context = ExtractionContext(version=version, source_url=source_url, locale=locale, rules=rules)
    section = locate_library_section(root, rules)
    if not section:
        logger.info("  Go %s: no standard library section", version)
        return []

    changes: list[ExtractedChange] = []
    headings = [block for block in section if block.is_("h3")]

    if not headings:
        changes.extend(extract_minor_changes(list(section), context))
    for heading in headings:
        if is_minor_changes_heading(heading):
            logger.debug("  Go %s: minor changes block %r", version, heading.text)
            changes.extend(extract_minor_changes(block_run(heading), context))
        else:
            changes.extend(extract_feature_block(heading, context))

    logger.info("  Go %s: %d changes extracted", version, len(changes))
    return changes
