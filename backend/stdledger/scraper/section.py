"""
stdledger — Standard-library section locator.
"""

from __future__ import annotations

from stdledger.scraper.document import HEADING_KINDS, DocumentBlock
from stdledger.scraper.rules import DEFAULT_RULES, ExtractionRules
from stdledger.utils.logging import logger


def find_section_heading(root: DocumentBlock, phrase: str) -> DocumentBlock | None:
    phrase = phrase.lower()
    for heading in root.find_all(*HEADING_KINDS):
        if phrase in heading.text.lower():
            return heading
    return None


def locate_library_section(
    root: DocumentBlock,
    rules: ExtractionRules = DEFAULT_RULES,
) -> tuple[DocumentBlock, ...]:
    """
    Blocks that make up the standard-library section.

    The section starts after the first heading mentioning the section
    phrase and runs until the next heading of the same or a higher level.
    A document without such a heading has an empty section.
    """
    heading = find_section_heading(root, rules.section_phrase)
    if heading is None:
        logger.debug("  No %r heading in document", rules.section_phrase)
        return ()

    level = heading.heading_level
    blocks: list[DocumentBlock] = []
    for sibling in heading.next_siblings():
        sibling_level = sibling.heading_level
        if sibling_level is not None and sibling_level <= level:
            break
        blocks.append(sibling)
    return tuple(blocks)
