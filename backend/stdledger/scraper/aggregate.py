"""
stdledger — Description aggregation.

Collects the prose that follows a package marker (an h4, a dt, a
feature h3) until the next boundary, asking the ownership heuristic
whether each fragment still belongs to the current package.
"""

from __future__ import annotations

from typing import Iterator

from stdledger.scraper.document import DocumentBlock
from stdledger.scraper.ownership import is_foreign
from stdledger.scraper.rules import DEFAULT_RULES, ExtractionRules
from stdledger.utils.logging import logger

CONTENT_KINDS = ("p", "li", "dd", "blockquote")


def truncate_description(text: str, rules: ExtractionRules = DEFAULT_RULES) -> str:
    if len(text) <= rules.description_limit:
        return text
    return text[: rules.description_limit] + rules.ellipsis


def is_boundary(block: DocumentBlock) -> bool:
    return block.is_heading or block.is_("dt")


def fragments(block: DocumentBlock) -> Iterator[str]:
    """Text fragments a single sibling contributes, in document order."""
    if block.is_(*CONTENT_KINDS):
        texts = [block.text]
    elif block.is_("div"):
        paragraphs = block.find_all("p")
        texts = [p.text for p in paragraphs] if paragraphs else [block.text]
    elif block.is_("ul", "ol"):
        texts = [li.text for li in block.find_all("li")]
    elif block.is_("dl"):
        texts = [dd.text for dd in block.find_all("dd")]
    else:
        texts = []

    for text in texts:
        if text:
            yield text


def aggregate_description(
    start: DocumentBlock,
    package: str,
    *,
    rules: ExtractionRules = DEFAULT_RULES,
    best_effort: bool = False,
) -> str:
    """
    Join the fragments after `start` that describe `package`.

    Strict mode stops at the first fragment that introduces another
    package. Best-effort mode skips such fragments and stops once enough
    text has been gathered.
    """
    collected: list[str] = []
    length = 0

    for sibling in start.next_siblings():
        if is_boundary(sibling):
            break

        for text in fragments(sibling):
            if is_foreign(text, package, rules):
                if not best_effort:
                    logger.debug("  %s: stopped at foreign fragment %r", package or "-", text[:60])
                    return truncate_description(" ".join(collected), rules)
                continue

            collected.append(text)
            length += len(text) + (1 if len(collected) > 1 else 0)
            if best_effort and length > rules.best_effort_threshold:
                return truncate_description(" ".join(collected), rules)

    return truncate_description(" ".join(collected), rules)
