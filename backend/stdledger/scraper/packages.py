"""
stdledger — Package identifier validation and discovery.

A package identifier is one or more lowercase alphanumeric segments
joined by "/", optionally ending in a /vN major-version suffix, and
never one of the generic words headings like to use ("new",
"experimental", ...).
"""

from __future__ import annotations

import re

from stdledger.errors import PackageNameRejected
from stdledger.models.release import PACKAGE_MAX_LENGTH, PACKAGE_PATTERN
from stdledger.scraper.document import DocumentBlock
from stdledger.scraper.rules import DEFAULT_RULES, ExtractionRules
from stdledger.utils.logging import logger

_PATH = r"[a-z][a-z0-9]*(?:/[a-z][a-z0-9]*)*(?:/v[0-9]+)?"

BACKQUOTED = re.compile(r"`([^`]+)`")
BRACKETED = re.compile(r"\[(" + _PATH + r")\]")
HEADING_PACKAGE = re.compile(r"(" + _PATH + r")\s+package")
SLASH_PATH = re.compile(r"\b([a-z][a-z0-9]*(?:/[a-z][a-z0-9]*)+(?:/v[0-9]+)?)\b")


def is_valid_package_name(text: str, rules: ExtractionRules = DEFAULT_RULES) -> bool:
    if not text or len(text) > PACKAGE_MAX_LENGTH:
        return False
    if text.lower() in rules.denylist:
        return False
    return PACKAGE_PATTERN.match(text) is not None


def validate_package_name(candidate: str, stage: str, rules: ExtractionRules = DEFAULT_RULES) -> str:
    if not is_valid_package_name(candidate, rules):
        raise PackageNameRejected(candidate, stage)
    return candidate


def _accept(candidate: str, stage: str, rules: ExtractionRules) -> str:
    try:
        return validate_package_name(candidate, stage, rules)
    except PackageNameRejected as exc:
        if candidate:
            logger.debug("  %s", exc.message)
        return ""


def package_from_text(text: str, rules: ExtractionRules = DEFAULT_RULES) -> str:
    """Back-quoted identifier first, then the whole text."""
    text = text.strip()
    match = BACKQUOTED.search(text)
    if match and is_valid_package_name(match.group(1), rules):
        return match.group(1)
    return _accept(text, "text", rules)


def package_from_href(href: str, rules: ExtractionRules = DEFAULT_RULES) -> str:
    """Map "/pkg/archive/tar/" and "#archive/tar" to "archive/tar"."""
    path = href.strip()
    if path.startswith("/pkg/"):
        path = path[len("/pkg/"):]
    path = path.removeprefix("#").removesuffix("/")
    return _accept(path, "href", rules)


def package_from_brackets(text: str, rules: ExtractionRules = DEFAULT_RULES) -> str:
    match = BRACKETED.search(text)
    if match:
        return _accept(match.group(1), "bracket", rules)
    return ""


def package_from_heading(text: str, rules: ExtractionRules = DEFAULT_RULES) -> str:
    """
    Name the package a feature heading is about.

    "New math/rand/v2 package" -> "math/rand/v2"
    "New experimental encoding/json/v2 package" -> "encoding/json/v2"
    "Enhanced routing patterns" -> "net/http" (via heading hints)
    """
    lowered = text.lower()
    if "new" in lowered and "package" in lowered:
        match = HEADING_PACKAGE.search(lowered)
        if match and is_valid_package_name(match.group(1), rules):
            return match.group(1)

        words = text.split()
        for i, word in enumerate(words):
            if word.lower() != "new":
                continue
            for candidate in words[i + 1:]:
                if candidate.lower() == "package":
                    break
                if candidate.lower() == "experimental":
                    continue
                if is_valid_package_name(candidate, rules):
                    return candidate

    for hint, package in rules.heading_hints.items():
        if hint in lowered:
            return package

    logger.debug("  No package named by heading %r", text)
    return ""


def package_from_term(term: DocumentBlock, rules: ExtractionRules = DEFAULT_RULES) -> str:
    """Link target, then link text, then inline code, then the term text."""
    for link in term.find_all("a"):
        href = link.attr("href")
        if href:
            name = package_from_href(href, rules)
            if name:
                return name
        name = _accept(link.text, "link text", rules)
        if name:
            return name

    for code in term.find_all("code"):
        name = _accept(code.text, "code", rules)
        if name:
            return name

    return package_from_text(term.text, rules)


def package_from_header(header: DocumentBlock, rules: ExtractionRules = DEFAULT_RULES) -> str:
    """Inline code, then link text, then the heading text itself."""
    for code in header.find_all("code"):
        name = _accept(code.text, "code", rules)
        if name:
            return name

    for link in header.find_all("a"):
        name = _accept(link.text, "link text", rules)
        if name:
            return name

    return package_from_text(header.text, rules)


def is_known_namespace(package: str, rules: ExtractionRules = DEFAULT_RULES) -> bool:
    return package.split("/", 1)[0] in rules.namespaces


def scan_packages(description: str, exclude: str = "", rules: ExtractionRules = DEFAULT_RULES) -> list[str]:
    """Standard-library slash paths mentioned in a description, first-seen order."""
    found: list[str] = []
    for match in SLASH_PATH.finditer(description):
        name = match.group(1)
        if name == exclude or name in found:
            continue
        if is_valid_package_name(name, rules) and is_known_namespace(name, rules):
            found.append(name)
    return found
