"""
stdledger — Ownership heuristic.

Decides whether a trailing text fragment still describes the current
package or starts describing another one. Each rule is a standalone
predicate; OWNERSHIP_RULES and FOREIGN_RULES fix their evaluation order.

A fragment is foreign only when no ownership rule fires and at least
one foreign rule does.
"""

from __future__ import annotations

import re
from typing import Callable

from stdledger.scraper.packages import BACKQUOTED, is_valid_package_name
from stdledger.scraper.rules import DEFAULT_RULES, ExtractionRules

Rule = Callable[[str, str, ExtractionRules], bool]

_PATH = r"[a-z][a-z0-9]*(?:/[a-z][a-z0-9]*)*(?:/v[0-9]+)?"
_LEADING_IDENTIFIER = re.compile(r"^(" + _PATH + r")(\.[A-Za-z_]|:|\s)")
_LEADING_ARTICLE = re.compile(r"^(The|Package)\s+(" + _PATH + r")(\s+package\b)?")


def _last_segment(package: str) -> str:
    return package.rsplit("/", 1)[-1]


# ── ownership ────────────────────────────────────────────


def mentions_full_identifier(text: str, package: str, rules: ExtractionRules) -> bool:
    return package in text


def mentions_qualified_member(text: str, package: str, rules: ExtractionRules) -> bool:
    """sha1.New, http.Client, ..."""
    return _last_segment(package) + "." in text


def mentions_quoted_segment(text: str, package: str, rules: ExtractionRules) -> bool:
    return f"`{_last_segment(package)}`" in text


def mentions_exported_type(text: str, package: str, rules: ExtractionRules) -> bool:
    names = rules.special_types.get(package, ())
    return any(name in text for name in names)


OWNERSHIP_RULES: tuple[Rule, ...] = (
    mentions_full_identifier,
    mentions_qualified_member,
    mentions_quoted_segment,
    mentions_exported_type,
)


# ── foreign package introduction ─────────────────────────


def _other_package(candidate: str, package: str, rules: ExtractionRules) -> bool:
    return candidate != package and is_valid_package_name(candidate, rules)


def starts_with_other_identifier(text: str, package: str, rules: ExtractionRules) -> bool:
    """Leading path, dotted member or colon label, e.g. "crypto/rand: ..."."""
    match = _LEADING_IDENTIFIER.match(text)
    if not match:
        return False
    candidate, follower = match.group(1), match.group(2)
    if not _other_package(candidate, package, rules):
        return False
    return "/" in candidate or follower.startswith(".") or follower == ":"


def starts_with_package_phrase(text: str, package: str, rules: ExtractionRules) -> bool:
    """Leading "The os/exec package", "The net/http" or "Package maps"."""
    match = _LEADING_ARTICLE.match(text)
    if not match:
        return False
    lead, candidate, package_word = match.group(1), match.group(2), match.group(3)
    if not _other_package(candidate, package, rules):
        return False
    return lead == "Package" or bool(package_word) or "/" in candidate


def quotes_other_package(text: str, package: str, rules: ExtractionRules) -> bool:
    quoted = [q for q in BACKQUOTED.findall(text) if _other_package(q, package, rules)]
    if not quoted:
        return False
    for part in package.split("/"):
        if f"{part}." in text or f"`{part}`" in text:
            return False
    return True


FOREIGN_RULES: tuple[Rule, ...] = (
    starts_with_other_identifier,
    starts_with_package_phrase,
    quotes_other_package,
)


def owns(text: str, package: str, rules: ExtractionRules = DEFAULT_RULES) -> bool:
    if not package:
        return True
    return any(rule(text, package, rules) for rule in OWNERSHIP_RULES)


def introduces_other_package(text: str, package: str, rules: ExtractionRules = DEFAULT_RULES) -> bool:
    return any(rule(text, package, rules) for rule in FOREIGN_RULES)


def is_foreign(text: str, package: str, rules: ExtractionRules = DEFAULT_RULES) -> bool:
    """True when the fragment belongs to a package other than `package`."""
    if owns(text, package, rules):
        return False
    return introduces_other_package(text, package, rules)
