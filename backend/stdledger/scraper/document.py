"""
stdledger — Read-only view over a parsed release document.

The extraction engine only walks siblings and descendants; it never
edits the tree. DocumentBlock wraps a BeautifulSoup Tag and exposes
exactly that surface so heuristics can be tested against small
hand-written HTML fragments.
"""

from __future__ import annotations

import re
from typing import Iterator

from bs4 import BeautifulSoup, Tag

HEADING_KINDS = ("h1", "h2", "h3", "h4", "h5", "h6")

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def looks_like_html(data: str) -> bool:
    head = data[:2048].lstrip().lower()
    return head.startswith("<") and (
        "<html" in head or "<!doctype" in head or "<head" in head or "<body" in head
    )


class DocumentBlock:
    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DocumentBlock) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        preview = self.text[:40]
        return f"<DocumentBlock {self.kind} {preview!r}>"

    @property
    def kind(self) -> str:
        return (self._tag.name or "").lower()

    @property
    def text(self) -> str:
        return normalize_text(self._tag.get_text())

    @property
    def heading_level(self) -> int | None:
        if self.kind in HEADING_KINDS:
            return int(self.kind[1])
        return None

    @property
    def is_heading(self) -> bool:
        return self.heading_level is not None

    def is_(self, *kinds: str) -> bool:
        return self.kind in kinds

    def attr(self, name: str) -> str | None:
        value = self._tag.get(name)
        if isinstance(value, list):
            return " ".join(value) if value else None
        return value

    def next_sibling(self) -> DocumentBlock | None:
        sibling = self._tag.find_next_sibling()
        return DocumentBlock(sibling) if isinstance(sibling, Tag) else None

    def next_siblings(self) -> Iterator[DocumentBlock]:
        for sibling in self._tag.next_siblings:
            if isinstance(sibling, Tag):
                yield DocumentBlock(sibling)

    def children(self) -> list[DocumentBlock]:
        return [DocumentBlock(c) for c in self._tag.children if isinstance(c, Tag)]

    def find_all(self, *kinds: str) -> list[DocumentBlock]:
        return [DocumentBlock(t) for t in self._tag.find_all(list(kinds))]

    def find_first(self, *kinds: str) -> DocumentBlock | None:
        found = self._tag.find(list(kinds))
        return DocumentBlock(found) if isinstance(found, Tag) else None


def parse_document(html: str) -> DocumentBlock:
    """Parse HTML into the root DocumentBlock."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return DocumentBlock(soup)
