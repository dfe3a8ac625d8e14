"""
stdledger — Heuristic tables for the extraction engine.

All word lists the validator, the ownership predicates and the
aggregator consult are bundled in one immutable ExtractionRules value.
Callers pass a customised copy (dataclasses.replace) instead of
mutating module state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

DENYLIST = frozenset({
    "experimental",
    "minor",
    "changes",
    "library",
    "standard",
    "new",
    "performance",
    "improvements",
    "enhancements",
    "fixes",
    "security",
    "compatibility",
})

# Top-level segments of the standard library namespace.
STDLIB_NAMESPACES = frozenset({
    "archive", "bufio", "bytes", "cmp", "compress", "container", "context",
    "crypto", "database", "debug", "embed", "encoding", "errors", "expvar",
    "flag", "fmt", "go", "hash", "html", "image", "index", "io", "iter",
    "log", "maps", "math", "mime", "net", "os", "path", "plugin", "reflect",
    "regexp", "runtime", "slices", "sort", "strconv", "strings", "structs",
    "sync", "syscall", "testing", "text", "time", "unicode", "unique",
    "unsafe", "weak",
})

SPECIAL_TYPE_NAMES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "go/token": ("FileSet", "File", "Token", "Pos", "Position"),
    "go/ast": ("Node", "Expr", "Stmt", "Decl", "File", "Package", "Ident", "FuncDecl", "TypeSpec"),
    "go/types": ("Type", "Object", "Package", "Scope", "Config", "Checker", "Info", "Selection"),
})

# Headings that describe a feature rather than name a package.
HEADING_HINTS: Mapping[str, str] = MappingProxyType({
    "routing": "net/http",
})


@dataclass(frozen=True)
class ExtractionRules:
    denylist: frozenset[str] = DENYLIST
    namespaces: frozenset[str] = STDLIB_NAMESPACES
    special_types: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: SPECIAL_TYPE_NAMES)
    heading_hints: Mapping[str, str] = field(default_factory=lambda: HEADING_HINTS)
    section_phrase: str = "standard library"
    description_limit: int = 200
    ellipsis: str = "..."
    best_effort_threshold: int = 50


DEFAULT_RULES = ExtractionRules()
