"""
stdledger — Change classification and canned summaries.

Two classifiers exist on purpose: release documents and minor-revision
notes use different vocabularies, so each source keeps its own rules.
Summaries are one sentence chosen by change type and keyword presence.
"""

from __future__ import annotations

import re

from stdledger.models.release import ChangeType

_SCRAPED_RULES: tuple[tuple[re.Pattern[str], ChangeType], ...] = (
    (re.compile(r"\b(?:new|added)\b"), ChangeType.ADDED),
    (re.compile(r"\bdeprecated\b"), ChangeType.DEPRECATED),
    (re.compile(r"\b(?:removed|deleted)\b"), ChangeType.REMOVED),
)

_REVISION_RULES: tuple[tuple[tuple[str, ...], ChangeType], ...] = (
    (("security fix", "cve-"), ChangeType.SECURITY_FIX),
    (("fix:", "bug fix"), ChangeType.BUG_FIX),
    (("test fixes", "stability improvements"), ChangeType.TEST_FIX),
    (("compatibility:",), ChangeType.COMPATIBILITY),
    (("hardening:",), ChangeType.SECURITY_ENHANCEMENT),
)


def classify_scraped(description: str) -> ChangeType:
    """Change type of a description taken from a release document."""
    lowered = description.lower()
    for pattern, change_type in _SCRAPED_RULES:
        if pattern.search(lowered):
            return change_type
    return ChangeType.MODIFIED


def classify_revision_note(description: str) -> ChangeType:
    """Change type of a minor-revision note ("crypto/x509: fix: ...")."""
    lowered = description.lower()
    for needles, change_type in _REVISION_RULES:
        if any(n in lowered for n in needles):
            return change_type
    return ChangeType.MODIFIED


# ── summaries ────────────────────────────────────────────
# Each entry: (keywords, sentence). First matching entry wins; an entry
# with no keywords is the default for that change type.

SummaryTable = dict[ChangeType, tuple[tuple[tuple[str, ...], str], ...]]

_SUMMARIES_JA: SummaryTable = {
    ChangeType.ADDED: (
        (("new method", "added method"), "新しいメソッドが追加されました"),
        (("function",), "新しい関数が追加されました"),
        (("type",), "新しい型が追加されました"),
        (("field",), "新しいフィールドが追加されました"),
        (("constant", "const"), "新しい定数が追加されました"),
        (("variable", "var"), "新しい変数が追加されました"),
        ((), "新機能が追加されました"),
    ),
    ChangeType.MODIFIED: (
        (("performance",), "パフォーマンスが改善されました"),
        (("behavior", "behaviour"), "動作が変更されました"),
        (("error",), "エラー処理が改善されました"),
        (("documentation", "doc"), "ドキュメントが更新されました"),
        (("fix",), "バグが修正されました"),
        (("support",), "サポートが拡張されました"),
        ((), "機能が改善されました"),
    ),
    ChangeType.DEPRECATED: (
        (("method",), "メソッドが非推奨になりました"),
        (("function",), "関数が非推奨になりました"),
        ((), "非推奨となりました"),
    ),
    ChangeType.REMOVED: (
        (("method",), "メソッドが削除されました"),
        (("function",), "関数が削除されました"),
        ((), "機能が削除されました"),
    ),
    ChangeType.SECURITY_FIX: (((), "セキュリティ修正が行われました"),),
    ChangeType.BUG_FIX: (((), "バグが修正されました"),),
    ChangeType.TEST_FIX: (((), "テストの修正・安定化が行われました"),),
    ChangeType.COMPATIBILITY: (((), "互換性の改善が行われました"),),
    ChangeType.SECURITY_ENHANCEMENT: (((), "セキュリティ強化が行われました"),),
    ChangeType.BASE: (((), "ベースパッケージエントリ（マイナーバージョンで導入）"),),
}

_SUMMARIES_EN: SummaryTable = {
    ChangeType.ADDED: (
        (("new method", "added method"), "A new method was added."),
        (("function",), "A new function was added."),
        (("type",), "A new type was added."),
        (("field",), "A new field was added."),
        (("constant", "const"), "A new constant was added."),
        (("variable", "var"), "A new variable was added."),
        ((), "New functionality was added."),
    ),
    ChangeType.MODIFIED: (
        (("performance",), "Performance was improved."),
        (("behavior", "behaviour"), "Behavior was changed."),
        (("error",), "Error handling was improved."),
        (("documentation", "doc"), "Documentation was updated."),
        (("fix",), "A bug was fixed."),
        (("support",), "Support was extended."),
        ((), "Functionality was improved."),
    ),
    ChangeType.DEPRECATED: (
        (("method",), "A method was deprecated."),
        (("function",), "A function was deprecated."),
        ((), "Deprecated."),
    ),
    ChangeType.REMOVED: (
        (("method",), "A method was removed."),
        (("function",), "A function was removed."),
        ((), "Functionality was removed."),
    ),
    ChangeType.SECURITY_FIX: (((), "A security issue was fixed."),),
    ChangeType.BUG_FIX: (((), "A bug was fixed."),),
    ChangeType.TEST_FIX: (((), "Tests were fixed and stabilized."),),
    ChangeType.COMPATIBILITY: (((), "Compatibility was improved."),),
    ChangeType.SECURITY_ENHANCEMENT: (((), "Security was hardened."),),
    ChangeType.BASE: (((), "Base package entry (introduced in a minor revision)."),),
}

SUMMARY_TABLES: dict[str, SummaryTable] = {
    "ja": _SUMMARIES_JA,
    "en": _SUMMARIES_EN,
}


def summarize(description: str, change_type: ChangeType, locale: str = "ja") -> str:
    """One canned sentence for a change; defined for every change type."""
    try:
        table = SUMMARY_TABLES[locale]
    except KeyError:
        raise ValueError(f"unsupported summary locale: {locale!r}") from None

    lowered = description.lower()
    entries = table[ChangeType(change_type)]
    for keywords, sentence in entries:
        if not keywords or any(k in lowered for k in keywords):
            return sentence
    return entries[-1][1]
