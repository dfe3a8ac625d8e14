"""Unit tests for the ownership heuristic."""

import pytest
from stdledger.scraper.ownership import (
    FOREIGN_RULES,
    OWNERSHIP_RULES,
    is_foreign,
    mentions_exported_type,
    mentions_full_identifier,
    mentions_qualified_member,
    mentions_quoted_segment,
    owns,
    quotes_other_package,
    starts_with_other_identifier,
    starts_with_package_phrase,
)
from stdledger.scraper.rules import DEFAULT_RULES


class TestOwnershipRules:
    def test_rule_order(self):
        assert OWNERSHIP_RULES[0] is mentions_full_identifier
        assert len(FOREIGN_RULES) == 3

    def test_full_identifier(self):
        assert mentions_full_identifier("The net/http server", "net/http", DEFAULT_RULES)

    def test_qualified_member(self):
        assert mentions_qualified_member("New http.Client option", "net/http", DEFAULT_RULES)

    def test_quoted_segment(self):
        assert mentions_quoted_segment("The `http` package", "net/http", DEFAULT_RULES)

    def test_exported_type_substring(self):
        assert mentions_exported_type("FileSet.Lookup is new", "go/token", DEFAULT_RULES)
        assert mentions_exported_type("FileSetter is new", "go/token", DEFAULT_RULES)
        assert not mentions_exported_type("Lookup is new", "go/token", DEFAULT_RULES)

    def test_empty_package_owns_everything(self):
        assert owns("The os/exec package changed", "")


class TestForeignRules:
    def test_leading_slash_path(self):
        assert starts_with_other_identifier("crypto/rand: Read never fails", "fmt", DEFAULT_RULES)

    def test_leading_dotted_member(self):
        assert starts_with_other_identifier("slices.Sort is faster", "fmt", DEFAULT_RULES)

    def test_plain_lowercase_word_is_not_a_package(self):
        assert not starts_with_other_identifier("now supports X", "fmt", DEFAULT_RULES)

    def test_package_phrase(self):
        assert starts_with_package_phrase("The pkg2 package adds Bar.", "pkg1", DEFAULT_RULES)
        assert starts_with_package_phrase("Package maps gains Keys.", "fmt", DEFAULT_RULES)
        assert starts_with_package_phrase("The os/exec Cmd type", "fmt", DEFAULT_RULES)

    def test_article_with_denylisted_word(self):
        assert not starts_with_package_phrase("The new function Foo", "fmt", DEFAULT_RULES)

    def test_quoted_other_package(self):
        assert quotes_other_package("See `errors` for details", "fmt", DEFAULT_RULES)
        assert not quotes_other_package("See `errors` and fmt.Errorf", "fmt", DEFAULT_RULES)


class TestBoundary:
    def test_owned_fragment_then_foreign_fragment(self):
        assert not is_foreign("Adds pkg1.Foo for parsing.", "pkg1")
        assert is_foreign("The pkg2 package gains Bar.", "pkg1")

    @pytest.mark.parametrize("text", [
        "The net/http package now ...",
        "net/http: Server honors ...",
    ])
    def test_ownership_wins_over_foreign_introduction(self, text):
        assert not is_foreign(text, "net/http")
