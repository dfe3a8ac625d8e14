"""Unit tests for release date resolution and synthetic documents."""

from datetime import date

import pytest
from stdledger.models.release import ChangeType
from stdledger.scraper.dates import (
    DEFAULT_RELEASE_DATE,
    ReleaseDateResolver,
    add_months,
    find_release_date,
    minor_release_date,
)
from stdledger.scraper.fetcher import DocumentFetcher
from stdledger.scraper.synthetic import release_number, synthetic_release, synthetic_release_date


class TestHistoryPattern:
    def test_finds_major_release_date(self, history_html):
        assert find_release_date(history_html, "1.22") == date(2024, 2, 6)

    def test_requires_dot_zero_release(self):
        assert find_release_date("go1.22.1 (released 2024-03-05)", "1.22") is None

    def test_custom_prefix(self):
        assert find_release_date("v1.5.0 (released 2020-01-02)", "1.5", prefix="v") == date(2020, 1, 2)


class TestResolver:
    def test_static_table_without_fetcher(self):
        resolver = ReleaseDateResolver()
        assert resolver.resolve("1.18") == date(2022, 3, 15)
        assert resolver.resolve("1.25") == date(2025, 8, 1)

    def test_default_for_unknown_version(self):
        assert ReleaseDateResolver().resolve("0.1") == DEFAULT_RELEASE_DATE

    def test_history_page_wins_and_is_fetched_once(self, scraper_config, mock_client, history_html):
        calls = []
        client = mock_client({"/doc/devel/release": history_html})
        client.event_hooks["request"].append(lambda request: calls.append(request.url.path))
        resolver = ReleaseDateResolver(DocumentFetcher(scraper_config, client=client))

        assert resolver.resolve("1.21") == date(2023, 8, 8)
        assert resolver.resolve("1.22") == date(2024, 2, 6)
        assert resolver.resolve("1.19") == date(2022, 8, 2)
        assert calls == ["/doc/devel/release"]

    def test_history_fetch_waits_for_delay(self, scraper_config, mock_client, history_html):
        sleeps = []
        client = mock_client({"/doc/devel/release": history_html})
        resolver = ReleaseDateResolver(
            DocumentFetcher(scraper_config, client=client), delay=1.0, sleep=sleeps.append,
        )
        resolver.resolve("1.21")
        resolver.resolve("1.22")
        assert sleeps == [1.0]

    def test_offline_history_falls_back_to_table(self, scraper_config, mock_client):
        resolver = ReleaseDateResolver(DocumentFetcher(scraper_config, client=mock_client({})))
        assert resolver.resolve("1.23") == date(2024, 8, 13)


class TestMinorReleaseDates:
    def test_known_revision(self):
        assert minor_release_date("1.23.4") == date(2024, 12, 3)
        assert minor_release_date("1.24.6") == date(2025, 8, 6)

    def test_estimate_from_major(self):
        assert minor_release_date("1.22.3") == date(2024, 5, 6)

    def test_today_when_nothing_known(self):
        assert minor_release_date("2.0.1", today=date(2030, 1, 1)) == date(2030, 1, 1)

    def test_add_months_clamps_day(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)


class TestSyntheticRelease:
    def test_release_number(self):
        assert release_number("1.21") == 121
        assert release_number("9.99") == 999
        assert release_number("tip") == 118

    def test_baseline_date(self):
        assert synthetic_release_date("1.18") == date(2021, 8, 1)

    def test_far_future_version(self):
        assert synthetic_release_date("9.99") == date(2023, 10, 13)

    def test_document_shape(self):
        doc = synthetic_release("9.99", history_url="https://go.test/doc/devel/release")
        assert doc.synthetic
        assert doc.url == "https://go.test/doc/devel/release#go9.99"
        assert doc.release_date == date(2023, 10, 13)
        assert doc.packages() == ["fmt", "net/http", "crypto/tls"]
        assert all(c.change_type == ChangeType.MODIFIED for c in doc.changes)

    def test_known_change_type_variations(self):
        url = "https://go.test/doc/devel/release"
        assert [c.change_type for c in synthetic_release("1.25", url).changes] == [
            ChangeType.ADDED, ChangeType.MODIFIED, ChangeType.MODIFIED,
        ]
        tls = synthetic_release("1.21", url, locale="en").changes[2]
        assert tls.change_type == ChangeType.DEPRECATED
        assert tls.summary == "Deprecated."

    @pytest.mark.parametrize("version", ["1.21", "9.99", "nonsense"])
    def test_deterministic(self, version):
        url = "https://go.test/doc/devel/release"
        assert synthetic_release(version, url) == synthetic_release(version, url)
