"""Unit tests for the SQLite release ledger."""

from datetime import date

import pytest
from stdledger.errors import ReleaseNotFoundError, StorageError
from stdledger.models.release import ChangeType, ExtractedChange, ReleaseDocument
from stdledger.storage.database import Database


def _doc(version, day, *changes):
    return ReleaseDocument(
        version=version,
        release_date=day,
        url=f"https://go.test/doc/go{version}",
        changes=tuple(
            ExtractedChange(package=p, change_type=t, description=d, summary="s")
            for p, t, d in changes
        ),
    )


@pytest.fixture
def seeded(db):
    db.persist(_doc("1.21", date(2023, 8, 8),
                    ("log/slog", ChangeType.ADDED, "New structured logging."),
                    ("net/http", ChangeType.MODIFIED, "Faster server.")))
    db.persist(_doc("1.22", date(2024, 2, 6),
                    ("net/http", ChangeType.ADDED, "Routing patterns."),
                    ("math/rand/v2", ChangeType.ADDED, "New package.")))
    return db


class TestWrites:
    def test_save_release_upserts(self, db):
        first = db.save_release("1.21", date(2023, 8, 8), "a")
        second = db.save_release("1.21", date(2023, 8, 9), "b")
        assert first == second
        release = db.release("1.21")
        assert release.release_date == date(2023, 8, 9)
        assert release.url == "b"

    def test_save_change(self, db):
        release_id = db.save_release("1.21", date(2023, 8, 8))
        db.save_change(release_id, ExtractedChange(package="fmt", description="x"))
        assert db.packages_in_version("1.21") == ["fmt"]

    def test_persist_replaces_previous_changes(self, seeded):
        seeded.persist(_doc("1.21", date(2023, 8, 8), ("os", ChangeType.MODIFIED, "Only this.")))
        assert seeded.packages_in_version("1.21") == ["os"]
        assert seeded.packages_in_version("1.22") == ["math/rand/v2", "net/http"]

    def test_clear(self, seeded):
        seeded.clear()
        assert seeded.all_releases() == []
        assert seeded.unique_packages() == []

    def test_closed_connection_raises_storage_error(self):
        database = Database(":memory:")
        database.close()
        with pytest.raises(StorageError):
            database.all_releases()


class TestReads:
    def test_releases_ordered_by_date(self, seeded):
        assert [r.version for r in seeded.all_releases()] == ["1.21", "1.22"]

    def test_unknown_release(self, seeded):
        with pytest.raises(ReleaseNotFoundError):
            seeded.release("0.1")
        assert seeded.release_id("0.1") is None

    def test_package_changes(self, seeded):
        changes = seeded.package_changes(seeded.release_id("1.22"))
        assert [c.package for c in changes] == ["math/rand/v2", "net/http"]
        assert changes[1].change_type == "Added"

    def test_package_evolution(self, seeded):
        timeline = seeded.package_evolution("net/http")
        assert [(e.version, e.change_type) for e in timeline] == [("1.21", "Modified"), ("1.22", "Added")]

    def test_unique_packages(self, seeded):
        assert seeded.unique_packages() == ["log/slog", "math/rand/v2", "net/http"]

    def test_visualization_data(self, seeded):
        data = seeded.visualization_data()
        assert data["packages"] == ["log/slog", "math/rand/v2", "net/http"]
        assert data["releases"][0]["release_date"] == "2023-08-08"
        assert len(data["package_evolution"]["net/http"]) == 2

    def test_stats(self, seeded):
        stats = seeded.stats()
        assert stats.releases == 2
        assert stats.packages == 3
        assert stats.changes == 4
        assert stats.by_change_type == {"Added": 3, "Modified": 1}
        assert stats.changes_per_release == {"1.21": 2, "1.22": 2}

    def test_load_documents_round_trips_changes(self, seeded):
        documents = seeded.load_documents()
        assert [d.version for d in documents] == ["1.21", "1.22"]
        assert documents[1].changes[0].change_type == ChangeType.ADDED
