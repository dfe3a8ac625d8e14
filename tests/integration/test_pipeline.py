"""Integration tests: harvest, import, base entries, analysis and the CLI."""

import json

import pytest
from stdledger import cli
from stdledger.analyzer import StdLibAnalyzer
from stdledger.importer.base_versions import create_base_versions
from stdledger.importer.json_importer import JSONImporter
from stdledger.scraper.fetcher import DocumentFetcher
from stdledger.scraper.release import ReleaseScraper
from stdledger.storage.database import Database

REVISIONS = [
    {
        "version": "go1.21.1",
        "changes": [
            {"package": "net/http", "change": "fix: close idle connections on shutdown", "links": []},
            {"package": "(none)", "change": "toolchain", "links": []},
        ],
    },
]


@pytest.fixture
def harvested(db, scraper_config, mock_client, definition_list_html, bracket_html, history_html):
    client = mock_client({
        "/doc/go1.21": definition_list_html,
        "/doc/go1.22": bracket_html,
        "/doc/devel/release": history_html,
    })
    scraper = ReleaseScraper(
        config=scraper_config,
        fetcher=DocumentFetcher(scraper_config, client=client),
        sleep=lambda _seconds: None,
    )
    documents, report = scraper.harvest(["1.21", "1.22", "1.30"])
    for document in documents:
        db.persist(document)
    return db, report


class TestLedgerPipeline:
    def test_harvest_persists_every_version(self, harvested):
        db, report = harvested
        assert sorted(r.version for r in db.all_releases()) == ["1.21", "1.22", "1.30"]
        assert report.synthetic_versions == ["1.30"]
        assert db.packages_in_version("1.30") == ["crypto/tls", "fmt", "net/http"]

    def test_import_then_base_entries(self, harvested, tmp_path):
        db, _ = harvested
        path = tmp_path / "revisions.json"
        path.write_text(json.dumps(REVISIONS), encoding="utf-8")
        JSONImporter(db, history_url="https://go.test/doc/devel/release").import_file(path)

        created = create_base_versions(db)

        assert created == {"1.21": ["net/http"]}
        timeline = [e for e in db.package_evolution("net/http") if e.version != "1.30"]
        assert [(e.version, e.change_type) for e in timeline] == [
            ("1.21", "Base"),
            ("1.21.1", "Bug Fix"),
            ("1.22", "Added"),
        ]

    def test_analyzer_over_stored_documents(self, harvested):
        db, report = harvested
        analysis = StdLibAnalyzer()
        result = analysis.analyze(db.load_documents())
        assert [v.version for v in result.versions if v.version != "1.30"] == ["1.21", "1.22"]
        assert analysis.stats()["total_changes"] == report.total_changes


class TestCli:
    def test_import_and_report(self, tmp_path, capsys):
        ledger = tmp_path / "ledger.db"
        path = tmp_path / "revisions.json"
        path.write_text(json.dumps(REVISIONS), encoding="utf-8")

        assert cli.main(["import-json", str(path), "--db", str(ledger)]) == 0
        assert "Imported 1 revisions" in capsys.readouterr().out

        assert cli.main(["report", "--db", str(ledger)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Standard Library Analysis Report")
        assert "Bug Fix: 1" in out

        assert cli.main(["report", "--search", "http", "--db", str(ledger)]) == 0
        assert capsys.readouterr().out == "net/http: 1 changes\n"

    def test_create_base_with_missing_major(self, tmp_path, capsys):
        ledger = tmp_path / "ledger.db"
        path = tmp_path / "revisions.json"
        path.write_text(json.dumps(REVISIONS), encoding="utf-8")
        cli.main(["import-json", str(path), "--db", str(ledger)])
        capsys.readouterr()

        assert cli.main(["create-base", "--db", str(ledger)]) == 0
        assert capsys.readouterr().out == ""
        with Database(ledger) as db:
            assert db.unique_packages() == ["net/http"]

    def test_error_is_reported_as_json(self, tmp_path, capsys):
        code = cli.main(["import-json", str(tmp_path / "missing.json"), "--db", str(tmp_path / "l.db")])
        assert code == 1
        err = capsys.readouterr().err
        payload = json.loads(err[err.index("{\n"):])
        assert payload["error_code"] == "IMPORT_FILE_UNREADABLE"

    def test_unknown_change_type_is_rejected(self, tmp_path):
        with pytest.raises(SystemExit):
            cli.main(["report", "--change-type", "Sideways", "--db", str(tmp_path / "l.db")])
