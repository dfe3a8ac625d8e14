"""Shared test configuration and fixtures for the stdledger test suite."""

import sys
from pathlib import Path

import pytest

# Add backend to Python path so imports work
backend_dir = str(Path(__file__).parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)


DEFINITION_LIST_RELEASE = """
<!DOCTYPE html>
<html><head><title>Go 1.21 Release Notes</title></head>
<body>
<h1>Go 1.21 Release Notes</h1>
<h2 id="language">Changes to the language</h2>
<p>Nothing about packages here.</p>
<h2 id="library">Standard library</h2>
<h3 id="slog">New log/slog package</h3>
<p>The new log/slog package provides structured logging with levels.</p>
<p>It integrates with log/slog handlers and the testing/slogtest package.</p>
<h3 id="minor_library_changes">Minor changes to the library</h3>
<dl id="archive/tar">
  <dt><a href="/pkg/archive/tar/">archive/tar</a></dt>
  <dd><p>Reader now supports X.</p></dd>
</dl>
<dl id="crypto/sha256">
  <dt><code>crypto/sha256</code></dt>
  <dd><p>SHA-224 and SHA-256 operations now use native instructions, improving performance.</p></dd>
</dl>
<dl id="bogus">
  <dt>New</dt>
  <dd><p>Not a package.</p></dd>
</dl>
<h2 id="ports">Ports</h2>
<h3 id="minor_library_changes_2">Minor changes to the library</h3>
<dl><dt><a href="/pkg/os/">os</a></dt><dd><p>Outside the section.</p></dd></dl>
</body></html>
"""

BRACKET_RELEASE = """
<!DOCTYPE html>
<html><body>
<h2 id="library">Standard library</h2>
<h3 id="minor">Minor changes to the library</h3>
<p>[crypto/tls]: improved handshake performance.</p>
<p>[net/http]: The new Request.PathValue method returns path wildcards.</p>
<p>General prose without any bracketed identifier.</p>
<dl><dt><a href="/pkg/slices/">slices</a></dt><dd><p>The new function Concat concatenates slices.</p></dd></dl>
</body></html>
"""

HEADER_RELEASE = """
<!DOCTYPE html>
<html><body>
<h2>Core library</h2>
<h2 id="library">Standard library</h2>
<h3 id="minor">Minor changes to the library</h3>
<h4 id="crypto/sha1"><code>crypto/sha1</code></h4>
<p>The sha1.Sum function now uses SHA-NI instructions.</p>
<p>The crypto/sha256 package is also faster.</p>
<h4 id="fmt"><a href="/pkg/fmt/">fmt</a></h4>
<ul><li>Errorf supports multiple %w verbs.</li></ul>
<h4 id="go/ast">go/ast</h4>
<p>The new File.GoVersion field records the minimum Go version.</p>
<h4 id="routing">Enhanced routing patterns</h4>
<p>Nothing here.</p>
</body></html>
"""

DENYLIST_RELEASE = """
<!DOCTYPE html>
<html><body>
<h2 id="library">Standard library</h2>
<h3 id="new">New experimental package</h3>
<p>This release ships an experimental feature.</p>
</body></html>
"""

HISTORY_PAGE = """
<!DOCTYPE html>
<html><body>
<h2 id="go1.21.0">go1.21.0 (released 2023-08-08)</h2>
<p>go1.22.0 (released 2024-02-06) is a major release of Go.</p>
</body></html>
"""


@pytest.fixture(scope="session")
def project_root():
    return Path(__file__).parent.parent


@pytest.fixture
def definition_list_html():
    return DEFINITION_LIST_RELEASE


@pytest.fixture
def bracket_html():
    return BRACKET_RELEASE


@pytest.fixture
def header_html():
    return HEADER_RELEASE


@pytest.fixture
def denylist_html():
    return DENYLIST_RELEASE


@pytest.fixture
def history_html():
    return HISTORY_PAGE


@pytest.fixture
def db():
    from stdledger.storage.database import Database

    database = Database(":memory:")
    yield database
    database.close()


@pytest.fixture
def scraper_config():
    from stdledger.core.config import ScraperConfig

    return ScraperConfig(
        docs_base_url="https://go.test/doc",
        document_url_template="{base}/{prefix}{version}#library",
        history_url="https://go.test/doc/devel/release",
        version_prefix="go",
        http_timeout=5.0,
        fetch_delay=1.0,
        summary_locale="ja",
        target_versions=("1.21", "1.22"),
    )


@pytest.fixture
def mock_client():
    """Build an httpx.Client whose responses come from a {path: html} map; other paths 404."""
    import httpx

    clients = []

    def factory(pages: dict[str, str]):
        def handler(request: httpx.Request) -> httpx.Response:
            body = pages.get(request.url.path)
            if body is None:
                return httpx.Response(404, text="<html><body>not found</body></html>")
            return httpx.Response(200, text=body, headers={"Content-Type": "text/html"})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
