"""
stdledger — Configuration
Loads .env automatically, then reads all settings from environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from stdledger.errors import ConfigError

_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(_env_path)

SUPPORTED_LOCALES = ("ja", "en")

DEFAULT_TARGET_VERSIONS = ("1.18", "1.19", "1.20", "1.21", "1.22", "1.23", "1.24", "1.25")


@dataclass(frozen=True)
class ScraperConfig:
    """Where release documents live and how politely to fetch them."""
    docs_base_url: str
    document_url_template: str
    history_url: str
    version_prefix: str
    http_timeout: float
    fetch_delay: float
    summary_locale: str
    target_versions: tuple[str, ...]

    def document_url(self, version: str) -> str:
        return self.document_url_template.format(
            base=self.docs_base_url.rstrip("/"),
            prefix=self.version_prefix,
            version=version,
        )


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""
    host: str
    port: int
    db_path: str
    scraper: ScraperConfig


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(name, raw, "a number") from None
    if value < 0:
        raise ConfigError(name, raw, "a non-negative number")
    return value


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(name, raw, "an integer") from None


def _versions_env(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    if not raw.strip():
        return DEFAULT_TARGET_VERSIONS
    return tuple(v.strip() for v in raw.split(",") if v.strip())


def _locale_env(name: str, default: str) -> str:
    raw = os.getenv(name, default).strip().lower()
    if raw not in SUPPORTED_LOCALES:
        raise ConfigError(name, raw, "one of " + ", ".join(SUPPORTED_LOCALES))
    return raw


def _load_config() -> AppConfig:
    return AppConfig(
        host=os.getenv("STDLEDGER_HOST", "127.0.0.1"),
        port=_int_env("STDLEDGER_PORT", "8080"),
        db_path=os.getenv("STDLEDGER_DB_PATH", "data.db"),
        scraper=ScraperConfig(
            docs_base_url=os.getenv("STDLEDGER_DOCS_BASE_URL", "https://go.dev/doc"),
            document_url_template=os.getenv(
                "STDLEDGER_DOCUMENT_URL_TEMPLATE",
                "{base}/{prefix}{version}#library",
            ),
            history_url=os.getenv(
                "STDLEDGER_HISTORY_URL",
                "https://go.dev/doc/devel/release",
            ),
            version_prefix=os.getenv("STDLEDGER_VERSION_PREFIX", "go"),
            http_timeout=_float_env("STDLEDGER_HTTP_TIMEOUT", "30"),
            fetch_delay=_float_env("STDLEDGER_FETCH_DELAY", "1.0"),
            summary_locale=_locale_env("STDLEDGER_SUMMARY_LOCALE", "ja"),
            target_versions=_versions_env("STDLEDGER_TARGET_VERSIONS"),
        ),
    )


settings = _load_config()
