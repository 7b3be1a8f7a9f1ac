# Shared pytest fixtures
from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from radar_ingest.auth.consent import ConsentProvider
from radar_ingest.config.loader import RadarConfig, load_config
from radar_ingest.logging.init import reset_logging
from radar_ingest.services.progress import LoadingIndicator
from radar_ingest.sources.fetcher import FetchError, FetchResponse


class FakeFetcher:
    """In-memory stand-in for HttpFetcher.

    routes: url -> list of responses served in order (the last one repeats).
    A response is ``(status, body)`` or an exception instance to raise.
    """

    def __init__(self, routes: dict[str, list[object]] | None = None) -> None:
        self.routes: dict[str, list[object]] = {k: list(v) for k, v in (routes or {}).items()}
        self.calls: list[dict[str, object]] = []

    def add(self, url: str, *responses: object) -> None:
        self.routes.setdefault(url, []).extend(responses)

    async def fetch(self, url, *, params=None, headers=None) -> FetchResponse:
        self.calls.append({"url": url, "params": params, "headers": headers or {}})
        queue = self.routes.get(url)
        if not queue:
            return FetchResponse(url=url, status=404, text="Not Found")
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        status, body = item
        text = body if isinstance(body, str) else json.dumps(body)
        return FetchResponse(url=url, status=status, text=text)

    def urls(self) -> list[str]:
        return [c["url"] for c in self.calls]


class FakeConsentProvider(ConsentProvider):
    """Hands out tokens from a list, one per interactive consent."""

    def __init__(self, tokens: list[str | None] | None = None, silent_token: str | None = None,
                 email: str | None = "someone@example.com") -> None:
        self.tokens = list(tokens or [])
        self.silent_token = silent_token
        self._email = email
        self.interactive_calls: list[bool] = []  # force_account_selection per call
        self.silent_calls = 0

    async def acquire_token(self, interactive: bool, force_account_selection: bool = False) -> str | None:
        if not interactive:
            self.silent_calls += 1
            return self.silent_token
        self.interactive_calls.append(force_account_selection)
        return self.tokens.pop(0) if self.tokens else None

    @property
    def email(self) -> str | None:
        return self._email


@pytest.fixture()
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture()
def quiet_indicator() -> LoadingIndicator:
    return LoadingIndicator(enabled=False)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "DEFAULT_RADAR_SHEET_ID", "DEFAULT_RADAR_SHEET_URL", "DEFAULT_RADAR_SHEET_NAME",
        "DEFAULT_RADAR_TITLE", "COMPANY_NAME", "COMPANY_URL", "RINGS", "QUADRANTS",
        "FIXED_TABLE_ASSEMBLY", "API_KEY", "HTTP_TIMEOUT_SECONDS",
        "GOOGLE_ACCESS_TOKEN", "GOOGLE_ACCOUNT_EMAIL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """default_sheet:
  sheet_id: null
  sheet_name: null
  title: Acme Tech Radar
branding:
  company_name: Acme
  company_url: https://acme.example
graph:
  rings: [Adopt, Trial, Assess, Hold]
  quadrants: [Techniques, Platforms, Tools, Languages & Frameworks]
  fixed_tables_enabled: true
google:
  api_key: null
http:
  timeout_seconds: 10
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "radar.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def default_config() -> RadarConfig:
    return load_config(None, environ={})


CSV_HEADER = "name,ring,quadrant,isNew,description"


def make_csv(*rows: str, header: str = CSV_HEADER) -> str:
    return "\n".join([header, *rows]) + "\n"


@pytest.fixture()
def sample_csv() -> str:
    return make_csv(
        "Kotlin,Adopt,Languages & Frameworks,TRUE,A JVM language",
        "Terraform,Trial,Tools,false,Infrastructure as code",
        "Pair programming,Adopt,Techniques,true,Two people one keyboard",
        "Kubernetes,Assess,Platforms,False,Container orchestration",
    )


@pytest.fixture()
def fetch_error() -> FetchError:
    return FetchError("Connection error: boom", "https://example.com")


@pytest.fixture()
def consent_factory():
    return FakeConsentProvider


@pytest.fixture()
def csv_factory():
    return make_csv
