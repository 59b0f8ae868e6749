"""
Tests for the service layer: result cache, configuration, fetcher and the
cache → fetch → extract orchestration.

HTTP is faked with httpx.MockTransport; coroutines run through asyncio.run.
"""

import asyncio
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from blueprint_parser.cache import ResultCache, details_cache_key, search_cache_key
from blueprint_parser.config import AppConfig, get_app_config
from blueprint_parser.exceptions import FetchError, InvalidRequestError
from blueprint_parser.fetcher import BlueprintFetcher, build_details_url, build_search_url
from blueprint_parser.main import BlueprintService
from blueprint_parser.schemas import BlueprintSearchParams


LISTING_PAGE = (
    '<li class="o-blueprint-card factory" data-blueprint-id="7">'
    '<h2><a href="/blueprints/belt-loop">Belt Loop</a></h2>'
    '<p>by <a href="/users/1">Ada</a></p></li>'
)

DETAIL_PAGE = (
    '<textarea id="blueprint-data">BLUEPRINT:0,1</textarea>'
    '<ul class="t-blueprint__requirements">'
    '<li class="t-blueprint__requirements-component"><i data-tippy-content="Conveyor Belt"></i>'
    '<div class="t-blueprint__requirements-component-tally">Qty: 40</div></li>'
    '</ul>'
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _service(handler, cache=None) -> BlueprintService:
    return BlueprintService(
        config=AppConfig(cache_ttl_ms=60_000, base_url="https://dsp.test"),
        fetcher=BlueprintFetcher(client=_mock_client(handler)),
        cache=cache if cache is not None else ResultCache(),
    )


# --- ResultCache ---

def test_cache_hit_before_expiry_and_miss_after():
    clock = FakeClock()
    cache = ResultCache(clock=clock)

    cache.put("k", ["value"], ttl_ms=500)
    clock.now += 0.4
    assert cache.get("k") == ["value"]

    clock.now += 0.2
    assert cache.get("k") is None
    assert len(cache) == 0


def test_cache_delete_clear_and_exists():
    cache = ResultCache()
    cache.put("a", 1, ttl_ms=10_000)
    cache.put("b", 2, ttl_ms=10_000)

    assert cache.exists("a")
    assert cache.delete("a") is True
    assert cache.delete("a") is False
    assert not cache.exists("a")
    assert cache.clear() == 1
    assert cache.get("b") is None


def test_cache_keys_separate_distinct_queries():
    base = BlueprintSearchParams(search="mall", tags=["Iron Ingot"], author="ada")
    assert search_cache_key(base) != search_cache_key(base.model_copy(update={"author": ""}))
    assert search_cache_key(base) != search_cache_key(base.model_copy(update={"tags": []}))
    assert details_cache_key("/blueprints/x", True) != details_cache_key("/blueprints/x", False)


def test_cache_put_sweeps_expired_entries_once_full():
    clock = FakeClock()
    cache = ResultCache(clock=clock, sweep_threshold=3)

    for key in ("a", "b", "c"):
        cache.put(key, key, ttl_ms=100)
    clock.now += 1
    cache.put("d", "d", ttl_ms=100)

    assert len(cache) == 1
    assert cache.get("d") == "d"


def test_cache_evict_expired_keeps_live_entries():
    clock = FakeClock()
    cache = ResultCache(clock=clock)
    cache.put("short", 1, ttl_ms=100)
    cache.put("long", 2, ttl_ms=10_000)

    clock.now += 1
    assert cache.evict_expired() == 1
    assert cache.evict_expired() == 0
    assert len(cache) == 1
    assert cache.get("long") == 2


# --- Configuration ---

def test_config_defaults(monkeypatch):
    for name in ("CACHE_TTL_MS", "PORT", "BLUEPRINTS_BASE_URL", "REQUEST_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    config = get_app_config(load_env_file=False)
    assert config.cache_ttl_ms == 300_000
    assert config.port == 3000
    assert config.base_url == "https://www.dysonsphereblueprints.com"
    assert config.request_timeout == 30.0
    assert config.log_level == "INFO"


def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("CACHE_TTL_MS", "1000")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("BLUEPRINTS_BASE_URL", "http://localhost:9000/")
    monkeypatch.setenv("REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = get_app_config(load_env_file=False)
    assert config.cache_ttl_ms == 1000
    assert config.port == 8080
    assert config.base_url == "http://localhost:9000"
    assert config.request_timeout == 2.5
    assert config.log_level == "DEBUG"
    assert config.log_level_value == 10


def test_config_invalid_values_fall_back(monkeypatch):
    monkeypatch.setenv("CACHE_TTL_MS", "five minutes")
    monkeypatch.setenv("PORT", "-1")
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    config = get_app_config(load_env_file=False)
    assert config.cache_ttl_ms == 300_000
    assert config.port == 3000
    assert config.log_level == "INFO"


# --- URL builders ---

def test_build_search_url_sends_every_form_field():
    params = BlueprintSearchParams(search="mall", tags=["Iron Ingot", "Magnet"], author="ada")
    url = build_search_url(params, "https://dsp.test")
    parts = urlsplit(url)
    query = parse_qs(parts.query, keep_blank_values=True)

    assert parts.path == "/blueprints"
    assert query["search"] == ["mall"]
    assert query["tags"] == ["Iron Ingot Magnet"]
    assert query["author"] == ["ada"]
    assert query["color_similarity"] == ["80"]
    assert query["order"] == ["recent"]
    assert query["commit"] == ["Search"]
    assert query["max_structures"] == [""]


def test_build_details_url_accepts_site_paths_only():
    assert build_details_url("/blueprints/belt-loop", "https://dsp.test") == "https://dsp.test/blueprints/belt-loop"

    for bad in ("https://evil.test/x", "//evil.test/x", "blueprints/x"):
        with pytest.raises(InvalidRequestError):
            build_details_url(bad, "https://dsp.test")


# --- Fetcher ---

def test_fetch_returns_body_text():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "blueprint-parser" in request.headers["user-agent"]
        return httpx.Response(200, text="<html>ok</html>")

    fetcher = BlueprintFetcher(client=_mock_client(handler))
    assert asyncio.run(fetcher.fetch("https://dsp.test/blueprints")) == "<html>ok</html>"


def test_fetch_non_success_status_raises():
    fetcher = BlueprintFetcher(client=_mock_client(lambda request: httpx.Response(503)))

    with pytest.raises(FetchError) as excinfo:
        asyncio.run(fetcher.fetch("https://dsp.test/blueprints"))
    assert excinfo.value.status_code == 503
    assert excinfo.value.url == "https://dsp.test/blueprints"


def test_fetch_error_carries_request_context():
    error = FetchError("Upstream returned 404", url="https://dsp.test/x", status_code=404)
    assert error.url == "https://dsp.test/x"
    assert error.status_code == 404
    assert FetchError("timed out", "https://dsp.test/x").status_code is None


def test_fetch_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = BlueprintFetcher(client=_mock_client(handler))
    with pytest.raises(FetchError) as excinfo:
        asyncio.run(fetcher.fetch("https://dsp.test/blueprints"))
    assert excinfo.value.status_code is None


# --- BlueprintService ---

def test_search_fetches_once_then_serves_from_cache():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text=LISTING_PAGE)

    service = _service(handler)
    params = BlueprintSearchParams(search="belt")

    async def run():
        return await service.search(params), await service.search(params)

    first, second = asyncio.run(run())

    assert len(requests) == 1
    assert requests[0].url.host == "dsp.test"
    assert [b.id for b in first] == ["7"]
    assert first[0].author == "Ada"
    assert second == first


def test_empty_search_results_are_cached_too():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, text="<p>No blueprints</p>")

    service = _service(handler)

    async def run():
        await service.search(BlueprintSearchParams(search="nothing"))
        return await service.search(BlueprintSearchParams(search="nothing"))

    assert asyncio.run(run()) == []
    assert len(calls) == 1


def test_search_requires_text():
    service = _service(lambda request: httpx.Response(200, text=LISTING_PAGE))
    with pytest.raises(InvalidRequestError):
        asyncio.run(service.search(BlueprintSearchParams(search="")))


def test_search_propagates_fetch_error_and_caches_nothing():
    cache = ResultCache()
    service = _service(lambda request: httpx.Response(500), cache=cache)

    with pytest.raises(FetchError):
        asyncio.run(service.search(BlueprintSearchParams(search="belt")))
    assert len(cache) == 0


def test_fetch_details_caches_per_payload_flag():
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, text=DETAIL_PAGE)

    service = _service(handler)

    async def run():
        summary = await service.fetch_details("/blueprints/belt-loop")
        full = await service.fetch_details("/blueprints/belt-loop", include_blueprint=True)
        again = await service.fetch_details("/blueprints/belt-loop", include_blueprint=True)
        return summary, full, again

    summary, full, again = asyncio.run(run())

    assert paths == ["/blueprints/belt-loop", "/blueprints/belt-loop"]
    assert summary.blueprint == ""
    assert full.blueprint == "BLUEPRINT:0,1"
    assert again == full
    assert full.requirements[0].name == "Conveyor Belt"
    assert full.requirements[0].count == 40


def test_fetch_details_rejects_foreign_urls_without_fetching():
    calls = []
    service = _service(lambda request: calls.append(request) or httpx.Response(200))

    with pytest.raises(InvalidRequestError):
        asyncio.run(service.fetch_details("https://evil.test/blueprints/x"))
    with pytest.raises(InvalidRequestError):
        asyncio.run(service.fetch_details(""))
    assert calls == []


def test_fetch_details_surrounding_whitespace_shares_cache_entry():
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, text=DETAIL_PAGE)

    service = _service(handler)

    async def run():
        first = await service.fetch_details("  /blueprints/belt-loop\n")
        second = await service.fetch_details("/blueprints/belt-loop")
        return first, second

    first, second = asyncio.run(run())

    assert paths == ["/blueprints/belt-loop"]
    assert first == second
    with pytest.raises(InvalidRequestError):
        asyncio.run(service.fetch_details("   "))
