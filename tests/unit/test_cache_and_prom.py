# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest
from prometheus_client import CollectorRegistry, Counter, Histogram, Summary

from reqcompose.core import create
from reqcompose.errors import CacheStoreError, ConfigurationError, TransportError
from reqcompose.http.adapters import StubTransport
from reqcompose.http.models import HttpRequest, HttpResponse
from reqcompose.registry import build_from_config
from reqcompose.stores import MemoryCacheStore
from reqcompose.wrappers import CacheOptions, MetricKind, PromOptions, crc32_hex, infer_metric_kind, serialize_descriptor

OK = HttpResponse(ok=True, status_code=200, text="ok")


class RecordingStore:
    def __init__(self):
        self.data = {}
        self.writes = []

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, options=None):
        self.writes.append((key, value, options))
        self.data[key] = value


def record(request, *names):
    events = []
    for name in names:
        request.emitter.on(name, events.append)
    return events


@pytest.mark.asyncio
async def test_cache_miss_then_hit():
    stub = StubTransport({"http://x": OK})
    store = RecordingStore()
    request = create(stub).wrap("cache", {"cache": store, "cache_options": {"ttl": 60}}).wrap("event")
    events = record(request, "cacheRequest", "cacheMiss")

    assert await request("http://x") is OK
    assert [e.name for e in events] == ["cacheRequest", "cacheMiss"]
    assert stub.calls == 1
    assert store.writes == [("http://x", OK, {"ttl": 60})]

    events.clear()
    assert await request("http://x") is OK
    assert [e.name for e in events] == ["cacheRequest"]
    assert stub.calls == 1
    assert len(store.writes) == 1


@pytest.mark.asyncio
async def test_cache_hits_equal_requests_minus_misses():
    stub = StubTransport({"http://a": OK, "http://b": OK})
    request = create(stub).wrap("cache", {"cache": MemoryCacheStore()}).wrap("event")
    events = record(request, "cacheRequest", "cacheMiss")

    for url in ["http://a", "http://b", "http://a", "http://a", "http://b"]:
        await request(url)

    requests = sum(1 for e in events if e.name == "cacheRequest")
    misses = sum(1 for e in events if e.name == "cacheMiss")
    assert requests - misses == 3
    assert stub.calls == 2


@pytest.mark.asyncio
async def test_cache_does_not_store_failures():
    boom = TransportError("boom", status_code=500)
    store = RecordingStore()
    request = create(StubTransport({"http://x": [boom, OK]})).wrap("cache", {"cache": store})

    with pytest.raises(TransportError) as excinfo:
        await request("http://x")
    assert excinfo.value is boom
    assert store.writes == []
    assert await request("http://x") is OK
    assert len(store.writes) == 1


@pytest.mark.asyncio
async def test_cache_store_errors_propagate():
    class BrokenStore(RecordingStore):
        async def get(self, key):
            raise CacheStoreError("store offline")

    stub = StubTransport({"http://x": OK})
    request = create(stub).wrap("cache", {"cache": BrokenStore()})
    with pytest.raises(CacheStoreError):
        await request("http://x")
    assert stub.calls == 0


@pytest.mark.asyncio
async def test_cache_store_write_errors_propagate_after_fetch():
    class ReadOnlyStore(RecordingStore):
        async def set(self, key, value, options=None):
            raise CacheStoreError("store is read-only")

    stub = StubTransport({"http://x": OK})
    request = create(stub).wrap("cache", {"cache": ReadOnlyStore()})
    with pytest.raises(CacheStoreError, match="read-only"):
        await request("http://x")
    assert stub.calls == 1


@pytest.mark.asyncio
async def test_cache_hashes_structured_requests():
    store = RecordingStore()
    stub = StubTransport({"http://x": OK})
    request = create(stub).wrap("cache", {"cache": store})

    await request(HttpRequest(url="http://x", headers={"Accept": "a/b"}))
    await request(HttpRequest(url="http://x", headers={"accept": "a/b"}))

    key = store.writes[0][0]
    assert len(key) == 8
    assert key == crc32_hex(serialize_descriptor(HttpRequest(url="http://x", headers={"ACCEPT": "a/b"})))
    assert stub.calls == 1


@pytest.mark.asyncio
async def test_cache_custom_key_and_hash():
    store = RecordingStore()
    request = create(StubTransport({"http://x": OK})).wrap(
        "cache", CacheOptions(cache=store, get_key=lambda descriptor: f"k:{HttpRequest.coerce(descriptor).url}")
    )
    await request({"url": "http://x"})
    assert store.writes[0][0] == "k:http://x"

    options = CacheOptions(cache=store, hash=lambda data: "fixed")
    assert options.key_for(HttpRequest(url="http://y")) == "fixed"
    assert options.key_for("http://y") == "http://y"


def test_serialize_descriptor_is_deterministic():
    a = serialize_descriptor({"url": "http://x", "method": "GET", "body": b"\x00hi"})
    b = serialize_descriptor({"method": "GET", "body": b"\x00hi", "url": "http://x"})
    assert a == b


def test_cache_options_validation():
    with pytest.raises(ConfigurationError):
        CacheOptions()
    with pytest.raises(ConfigurationError):
        CacheOptions(cache=object())
    with pytest.raises(ConfigurationError):
        CacheOptions(cache=RecordingStore(), get_key="nope")


@pytest.mark.asyncio
async def test_memory_store_ttl_expiry():
    now = [100.0]
    store = MemoryCacheStore(clock=lambda: now[0])
    await store.set("k", "v", {"ttl": 5})
    assert await store.get("k") == "v"
    now[0] = 105.0
    assert await store.get("k") is None
    assert len(store) == 0
    await store.set("forever", "v")
    now[0] = 1e9
    assert await store.get("forever") == "v"


@pytest.mark.asyncio
async def test_prom_counter_labels_from_error():
    registry = CollectorRegistry()
    counter = Counter("requests", "Requests", ["outcome"], registry=registry)
    stub = StubTransport({"http://ok": OK, "http://bad": TransportError("bad", status_code=500)})
    labels = lambda error: {"outcome": "error" if error else "ok"}  # noqa: E731
    request = create(stub).wrap("prom", {"metric": counter, "labels": labels})

    await request("http://ok")
    await request("http://ok")
    with pytest.raises(TransportError):
        await request("http://bad")

    assert registry.get_sample_value("requests_total", {"outcome": "ok"}) == 2
    assert registry.get_sample_value("requests_total", {"outcome": "error"}) == 1


@pytest.mark.asyncio
async def test_prom_sink_failure_keeps_the_transport_error(caplog):
    # A labelled counter with no labels supplied cannot be incremented.
    counter = Counter("failures", "Failures", ["outcome"], registry=CollectorRegistry())
    boom = TransportError("boom", status_code=502)
    request = create(StubTransport({"http://x": boom})).wrap("prom", {"metric": counter, "labels": {}})

    with caplog.at_level("ERROR", logger="reqcompose.wrappers.prom"):
        with pytest.raises(TransportError) as excinfo:
            await request("http://x")

    assert excinfo.value is boom
    assert any("Failed to record counter metric" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_prom_histogram_observes_latency_with_static_labels():
    registry = CollectorRegistry()
    histogram = Histogram("latency_seconds", "Latency", ["route"], registry=registry)
    request = create(StubTransport({"http://x": OK})).wrap("prom", PromOptions(metric=histogram, labels={"route": "x"}))

    assert await request("http://x") is OK
    assert registry.get_sample_value("latency_seconds_count", {"route": "x"}) == 1
    assert registry.get_sample_value("latency_seconds_sum", {"route": "x"}) >= 0


@pytest.mark.asyncio
async def test_prom_reraises_the_original_error_for_unlabelled_summary():
    registry = CollectorRegistry()
    summary = Summary("plain_seconds", "Plain", registry=registry)
    boom = TransportError("boom")
    request = create(StubTransport({"http://x": boom})).wrap("prom", {"metric": summary})

    with pytest.raises(TransportError) as excinfo:
        await request("http://x")
    assert excinfo.value is boom
    assert registry.get_sample_value("plain_seconds_count") == 1


@pytest.mark.asyncio
async def test_prom_awaits_async_custom_sinks():
    class AsyncCounter:
        def __init__(self):
            self.count = 0

        async def inc(self):
            self.count += 1

    sink = AsyncCounter()
    request = create(StubTransport({"http://x": OK})).wrap("prom", {"metric": sink})
    await request("http://x")
    assert sink.count == 1


def test_metric_kind_inference_and_validation():
    registry = CollectorRegistry()
    assert infer_metric_kind(Counter("c", "c", registry=registry)) is MetricKind.COUNTER
    assert infer_metric_kind(Histogram("h", "h", registry=registry)) is MetricKind.LATENCY
    with pytest.raises(ConfigurationError):
        infer_metric_kind(object())
    with pytest.raises(ConfigurationError):
        PromOptions()
    with pytest.raises(ConfigurationError):
        PromOptions(metric=Counter("c2", "c", registry=registry), kind="latency")
    assert PromOptions(metric=Counter("c3", "c", registry=registry), kind="counter").kind is MetricKind.COUNTER


@pytest.mark.asyncio
async def test_build_from_config_matches_manual_composition():
    def compose_events(request):
        events = []
        for name in ("request", "response", "retrySuccess", "cacheRequest", "cacheMiss"):
            request.emitter.on(name, lambda payload, events=events: events.append(payload.name))
        return events

    configured = build_from_config(
        {"cache": {"cache": MemoryCacheStore()}, "event": True, "retry": {"attempts": 2}},
        StubTransport({"http://x": OK}),
    )
    manual = (
        create(StubTransport({"http://x": OK}))
        .wrap("cache", {"cache": MemoryCacheStore()})
        .wrap("retry", {"attempts": 2})
        .wrap("event")
    )
    configured_events, manual_events = compose_events(configured), compose_events(manual)

    for _ in range(2):
        assert await configured("http://x") is OK
        assert await manual("http://x") is OK

    assert configured_events == manual_events
    assert configured_events[:5] == ["request", "cacheRequest", "cacheMiss", "retrySuccess", "response"]
