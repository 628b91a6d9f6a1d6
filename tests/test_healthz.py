from __future__ import annotations


def test_healthz_shape(client):
    r = client.get("/healthz")
    assert r.status_code == 200

    payload = r.json()
    assert payload["status"] == "ok"
    checks = payload["checks"]
    for key in ("openai", "store"):
        assert key in checks
        assert "status" in checks[key]
    assert checks["store"]["sessions"] == 0


def test_healthz_alias_and_no_key(client_without_key):
    r = client_without_key.get("/api/healthz")
    assert r.status_code == 200

    payload = r.json()
    assert payload["status"] == "error"
    assert payload["checks"]["openai"]["status"] == "error"


def test_healthz_never_echoes_key(client):
    assert "sk-test" not in client.get("/healthz").text


def test_request_id_is_echoed(client):
    r = client.get("/healthz", headers={"x-request-id": "req-123"})
    assert r.headers["x-request-id"] == "req-123"

    generated = client.get("/healthz").headers["x-request-id"]
    assert generated and generated != "req-123"


def test_metrics_count_sessions_and_degraded_stages(client, fake_openai, audio_file):
    from app.metrics import SESSIONS_CREATED, STAGE_DEGRADED

    created_before = SESSIONS_CREATED.value()
    degraded_before = STAGE_DEGRADED.value({"stage": "embed"})

    fake_openai.embedding_error = RuntimeError("nope")
    assert client.post("/sessions", files=audio_file).status_code == 201

    assert SESSIONS_CREATED.value() == created_before + 1
    assert STAGE_DEGRADED.value({"stage": "embed"}) == degraded_before + 1

    text = client.get("/metrics-prom").text
    assert "sessions_created_total" in text
    assert 'pipeline_stage_degraded_total{stage="embed"}' in text
    assert "http_requests_total" in text


def test_latency_summary_keeps_only_count_and_sum():
    from app.metrics import Summary

    latency = Summary("test_latency_seconds", "Latency used by this test.")
    for _ in range(50):
        latency.observe(0.5, {"path": "/sessions"})

    assert latency.count({"path": "/sessions"}) == 50
    assert latency._values[(("path", "/sessions"),)] == (50, 25.0)
    lines = latency.render_prometheus()
    assert 'test_latency_seconds_count{path="/sessions"} 50' in lines
    assert 'test_latency_seconds_sum{path="/sessions"} 25.0' in lines


def test_http_latency_does_not_grow_per_request(client):
    from app.metrics import HTTP_LATENCY

    labels = {"path": "/sessions", "method": "GET", "status": "200"}
    before = HTTP_LATENCY.count(labels)
    for _ in range(20):
        client.get("/sessions")

    assert HTTP_LATENCY.count(labels) == before + 20
    count, total = HTTP_LATENCY._values[tuple(sorted(labels.items()))]
    assert count == before + 20
    assert total >= 0.0
