from __future__ import annotations


def test_health_ok(client) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_metrics_exposes_request_and_upstream_counters(client) -> None:
    client.get("/health")
    res = client.get("/metrics")
    assert res.status_code == 200
    assert 'http_requests_total{method="GET",route="/health",status_code="200"}' in res.text
    assert "groq_upstream_requests_total" in res.text
