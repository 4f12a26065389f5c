"""Request logging against the real app: endpoint names, slow flag, skipped paths."""

import logging

import pytest

from app import create_app


@pytest.fixture
def make_client(fake_client, cache, stub_config):
    def build():
        app = create_app(config=stub_config, client=fake_client, cache=cache)
        app.config["TESTING"] = True
        return app.test_client()
    return build


def _request_logs(caplog):
    return [r for r in caplog.records if r.name == "api.request"]


def test_logs_endpoint_name(monkeypatch, caplog, make_client):
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "true")
    monkeypatch.delenv("REQUEST_LOG_SLOW_MS", raising=False)
    client = make_client()

    with caplog.at_level(logging.INFO, logger="api.request"):
        client.get("/api/stats/summary", headers={"X-Request-ID": "req-1"})

    (record,) = _request_logs(caplog)
    message = record.getMessage()
    assert record.levelno == logging.INFO
    assert "endpoint=stats.get_summary" in message
    assert "status=200" in message
    assert "slow=False" in message
    assert "request_id=req-1" in message


def test_slow_requests_logged_as_warning(monkeypatch, caplog, make_client):
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "true")
    monkeypatch.setenv("REQUEST_LOG_SLOW_MS", "0")
    client = make_client()

    with caplog.at_level(logging.INFO, logger="api.request"):
        client.get("/admin/count-active-assets?building=Library")

    (record,) = _request_logs(caplog)
    assert record.levelno == logging.WARNING
    assert "endpoint=admin.count_active_assets" in record.getMessage()
    assert "slow=True" in record.getMessage()


def test_upstream_failure_status_logged(monkeypatch, caplog, make_client, fake_client):
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "true")
    fake_client.failures.add("SRB_Details")
    client = make_client()

    with caplog.at_level(logging.INFO, logger="api.request"):
        client.get("/api/stats/asset-by-category")

    (record,) = _request_logs(caplog)
    assert "status=500" in record.getMessage()


def test_health_probes_not_logged(monkeypatch, caplog, make_client):
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "true")
    client = make_client()

    with caplog.at_level(logging.INFO, logger="api.request"):
        client.get("/health")

    assert _request_logs(caplog) == []


def test_request_logging_disabled(monkeypatch, caplog, make_client):
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "false")
    client = make_client()

    with caplog.at_level(logging.INFO, logger="api.request"):
        client.get("/api/buildings")

    assert _request_logs(caplog) == []
