"""
Tests for health checks, metrics and structured logging
"""
import json
import logging
from uuid import uuid4

from reflect.core.logging_config import (ContextualFormatter, LoggingConfig,
                                         SensitiveDataFilter)
from reflect.core.middleware import completion_level
from reflect.core.middleware_metrics import normalize_endpoint


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "Reflect"


def test_detailed_health(client, db):
    response = client.get("/health/detailed")
    assert response.status_code == 200
    body = response.json()
    assert body["components"]["database"]["status"] == "healthy"
    assert set(body["logging"]) == {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def test_api_root(client):
    body = client.get("/api").json()
    assert body["name"] == "Reflect"
    assert body["status"] == "running"


def test_metrics_endpoint(client, db, register_user):
    register_user(client, username="scraped")
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "reflect_http_requests_total" in response.text
    assert "reflect_active_sessions 1.0" in response.text


def test_request_id_header(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"

    generated = client.get("/health").headers["X-Request-ID"]
    assert generated and generated != "abc-123"


def test_normalize_endpoint():
    entry_id = uuid4()
    assert normalize_endpoint(f"/api/journal/{entry_id}") == "/api/journal/{id}"
    assert normalize_endpoint("/collection/unorganized") == "/collection/unorganized"
    assert normalize_endpoint("/") == "/"


def test_completion_level():
    assert completion_level("/api/journal", 201) == logging.INFO
    assert completion_level("/health", 200) == logging.DEBUG
    assert completion_level("/api/journal", 400) == logging.WARNING
    assert completion_level("/api/journal", 404) == logging.INFO
    assert completion_level("/metrics", 500) == logging.ERROR


def _record(msg, *args):
    return logging.LogRecord("reflect.test", logging.INFO, __file__, 1, msg, args, None)


def test_sensitive_data_is_masked():
    record = _record('login with password="hunter22" and Bearer abc.def')
    SensitiveDataFilter().filter(record)
    assert "hunter22" not in record.msg
    assert "abc.def" not in record.msg

    record = _record("auth header %s", "Bearer xyz")
    SensitiveDataFilter().filter(record)
    assert record.getMessage() == "auth header Bearer ***"


def test_masking_can_be_disabled():
    record = _record("password=hunter22")
    SensitiveDataFilter(enabled=False).filter(record)
    assert record.msg == "password=hunter22"


def test_json_formatter_merges_context_and_extra():
    LoggingConfig.set_context(request_id="req-1", user_id="u-1")
    try:
        record = _record("Created journal entry")
        record.entry_id = "e-1"
        payload = json.loads(ContextualFormatter().format(record))
    finally:
        LoggingConfig.clear_context()

    assert payload["message"] == "Created journal entry"
    assert payload["level"] == "INFO"
    assert payload["request_id"] == "req-1"
    assert payload["user_id"] == "u-1"
    assert payload["entry_id"] == "e-1"


def test_log_level_counters():
    LoggingConfig.configure()
    LoggingConfig.reset_metrics()
    LoggingConfig.get_logger("reflect.test").warning("counted")
    assert LoggingConfig.get_metrics()["WARNING"] == 1
