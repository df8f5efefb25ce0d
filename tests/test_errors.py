"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
from datetime import date

from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.errors import InvalidWindowError, TaskSourceError
from app.main import app
from app.routers.progress import get_task_source


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_invalid_window_error(self):
        err = InvalidWindowError(length=0)
        assert err.http_status == 422
        assert err.code == "INVALID_WINDOW"
        assert "0" in err.message
        assert err.to_dict()["details"]["length"] == 0

    def test_task_source_error(self):
        err = TaskSourceError(day=date(2026, 2, 20), reason="HTTP 500")
        assert err.http_status == 502
        assert err.code == "TASK_SOURCE_ERROR"
        assert "2026-02-20" in err.message
        d = err.to_dict()
        assert d["details"] == {"day": "2026-02-20", "reason": "HTTP 500"}


# ---------------------------------------------------------------------------
# Integration tests on HTTP error responses
# ---------------------------------------------------------------------------

class TestErrorEnvelope:
    def test_application_error_uses_envelope(self, client, monkeypatch):
        monkeypatch.setattr(settings, "WINDOW_DAYS", 0)
        r = client.get("/progress")
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "INVALID_WINDOW"
        assert body["details"]["length"] == 0

    def test_validation_error_lists_fields(self, client):
        r = client.get("/progress?window_days=abc")
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert isinstance(body["details"]["errors"], list)

    def test_unhandled_error_is_500_envelope(self):
        def broken_source():
            raise RuntimeError("misconfigured")

        app.dependency_overrides[get_task_source] = broken_source
        try:
            with TestClient(app, raise_server_exceptions=False) as c:
                r = c.get("/progress?user_id=u1")
        finally:
            app.dependency_overrides.clear()
        assert r.status_code == 500
        assert r.json() == {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        }
