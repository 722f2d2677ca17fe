import json

import flask
import pytest

import main
from conftest import FakeAIService, ai_response, rate_limited
from models.book import BookMetadata
from services.errors import AuthFailedError, QuotaExceededError

ALLOWED_ORIGIN = "http://localhost:4200"

app = flask.Flask(__name__)


def call(path="/generate_book_summary", method="POST", payload=None, headers=None):
    with app.test_request_context(path, method=method, json=payload, headers=headers or {}):
        body, status, response_headers = main.main_http_entry(flask.request)
    return (json.loads(body) if body else None), status, response_headers


@pytest.fixture
def use_ai(monkeypatch, make_invoker):
    def _use(*results, **limits):
        ai = FakeAIService(list(results))
        monkeypatch.setattr(main, "_invoker", make_invoker(ai, **limits))
        return ai
    return _use


def test_successful_summary(use_ai, nexus_payload):
    use_ai(ai_response(short="Un resumen breve.", detailed="Un resumen detallado."))
    body, status, headers = call(payload=nexus_payload, headers={"Origin": ALLOWED_ORIGIN})

    assert status == 200
    assert body["success"] is True
    assert "fallback" not in body
    assert body["data"]["shortSummary"] == "Un resumen breve."
    assert body["data"]["processingMethod"] == "openai_api"
    assert body["data"]["language"] == "es"
    assert body["data"]["translationApplied"] is True
    assert set(body["data"]["detailedConfidenceFactors"]) == {
        "dataQuality", "sourceReliability", "contentCoverage", "aiProcessing", "crossValidation",
    }
    assert headers["Access-Control-Allow-Origin"] == ALLOWED_ORIGIN


def test_fallback_response_is_flagged(use_ai, nexus_payload):
    use_ai(rate_limited())
    body, status, _ = call(payload=nexus_payload)

    assert status == 200
    assert body["fallback"] is True
    assert body["translated"] is True
    assert body["data"]["processingMethod"] == "fallback_template"
    assert "Historia" in body["data"]["detailedSummary"]


def test_missing_isbn_is_invalid(use_ai, nexus_payload):
    ai = use_ai(ai_response())
    del nexus_payload["isbn"]
    body, status, _ = call(payload=nexus_payload)

    assert status == 400
    assert body == {
        "success": False,
        "error": "Invalid request. Title and ISBN are required.",
        "classification": "invalid_request",
    }
    assert ai.calls == []


def test_client_rate_limit_is_429(use_ai, nexus_payload):
    use_ai(ai_response(), max_per_hour=1)
    headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
    assert call(payload=nexus_payload, headers=headers)[1] == 200

    body, status, _ = call(payload=nexus_payload, headers=headers)
    assert status == 429
    assert body["classification"] == "rate_limited"

    assert call(payload=nexus_payload, headers={"X-Forwarded-For": "198.51.100.2"})[1] == 200


def test_global_cap_is_503(use_ai, nexus_payload):
    use_ai(ai_response(), max_per_month=0)
    body, status, _ = call(payload=nexus_payload)
    assert status == 503
    assert body["classification"] == "global_cap_reached"


def test_quota_error_carries_suggestion(use_ai, nexus_payload):
    use_ai(QuotaExceededError("OpenAI quota exceeded.", suggestion="Check billing."))
    body, status, _ = call(payload=nexus_payload)
    assert status == 429
    assert body["classification"] == "quota_exceeded"
    assert body["suggestion"] == "Check billing."


def test_auth_error_is_401(use_ai, nexus_payload):
    use_ai(AuthFailedError("Authentication failed with AI service"))
    body, status, _ = call(payload=nexus_payload)
    assert status == 401
    assert body["classification"] == "auth_failed"


def test_unexpected_error_is_generic_500(monkeypatch, nexus_payload):
    class Broken:
        def generate(self, *args):
            raise RuntimeError("boom")

    monkeypatch.setattr(main, "_invoker", Broken())
    body, status, _ = call(payload=nexus_payload)
    assert status == 500
    assert body["classification"] == "unknown"
    assert "boom" not in body["error"]


def test_get_is_not_allowed():
    body, status, _ = call(method="GET")
    assert status == 405
    assert body["success"] is False


def test_preflight_for_allowed_origin():
    body, status, headers = call(method="OPTIONS", headers={"Origin": ALLOWED_ORIGIN})
    assert status == 204
    assert body is None
    assert headers["Access-Control-Allow-Origin"] == ALLOWED_ORIGIN
    assert "POST" in headers["Access-Control-Allow-Methods"]


def test_preflight_for_unknown_origin_has_no_cors_headers():
    _, status, headers = call(method="OPTIONS", headers={"Origin": "https://evil.example"})
    assert status == 204
    assert "Access-Control-Allow-Origin" not in headers


def test_unknown_path_is_404():
    body, status, _ = call(path="/nope")
    assert status == 404


def test_lookup_book(monkeypatch):
    class FakeBooks:
        def lookup_isbn(self, isbn):
            return BookMetadata(isbn=isbn, title="Nexus", authors=["Yuval Noah Harari"])

    monkeypatch.setattr(main, "_books_service", FakeBooks())
    body, status, _ = call(path="/lookup_book", payload={"isbn": "9780525520024"})

    assert status == 200
    assert body["data"]["title"] == "Nexus"
    assert body["data"]["publisher"] == "Unknown Publisher"


def test_lookup_book_requires_isbn(monkeypatch):
    monkeypatch.setattr(main, "_books_service", object())
    body, status, _ = call(path="/lookup_book", payload={})
    assert status == 400
    assert body["classification"] == "invalid_request"


def test_blank_title_is_invalid(use_ai, nexus_payload):
    ai = use_ai(ai_response())
    nexus_payload["title"] = "   "
    body, status, _ = call(payload=nexus_payload)

    assert status == 400
    assert body["classification"] == "invalid_request"
    assert ai.calls == []
