"""
Main Entry Point - HTTP endpoints for the Book Summary Function.

This module provides HTTP endpoints for:
1. generate_book_summary - Builds an AI summary (or a template fallback)
   with confidence score and source attribution for one book.
2. lookup_book - Fetches book metadata for an ISBN from Google Books.

Architecture:
- A single deployed function routes by path (main_http_entry).
- Only POST is accepted; OPTIONS preflight is answered for the CORS
  allow-list configured in config.py.
- Services raise classified SummaryError subclasses; this module is the
  only place they become HTTP status codes.
"""
import json
import threading
import traceback
import uuid

import functions_framework

from config import (
    OPENAI_MODEL, OPENAI_TIMEOUT_SECONDS, CORS_ALLOWED_ORIGINS, COUNTER_BACKEND,
    MAX_REQUESTS_PER_HOUR, MAX_REQUESTS_PER_MONTH,
    RETRY_MAX_ATTEMPTS, RETRY_BASE_DELAY_SECONDS, RETRY_BACKOFF_MULTIPLIER,
    THROTTLE_MIN_SPACING_SECONDS,
)
from models.summary import SummaryRequest
from services.books_service import BooksService
from services.errors import InvalidRequestError, SummaryError
from services.logging_service import RequestLogger, get_logger, set_global_request_id
from services.openai_service import OpenAIService
from services.policies import RetryPolicy, ThrottlePolicy
from services.rate_limiter import build_rate_limiter
from services.summary_invoker import SummaryInvoker

_invoker = None
_invoker_lock = threading.Lock()
_books_service = None


def get_invoker() -> SummaryInvoker:
    """Get or create the shared invoker (keeps the inter-call spacing state)."""
    global _invoker
    with _invoker_lock:
        if _invoker is None:
            _invoker = SummaryInvoker(
                ai_service=OpenAIService(timeout=OPENAI_TIMEOUT_SECONDS),
                rate_limiter=build_rate_limiter(
                    COUNTER_BACKEND, MAX_REQUESTS_PER_HOUR, MAX_REQUESTS_PER_MONTH
                ),
                model=OPENAI_MODEL,
                retry_policy=RetryPolicy(
                    max_attempts=RETRY_MAX_ATTEMPTS,
                    base_delay=RETRY_BASE_DELAY_SECONDS,
                    backoff_multiplier=RETRY_BACKOFF_MULTIPLIER,
                ),
                throttle=ThrottlePolicy(min_spacing=THROTTLE_MIN_SPACING_SECONDS),
            )
        return _invoker


def get_books_service() -> BooksService:
    global _books_service
    if _books_service is None:
        _books_service = BooksService()
    return _books_service


def _cors_headers(request) -> dict:
    headers = {"Content-Type": "application/json"}
    origin = request.headers.get("Origin")
    if origin and origin in CORS_ALLOWED_ORIGINS:
        headers.update({
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": "POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type, Authorization",
            "Access-Control-Allow-Credentials": "true",
            "Vary": "Origin",
        })
    return headers


def _respond(request, body: dict, status: int):
    return json.dumps(body, ensure_ascii=False), status, _cors_headers(request)


def _preflight(request):
    headers = _cors_headers(request)
    headers.pop("Content-Type", None)
    if "Access-Control-Allow-Origin" in headers:
        headers["Access-Control-Max-Age"] = "3600"
    return "", 204, headers


def get_client_ip(request) -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.remote_addr or "unknown"


@functions_framework.http
def main_http_entry(request):
    """
    Main HTTP entry point that routes requests based on path.
    Enables Single-Function deployment for multiple handlers.
    """
    path = request.path
    get_logger().debug("Routing request", method=request.method, path=path)

    if path == "/" or path.endswith("/generate_book_summary"):
        return generate_book_summary(request)
    elif path.endswith("/lookup_book"):
        return lookup_book(request)
    else:
        return _respond(request, {"success": False, "error": f"Path {path} not found"}, 404)


@functions_framework.http
def generate_book_summary(request):
    """
    Generates the summary for one book.

    Expected payload (camelCase SummaryRequest):
    {
        "title": "Nexus",
        "authors": ["Yuval Noah Harari"],
        "isbn": "9780525520024",
        "description": "...",
        "categories": ["History"],
        "publisher": "Random House",
        "publishedDate": "2024-09-10",
        "pageCount": 528,
        "language": "en",
        "targetLanguage": "es"
    }
    """
    if request.method == "OPTIONS":
        return _preflight(request)
    if request.method != "POST":
        return _respond(request, {"success": False, "error": "Method not allowed"}, 405)

    request_id = str(uuid.uuid4())
    set_global_request_id(request_id)
    logger = RequestLogger(request_id)

    try:
        summary_request = SummaryRequest.from_dict(request.get_json(silent=True))
        logger.log_stage("generate_book_summary", "started",
                         isbn=summary_request.isbn,
                         target_language=summary_request.target_language)

        outcome = get_invoker().generate(summary_request, get_client_ip(request), logger)

        body = {"success": True, "data": outcome.summary.to_dict()}
        if outcome.fallback:
            body["fallback"] = True
            body["translated"] = outcome.summary.translation_applied
        logger.log_stage("generate_book_summary", "completed", fallback=outcome.fallback)
        logger.log_metric("confidence_score", outcome.summary.confidence_score,
                          processing_method=outcome.summary.processing_method)
        return _respond(request, body, 200)

    except SummaryError as e:
        logger.log_error("generate_book_summary", e.message,
                         classification=e.classification, status=e.http_status)
        return _respond(request, e.to_dict(), e.http_status)
    except Exception as e:
        logger.log_error("generate_book_summary", str(e), traceback=traceback.format_exc())
        return _respond(request, {
            "success": False,
            "error": "Failed to generate book summary. Please try again.",
            "classification": "unknown",
        }, 500)
    finally:
        set_global_request_id(None)


@functions_framework.http
def lookup_book(request):
    """
    Returns Google Books metadata for an ISBN.

    Expected payload: {"isbn": "9780525520024"}
    """
    if request.method == "OPTIONS":
        return _preflight(request)
    if request.method != "POST":
        return _respond(request, {"success": False, "error": "Method not allowed"}, 405)

    logger = RequestLogger(str(uuid.uuid4()))
    try:
        data = request.get_json(silent=True) or {}
        if not data.get("isbn"):
            raise InvalidRequestError("Invalid request. ISBN is required.")
        book = get_books_service().lookup_isbn(str(data["isbn"]))
        logger.info("Book metadata found", isbn=book.isbn, title=book.title)
        return _respond(request, {"success": True, "data": book.to_dict()}, 200)
    except SummaryError as e:
        logger.log_error("lookup_book", e.message, classification=e.classification)
        return _respond(request, e.to_dict(), e.http_status)
    except Exception as e:
        logger.log_error("lookup_book", str(e), traceback=traceback.format_exc())
        return _respond(request, {
            "success": False,
            "error": "Failed to fetch book information.",
            "classification": "unknown",
        }, 500)
