import os
import sys
from datetime import datetime, timezone

import pytest

# Add cloud_function to sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../cloud_function'))

os.environ.setdefault("CLOUD_LOGGING_ENABLED", "false")
os.environ.pop("GCS_BUCKET_NAME", None)
os.environ["COUNTER_BACKEND"] = "memory"

from models.summary import SummaryRequest
from services.errors import UpstreamRateLimitedError
from services.policies import RetryPolicy, ThrottlePolicy
from services.rate_limiter import InMemoryCounterService, RateLimiter
from services.summary_invoker import SummaryInvoker

FIXED_NOW = datetime(2024, 9, 10, 14, 5, tzinfo=timezone.utc)


class FakeAIService:
    """Replays scripted results: dicts are returned, exceptions raised."""

    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    def complete(self, kwargs):
        self.calls.append(kwargs)
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


def ai_response(short="A concise summary of the book.", detailed="A longer summary of the book.", **extra):
    response = {
        "shortSummary": short,
        "detailedSummary": detailed,
        "confidenceScore": 85,
        "reasoningFactors": ["Detailed description", "Complete metadata"],
        "sourcesUsed": ["Book description", "Metadata"],
    }
    response.update(extra)
    return response


def rate_limited():
    return UpstreamRateLimitedError("429 rate limit")


@pytest.fixture
def nexus_payload():
    return {
        "title": "Nexus",
        "authors": ["Yuval Noah Harari"],
        "isbn": "9780525520024",
        "description": "...",
        "categories": ["History"],
        "publisher": "Random House",
        "publishedDate": "2024-09-10",
        "pageCount": 528,
        "language": "en",
        "targetLanguage": "es",
    }


@pytest.fixture
def nexus_request(nexus_payload):
    return SummaryRequest.from_dict(nexus_payload)


@pytest.fixture
def rich_request():
    return SummaryRequest(
        title="Sapiens",
        authors=("Yuval Noah Harari",),
        isbn="9780062316097",
        description="x" * 250,
        categories=("History",),
        publisher="Harper",
        published_date="2015-02-10",
        page_count=464,
        source_language="en",
        target_language="en",
        average_rating=4.5,
        ratings_count=10,
    )


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_invoker(sleeps):
    def _make(ai_service, max_per_hour=10, max_per_month=1000, throttle=None):
        limiter = RateLimiter(
            InMemoryCounterService(), InMemoryCounterService(),
            max_per_hour=max_per_hour, max_per_month=max_per_month,
            clock=lambda: FIXED_NOW,
        )
        return SummaryInvoker(
            ai_service=ai_service,
            rate_limiter=limiter,
            model="gpt-3.5-turbo",
            retry_policy=RetryPolicy(max_attempts=3, base_delay=0.5, backoff_multiplier=2.0),
            throttle=throttle or ThrottlePolicy(min_spacing=0),
            clock=lambda: FIXED_NOW,
            sleep=sleeps.append,
        )
    return _make
