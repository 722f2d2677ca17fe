from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from services.errors import GlobalCapReachedError, RateLimitedError
from services.rate_limiter import (
    MONTHLY_COLLECTION,
    FirestoreCounterService,
    InMemoryCounterService,
    RateLimiter,
    hourly_key,
    monthly_key,
)

NOW = datetime(2024, 9, 10, 14, 5, tzinfo=timezone.utc)


@pytest.fixture
def counters():
    return InMemoryCounterService(), InMemoryCounterService()


def _limiter(counters, max_per_hour=10, max_per_month=1000):
    hourly, monthly = counters
    return RateLimiter(hourly, monthly, max_per_hour=max_per_hour,
                       max_per_month=max_per_month, clock=lambda: NOW)


def test_keys_use_window_start():
    key, start = hourly_key("203.0.113.7", NOW)
    assert start == datetime(2024, 9, 10, 14, tzinfo=timezone.utc)
    assert key == f"203.0.113.7_{int(start.timestamp() * 1000)}"

    key, start = monthly_key(NOW)
    assert key == "2024-9"
    assert start == datetime(2024, 9, 1, tzinfo=timezone.utc)


def test_eleventh_request_in_hour_is_rate_limited(counters):
    limiter = _limiter(counters)
    for _ in range(10):
        limiter.check("203.0.113.7")

    with pytest.raises(RateLimitedError) as exc_info:
        limiter.check("203.0.113.7")
    assert exc_info.value.classification == "rate_limited"

    # Rejected attempts are not charged to the global counter
    _, monthly = counters
    assert monthly.count(monthly_key(NOW)[0]) == 10


def test_next_hour_starts_a_fresh_window(counters):
    limiter = _limiter(counters)
    for _ in range(10):
        limiter.check("203.0.113.7")
    limiter.check("203.0.113.7", now=NOW + timedelta(hours=1))


def test_clients_are_counted_separately(counters):
    limiter = _limiter(counters, max_per_hour=1)
    limiter.check("client-a")
    limiter.check("client-b")
    with pytest.raises(RateLimitedError):
        limiter.check("client-a")


def test_global_cap_applies_across_clients(counters):
    limiter = _limiter(counters, max_per_hour=1000, max_per_month=1000)
    for i in range(1000):
        limiter.check(f"client-{i % 7}")

    with pytest.raises(GlobalCapReachedError) as exc_info:
        limiter.check("client-new")
    assert exc_info.value.http_status == 503

    limiter.check("client-new", now=datetime(2024, 10, 1, tzinfo=timezone.utc))


def test_counter_does_not_increment_past_cap():
    counter = InMemoryCounterService()
    assert counter.check_and_increment("k", NOW, 1) is True
    assert counter.check_and_increment("k", NOW, 1) is False
    assert counter.count("k") == 1


def test_firestore_read_returns_stored_count():
    client = MagicMock()
    snapshot = client.collection.return_value.document.return_value.get.return_value
    snapshot.exists = True
    snapshot.to_dict.return_value = {"count": 42}
    counters = FirestoreCounterService(MONTHLY_COLLECTION, client=client)

    assert counters.read("2024-9") == 42
    client.collection.assert_called_with("globalUsage")
    client.collection.return_value.document.assert_called_with("2024-9")

    snapshot.exists = False
    assert counters.read("2024-9") == 0
