"""
Rate Limiter - Per-client hourly and global monthly usage caps.

Counters live in Firestore documents keyed by (identifier, window start):
    rateLimits/{client}_{hourStartMs}  -> {count, timestamp}
    globalUsage/{year}-{month}         -> {count, timestamp}
Each check reads, compares against the cap and increments inside a single
transaction, so two concurrent requests can never both see "under the cap"
for the last free slot. Window documents are never deleted; old keys are
simply no longer read.
"""
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple

from services.errors import GlobalCapReachedError, RateLimitedError
from services.logging_service import get_logger

HOURLY_COLLECTION = "rateLimits"
MONTHLY_COLLECTION = "globalUsage"


class CounterService:
    """Atomic read-compare-increment on a windowed counter."""

    def check_and_increment(self, key: str, window_start: datetime, cap: int) -> bool:
        """Returns False (without incrementing) when the counter is at or above `cap`."""
        raise NotImplementedError


class InMemoryCounterService(CounterService):
    """Process-local counters for local runs and tests."""

    def __init__(self):
        self._counts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def check_and_increment(self, key: str, window_start: datetime, cap: int) -> bool:
        with self._lock:
            count = self._counts.get(key, 0)
            if count >= cap:
                return False
            self._counts[key] = count + 1
            return True

    def count(self, key: str) -> int:
        with self._lock:
            return self._counts.get(key, 0)


class FirestoreCounterService(CounterService):
    """Counters stored as Firestore documents, incremented transactionally."""

    def __init__(self, collection: str, client=None):
        self.collection = collection
        self._client = client

    def _get_client(self):
        """Lazy initialization of Firestore client."""
        if self._client is None:
            from google.cloud import firestore
            self._client = firestore.Client()
        return self._client

    def check_and_increment(self, key: str, window_start: datetime, cap: int) -> bool:
        from google.cloud import firestore

        client = self._get_client()
        doc_ref = client.collection(self.collection).document(key)

        @firestore.transactional
        def _increment(transaction):
            snapshot = doc_ref.get(transaction=transaction)
            count = 0
            if snapshot.exists:
                count = (snapshot.to_dict() or {}).get("count", 0)
            if count >= cap:
                return False
            transaction.set(doc_ref, {"count": count + 1, "timestamp": window_start}, merge=True)
            return True

        return _increment(client.transaction())

    def read(self, key: str) -> int:
        snapshot = self._get_client().collection(self.collection).document(key).get()
        if not snapshot.exists:
            return 0
        return (snapshot.to_dict() or {}).get("count", 0)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def hour_window(now: datetime) -> datetime:
    return now.replace(minute=0, second=0, microsecond=0)


def month_window(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def hourly_key(client_id: str, now: datetime) -> Tuple[str, datetime]:
    start = hour_window(now)
    safe_client = (client_id or "unknown").replace("/", "_")
    return f"{safe_client}_{int(start.timestamp() * 1000)}", start


def monthly_key(now: datetime) -> Tuple[str, datetime]:
    start = month_window(now)
    return f"{start.year}-{start.month}", start


class RateLimiter:
    """Applies the per-client hourly cap, then the global monthly cap."""

    def __init__(self, hourly: CounterService, monthly: CounterService,
                 max_per_hour: int = 10, max_per_month: int = 1000,
                 clock: Callable[[], datetime] = _utcnow):
        self.hourly = hourly
        self.monthly = monthly
        self.max_per_hour = max_per_hour
        self.max_per_month = max_per_month
        self.clock = clock

    def check(self, client_id: str, now: Optional[datetime] = None):
        """
        Counts one attempt for `client_id`.

        Raises:
            RateLimitedError: the client used up this hour's allowance
            GlobalCapReachedError: the monthly global cap is reached
        """
        now = now or self.clock()

        key, start = hourly_key(client_id, now)
        if not self.hourly.check_and_increment(key, start, self.max_per_hour):
            get_logger().warning("Client rate limit reached", client_id=client_id, window=key)
            raise RateLimitedError("Rate limit exceeded. Please try again later.")

        key, start = monthly_key(now)
        if not self.monthly.check_and_increment(key, start, self.max_per_month):
            get_logger().error("Global monthly cap reached", window=key)
            raise GlobalCapReachedError(
                "Service temporarily unavailable: free tier usage limit reached."
            )


def build_rate_limiter(backend: str, max_per_hour: int, max_per_month: int) -> RateLimiter:
    if backend == "memory":
        hourly, monthly = InMemoryCounterService(), InMemoryCounterService()
    else:
        hourly = FirestoreCounterService(HOURLY_COLLECTION)
        monthly = FirestoreCounterService(MONTHLY_COLLECTION)
    return RateLimiter(hourly, monthly, max_per_hour=max_per_hour, max_per_month=max_per_month)
