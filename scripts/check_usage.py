import os
import sys
from datetime import datetime, timezone

from google.cloud import firestore

# Add cloud_function to sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../cloud_function'))

from config import MAX_REQUESTS_PER_HOUR, MAX_REQUESTS_PER_MONTH
from services.rate_limiter import (
    HOURLY_COLLECTION, MONTHLY_COLLECTION, FirestoreCounterService, hour_window, monthly_key,
)


def check_usage():
    db = firestore.Client()
    now = datetime.now(timezone.utc)

    month_key, _ = monthly_key(now)
    used = FirestoreCounterService(MONTHLY_COLLECTION, client=db).read(month_key)

    print(f"--- Global usage {month_key} ---")
    print(f"  Requests: {used}/{MAX_REQUESTS_PER_MONTH}")
    print(f"  Remaining: {max(0, MAX_REQUESTS_PER_MONTH - used)}")

    # Hourly documents are keyed {client}_{hourStartMs}
    suffix = f"_{int(hour_window(now).timestamp() * 1000)}"
    print(f"\n--- Clients this hour (cap {MAX_REQUESTS_PER_HOUR}) ---")
    busy = []
    for doc in db.collection(HOURLY_COLLECTION).stream():
        if not doc.id.endswith(suffix):
            continue
        count = (doc.to_dict() or {}).get("count", 0)
        client = doc.id[:-len(suffix)]
        marker = " (limited)" if count >= MAX_REQUESTS_PER_HOUR else ""
        print(f"  {client}: {count}{marker}")
        busy.append(client)

    if not busy:
        print("  No requests yet")
    return used, busy


if __name__ == "__main__":
    check_usage()
