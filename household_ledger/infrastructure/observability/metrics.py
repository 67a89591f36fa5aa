"""Prometheus metrics for sign-ins, store mutations and rejected records"""

from prometheus_client import Counter, Histogram

# Auth metrics
sign_in_counter = Counter(
    "household_sign_in_total",
    "Sign-in attempts",
    ["outcome"],  # allowed | denied | provider_error
)

# Store metrics
mutation_counter = Counter(
    "household_store_mutations_total",
    "Writes to the document store",
    ["collection", "operation"],  # create | update | delete
)

rejected_record_counter = Counter(
    "household_rejected_records_total",
    "Stored records that failed validation",
    ["collection", "reason"],
)

# Identity provider metrics
identity_latency_histogram = Histogram(
    "identity_provider_latency_seconds",
    "Identity provider token verification time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_sign_in(outcome: str) -> None:
    sign_in_counter.labels(outcome=outcome).inc()


def record_mutation(collection: str, operation: str) -> None:
    mutation_counter.labels(collection=collection, operation=operation).inc()


def record_rejected(collection: str, reason: str) -> None:
    """Count a record skipped during decoding or aggregation"""
    rejected_record_counter.labels(collection=collection, reason=reason).inc()
