"""Metrics definitions for the matching engine."""

from prometheus_client import Counter, Histogram


# Search Metrics
SEARCH_REQUESTS_TOTAL = Counter(
    'dishscout_search_requests_total',
    'Total search requests',
    ['sort_by', 'source_mode']
)

SEARCH_DURATION_SECONDS = Histogram(
    'dishscout_search_duration_seconds',
    'Search duration in seconds',
    ['sort_by']
)

ZERO_RESULTS_SEARCHES_TOTAL = Counter(
    'dishscout_zero_results_searches_total',
    'Total searches with zero results',
    ['source_mode']
)

DEGRADED_SEARCHES_TOTAL = Counter(
    'dishscout_degraded_searches_total',
    'Total searches answered from a reduced source set'
)


# Source Metrics
SOURCE_FETCH_DURATION_SECONDS = Histogram(
    'dishscout_source_fetch_duration_seconds',
    'Source fetch duration in seconds',
    ['source']
)

SOURCE_FETCH_FAILURES_TOTAL = Counter(
    'dishscout_source_fetch_failures_total',
    'Total source fetch failures',
    ['source', 'reason']
)

MALFORMED_RECORDS_TOTAL = Counter(
    'dishscout_malformed_records_total',
    'Total raw records dropped during normalization',
    ['source', 'kind']
)

WORKING_SET_RESTAURANTS = Histogram(
    'dishscout_working_set_restaurants',
    'Number of restaurants in the merged working set',
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000]
)


def record_search_request(sort_by: str, source_mode: str, duration: float, result_count: int):
    """Record search request metrics."""
    SEARCH_REQUESTS_TOTAL.labels(sort_by=sort_by, source_mode=source_mode).inc()
    SEARCH_DURATION_SECONDS.labels(sort_by=sort_by).observe(duration)

    if result_count == 0:
        ZERO_RESULTS_SEARCHES_TOTAL.labels(source_mode=source_mode).inc()


def record_degraded_search():
    """Record a search answered without every requested source."""
    DEGRADED_SEARCHES_TOTAL.inc()


def record_source_fetch(source: str, duration: float):
    """Record a successful source fetch."""
    SOURCE_FETCH_DURATION_SECONDS.labels(source=source).observe(duration)


def record_source_failure(source: str, reason: str):
    """Record a failed or timed out source fetch."""
    SOURCE_FETCH_FAILURES_TOTAL.labels(source=source, reason=reason).inc()


def record_malformed_record(source: str, kind: str):
    """Record a raw record dropped by the normalizer."""
    MALFORMED_RECORDS_TOTAL.labels(source=source, kind=kind).inc()


def record_working_set_size(restaurant_count: int):
    """Record the size of the merged working set."""
    WORKING_SET_RESTAURANTS.observe(restaurant_count)
