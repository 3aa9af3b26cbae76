"""Prometheus metrics definitions for the venue portal.

Exposes metrics for:
1. HTTP API metrics (requests, latency, errors)
2. Event metrics (events created, occurrences generated)
3. Analytics metrics (views, per-day fetch failures, malformed records)
"""
from prometheus_client import Counter, Histogram, Gauge

# =============================================================================
# HTTP API METRICS
# =============================================================================

# Request counter with method, endpoint, and status labels
HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Request latency histogram
HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Active requests gauge
HTTP_REQUESTS_IN_PROGRESS = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method", "endpoint"],
)

# =============================================================================
# EVENT METRICS
# =============================================================================

EVENTS_CREATED_TOTAL = Counter(
    "portal_events_created_total",
    "Total number of event occurrences persisted",
    ["kind"],  # kind: single, recurring
)

OCCURRENCES_GENERATED_TOTAL = Counter(
    "portal_occurrences_generated_total",
    "Total number of occurrences produced by the weekly generator",
)

EVENT_UPDATES_TOTAL = Counter(
    "portal_event_updates_total",
    "Total number of single-occurrence event edits",
)

# =============================================================================
# VENUE METRICS
# =============================================================================

VENUE_UPDATES_TOTAL = Counter(
    "portal_venue_updates_total",
    "Total number of venue profile edits",
    ["section"],  # section: details, hours
)

# =============================================================================
# ANALYTICS METRICS
# =============================================================================

ANALYTICS_VIEWS_TOTAL = Counter(
    "portal_analytics_views_total",
    "Total number of analytics views computed",
)

ANALYTICS_COMPUTE_DURATION_SECONDS = Histogram(
    "portal_analytics_compute_duration_seconds",
    "Time to fetch and aggregate one analytics view",
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

# Per-day reads that failed and were replaced by an empty bucket
ANALYTICS_DAY_FETCH_ERRORS_TOTAL = Counter(
    "portal_analytics_day_fetch_errors_total",
    "Per-day analytics reads that failed and contributed zero",
    ["collection"],  # collection: daily_going, vibe_daily
)

MALFORMED_RECORDS_SKIPPED_TOTAL = Counter(
    "portal_malformed_records_skipped_total",
    "Analytics input records coerced to a neutral contribution",
    ["collection"],  # collection: daily_going, vibe_daily, reviews
)
