# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metric objects for the facilitation service.
HTTP metrics are fed by middleware, business metrics by services and repositories.
"""

from prometheus_client import Counter, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "facilitation_requests_total",
    "Total HTTP requests to facilitation service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "facilitation_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "facilitation_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
SELECTIONS_TOTAL = Counter(
    "facilitation_selections_total",
    "Total facilitator selections performed",
)
MEMBER_SELECTED = Counter(
    "facilitation_member_selected_total",
    "Times each member was drawn as facilitator",
    ["member"],
)
STATISTICS_QUERIES = Counter(
    "facilitation_statistics_queries_total",
    "Total statistics reports computed",
    ["report"],
)
SESSIONS_PROCESSED = Counter(
    "facilitation_sessions_processed_total",
    "Total session records parsed",
)
SESSION_FETCH_ERRORS = Counter(
    "facilitation_session_fetch_errors_total",
    "Total failures reading session history",
)
