# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metric objects for HTTP traffic and scheduling.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "cadence_requests_total",
    "Total HTTP requests to the prompt cadence service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "cadence_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "cadence_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
RESCHEDULES_TOTAL = Counter(
    "cadence_reschedules_total",
    "Total scheduling runs",
    ["cadence"],
)
SLOTS_SCHEDULED = Counter(
    "cadence_slots_scheduled_total",
    "Prompt slots accepted by the delivery channel",
    ["cadence"],
)
SLOTS_DROPPED = Counter(
    "cadence_slots_dropped_total",
    "Prompt slots dropped by the collision guard",
    ["cadence"],
)
DELIVERY_FAILURES = Counter(
    "cadence_delivery_failures_total",
    "Individual delivery submissions that failed or timed out",
    ["role"],
)
ROLE_ROTATIONS = Counter(
    "cadence_role_rotations_total",
    "Active responder changes",
    ["reason"],
)
READINESS_QUERIES = Counter(
    "cadence_readiness_queries_total",
    "Readiness projections served",
    ["tone"],
)
ACTIVE_GROUPS = Gauge(
    "cadence_active_groups",
    "Number of groups in the registry",
)
