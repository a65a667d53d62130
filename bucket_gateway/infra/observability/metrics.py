from prometheus_client import Counter, Histogram, make_asgi_app

# Low-cardinality labels: route templates only, never raw paths or object keys.
REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)

LATENCY = Histogram(
    "http_request_duration_seconds",
    "Request latency in seconds",
    ["method", "route"],
)

STORAGE_OPERATIONS = Counter(
    "storage_operations_total",
    "Calls made to the object storage backend",
    ["operation", "outcome"],
)

# ASGI app served under /metrics
metrics_app = make_asgi_app()
