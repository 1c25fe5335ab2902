from prometheus_client import Counter

TELEMETRY_DISPATCHED = Counter(
    "telemetry_dispatched_total",
    "Telemetry rows handed to the background queue",
    ["kind"],
)
TELEMETRY_DISPATCH_FAILURES = Counter(
    "telemetry_dispatch_failures_total",
    "Telemetry rows dropped because the background queue was unavailable",
    ["kind"],
)
TELEMETRY_WRITE_FAILURES = Counter(
    "telemetry_write_failures_total",
    "Telemetry rows dropped because the database write failed",
    ["kind"],
)
