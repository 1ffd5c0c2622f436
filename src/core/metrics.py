from prometheus_client import Counter, Histogram

# Registered once per process; the endpoint and probe share them.
ECHO_CONNECTIONS = Counter(
    "echo_connections_total",
    "Connections handled by the echo endpoint",
    ["outcome"],
)
ECHO_BYTES = Counter(
    "echo_bytes_total",
    "Bytes moved by the echo endpoint",
    ["direction"],
)
PROBE_DURATION = Histogram(
    "probe_transfer_seconds",
    "Timed send+receive duration of a transfer probe",
)
PROBE_FAILURES = Counter(
    "probe_failures_total",
    "Transfer probes that ended with an error",
    ["error"],
)
