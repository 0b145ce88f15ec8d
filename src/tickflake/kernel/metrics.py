"""
Prometheus metrics collection for tickflake.

Provides observability into identifier generation: throughput, sequence
overflow waits and clock anomalies, labeled by machine id.
"""

from prometheus_client import Counter, Histogram, start_http_server

# ============================================================================
# Generation Metrics
# ============================================================================

ids_generated_total = Counter(
    "tickflake_ids_generated_total",
    "Total number of identifiers generated",
    ["machine_id"],
)

sequence_overflow_waits_total = Counter(
    "tickflake_sequence_overflow_waits_total",
    "Total number of waits for the next tick after the sequence was exhausted",
    ["machine_id"],
)

sequence_overflow_wait_seconds = Histogram(
    "tickflake_sequence_overflow_wait_seconds",
    "Time slept waiting for the next tick after sequence exhaustion",
    ["machine_id"],
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.0075, 0.01),
)

# ============================================================================
# Clock Anomaly Metrics
# ============================================================================

clock_regressions_total = Counter(
    "tickflake_clock_regressions_total",
    "Total number of calls refused because the clock moved backwards",
    ["machine_id"],
)

time_range_exhausted_total = Counter(
    "tickflake_time_range_exhausted_total",
    "Total number of calls refused because the epoch's tick range is used up",
    ["machine_id"],
)


def start_metrics_server(port: int = 9090) -> None:
    """
    Start Prometheus metrics HTTP server.

    Args:
        port: Port to listen on (default: 9090)
    """
    start_http_server(port)
