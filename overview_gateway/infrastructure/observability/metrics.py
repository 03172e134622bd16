"""Prometheus metrics for overview requests, FX data quality, and close readiness"""

from prometheus_client import Counter, Histogram

# Overview metrics
overview_request_counter = Counter(
    "overview_requests_total",
    "Overview computations served",
    ["endpoint"],  # dashboard | performance | close_readiness
)

fx_rate_fallback_counter = Counter(
    "fx_rate_fallback_total",
    "Currency pairs missing from a rate batch and converted 1:1",
    ["pair"],
)

close_readiness_score_histogram = Histogram(
    "close_readiness_score",
    "Close readiness scores reported",
    buckets=[0, 25, 50, 75, 90, 100],
)

# Upstream reads
upstream_read_failures_counter = Counter(
    "upstream_read_failures_total",
    "Failed collaborator reads",
    ["source"],  # accounts | transactions | invoices | bills | fx | ...
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_rate_fallback(pair: str) -> None:
    fx_rate_fallback_counter.labels(pair=pair).inc()


def record_close_readiness(score: int) -> None:
    overview_request_counter.labels(endpoint="close_readiness").inc()
    close_readiness_score_histogram.observe(score)
