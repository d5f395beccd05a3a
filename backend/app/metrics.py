"""Prometheus metrics for monitoring.

Tracks request latency, compatibility scoring volume and score
distribution, and rate limit hits.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram, Info

# Application info
APP_INFO = Info("dsc_app", "DevShowcase matching service info")

# HTTP metrics
HTTP_REQUESTS_TOTAL = Counter(
    "dsc_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "dsc_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Matching metrics
MATCHES_TOTAL = Counter(
    "dsc_matches_total",
    "Total compatibility scores calculated",
    ["endpoint"],
)

MATCH_SCORE = Histogram(
    "dsc_match_score",
    "Distribution of compatibility scores",
    buckets=(10, 20, 30, 40, 50, 60, 70, 80, 90, 100),
)

# Rate limiting
RATE_LIMIT_HITS = Counter(
    "dsc_rate_limit_hits_total",
    "Total rate limit hits",
    ["endpoint", "limit_type"],
)
