# metrics.py
"""Prometheus metrics for the ban-list updater."""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# 0. Global Registry
REGISTRY = CollectorRegistry()

# 1. Counters
BANLIST_REFRESHES = Counter(
    "banlist_refresh",
    "Completed ban-list refresh cycles by outcome.",
    ["outcome"],
    registry=REGISTRY,
)
BANLIST_FETCH_ERRORS = Counter(
    "banlist_fetch_errors",
    "Ban-list download failures by error type.",
    ["error"],
    registry=REGISTRY,
)

# 2. Gauges
BANLIST_ENTRIES = Gauge(
    "banlist_entries",
    "Number of entries in the active ban-list.",
    registry=REGISTRY,
)

# 3. Histograms
BANLIST_FETCH_DURATION = Histogram(
    "banlist_fetch_duration_seconds",
    "Time spent downloading the ban-list.",
    registry=REGISTRY,
    buckets=(0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30),
)


def increment_counter_metric(metric_instance, labels=None):
    if not isinstance(metric_instance, Counter):
        raise TypeError("increment_counter_metric requires a Counter")
    if labels:
        metric_instance.labels(**labels).inc()
    else:
        metric_instance.inc()


def set_gauge_metric(metric_instance, value, labels=None):
    if not isinstance(metric_instance, Gauge):
        raise TypeError("set_gauge_metric requires a Gauge")
    if labels:
        metric_instance.labels(**labels).set(value)
    else:
        metric_instance.set(value)


def observe_histogram_metric(metric_instance, value, labels=None):
    if not isinstance(metric_instance, Histogram):
        raise TypeError("observe_histogram_metric requires a Histogram")
    if labels:
        metric_instance.labels(**labels).observe(value)
    else:
        metric_instance.observe(value)


def get_metrics() -> bytes:
    """Return the registry in the Prometheus text exposition format."""
    return generate_latest(REGISTRY)
