"""Prometheus metrics for rate calculations, entitlement aggregation and rate table health"""

from typing import Iterable

from prometheus_client import Counter, Histogram

# Calculation metrics
rate_calculation_counter = Counter(
    "wc_rate_calculations_total",
    "Weekly benefit rates calculated",
    ["benefit_type", "applied_rule"],
)

calculation_error_counter = Counter(
    "wc_calculation_errors_total",
    "Calculations rejected by the domain layer",
    ["error"],  # exception class name
)

entitlement_aggregation_counter = Counter(
    "wc_entitlement_aggregations_total",
    "Ledger aggregations performed",
)

ledger_entries_histogram = Histogram(
    "wc_ledger_entries",
    "Ledger size per aggregation",
    buckets=[0, 1, 2, 5, 10, 25, 50, 100],
)

# Rate table source
rate_table_fetch_failures_counter = Counter(
    "rate_table_fetch_failures_total",
    "Failed rate table fetch attempts",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_rate_calculations(calculations: Iterable) -> None:
    """Count calculated rates by benefit type and min/max rule applied"""
    for calc in calculations:
        rate_calculation_counter.labels(
            benefit_type=calc.type.value,
            applied_rule=calc.applied_rule.value,
        ).inc()


def record_aggregation(ledger_size: int) -> None:
    entitlement_aggregation_counter.inc()
    ledger_entries_histogram.observe(ledger_size)


def record_calculation_error(error: Exception) -> None:
    calculation_error_counter.labels(error=type(error).__name__).inc()
