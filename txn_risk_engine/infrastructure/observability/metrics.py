"""Prometheus metrics for monitoring analysis volume, risk scores, and eligibility outcomes"""

from prometheus_client import Counter, Histogram

from txn_risk_engine.domain.models import AnalysisResult

# Analysis metrics
analysis_counter = Counter(
    "txn_analysis_total",
    "Total transaction batches analyzed",
    ["outcome"],  # completed | rejected
)

overall_risk_score_histogram = Histogram(
    "txn_overall_risk_score",
    "Overall risk score per analyzed batch",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

suspicious_entry_counter = Counter(
    "txn_suspicious_entries_total",
    "Suspicious transaction entries flagged, by fraud type",
    ["fraud_type"],
)

rejected_row_counter = Counter(
    "txn_rejected_rows_total",
    "CSV data rows dropped during validation",
)

# Eligibility metrics
loan_eligibility_counter = Counter(
    "txn_loan_eligibility_total",
    "Loan eligibility outcomes",
    ["outcome"],  # eligible | ineligible
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(result: AnalysisResult) -> None:
    """Record metrics for one completed analysis"""
    analysis_counter.labels(outcome="completed").inc()
    overall_risk_score_histogram.observe(result.overall_risk_score)
    rejected_row_counter.inc(result.rejected_rows)

    for fraud_type, count in result.suspicious_by_fraud_type.items():
        suspicious_entry_counter.labels(fraud_type=fraud_type).inc(count)

    outcome = "eligible" if result.loan_eligibility.is_eligible else "ineligible"
    loan_eligibility_counter.labels(outcome=outcome).inc()


def record_rejection() -> None:
    """Record an upload rejected before or during validation"""
    analysis_counter.labels(outcome="rejected").inc()
