"""Analysis pipeline - CSV text in, AnalysisResult out"""

from typing import Dict, List

from txn_risk_engine.domain.detection import detect_patterns
from txn_risk_engine.domain.eligibility import assess_loan_eligibility
from txn_risk_engine.domain.ingestion import parse_transactions
from txn_risk_engine.domain.models import AnalysisResult, SuspiciousTransaction, Transaction, TransactionDetails
from txn_risk_engine.domain.scoring import calculate_overall_risk_score, format_suspicious_transactions


def count_by_fraud_type(suspicious: List[SuspiciousTransaction]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for entry in suspicious:
        counts[entry.fraud_type] = counts.get(entry.fraud_type, 0) + 1
    return counts


def analyze_transactions(
    transactions: List[Transaction],
    suspicious_limit: int = 50,
    merchant_limit: int = 5,
    rejected_rows: int = 0,
) -> AnalysisResult:
    """
    Run detection, risk aggregation and loan eligibility over validated transactions.

    An empty list yields a well-formed result with zeroed scores.
    """
    detection = detect_patterns(transactions, merchant_limit=merchant_limit)
    total_suspicious = len(detection.suspicious)

    return AnalysisResult(
        total_transactions=len(transactions),
        suspicious_transactions=total_suspicious,
        overall_risk_score=calculate_overall_risk_score(total_suspicious, len(transactions), detection.findings),
        findings=detection.findings,
        transaction_details=TransactionDetails(
            suspicious_transactions=format_suspicious_transactions(detection.suspicious, suspicious_limit),
            top_risk_merchants=detection.top_risk_merchants,
        ),
        loan_eligibility=assess_loan_eligibility(transactions, detection.suspicious),
        rejected_rows=rejected_rows,
        suspicious_by_fraud_type=count_by_fraud_type(detection.suspicious),
    )


def analyze_csv(csv_text: str, suspicious_limit: int = 50, merchant_limit: int = 5) -> AnalysisResult:
    """
    Main entry point: parse CSV text and analyze it.

    Raises:
        CSVValidationError: if the header lacks required columns
    """
    ingestion = parse_transactions(csv_text)
    return analyze_transactions(
        ingestion.transactions,
        suspicious_limit=suspicious_limit,
        merchant_limit=merchant_limit,
        rejected_rows=len(ingestion.invalid_rows),
    )
