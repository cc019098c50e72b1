"""Risk aggregation - overall risk score and ranked suspicious list"""

from typing import List

from txn_risk_engine.domain.models import Finding, FormattedSuspiciousTransaction, SuspiciousTransaction
from txn_risk_engine.utils.math_utils import round_half_up

FINDING_WEIGHTS = {
    "High": 20,
    "Medium": 10,
    "Low": 5,
}

MAX_RISK_SCORE = 100


def suspicious_ratio(total_suspicious: int, total_transactions: int) -> float:
    """Suspicious entries per valid transaction; 0.0 when there are no transactions"""
    if total_transactions == 0:
        return 0.0
    return total_suspicious / total_transactions


def calculate_overall_risk_score(
    total_suspicious: int,
    total_transactions: int,
    findings: List[Finding],
) -> int:
    """
    Combine the suspicious ratio and finding severities into a 0-100 score.

    score = min(100, round(ratio * 100 + sum(weight(finding.risk_level))))

    Weights: High = 20, Medium = 10, Low = 5. The ratio can exceed 1.0
    because a transaction may be flagged by several rules.
    """
    ratio = suspicious_ratio(total_suspicious, total_transactions)
    finding_weight = sum(FINDING_WEIGHTS.get(f.risk_level, 0) for f in findings)
    return min(MAX_RISK_SCORE, round_half_up(ratio * 100 + finding_weight))


def format_suspicious_transactions(
    suspicious: List[SuspiciousTransaction],
    limit: int = 50,
) -> List[FormattedSuspiciousTransaction]:
    """Project flagged entries for display, highest risk first (stable for ties)"""
    formatted = [
        FormattedSuspiciousTransaction(
            id=entry.transaction.transaction_id,
            date=entry.transaction.date,
            amount=entry.transaction.amount,
            account_id=entry.transaction.account_id,
            merchant=entry.transaction.merchant_name,
            fraud_type=entry.fraud_type,
            risk_score=entry.risk_score,
        )
        for entry in suspicious
    ]
    formatted.sort(key=lambda f: f.risk_score, reverse=True)
    return formatted[:limit]
