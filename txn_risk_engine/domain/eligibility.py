"""Loan eligibility assessment - per-account analysis and portfolio scoring"""

import logging
from typing import Dict, List, Optional

from txn_risk_engine.domain.models import (
    AccountAnalysis,
    LoanEligibilityResult,
    ReasonCode,
    SuspiciousTransaction,
    Transaction,
)
from txn_risk_engine.domain.scoring import suspicious_ratio
from txn_risk_engine.utils.math_utils import clamp, mean, population_std_dev, round_half_up

logger = logging.getLogger(__name__)

INFLOW_TYPES = frozenset({"deposit", "transfer", "income"})

BASE_SCORE = 70
ELIGIBILITY_THRESHOLD = 60
MIN_LOAN_AMOUNT = 1000
MAX_LOAN_AMOUNT = 100_000
LOAN_MULTIPLIER = 1.5


def classify_velocity(transaction_count: int) -> str:
    if transaction_count > 15:
        return "high"
    elif transaction_count > 7:
        return "medium"
    return "low"


def classify_stability(amounts: List[float]) -> str:
    """
    Classify cash-flow stability by the coefficient of variation of amounts.

    CV = population std dev / mean (0 when the mean is 0)
    - < 0.3: stable
    - < 0.7: moderate
    - otherwise: unstable
    """
    amount_mean = mean(amounts)
    coefficient = population_std_dev(amounts) / amount_mean if amount_mean else 0.0

    if coefficient < 0.3:
        return "stable"
    elif coefficient < 0.7:
        return "moderate"
    return "unstable"


def classify_risk(account_suspicious_ratio: float) -> str:
    if account_suspicious_ratio > 0.1:
        return "high"
    elif account_suspicious_ratio > 0.05:
        return "medium"
    return "low"


def analyze_account(account_id: str, transactions: List[Transaction], suspicious_count: int) -> AccountAnalysis:
    """Derive balance, velocity, stability and risk for one account's transactions"""
    total_inflow = sum(t.amount for t in transactions if t.transaction_type in INFLOW_TYPES)
    total_outflow = sum(t.amount for t in transactions if t.transaction_type not in INFLOW_TYPES)

    return AccountAnalysis(
        account_id=account_id,
        average_balance=round_half_up(max(total_inflow - total_outflow, 0)),
        cash_flow_stability=classify_stability([t.amount for t in transactions]),
        transaction_velocity=classify_velocity(len(transactions)),
        risk_level=classify_risk(suspicious_count / len(transactions)),
    )


def analyze_accounts(
    transactions: List[Transaction],
    suspicious: List[SuspiciousTransaction],
) -> List[AccountAnalysis]:
    """Group all valid transactions by account and analyze each group"""
    by_account: Dict[str, List[Transaction]] = {}
    for txn in transactions:
        by_account.setdefault(txn.account_id, []).append(txn)

    # Every suspicious entry counts, including a transaction flagged by two rules
    suspicious_by_account: Dict[str, int] = {}
    for entry in suspicious:
        account_id = entry.transaction.account_id
        suspicious_by_account[account_id] = suspicious_by_account.get(account_id, 0) + 1

    return [
        analyze_account(account_id, txns, suspicious_by_account.get(account_id, 0))
        for account_id, txns in by_account.items()
    ]


def balance_bonus(average_account_balance: float) -> int:
    if average_account_balance > 10000:
        return 15
    elif average_account_balance > 5000:
        return 10
    elif average_account_balance > 1000:
        return 5
    return 0


def calculate_eligibility_score(accounts: List[AccountAnalysis], global_suspicious_ratio: float) -> int:
    """
    Portfolio score from base 70, clamped to 0-100.

    - minus round(global suspicious ratio * 100)
    - minus 15 per high-risk and 5 per medium-risk account
    - plus 5 per stable account
    - plus a bonus on the mean account balance (>10k +15, >5k +10, >1k +5)
    """
    score = BASE_SCORE
    score -= round_half_up(global_suspicious_ratio * 100)

    high_risk = sum(1 for a in accounts if a.risk_level == "high")
    medium_risk = sum(1 for a in accounts if a.risk_level == "medium")
    score -= high_risk * 15 + medium_risk * 5

    score += sum(5 for a in accounts if a.cash_flow_stability == "stable")
    score += balance_bonus(mean([a.average_balance for a in accounts]))

    return int(clamp(score, 0, 100))


def determine_max_loan_amount(total_balance: float, score: int) -> int:
    """Scale the summed account balance by score, bounded to [1000, 100000]"""
    amount = round_half_up(total_balance * (score / 100) * LOAN_MULTIPLIER)
    return int(clamp(amount, MIN_LOAN_AMOUNT, MAX_LOAN_AMOUNT))


def build_reason_codes(accounts: List[AccountAnalysis], global_suspicious_ratio: float) -> List[ReasonCode]:
    """Explain the score; each code is evaluated independently"""
    average_account_balance = mean([a.average_balance for a in accounts])
    codes = []

    if any(a.cash_flow_stability == "stable" for a in accounts):
        codes.append(ReasonCode("STABLE_CASHFLOW", "Consistent and stable transaction patterns", "positive"))
    if average_account_balance > 5000:
        codes.append(ReasonCode("SUFFICIENT_BALANCE", "Adequate account balance maintained", "positive"))
    if global_suspicious_ratio < 0.05:
        codes.append(ReasonCode("LOW_RISK", "Low risk transaction history", "positive"))

    if any(a.risk_level == "high" for a in accounts):
        codes.append(ReasonCode("HIGH_RISK_ACTIVITY", "High risk transaction patterns detected", "negative"))
    if global_suspicious_ratio > 0.1:
        codes.append(ReasonCode("SUSPICIOUS_ACTIVITY", "Higher than normal suspicious transactions", "negative"))
    if any(a.cash_flow_stability == "unstable" for a in accounts):
        codes.append(ReasonCode("UNSTABLE_CASHFLOW", "Erratic transaction patterns observed", "negative"))

    return codes


def assess_loan_eligibility(
    transactions: List[Transaction],
    suspicious: List[SuspiciousTransaction],
) -> LoanEligibilityResult:
    """
    Main entry point for the eligibility stage.

    An empty batch is never eligible: it yields score 0 with no reason
    codes and no account analysis.
    """
    if not transactions:
        return LoanEligibilityResult(is_eligible=False, score=0, max_loan_amount=None)

    accounts = analyze_accounts(transactions, suspicious)
    global_ratio = suspicious_ratio(len(suspicious), len(transactions))

    score = calculate_eligibility_score(accounts, global_ratio)
    is_eligible = score >= ELIGIBILITY_THRESHOLD

    max_loan_amount: Optional[int] = None
    if is_eligible:
        max_loan_amount = determine_max_loan_amount(sum(a.average_balance for a in accounts), score)

    logger.info(
        "Loan eligibility assessed",
        extra={"account_count": len(accounts), "score": score, "eligible": is_eligible},
    )

    return LoanEligibilityResult(
        is_eligible=is_eligible,
        score=score,
        max_loan_amount=max_loan_amount,
        reason_codes=build_reason_codes(accounts, global_ratio),
        account_analysis=accounts,
    )
