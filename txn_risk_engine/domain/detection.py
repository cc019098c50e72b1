"""Pattern detection engine - frequency aggregation and fraud heuristics"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Set

from txn_risk_engine.domain.models import (
    DetectionResult,
    Finding,
    FrequencyTables,
    MerchantStats,
    RiskMerchant,
    SuspiciousTransaction,
    Transaction,
)

logger = logging.getLogger(__name__)

HIGH_VALUE_THRESHOLD = 5000
STRUCTURING_MIN_AMOUNT = 1000
STRUCTURING_ROUND_UNIT = 100
ACCOUNT_FREQUENCY_THRESHOLD = 5
LOCATION_ACCOUNTS_THRESHOLD = 3
RISK_MERCHANT_MIN_COUNT = 2

HIGH_VALUE = "High Value Transaction"
POTENTIAL_STRUCTURING = "Potential Structuring"
UNUSUAL_FREQUENCY = "Unusual Frequency"
LOCATION_ANOMALY = "Location Anomaly"


@dataclass(frozen=True)
class TransactionRule:
    """Rule evaluated against each transaction on its own; always appends on match"""

    fraud_type: str
    risk_score: int
    matches: Callable[[Transaction], bool]


@dataclass(frozen=True)
class AggregateRule:
    """Rule selecting transactions from the frequency tables; skips ids already flagged"""

    fraud_type: str
    risk_score: int
    select: Callable[[List[Transaction], FrequencyTables], List[Transaction]]


def is_high_value(txn: Transaction) -> bool:
    return txn.amount > HIGH_VALUE_THRESHOLD


def is_potential_structuring(txn: Transaction) -> bool:
    return txn.amount % STRUCTURING_ROUND_UNIT == 0 and txn.amount >= STRUCTURING_MIN_AMOUNT


def frequent_accounts(tables: FrequencyTables) -> List[str]:
    return [acc for acc, count in tables.account_counts.items() if count > ACCOUNT_FREQUENCY_THRESHOLD]


def crowded_locations(tables: FrequencyTables) -> List[str]:
    return [
        loc for loc, accounts in tables.location_accounts.items()
        if len(accounts) > LOCATION_ACCOUNTS_THRESHOLD
    ]


def group_by(transactions: List[Transaction], key: Callable[[Transaction], str]) -> Dict[str, List[Transaction]]:
    """Bucket transactions by key, keeping input order within each bucket"""
    groups: Dict[str, List[Transaction]] = {}
    for txn in transactions:
        groups.setdefault(key(txn), []).append(txn)
    return groups


def select_frequent_account_transactions(
    transactions: List[Transaction], tables: FrequencyTables
) -> List[Transaction]:
    by_account = group_by(transactions, lambda t: t.account_id)
    selected = []
    for account_id in frequent_accounts(tables):
        selected.extend(by_account.get(account_id, []))
    return selected


def select_crowded_location_transactions(
    transactions: List[Transaction], tables: FrequencyTables
) -> List[Transaction]:
    by_location = group_by(transactions, lambda t: t.location)
    selected = []
    for location in crowded_locations(tables):
        selected.extend(by_location.get(location, []))
    return selected


TRANSACTION_RULES = (
    TransactionRule(HIGH_VALUE, 65, is_high_value),
    TransactionRule(POTENTIAL_STRUCTURING, 55, is_potential_structuring),
)

# Order matters: a later rule skips transactions flagged by anything before it
AGGREGATE_RULES = (
    AggregateRule(UNUSUAL_FREQUENCY, 70, select_frequent_account_transactions),
    AggregateRule(LOCATION_ANOMALY, 60, select_crowded_location_transactions),
)


def build_frequency_tables(transactions: List[Transaction]) -> FrequencyTables:
    """Build account, merchant, IP and location aggregates in one pass"""
    account_counts: Dict[str, int] = {}
    merchant_counts: Dict[str, int] = {}
    merchant_totals: Dict[str, float] = {}
    ip_counts: Dict[str, int] = {}
    location_accounts: Dict[str, Set[str]] = {}

    for txn in transactions:
        account_counts[txn.account_id] = account_counts.get(txn.account_id, 0) + 1

        merchant_counts[txn.merchant_name] = merchant_counts.get(txn.merchant_name, 0) + 1
        merchant_totals[txn.merchant_name] = merchant_totals.get(txn.merchant_name, 0.0) + txn.amount

        if txn.ip_address:
            ip_counts[txn.ip_address] = ip_counts.get(txn.ip_address, 0) + 1

        if txn.location and txn.account_id:
            location_accounts.setdefault(txn.location, set()).add(txn.account_id)

    return FrequencyTables(
        account_counts=account_counts,
        merchant_stats={
            name: MerchantStats(count=merchant_counts[name], total_amount=merchant_totals[name])
            for name in merchant_counts
        },
        ip_counts=ip_counts,
        location_accounts={loc: frozenset(accounts) for loc, accounts in location_accounts.items()},
    )


def flag_suspicious_transactions(
    transactions: List[Transaction], tables: FrequencyTables
) -> List[SuspiciousTransaction]:
    """
    Apply all detection rules and return the suspicious list.

    Per-transaction rules run first and may flag the same transaction more
    than once (one entry per rule). Aggregate rules then run in order and
    only add transactions whose id is not yet on the list at that moment.
    """
    suspicious: List[SuspiciousTransaction] = []

    for txn in transactions:
        for rule in TRANSACTION_RULES:
            if rule.matches(txn):
                suspicious.append(SuspiciousTransaction(txn, rule.fraud_type, rule.risk_score))

    flagged_ids = {entry.transaction.transaction_id for entry in suspicious}
    for rule in AGGREGATE_RULES:
        for txn in rule.select(transactions, tables):
            if txn.transaction_id in flagged_ids:
                continue
            suspicious.append(SuspiciousTransaction(txn, rule.fraud_type, rule.risk_score))
            flagged_ids.add(txn.transaction_id)

    return suspicious


def build_findings(transactions: List[Transaction], tables: FrequencyTables) -> List[Finding]:
    """Summarize each detection category; categories with no hits are dropped"""
    findings = [
        Finding(
            type="Anomaly",
            description="Unusual transaction frequency detected for same account",
            risk_level="Medium",
            affected_count=len(frequent_accounts(tables)),
        ),
        Finding(
            type="Pattern",
            description="Multiple high-value transactions",
            risk_level="High",
            affected_count=sum(1 for t in transactions if is_high_value(t)),
        ),
        Finding(
            type="Anomaly",
            description="Potential structuring (round numbers)",
            risk_level="Medium",
            affected_count=sum(1 for t in transactions if is_potential_structuring(t)),
        ),
        Finding(
            type="Pattern",
            description="Location anomalies",
            risk_level="Low",
            affected_count=len(crowded_locations(tables)),
        ),
    ]
    return [f for f in findings if f.affected_count > 0]


def top_risk_merchants(tables: FrequencyTables, limit: int = 5) -> List[RiskMerchant]:
    """Merchants seen more than twice, largest total amount first"""
    merchants = [
        RiskMerchant(merchant=name, count=stats.count, total_amount=stats.total_amount)
        for name, stats in tables.merchant_stats.items()
        if stats.count > RISK_MERCHANT_MIN_COUNT
    ]
    merchants.sort(key=lambda m: m.total_amount, reverse=True)
    return merchants[:limit]


def detect_patterns(transactions: List[Transaction], merchant_limit: int = 5) -> DetectionResult:
    """Run the detection stage over validated transactions"""
    tables = build_frequency_tables(transactions)
    suspicious = flag_suspicious_transactions(transactions, tables)
    findings = build_findings(transactions, tables)

    logger.info(
        "Pattern detection complete",
        extra={
            "transaction_count": len(transactions),
            "suspicious_count": len(suspicious),
            "finding_count": len(findings),
        },
    )

    return DetectionResult(
        tables=tables,
        suspicious=suspicious,
        findings=findings,
        top_risk_merchants=top_risk_merchants(tables, merchant_limit),
    )
