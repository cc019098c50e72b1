"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Union


@dataclass(frozen=True)
class Transaction:
    """Validated transaction parsed from one CSV data row"""

    transaction_id: str
    date: str  # YYYY-MM-DD, kept as supplied
    amount: float
    account_id: str
    merchant_name: str
    transaction_type: str
    location: str
    ip_address: str


@dataclass(frozen=True)
class RawRow:
    """Untyped CSV row: lower-cased header -> trimmed value"""

    line_number: int
    values: Dict[str, str]


@dataclass(frozen=True)
class InvalidRow:
    """A data row rejected during validation"""

    line_number: int
    reason: str


ParsedRow = Union[Transaction, InvalidRow]


@dataclass
class IngestionResult:
    """Output of the ingestion stage"""

    transactions: List[Transaction]
    invalid_rows: List[InvalidRow]


@dataclass(frozen=True)
class MerchantStats:
    count: int
    total_amount: float


@dataclass(frozen=True)
class FrequencyTables:
    """Aggregates built in a single pass over valid transactions"""

    account_counts: Dict[str, int]
    merchant_stats: Dict[str, MerchantStats]
    ip_counts: Dict[str, int]
    location_accounts: Dict[str, FrozenSet[str]]


@dataclass(frozen=True)
class SuspiciousTransaction:
    """A transaction flagged by one detection rule"""

    transaction: Transaction
    fraud_type: str
    risk_score: int


@dataclass(frozen=True)
class Finding:
    """Aggregate finding for one detection category"""

    type: str  # "Anomaly" | "Pattern" | "Fraud"
    description: str
    risk_level: str  # "Low" | "Medium" | "High"
    affected_count: int


@dataclass(frozen=True)
class RiskMerchant:
    merchant: str
    count: int
    total_amount: float


@dataclass
class DetectionResult:
    """Output of the pattern detection stage"""

    tables: FrequencyTables
    suspicious: List[SuspiciousTransaction]
    findings: List[Finding]
    top_risk_merchants: List[RiskMerchant]


@dataclass(frozen=True)
class FormattedSuspiciousTransaction:
    """Suspicious transaction as presented in the result details"""

    id: str
    date: str
    amount: float
    account_id: str
    merchant: str
    fraud_type: str
    risk_score: int


@dataclass(frozen=True)
class AccountAnalysis:
    """Per-account cash-flow, velocity and risk classification"""

    account_id: str
    average_balance: int
    cash_flow_stability: str  # "stable" | "moderate" | "unstable"
    transaction_velocity: str  # "high" | "medium" | "low"
    risk_level: str  # "low" | "medium" | "high"


@dataclass(frozen=True)
class ReasonCode:
    code: str
    description: str
    impact: str  # "positive" | "negative"


@dataclass(frozen=True)
class LoanEligibilityResult:
    """Portfolio-level loan eligibility assessment"""

    is_eligible: bool
    score: int
    max_loan_amount: Optional[int]
    reason_codes: List[ReasonCode] = field(default_factory=list)
    account_analysis: List[AccountAnalysis] = field(default_factory=list)


@dataclass(frozen=True)
class TransactionDetails:
    suspicious_transactions: List[FormattedSuspiciousTransaction]
    top_risk_merchants: List[RiskMerchant]


@dataclass(frozen=True)
class AnalysisResult:
    """Complete output of one engine invocation"""

    total_transactions: int
    suspicious_transactions: int
    overall_risk_score: int
    findings: List[Finding]
    transaction_details: TransactionDetails
    loan_eligibility: LoanEligibilityResult
    rejected_rows: int = 0
    # Full suspicious list tallied per fraud type, before display truncation
    suspicious_by_fraud_type: Dict[str, int] = field(default_factory=dict)
