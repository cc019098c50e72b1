"""Pydantic schemas for API response serialization"""

from dataclasses import asdict
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from txn_risk_engine.domain.models import AnalysisResult


class CamelModel(BaseModel):
    """Base schema emitting camelCase keys while accepting snake_case input"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FindingSchema(CamelModel):
    type: str
    description: str
    risk_level: str
    affected_count: int


class SuspiciousTransactionSchema(CamelModel):
    """Single flagged transaction entry"""

    id: str
    date: str
    amount: float
    account_id: str
    merchant: str
    fraud_type: str
    risk_score: int


class RiskMerchantSchema(CamelModel):
    merchant: str
    count: int
    total_amount: float


class TransactionDetailsSchema(CamelModel):
    suspicious_transactions: List[SuspiciousTransactionSchema]
    top_risk_merchants: List[RiskMerchantSchema]


class ReasonCodeSchema(CamelModel):
    code: str
    description: str
    impact: str


class AccountAnalysisSchema(CamelModel):
    account_id: str
    average_balance: int
    cash_flow_stability: str
    transaction_velocity: str
    risk_level: str


class LoanEligibilitySchema(CamelModel):
    """Loan eligibility block; maxLoanAmount is only present when eligible"""

    is_eligible: bool
    score: int
    max_loan_amount: Optional[int] = None
    reason_codes: List[ReasonCodeSchema]
    account_analysis: List[AccountAnalysisSchema]


class AnalysisResponse(CamelModel):
    """Response for POST /v1/transactions/analyze"""

    total_transactions: int
    suspicious_transactions: int
    overall_risk_score: int
    findings: List[FindingSchema]
    transaction_details: TransactionDetailsSchema
    loan_eligibility: LoanEligibilitySchema
    rejected_rows: int

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResponse":
        return cls.model_validate(asdict(result))
