"""Pytest fixtures for testing"""

import pytest
from typing import Callable, List
from fastapi.testclient import TestClient
from txn_risk_engine.api.main import create_app
from txn_risk_engine.domain.models import Transaction


CSV_HEADER = "transaction_id,date,amount,account_id,merchant_name,transaction_type,location,ip_address"


def csv_row(
    transaction_id: str,
    amount,
    account_id: str = "ACC-1",
    merchant_name: str = "Corner Store",
    transaction_type: str = "purchase",
    location: str = "New York",
    ip_address: str = "192.168.1.1",
    date: str = "2025-06-23",
) -> str:
    """Build one data line in canonical column order"""
    return ",".join(
        [transaction_id, date, str(amount), account_id, merchant_name, transaction_type, location, ip_address]
    )


def build_csv(rows: List[str], header: str = CSV_HEADER) -> str:
    return "\n".join([header] + rows) + "\n"


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    app = create_app()
    return TestClient(app)


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Factory for domain transactions with sensible defaults"""

    def _make(
        transaction_id: str,
        amount: float,
        account_id: str = "ACC-1",
        merchant_name: str = "Corner Store",
        transaction_type: str = "purchase",
        location: str = "New York",
        ip_address: str = "192.168.1.1",
        date: str = "2025-06-23",
    ) -> Transaction:
        return Transaction(
            transaction_id=transaction_id,
            date=date,
            amount=amount,
            account_id=account_id,
            merchant_name=merchant_name,
            transaction_type=transaction_type,
            location=location,
            ip_address=ip_address,
        )

    return _make


@pytest.fixture
def row() -> Callable[..., str]:
    """Factory for CSV data lines"""
    return csv_row


@pytest.fixture
def make_csv() -> Callable[..., str]:
    """Factory joining a header and data lines into CSV text"""
    return build_csv
