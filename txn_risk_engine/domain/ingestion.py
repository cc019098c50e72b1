"""CSV ingestion - header validation and two-stage row parsing

Rows are split on bare commas. Quoted values are not supported, so field
values must not contain commas.
"""

import logging
import math
import re
from typing import List, Optional

from txn_risk_engine.domain.exceptions import CSVValidationError
from txn_risk_engine.domain.models import IngestionResult, InvalidRow, ParsedRow, RawRow, Transaction

logger = logging.getLogger(__name__)

# Leading decimal number; anything after it is ignored ("500.00USD" -> 500.0, "1_000" -> 1.0)
AMOUNT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

REQUIRED_COLUMNS = (
    "transaction_id",
    "date",
    "amount",
    "account_id",
    "merchant_name",
    "transaction_type",
    "location",
    "ip_address",
)


def read_header(header_line: str) -> List[str]:
    """
    Normalize the header line and check that every required column is present.

    Matching is case-insensitive and order-independent.

    Raises:
        CSVValidationError: naming every missing column, in canonical order
    """
    headers = [h.strip().lower() for h in header_line.split(",")]
    missing = [column for column in REQUIRED_COLUMNS if column not in headers]
    if missing:
        raise CSVValidationError(missing)
    return headers


def read_raw_row(line_number: int, line: str, headers: List[str]) -> RawRow:
    """Map a data line positionally onto the header; absent trailing values become empty strings"""
    cells = line.split(",")
    values = {}
    for index, header in enumerate(headers):
        values[header] = cells[index].strip() if index < len(cells) else ""
    return RawRow(line_number=line_number, values=values)


def parse_amount(text: str) -> Optional[float]:
    """Read the leading number of text, ignoring any trailing characters; None if there is none"""
    match = AMOUNT_PREFIX.match(text)
    if match is None:
        return None
    return float(match.group(0))


def validate_row(raw: RawRow) -> ParsedRow:
    """Turn a raw row into a Transaction, or an InvalidRow explaining the rejection"""
    values = raw.values

    transaction_id = values.get("transaction_id", "")
    if not transaction_id:
        return InvalidRow(line_number=raw.line_number, reason="missing transaction_id")

    amount_text = values.get("amount", "")
    amount = parse_amount(amount_text)
    if amount is None:
        return InvalidRow(line_number=raw.line_number, reason=f"amount is not a number: {amount_text!r}")
    if not math.isfinite(amount):
        return InvalidRow(line_number=raw.line_number, reason=f"amount is not finite: {amount_text!r}")

    return Transaction(
        transaction_id=transaction_id,
        date=values.get("date", ""),
        amount=amount,
        account_id=values.get("account_id", ""),
        merchant_name=values.get("merchant_name", ""),
        transaction_type=values.get("transaction_type", ""),
        location=values.get("location", ""),
        ip_address=values.get("ip_address", ""),
    )


def parse_transactions(csv_text: str) -> IngestionResult:
    """
    Parse raw CSV text into validated transactions.

    The first non-empty line is the header. Blank data lines are skipped;
    rows failing validation are collected separately and excluded from analysis.

    Raises:
        CSVValidationError: if the header lacks required columns
    """
    lines = csv_text.strip().split("\n")
    headers = read_header(lines[0])

    transactions: List[Transaction] = []
    invalid_rows: List[InvalidRow] = []

    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        parsed = validate_row(read_raw_row(line_number, line, headers))
        if isinstance(parsed, InvalidRow):
            logger.debug("Dropping row %d: %s", parsed.line_number, parsed.reason)
            invalid_rows.append(parsed)
        else:
            transactions.append(parsed)

    logger.info(
        "Parsed transactions",
        extra={"valid_rows": len(transactions), "rejected_rows": len(invalid_rows)},
    )
    return IngestionResult(transactions=transactions, invalid_rows=invalid_rows)
