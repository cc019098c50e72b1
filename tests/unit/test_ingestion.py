"""Unit tests for CSV ingestion and row validation"""

import pytest
from txn_risk_engine.domain.exceptions import CSVValidationError
from txn_risk_engine.domain.ingestion import parse_amount, parse_transactions, read_header, read_raw_row, validate_row
from txn_risk_engine.domain.models import InvalidRow, RawRow, Transaction


def test_parse_transactions_maps_all_fields(row, make_csv):
    """Test a well-formed row becomes a typed Transaction"""
    csv_text = make_csv([row("TX-1", "500.25", account_id="ACC-9876", merchant_name="Amazon", location="Boston")])

    result = parse_transactions(csv_text)

    assert result.invalid_rows == []
    assert result.transactions == [
        Transaction(
            transaction_id="TX-1",
            date="2025-06-23",
            amount=500.25,
            account_id="ACC-9876",
            merchant_name="Amazon",
            transaction_type="purchase",
            location="Boston",
            ip_address="192.168.1.1",
        )
    ]


def test_header_is_case_insensitive_and_order_independent():
    """Test columns are matched by name regardless of case or position"""
    csv_text = (
        "IP_Address, Amount ,Location,Transaction_Type,Merchant_Name,Account_ID,Date,TRANSACTION_ID\n"
        "10.0.0.7,75.5,Austin,deposit,Payroll,ACC-2,2025-01-02,TX-9\n"
    )

    txn = parse_transactions(csv_text).transactions[0]

    assert txn.transaction_id == "TX-9"
    assert txn.amount == 75.5
    assert txn.account_id == "ACC-2"
    assert txn.transaction_type == "deposit"
    assert txn.ip_address == "10.0.0.7"


def test_missing_columns_are_all_reported():
    """Test the error names every missing column, not just the first"""
    header = "transaction_id,date,amount,account_id,merchant_name,transaction_type"

    with pytest.raises(CSVValidationError) as exc_info:
        parse_transactions(header + "\nTX-1,2025-01-01,10,ACC-1,Shop,purchase\n")

    assert exc_info.value.missing_columns == ["location", "ip_address"]
    assert "location" in str(exc_info.value)
    assert "ip_address" in str(exc_info.value)


def test_empty_input_reports_every_required_column():
    with pytest.raises(CSVValidationError) as exc_info:
        parse_transactions("")

    assert len(exc_info.value.missing_columns) == 8


def test_invalid_rows_are_dropped(row, make_csv):
    """Test rows without an id or with a non-numeric amount are excluded"""
    csv_text = make_csv([
        row("TX-1", "100.5"),
        row("", "200"),
        row("TX-3", "abc"),
        row("TX-4", ""),
        row("TX-5", "nan"),
        row("TX-6", "inf"),
        row("TX-7", "0"),
    ])

    result = parse_transactions(csv_text)

    assert [t.transaction_id for t in result.transactions] == ["TX-1", "TX-7"]
    assert [r.line_number for r in result.invalid_rows] == [3, 4, 5, 6, 7]


def test_blank_lines_and_crlf_are_tolerated(row, make_csv):
    csv_text = make_csv([row("TX-1", "10.5"), "", "   ", row("TX-2", "20.5")]).replace("\n", "\r\n")

    result = parse_transactions(csv_text)

    assert [t.transaction_id for t in result.transactions] == ["TX-1", "TX-2"]
    assert result.transactions[0].ip_address == "192.168.1.1"
    assert result.invalid_rows == []


def test_short_row_fills_missing_values_with_empty_strings():
    headers = read_header("transaction_id,date,amount,account_id,merchant_name,transaction_type,location,ip_address")

    raw = read_raw_row(2, "TX-1, 2025-06-23 , 99.5,ACC-1", headers)

    assert raw.values["date"] == "2025-06-23"
    assert raw.values["amount"] == "99.5"
    assert raw.values["location"] == ""
    assert raw.values["ip_address"] == ""


def test_validate_row_explains_rejection():
    raw = RawRow(line_number=4, values={"transaction_id": "TX-1", "amount": "USD 12"})

    parsed = validate_row(raw)

    assert isinstance(parsed, InvalidRow)
    assert parsed.line_number == 4
    assert "amount" in parsed.reason


@pytest.mark.parametrize(
    "text,expected",
    [
        ("500.25", 500.25),
        ("500.00USD", 500.0),
        ("1_000", 1.0),
        ("-42.5", -42.5),
        (".5", 0.5),
        ("7.", 7.0),
        ("1e3", 1000.0),
        ("2e", 2.0),
        ("12abc", 12.0),
    ],
)
def test_parse_amount_reads_leading_number(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "USD 12", "nan", "inf", "-", "."])
def test_parse_amount_without_leading_number(text):
    assert parse_amount(text) is None


def test_amount_with_trailing_text_is_kept(row, make_csv):
    """Test a suffixed amount is read by its prefix and underscores end the number"""
    result = parse_transactions(make_csv([row("TX-1", "1_000"), row("TX-2", "500.00USD")]))

    assert [(t.transaction_id, t.amount) for t in result.transactions] == [("TX-1", 1.0), ("TX-2", 500.0)]
    assert result.invalid_rows == []


def test_overflowing_amount_is_rejected(row, make_csv):
    result = parse_transactions(make_csv([row("TX-1", "1e999")]))

    assert result.transactions == []
    assert "finite" in result.invalid_rows[0].reason
