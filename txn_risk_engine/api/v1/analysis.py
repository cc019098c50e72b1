"""POST /v1/transactions/analyze - fraud pattern and loan eligibility analysis endpoint"""

import time
import logging
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from txn_risk_engine.api.v1.schemas import AnalysisResponse
from txn_risk_engine.api.dependencies import get_request_id, get_settings
from txn_risk_engine.config import Settings
from txn_risk_engine.domain.engine import analyze_csv
from txn_risk_engine.domain.exceptions import (
    CSVValidationError,
    InvalidEncodingError,
    PayloadTooLargeError,
    UnsupportedFileError,
)
from txn_risk_engine.infrastructure.observability.metrics import record_analysis, record_rejection
from txn_risk_engine.infrastructure.observability.logging import log_analysis

router = APIRouter()


def decode_upload(filename: str, content: bytes, max_bytes: int) -> str:
    """
    Check an uploaded file and return its text.

    Raises:
        UnsupportedFileError: filename does not end in .csv
        PayloadTooLargeError: content is larger than max_bytes
        InvalidEncodingError: content is not valid UTF-8
    """
    if not filename.lower().endswith(".csv"):
        raise UnsupportedFileError("Only CSV files are allowed")
    if len(content) > max_bytes:
        raise PayloadTooLargeError(len(content), max_bytes)
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise InvalidEncodingError("CSV file must be UTF-8 encoded") from e


@router.post(
    "/transactions/analyze",
    response_model=AnalysisResponse,
    response_model_exclude_none=True,
)
async def analyze_upload(
    request: Request,
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
):
    """
    Analyze an uploaded CSV of transactions.

    Flow:
    1. Check extension and size, decode as UTF-8
    2. Parse and validate rows
    3. Detect fraud patterns and score overall risk
    4. Assess loan eligibility
    5. Return the combined analysis
    """
    start_time = time.time()
    request_id = get_request_id(request)
    filename = file.filename or ""

    try:
        content = await file.read()
        csv_text = decode_upload(filename, content, settings.max_upload_bytes)

        # CPU-bound; keep it off the event loop
        result = await run_in_threadpool(
            analyze_csv,
            csv_text,
            suspicious_limit=settings.suspicious_list_limit,
            merchant_limit=settings.top_merchants_limit,
        )

        duration_ms = (time.time() - start_time) * 1000
        record_analysis(result)
        log_analysis(
            request_id,
            filename,
            result.total_transactions,
            result.suspicious_transactions,
            result.overall_risk_score,
            result.loan_eligibility.is_eligible,
            duration_ms,
        )

        return AnalysisResponse.from_result(result)

    except (UnsupportedFileError, InvalidEncodingError) as e:
        record_rejection()
        logging.warning(f"Rejected upload: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    except PayloadTooLargeError as e:
        record_rejection()
        logging.warning(f"Rejected upload: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=413, detail=str(e))

    except CSVValidationError as e:
        record_rejection()
        logging.warning(f"Invalid CSV: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to process transaction data")
