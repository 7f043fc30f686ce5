import logging
import time
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from pvinspect.config import DEFAULT_CONFIDENCE_THRESHOLD, DEFAULT_HISTORY_LIMIT
from pvinspect.dal.upload_repo import UploadRepository
from pvinspect.dependencies import get_aggregator, get_upload_repo, get_validator
from pvinspect.models import (
    AnalysisHistoryEntry,
    AnalysisHistoryResponse,
    AnalysisReport,
    BatchFailure,
    BatchInterpretRequest,
    BatchInterpretResponse,
    BatchSuccess,
    ClassificationSample,
    HealthCheckResponse,
    IntakePolicyResponse,
    InterpretRequest,
)
from pvinspect.services.intake_validator import IntakeValidator
from pvinspect.services.result_aggregator import ResultAggregator
from pvinspect.services.result_interpreter import result_interpreter

router = APIRouter(prefix="/api")

logger = logging.getLogger(__name__)

@router.get("/health", response_model=HealthCheckResponse)
async def health_check(aggregator: ResultAggregator = Depends(get_aggregator)):
    """Health check endpoint."""
    return HealthCheckResponse(
        status="OK",
        catalog_size=len(aggregator)
    )

@router.get("/intake/policy", response_model=IntakePolicyResponse)
async def intake_policy(validator: IntakeValidator = Depends(get_validator)):
    """Limits the browser drop zone should be configured with."""
    return IntakePolicyResponse(
        max_size=validator.max_size,
        accepted_types=list(validator.accepted_types),
        disabled=validator.disabled
    )

def _timed_interpret(results: List[ClassificationSample], confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD) -> AnalysisReport:
    start_time = time.perf_counter()
    report = result_interpreter.interpret(results, confidence_threshold=confidence_threshold)
    report.summary.processing_time = round((time.perf_counter() - start_time) * 1000, 3)
    return report

def _record_analysis(repo: UploadRepository, image_id: str, session_id: Optional[str], report: AnalysisReport) -> bool:
    if not session_id:
        return False
    entry = AnalysisHistoryEntry(
        id=str(uuid.uuid4()),
        image_id=image_id,
        timestamp=datetime.now().isoformat(timespec="milliseconds"),
        summary=report.summary
    )
    return repo.save_analysis(image_id, session_id, entry.model_dump(mode="json"))

@router.post("/analysis/interpret", response_model=AnalysisReport)
async def interpret_results(payload: InterpretRequest, request: Request,
                            repo: UploadRepository = Depends(get_upload_repo)):
    session_id = request.cookies.get("session_id")
    if payload.image_id and (not session_id or repo.get(payload.image_id, session_id) is None):
        raise HTTPException(status_code=404, detail="Image not found")

    report = _timed_interpret(payload.results, payload.confidence_threshold)
    if payload.image_id:
        _record_analysis(repo, payload.image_id, session_id, report)

    logger.info(f"Interpreted {len(payload.results)} detections: "
                f"{report.summary.overall_status}, {report.summary.total_issues} issues")
    return report

@router.post("/analysis/batch", response_model=BatchInterpretResponse)
async def interpret_batch(payload: BatchInterpretRequest, request: Request,
                          repo: UploadRepository = Depends(get_upload_repo)):
    """
    Interprets the result sets of several uploads in one call.
    Items whose upload is unknown to the session are reported as failed; the others still succeed.
    """
    session_id = request.cookies.get("session_id")
    successful = []
    failed = []

    for item in payload.items:
        if not session_id or repo.get(item.image_id, session_id) is None:
            failed.append(BatchFailure(image_id=item.image_id, error="Image not found"))
            continue

        report = _timed_interpret(item.results, payload.confidence_threshold)
        _record_analysis(repo, item.image_id, session_id, report)
        successful.append(BatchSuccess(image_id=item.image_id, **report.model_dump()))

    logger.info(f"Batch interpretation: {len(successful)} succeeded, {len(failed)} failed")
    return BatchInterpretResponse(
        successful=successful,
        failed=failed,
        total=len(payload.items),
        success_count=len(successful),
        failure_count=len(failed)
    )

@router.get("/analysis/history/{image_id}", response_model=AnalysisHistoryResponse)
async def analysis_history(
    image_id: str,
    request: Request,
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
    repo: UploadRepository = Depends(get_upload_repo),
):
    session_id = request.cookies.get("session_id")
    history = repo.get_analysis_history(image_id, session_id) if session_id else None
    if history is None:
        raise HTTPException(status_code=404, detail="Image not found")

    return AnalysisHistoryResponse(
        image_id=image_id,
        history=history[offset:offset + limit],
        total=len(history),
        limit=limit,
        offset=offset
    )
