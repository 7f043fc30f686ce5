import uuid
import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile

from pvinspect.dal.upload_repo import UploadRepository
from pvinspect.dependencies import get_upload_repo, get_validator
from pvinspect.models import AnnotateRequest, ErrorType, ImageMetadata, IntakeFile, UploadResponse, ValidationError
from pvinspect.services.detection_visualizer_service import detection_visualizer_service
from pvinspect.services.image_inspection import UnreadableImageError, describe_image, make_thumbnail_base64
from pvinspect.services.intake_validator import IntakeValidator

router = APIRouter(prefix="/api/upload", tags=["upload"])

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    ErrorType.FILE_TOO_LARGE: 413,
    ErrorType.UNSUPPORTED_FORMAT: 415,
    ErrorType.UNKNOWN: 400,
}

def _rejected(error: ValidationError) -> HTTPException:
    return HTTPException(status_code=_ERROR_STATUS[error.type], detail=error.model_dump(mode="json"))

def _to_response(record: dict, thumbnail_base64: str = None) -> UploadResponse:
    return UploadResponse(
        image_id=record["id"],
        filename=record["filename"],
        uploaded_at=record["uploaded_at"],
        metadata=ImageMetadata(**record["metadata"]),
        thumbnail_base64=thumbnail_base64
    )

def _require_session(request: Request) -> str:
    session_id = request.cookies.get("session_id")
    if not session_id:
        raise HTTPException(status_code=400, detail="No session found - reload page")
    return session_id

@router.post("", response_model=UploadResponse)
async def upload_image(
    request: Request,
    files: List[UploadFile] = File(...),
    validator: IntakeValidator = Depends(get_validator),
    repo: UploadRepository = Depends(get_upload_repo),
):
    session_id = _require_session(request)
    if validator.disabled:
        raise HTTPException(status_code=503, detail="Uploads are currently disabled")

    # Sizes come from the multipart parser; only the accepted file is read into memory
    offered = []
    sources = {}
    for file in files:
        size = file.size
        if size is None:
            file.file.seek(0, 2)
            size = file.file.tell()
            file.file.seek(0)
        intake_file = IntakeFile(
            filename=file.filename or "upload",
            content_type=file.content_type or "",
            size=size
        )
        offered.append(intake_file)
        sources[id(intake_file)] = file

    outcome = {}
    validator.handle_drop(
        validator.build_event(offered),
        on_accept=lambda f: outcome.update(file=f),
        on_reject=lambda e: outcome.update(error=e),
    )

    if "error" in outcome:
        raise _rejected(outcome["error"])
    if "file" not in outcome:
        raise HTTPException(status_code=400, detail="No file received")

    accepted: IntakeFile = outcome["file"]
    accepted.content = await sources[id(accepted)].read()

    # The declared content type passed; make sure the bytes really are an image
    try:
        metadata = describe_image(accepted.content)
        thumbnail = make_thumbnail_base64(accepted.content)
    except UnreadableImageError as e:
        logger.warning(f"Unreadable image {accepted.filename}: {e}")
        raise _rejected(validator.error_for(ErrorType.UNSUPPORTED_FORMAT))

    try:
        image_id = str(uuid.uuid4())
        record = repo.save(
            image_id, session_id, accepted.filename, accepted.content_type,
            accepted.content, metadata.model_dump()
        )
    except Exception as e:
        logger.error(f"Upload failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"Uploaded {accepted.filename} as {image_id} ({metadata.width}x{metadata.height} {metadata.format}, {metadata.size} bytes)")
    return _to_response(record, thumbnail)

@router.get("", response_model=List[UploadResponse])
async def list_uploads(request: Request, repo: UploadRepository = Depends(get_upload_repo)):
    session_id = request.cookies.get("session_id")
    if not session_id:
        return []
    return [_to_response(r) for r in repo.list_images(session_id)]

@router.get("/{image_id}/content")
async def get_upload_content(image_id: str, request: Request, repo: UploadRepository = Depends(get_upload_repo)):
    session_id = _require_session(request)
    record = repo.get(image_id, session_id)
    if not record:
        raise HTTPException(status_code=404, detail="Image not found")
    return Response(content=record["content"], media_type=record["content_type"])

@router.post("/{image_id}/annotate")
async def annotate_upload(image_id: str, payload: AnnotateRequest, request: Request,
                          repo: UploadRepository = Depends(get_upload_repo)):
    """Returns the stored image as JPEG with the given detections drawn on it."""
    session_id = _require_session(request)
    record = repo.get(image_id, session_id)
    if not record:
        raise HTTPException(status_code=404, detail="Image not found")

    try:
        annotated = detection_visualizer_service.draw_detections(record["content"], payload.results)
    except Exception as e:
        logger.error(f"Annotation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return Response(content=annotated, media_type="image/jpeg")

@router.delete("/{image_id}")
async def delete_upload(image_id: str, request: Request, repo: UploadRepository = Depends(get_upload_repo)):
    session_id = _require_session(request)
    if not repo.delete(image_id, session_id):
        raise HTTPException(status_code=404, detail="Image not found")
    return {"status": "deleted", "id": image_id}

@router.delete("")
async def clear_session_uploads(request: Request, repo: UploadRepository = Depends(get_upload_repo)):
    """Deletes all uploads associated with the current session ID."""
    session_id = _require_session(request)
    repo.clear_session(session_id)
    return {"status": "cleared", "message": "All session uploads deleted"}
