import fnmatch
import logging
from enum import Enum
from typing import Callable, Iterable, List, Sequence

from pvinspect.config import DEFAULT_ACCEPTED_TYPES, MAX_UPLOAD_SIZE
from pvinspect.models import (
    DropEvent,
    ErrorType,
    FileRejection,
    IntakeFile,
    RejectionReason,
    ValidationError,
)
from pvinspect.panel_data import ERROR_MESSAGES

logger = logging.getLogger(__name__)

# Reason codes emitted by the drop-zone filter (same codes the browser side uses).
FILE_TOO_LARGE_CODE = "file-too-large"
FILE_INVALID_TYPE_CODE = "file-invalid-type"

_CODE_TO_ERROR_TYPE = {
    FILE_TOO_LARGE_CODE: ErrorType.FILE_TOO_LARGE,
    FILE_INVALID_TYPE_CODE: ErrorType.UNSUPPORTED_FORMAT,
}


class DropzoneState(str, Enum):
    IDLE = "idle"
    DRAG_ACTIVE = "drag-active"
    DRAG_REJECT = "drag-reject"


def dropzone_state(is_drag_active: bool, is_drag_reject: bool) -> DropzoneState:
    """Maps the browser's drag-tracking flags to one presentation state."""
    if is_drag_reject:
        return DropzoneState.DRAG_REJECT
    if is_drag_active:
        return DropzoneState.DRAG_ACTIVE
    return DropzoneState.IDLE


class IntakeValidator:
    """
    Gates which dropped or selected files reach the inference collaborator.

    Responsibilities:
    1. Apply the size/type policy to offered files (check_file, build_event).
    2. Resolve a drop event to exactly one outcome: the first accepted file,
       a typed ValidationError for the first rejection, or nothing.
    3. Keep a single message template per error type. Every error is
       non-retryable since the user has to pick a different file.
    """

    def __init__(self, max_size: int = MAX_UPLOAD_SIZE,
                 accepted_types: Iterable[str] = DEFAULT_ACCEPTED_TYPES,
                 disabled: bool = False):
        self.max_size = max_size
        self.accepted_types = tuple(accepted_types)
        self.disabled = disabled

    def handle_drop(self, event: DropEvent,
                    on_accept: Callable[[IntakeFile], None],
                    on_reject: Callable[[ValidationError], None]) -> None:
        """Fires at most one callback for the event."""
        if self.disabled:
            logger.debug("Intake disabled, ignoring drop event")
            return

        if event.accepted:
            # Single-file intake: first wins, the rest are dropped
            if len(event.accepted) > 1:
                logger.debug(f"Dropping {len(event.accepted) - 1} extra accepted files")
            on_accept(event.accepted[0])
            return

        if event.rejected:
            error = self.classify_rejection(event.rejected[0])
            logger.warning(f"Rejected {event.rejected[0].file.filename}: {error.type.value}")
            on_reject(error)

    def classify_rejection(self, rejection: FileRejection) -> ValidationError:
        """Maps the first reason code of a rejection to a ValidationError."""
        code = rejection.errors[0].code if rejection.errors else None
        return self.error_for(_CODE_TO_ERROR_TYPE.get(code, ErrorType.UNKNOWN))

    def error_for(self, error_type: ErrorType) -> ValidationError:
        message = ERROR_MESSAGES[error_type].format(max_mb=round(self.max_size / 1024 / 1024))
        return ValidationError(type=error_type, message=message, retryable=False)

    def accepts_type(self, content_type: str) -> bool:
        content_type = (content_type or "").lower()
        return any(fnmatch.fnmatch(content_type, pattern.lower()) for pattern in self.accepted_types)

    def check_file(self, file: IntakeFile) -> List[RejectionReason]:
        """
        Server-side equivalent of the drop-zone filter.
        Returns the reason codes the file violates, empty if it passes.
        """
        errors = []
        if file.size > self.max_size:
            errors.append(RejectionReason(
                code=FILE_TOO_LARGE_CODE,
                message=f"File is larger than {self.max_size} bytes"
            ))
        if not self.accepts_type(file.content_type):
            errors.append(RejectionReason(
                code=FILE_INVALID_TYPE_CODE,
                message=f"File type must be one of {', '.join(self.accepted_types)}"
            ))
        return errors

    def build_event(self, files: Sequence[IntakeFile]) -> DropEvent:
        """Splits offered files into accepted and rejected, keeping their order."""
        accepted = []
        rejected = []
        for file in files:
            errors = self.check_file(file)
            if errors:
                rejected.append(FileRejection(file=file, errors=errors))
            else:
                accepted.append(file)
        return DropEvent(accepted=accepted, rejected=rejected)
