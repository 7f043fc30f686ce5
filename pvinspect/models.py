from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class PanelCondition(str, Enum):
    NORMAL = "normal"
    LEAVES = "leaves"
    DUST = "dust"
    SHADOW = "shadow"
    OTHER = "other"


class Severity(str, Enum):
    """Urgency of a detection. Compares by rank (LOW < MEDIUM < HIGH), not alphabetically."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return list(Severity).index(self)

    def __lt__(self, other):
        return self.rank < _severity_rank(other)

    def __le__(self, other):
        return self.rank <= _severity_rank(other)

    def __gt__(self, other):
        return self.rank > _severity_rank(other)

    def __ge__(self, other):
        return self.rank >= _severity_rank(other)


def _severity_rank(other) -> int:
    # Plain strings would otherwise compare alphabetically through str
    if not isinstance(other, Severity):
        raise TypeError(f"cannot order Severity against {type(other).__name__}")
    return other.rank


class ErrorType(str, Enum):
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    UNKNOWN = "UNKNOWN"


# --- Detection results ---

class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class ClassificationSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: PanelCondition
    confidence: float = Field(..., ge=0.0, le=1.0)
    bounding_box: BoundingBox
    description: str = Field(..., min_length=1)
    severity: Severity


class DemoEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    image_url: str
    category: PanelCondition # Dominant category, used for indexing and search
    expected_results: Tuple[ClassificationSample, ...] = Field(..., min_length=1)


class CatalogStatistics(BaseModel):
    total: int
    by_category: Dict[PanelCondition, int]
    average_confidence: float


class CategoryBreakdown(BaseModel):
    category: PanelCondition
    count: int
    label: str


class DemoSearchResponse(BaseModel):
    results: List[DemoEntry]
    total: int
    query: str
    category: Optional[PanelCondition] = None


# --- Intake ---

class IntakeFile(BaseModel):
    filename: str
    content_type: str
    size: int = Field(..., ge=0)
    content: bytes = Field(default=b"", repr=False)


class RejectionReason(BaseModel):
    code: str
    message: Optional[str] = None


class FileRejection(BaseModel):
    file: IntakeFile
    errors: List[RejectionReason] = Field(default_factory=list)


class DropEvent(BaseModel):
    accepted: List[IntakeFile] = Field(default_factory=list)
    rejected: List[FileRejection] = Field(default_factory=list)
    is_drag_active: bool = False
    is_drag_reject: bool = False


class ValidationError(BaseModel):
    """User-facing outcome of a rejected file."""
    model_config = ConfigDict(frozen=True)

    type: ErrorType
    message: str
    retryable: bool = False


class IntakePolicyResponse(BaseModel):
    max_size: int
    accepted_types: List[str]
    disabled: bool


class ImageMetadata(BaseModel):
    size: int
    width: int
    height: int
    format: str


class UploadResponse(BaseModel):
    image_id: str
    filename: str
    uploaded_at: str
    metadata: ImageMetadata
    thumbnail_base64: Optional[str] = None


# --- Analysis ---

class Recommendation(BaseModel):
    type: str # 'maintenance', 'cleaning', 'inspection' or 'replacement'
    priority: Severity
    description: str
    estimated_cost: Optional[float] = None
    estimated_time: Optional[str] = None


class AnalysisSummary(BaseModel):
    overall_status: str # 'healthy', 'warning' or 'critical'
    total_issues: int
    processing_time: float
    confidence: float


class AnalysisReport(BaseModel):
    results: List[ClassificationSample]
    summary: AnalysisSummary
    recommendations: List[Recommendation]


from pvinspect.config import DEFAULT_CONFIDENCE_THRESHOLD, MAX_BATCH_SIZE

class InterpretRequest(BaseModel):
    results: List[ClassificationSample]
    # When set, the report is stored in that upload's analysis history
    image_id: Optional[str] = None
    confidence_threshold: float = Field(default=DEFAULT_CONFIDENCE_THRESHOLD, ge=0.0, le=1.0)


class HealthCheckResponse(BaseModel):
    status: str
    catalog_size: int


class AnnotateRequest(BaseModel):
    results: List[ClassificationSample]


class BatchItem(BaseModel):
    image_id: str
    results: List[ClassificationSample]


class BatchInterpretRequest(BaseModel):
    items: List[BatchItem] = Field(..., min_length=1, max_length=MAX_BATCH_SIZE)
    confidence_threshold: float = Field(default=DEFAULT_CONFIDENCE_THRESHOLD, ge=0.0, le=1.0)


class BatchSuccess(AnalysisReport):
    image_id: str


class BatchFailure(BaseModel):
    image_id: str
    error: str


class BatchInterpretResponse(BaseModel):
    successful: List[BatchSuccess]
    failed: List[BatchFailure]
    total: int
    success_count: int
    failure_count: int


class AnalysisHistoryEntry(BaseModel):
    id: str
    image_id: str
    timestamp: str
    summary: AnalysisSummary


class AnalysisHistoryResponse(BaseModel):
    image_id: str
    history: List[AnalysisHistoryEntry]
    total: int
    limit: int
    offset: int
