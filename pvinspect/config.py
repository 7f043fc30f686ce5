"""
Configuration settings for the PV Inspect service.
Contains intake limits, interpretation defaults, and system constants.
"""
import os


# --- Intake Validation ---

# Largest file (in bytes) the intake validator lets through to inference.
# 10 MiB covers full-resolution phone photos of a panel array.
MAX_UPLOAD_SIZE = int(os.getenv("PVINSPECT_MAX_UPLOAD_SIZE", str(10 * 1024 * 1024)))

# MIME patterns accepted by default. A wildcard subtype ("image/*") is allowed.
DEFAULT_ACCEPTED_TYPES = ("image/jpeg", "image/png", "image/webp")

ACCEPTED_TYPES = tuple(
    t.strip()
    for t in os.getenv("PVINSPECT_ACCEPTED_TYPES", ",".join(DEFAULT_ACCEPTED_TYPES)).split(",")
    if t.strip()
)

# Switches intake off entirely, e.g. while the inference backend is down.
UPLOADS_DISABLED = os.getenv("PVINSPECT_UPLOADS_DISABLED", "").lower() in ("1", "true", "yes")


# --- Result Interpretation ---

# Detections below this confidence are discarded before summarising.
DEFAULT_CONFIDENCE_THRESHOLD = 0.7

# Number of showcase entries returned by the "recommended" query.
DEFAULT_RECOMMENDED_LIMIT = 3

# Cap on showcase search results returned over HTTP.
DEFAULT_SEARCH_LIMIT = 10

# Most result sets accepted by one batch interpretation request.
MAX_BATCH_SIZE = 10

# Default page size for an upload's analysis history.
DEFAULT_HISTORY_LIMIT = 10


# --- Thumbnails ---

# Thumbnails fit inside this box and are never enlarged.
THUMBNAIL_SIZE = (300, 300)
THUMBNAIL_QUALITY = 80


# --- Logging ---

LOG_LEVEL = os.getenv("PVINSPECT_LOG_LEVEL", "INFO").upper()
