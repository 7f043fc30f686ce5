# Static lookup tables for panel conditions plus the bundled showcase catalog.
# Rationale:
# 1. Labels, error messages and maintenance rules are keyed by enum members so that
#    adding a PanelCondition without a label fails at import time.
# 2. The showcase catalog stands in for live inference in demo mode; its samples are
#    pre-computed results for reference photos kept in the static asset store.

from pvinspect.models import (
    BoundingBox,
    ClassificationSample,
    DemoEntry,
    ErrorType,
    PanelCondition,
    Severity,
)

CATEGORY_LABELS = {
    PanelCondition.NORMAL: "Normal",
    PanelCondition.LEAVES: "Leaf obstruction",
    PanelCondition.DUST: "Dust coverage",
    PanelCondition.SHADOW: "Shadow",
    PanelCondition.OTHER: "Other anomaly",
}

# One template per error type. FILE_TOO_LARGE is formatted with the limit in MB.
ERROR_MESSAGES = {
    ErrorType.FILE_TOO_LARGE: "File exceeds the size limit; the maximum supported size is {max_mb}MB.",
    ErrorType.UNSUPPORTED_FORMAT: "Unsupported file format. Please choose a JPG, PNG or WEBP image.",
    ErrorType.UNKNOWN: "File upload failed.",
}

# Maintenance advice per problem category, applied in this order.
RECOMMENDATION_RULES = {
    PanelCondition.LEAVES: {
        "type": "cleaning",
        "priority": Severity.MEDIUM,
        "description": "Clear leaves off the panel surface to restore generation efficiency.",
        "estimated_cost": 200,
        "estimated_time": "2-4 hours",
    },
    PanelCondition.DUST: {
        "type": "cleaning",
        "priority": Severity.MEDIUM,
        "description": "Clean the dust off the panel surface; regular cleaning can raise output by 15-20%.",
        "estimated_cost": 150,
        "estimated_time": "1-2 hours",
    },
    PanelCondition.SHADOW: {
        "type": "inspection",
        "priority": Severity.LOW,
        "description": "Shading detected; check the surroundings for new obstructions.",
        "estimated_cost": 100,
        "estimated_time": "1 hour",
    },
    PanelCondition.OTHER: {
        "type": "inspection",
        "priority": Severity.HIGH,
        "description": "Anomaly detected; schedule a detailed inspection to identify the problem.",
        "estimated_cost": 500,
        "estimated_time": "4-6 hours",
    },
}

# Used when no problem category is present.
PREVENTIVE_MAINTENANCE = {
    "type": "maintenance",
    "priority": Severity.LOW,
    "description": "Panel is in good condition; keep up regular preventive maintenance.",
    "estimated_cost": 300,
    "estimated_time": "2-3 hours",
}


def _sample(category, confidence, box, description, severity):
    x, y, width, height = box
    return ClassificationSample(
        category=category,
        confidence=confidence,
        bounding_box=BoundingBox(x=x, y=y, width=width, height=height),
        description=description,
        severity=severity,
    )


SHOWCASE_CATALOG = (
    DemoEntry(
        id="demo-1",
        title="Normal panel",
        description="A panel in good condition with no obstruction or soiling",
        image_url="/static/demo/normal-panel.jpg",
        category=PanelCondition.NORMAL,
        expected_results=(
            _sample(PanelCondition.NORMAL, 0.95, (50, 50, 300, 200), "Normal panel area", Severity.LOW),
        ),
    ),
    DemoEntry(
        id="demo-2",
        title="Leaf obstruction",
        description="Leaves covering the panel surface reduce generation efficiency",
        image_url="/static/demo/leaves-obstruction.jpg",
        category=PanelCondition.LEAVES,
        expected_results=(
            _sample(PanelCondition.NORMAL, 0.88, (100, 80, 200, 150), "Normal panel area", Severity.LOW),
            _sample(PanelCondition.LEAVES, 0.92, (250, 120, 80, 60), "Leaf obstruction detected", Severity.MEDIUM),
        ),
    ),
    DemoEntry(
        id="demo-3",
        title="Dust coverage",
        description="Heavy dust build-up on the panel surface calls for cleaning",
        image_url="/static/demo/dust-coverage.jpg",
        category=PanelCondition.DUST,
        expected_results=(
            _sample(PanelCondition.NORMAL, 0.75, (80, 60, 180, 120), "Normal panel area", Severity.LOW),
            _sample(PanelCondition.DUST, 0.89, (200, 100, 120, 90), "Dust coverage detected", Severity.MEDIUM),
        ),
    ),
    DemoEntry(
        id="demo-4",
        title="Cloud shadow",
        description="A passing cloud casts a shadow that temporarily lowers output",
        image_url="/static/demo/cloud-shadow.jpg",
        category=PanelCondition.SHADOW,
        expected_results=(
            _sample(PanelCondition.NORMAL, 0.82, (60, 40, 220, 160), "Normal panel area", Severity.LOW),
            _sample(PanelCondition.SHADOW, 0.78, (180, 80, 100, 80), "Shadow detected", Severity.LOW),
        ),
    ),
    DemoEntry(
        id="demo-5",
        title="Abnormal condition",
        description="The panel shows an anomaly that needs a detailed check",
        image_url="/static/demo/abnormal-condition.jpg",
        category=PanelCondition.OTHER,
        expected_results=(
            _sample(PanelCondition.NORMAL, 0.65, (40, 30, 150, 100), "Normal panel area", Severity.LOW),
            _sample(PanelCondition.OTHER, 0.85, (200, 80, 120, 100), "Anomaly detected", Severity.HIGH),
        ),
    ),
    DemoEntry(
        id="demo-6",
        title="Mixed issues",
        description="Several problems at once that need combined treatment",
        image_url="/static/demo/mixed-issues.jpg",
        category=PanelCondition.OTHER,
        expected_results=(
            _sample(PanelCondition.NORMAL, 0.70, (50, 40, 180, 120), "Normal panel area", Severity.LOW),
            _sample(PanelCondition.LEAVES, 0.83, (200, 60, 60, 45), "Leaf obstruction detected", Severity.MEDIUM),
            _sample(PanelCondition.DUST, 0.76, (150, 120, 100, 75), "Dust coverage detected", Severity.MEDIUM),
        ),
    ),
)

# Overlay colours for annotated images
CATEGORY_COLORS = {
    PanelCondition.NORMAL: "#22c55e",
    PanelCondition.LEAVES: "#f59e0b",
    PanelCondition.DUST: "#6b7280",
    PanelCondition.SHADOW: "#3b82f6",
    PanelCondition.OTHER: "#ef4444",
}

SEVERITY_COLORS = {
    Severity.LOW: "#22c55e",
    Severity.MEDIUM: "#f59e0b",
    Severity.HIGH: "#ef4444",
}
