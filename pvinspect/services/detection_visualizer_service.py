import io
import logging
from typing import Sequence

from PIL import Image, ImageDraw, UnidentifiedImageError

from pvinspect.models import ClassificationSample, Severity
from pvinspect.panel_data import CATEGORY_COLORS, SEVERITY_COLORS
from pvinspect.services.image_inspection import UnreadableImageError

logger = logging.getLogger(__name__)

LABEL_HEIGHT = 16
SEVERITY_DOT_RADIUS = 6

class DetectionVisualizerService:
    def draw_detections(self, image_content: bytes, samples: Sequence[ClassificationSample]) -> bytes:
        """
        Draws each detection's bounding box, a "<category> (<confidence>%)" label,
        and a severity dot for anything above LOW.
        Boxes are in source-image pixels. Returns the annotated image as JPEG bytes.
        """
        try:
            image = Image.open(io.BytesIO(image_content)).convert("RGB")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise UnreadableImageError(str(e)) from e

        draw = ImageDraw.Draw(image)

        for sample in samples:
            box = sample.bounding_box
            color = CATEGORY_COLORS[sample.category]
            x0, y0 = box.x, box.y
            x1, y1 = box.x + box.width, box.y + box.height

            draw.rectangle([x0, y0, x1, y1], outline=color, width=2)

            # Label sits above the box, or inside it at the top edge
            label = f"{sample.category.value} ({round(sample.confidence * 100)}%)"
            label_top = y0 - LABEL_HEIGHT if y0 >= LABEL_HEIGHT else y0
            label_width = draw.textlength(label) + 8
            draw.rectangle([x0, label_top, x0 + label_width, label_top + LABEL_HEIGHT], fill=color)
            draw.text((x0 + 4, label_top + 2), label, fill="white")

            if sample.severity != Severity.LOW:
                cx, cy = x1 - 8, y0 + 8
                r = SEVERITY_DOT_RADIUS
                draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=SEVERITY_COLORS[sample.severity])

        logger.debug(f"Annotated image with {len(samples)} detections")

        buf = io.BytesIO()
        image.save(buf, format="JPEG")
        return buf.getvalue()

detection_visualizer_service = DetectionVisualizerService()
