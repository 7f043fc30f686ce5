import base64
import io
import logging

from PIL import Image, UnidentifiedImageError

from pvinspect.config import THUMBNAIL_QUALITY, THUMBNAIL_SIZE
from pvinspect.models import ImageMetadata

logger = logging.getLogger(__name__)


class UnreadableImageError(ValueError):
    """The uploaded bytes are not an image Pillow can decode."""


def describe_image(content: bytes) -> ImageMetadata:
    """Reads format and dimensions without decoding the full image."""
    try:
        with Image.open(io.BytesIO(content)) as image:
            width, height = image.size
            fmt = (image.format or "unknown").lower()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise UnreadableImageError(str(e)) from e

    return ImageMetadata(size=len(content), width=width, height=height, format=fmt)


def make_thumbnail_base64(content: bytes, size=THUMBNAIL_SIZE, quality: int = THUMBNAIL_QUALITY) -> str:
    """JPEG thumbnail fitting inside `size`; smaller images are not enlarged."""
    try:
        with Image.open(io.BytesIO(content)) as image:
            if image.mode != "RGB":
                image = image.convert("RGB")
            # thumbnail() only ever shrinks
            image.thumbnail(size)
            buffered = io.BytesIO()
            image.save(buffered, format="JPEG", quality=quality)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise UnreadableImageError(str(e)) from e

    return base64.b64encode(buffered.getvalue()).decode("utf-8")
