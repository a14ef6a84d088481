"""Fridge photo validation and downscaling before recognition."""

import io
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from app.config import settings
from app.utils.exceptions import ImageProcessingError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_MIME = ("image/jpeg", "image/png", "image/webp")

# Below this size the photo goes to Gemini untouched
RESIZE_MIN_BYTES = 350_000


class ImageService:
    """Service for processing uploaded fridge photos."""

    @staticmethod
    def validate_image(file_content: bytes, declared_mime: Optional[str] = None) -> Tuple[bytes, str]:
        """
        Validate an uploaded photo.

        Args:
            file_content: Image file bytes
            declared_mime: Content type sent by the browser, if any

        Returns:
            Tuple of (image_bytes, mime_type) where mime_type comes from the bytes

        Raises:
            ImageProcessingError: If image is invalid
        """
        if not file_content:
            raise ImageProcessingError("Image file is empty")

        if len(file_content) > settings.max_upload_size:
            raise ImageProcessingError(
                f"Image file too large (max {settings.max_upload_size / 1024 / 1024:.0f}MB)"
            )

        mime_type = ImageService.detect_mime_type(file_content)
        if mime_type not in ALLOWED_IMAGE_MIME:
            raise ImageProcessingError(
                f"Unsupported image format: {mime_type}. Supported: JPEG, PNG, WebP"
            )

        if declared_mime and declared_mime.lower() != mime_type:
            logger.debug("Declared content type %s differs from detected %s", declared_mime, mime_type)

        return file_content, mime_type

    @staticmethod
    def detect_mime_type(file_content: bytes) -> str:
        """Detect MIME type from magic bytes."""
        if file_content.startswith(b"\xff\xd8\xff"):
            return "image/jpeg"
        if file_content.startswith(b"\x89PNG\r\n\x1a\n"):
            return "image/png"
        if file_content.startswith(b"RIFF") and b"WEBP" in file_content[:12]:
            return "image/webp"
        return "application/octet-stream"

    @staticmethod
    def optimize_for_vision(image_bytes: bytes, mime_type: str) -> Tuple[bytes, str]:
        """
        Downscale + compress large photos to reduce Gemini latency.

        Returns (new_bytes, new_mime). Small photos, and photos Pillow cannot
        decode, are returned unchanged.
        """
        if len(image_bytes) < RESIZE_MIN_BYTES:
            return image_bytes, mime_type

        try:
            with Image.open(io.BytesIO(image_bytes)) as im:
                if im.mode in ("RGBA", "LA") or (im.mode == "P" and "transparency" in im.info):
                    bg = Image.new("RGBA", im.size, (255, 255, 255, 255))
                    im = Image.alpha_composite(bg, im.convert("RGBA")).convert("RGB")
                else:
                    im = im.convert("RGB")

                w, h = im.size
                max_side = max(w, h)
                if max_side > settings.vision_max_dim:
                    scale = settings.vision_max_dim / float(max_side)
                    im = im.resize((max(1, int(w * scale)), max(1, int(h * scale))), Image.LANCZOS)

                out = io.BytesIO()
                im.save(out, format="JPEG", quality=settings.jpeg_quality, optimize=True)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.warning(f"Image resize/compress skipped: {e}")
            return image_bytes, mime_type

        optimized = out.getvalue()
        logger.info(
            "Image optimized for vision",
            extra={"orig_bytes": len(image_bytes), "opt_bytes": len(optimized)},
        )
        return optimized, "image/jpeg"
