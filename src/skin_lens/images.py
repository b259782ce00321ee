"""Local image loading and validation."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from skin_lens.config import MAX_IMAGE_BYTES
from skin_lens.exceptions import ValidationError

ImageInput = bytes | str | Path | Image.Image

ALLOWED_MIME_TYPES = {"image/jpeg", "image/png"}
_MIME_ALIASES = {"image/jpg": "image/jpeg", "image/pjpeg": "image/jpeg"}
_FORMAT_TO_MIME = {"JPEG": "image/jpeg", "MPO": "image/jpeg", "PNG": "image/png"}


def normalize_mime(content_type: str | None) -> str | None:
    if not content_type:
        return None
    mime = content_type.split(";")[0].strip().lower()
    return _MIME_ALIASES.get(mime, mime)


def sniff_mime(payload: bytes) -> str | None:
    """Return the mime type Pillow detects for ``payload``, if any."""
    try:
        with Image.open(BytesIO(payload)) as image:
            fmt = (image.format or "").upper()
    except (UnidentifiedImageError, OSError, ValueError):
        return None
    return _FORMAT_TO_MIME.get(fmt, f"image/{fmt.lower()}" if fmt else None)


def validate_image(payload: bytes, mime: str | None, *, max_bytes: int = MAX_IMAGE_BYTES) -> str:
    """Check type and size of an image before it is sent upstream.

    Returns the normalized mime type. Raises ValidationError on an
    unsupported type, an empty payload, a payload above ``max_bytes`` or
    bytes that do not decode as the declared image type.
    """
    resolved = normalize_mime(mime)
    if resolved is None:
        resolved = sniff_mime(payload) if payload else None
    if resolved not in ALLOWED_MIME_TYPES:
        raise ValidationError("Invalid file type. Only JPEG and PNG files are allowed.")
    if not payload:
        raise ValidationError("Empty image file.")
    if len(payload) > max_bytes:
        raise ValidationError("File size too large. Maximum allowed size is 2MB.")

    detected = sniff_mime(payload)
    if detected is None:
        raise ValidationError("Failed to process image. Please try a different image.")
    if detected not in ALLOWED_MIME_TYPES:
        raise ValidationError("Invalid file type. Only JPEG and PNG files are allowed.")
    return resolved


def load_image(image: ImageInput) -> tuple[bytes, str | None]:
    """Load raw bytes and a best-guess mime type from various input types."""
    if isinstance(image, bytes):
        return image, sniff_mime(image)

    if isinstance(image, Image.Image):
        fmt = (image.format or "PNG").upper()
        if fmt not in {"JPEG", "PNG"}:
            fmt = "PNG"
        with BytesIO() as buffer:
            image.save(buffer, format=fmt)
            return buffer.getvalue(), _FORMAT_TO_MIME[fmt]

    path = Path(image) if isinstance(image, str) else image
    if not path.exists():
        raise ValidationError(f"Image file not found: {path}")
    try:
        payload = path.read_bytes()
    except OSError as e:
        raise ValidationError(f"Failed to read image: {e}") from e
    return payload, sniff_mime(payload)
