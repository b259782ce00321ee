"""Custom exceptions for skin-lens."""

from enum import Enum


class SkinLensError(Exception):
    """Base exception for skin-lens."""

    pass


class ValidationError(SkinLensError):
    """Raised when an image fails local checks before any network call."""

    pass


class TransportError(SkinLensError):
    """Raised on network failure or an unreadable upstream body."""

    pass


class NoResultError(SkinLensError):
    """Raised when no analysis result is stored."""

    def __init__(self, message: str = "No analysis result found. Please run a new analysis."):
        super().__init__(message)


class UpstreamErrorCategory(str, Enum):
    INVALID_CREDENTIALS = "InvalidCredentials"
    NO_FACE_DETECTED = "NoFaceDetected"
    IMAGE_QUALITY_REJECTED = "ImageQualityRejected"
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    FILE_TOO_LARGE = "FileTooLarge"
    INVALID_DIMENSIONS = "InvalidDimensions"
    MULTIPLE_FACES_REJECTED = "MultipleFacesRejected"
    INSUFFICIENT_PERMISSION = "InsufficientPermission"
    UPSTREAM_BAD_REQUEST = "UpstreamBadRequest"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"


# (HTTP status, user-facing message) per category.
CATEGORY_RESPONSES: dict[UpstreamErrorCategory, tuple[int, str]] = {
    UpstreamErrorCategory.INVALID_CREDENTIALS: (401, "Invalid vision API credentials."),
    UpstreamErrorCategory.NO_FACE_DETECTED: (
        400,
        "No face detected in the image. Please ensure the image contains a clear face, "
        "facing forward with good lighting.",
    ),
    UpstreamErrorCategory.IMAGE_QUALITY_REJECTED: (
        400,
        "Image quality is not suitable for analysis. Please use a clearer image with a single face, "
        "proper lighting, and frontal view.",
    ),
    UpstreamErrorCategory.UNSUPPORTED_FORMAT: (400, "Image format not supported. Please use JPEG or PNG format."),
    UpstreamErrorCategory.FILE_TOO_LARGE: (400, "Image file is too large. Maximum allowed size is 2MB."),
    UpstreamErrorCategory.INVALID_DIMENSIONS: (
        400,
        "Image size does not meet requirements. Please use an image with dimensions between "
        "48x48 and 4096x4096 pixels.",
    ),
    UpstreamErrorCategory.MULTIPLE_FACES_REJECTED: (
        400,
        "Multiple faces detected. Please use an image with only one face for accurate skin analysis.",
    ),
    UpstreamErrorCategory.INSUFFICIENT_PERMISSION: (
        403,
        "The vision API key is not permitted to use this analysis.",
    ),
    UpstreamErrorCategory.UPSTREAM_BAD_REQUEST: (
        400,
        "Bad request to the vision API. Check image format and size.",
    ),
    UpstreamErrorCategory.UPSTREAM_UNAVAILABLE: (
        500,
        "The vision API is unavailable. Please try again later.",
    ),
}


class UpstreamError(SkinLensError):
    """Raised when the vision API rejects a request.

    ``detail`` keeps the upstream text for logs; ``str(error)`` is always the
    fixed user-facing message of the category.
    """

    def __init__(
        self,
        category: UpstreamErrorCategory,
        *,
        upstream_status: int | None = None,
        detail: str | None = None,
    ):
        self.category = category
        self.status_code, self.user_message = CATEGORY_RESPONSES[category]
        self.upstream_status = upstream_status
        self.detail = detail
        super().__init__(self.user_message)


class AuthenticationError(UpstreamError):
    """Raised when API credentials are missing, malformed or rejected."""

    def __init__(self, *, upstream_status: int | None = None, detail: str | None = None):
        super().__init__(
            UpstreamErrorCategory.INVALID_CREDENTIALS,
            upstream_status=upstream_status,
            detail=detail,
        )
