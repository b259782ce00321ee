"""Face++ provider implementation."""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from urllib import error, parse, request

from skin_lens.config import DEFAULT_BASE_URL, MAX_IMAGE_BYTES, Settings
from skin_lens.exceptions import (
    AuthenticationError,
    SkinLensError,
    TransportError,
    UpstreamError,
    UpstreamErrorCategory,
)
from skin_lens.images import validate_image
from skin_lens.normalization.engine import to_number, upstream_warnings
from skin_lens.providers.base import BaseProvider
from skin_lens.schema import AnalysisMode

BASIC_ATTRIBUTES = (
    "skinstatus,gender,age,emotion,beauty,headpose,facequality,blur,eyestatus,mouthstatus,smiling,eyegaze"
)

# mode -> (endpoint path, return_attributes)
MODE_ENDPOINTS: dict[str, tuple[str, str | None]] = {
    "basic": ("v3/detect", BASIC_ATTRIBUTES),
    "advanced": ("v1/skinanalyze", None),
}

HEADPOSE_LIMIT_DEGREES = 45.0
HEADPOSE_WARNING = "improper_headpose"

# Checked in order; INVALID_IMAGE_FACE_COUNT must come before its prefix INVALID_IMAGE_FACE.
_ERROR_TOKENS: tuple[tuple[str, UpstreamErrorCategory], ...] = (
    ("INVALID_IMAGE_FACE_COUNT", UpstreamErrorCategory.MULTIPLE_FACES_REJECTED),
    ("INVALID_IMAGE_FACE", UpstreamErrorCategory.IMAGE_QUALITY_REJECTED),
    ("NO_FACE_FOUND", UpstreamErrorCategory.NO_FACE_DETECTED),
    ("IMAGE_ERROR_UNSUPPORTED_FORMAT", UpstreamErrorCategory.UNSUPPORTED_FORMAT),
    ("IMAGE_FILE_TOO_LARGE", UpstreamErrorCategory.FILE_TOO_LARGE),
    ("INVALID_IMAGE_SIZE", UpstreamErrorCategory.INVALID_DIMENSIONS),
    ("AUTHENTICATION_ERROR", UpstreamErrorCategory.INVALID_CREDENTIALS),
    ("AUTHORIZATION_ERROR", UpstreamErrorCategory.INVALID_CREDENTIALS),
    ("INSUFFICIENT_PERMISSION", UpstreamErrorCategory.INSUFFICIENT_PERMISSION),
    ("API_NOT_FOUND", UpstreamErrorCategory.INSUFFICIENT_PERMISSION),
)


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: bytes


class UrllibFormClient:
    """Posts form-encoded requests and returns status and body for any status."""

    def post_form(self, url: str, fields: dict[str, str], *, timeout: float | None = None) -> HttpResponse:
        data = parse.urlencode(fields).encode("ascii")
        req = request.Request(
            url,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            method="POST",
        )
        kwargs = {"timeout": timeout} if timeout is not None else {}
        try:
            with request.urlopen(req, **kwargs) as resp:
                return HttpResponse(status=resp.status, body=resp.read())
        except error.HTTPError as exc:
            return HttpResponse(status=exc.code, body=exc.read() or b"")
        except (error.URLError, TimeoutError, ValueError) as exc:
            raise TransportError(f"Vision API request failed: {exc}") from exc


def map_upstream_error(status: int, error_message: str | None) -> UpstreamErrorCategory:
    """Map an upstream HTTP status and error message to an error category."""
    message = error_message or ""
    for token, category in _ERROR_TOKENS:
        if token in message:
            return category
    if status == 401:
        return UpstreamErrorCategory.INVALID_CREDENTIALS
    if status == 403:
        return UpstreamErrorCategory.INSUFFICIENT_PERMISSION
    if 400 <= status < 500:
        return UpstreamErrorCategory.UPSTREAM_BAD_REQUEST
    return UpstreamErrorCategory.UPSTREAM_UNAVAILABLE


def exceeds_headpose_limit(headpose: object) -> bool:
    if not isinstance(headpose, dict):
        return False
    for key in ("roll_angle", "yaw_angle", "pitch_angle"):
        angle = headpose.get(key)
        if isinstance(angle, bool) or not isinstance(angle, (int, float)):
            continue
        value = to_number(angle)
        if value is not None and abs(value) > HEADPOSE_LIMIT_DEGREES:
            return True
    return False


def _raise_for_category(category: UpstreamErrorCategory, *, status: int, detail: str | None) -> None:
    if category is UpstreamErrorCategory.INVALID_CREDENTIALS:
        raise AuthenticationError(upstream_status=status, detail=detail)
    raise UpstreamError(category, upstream_status=status, detail=detail)


def _decode_json(body: bytes) -> object:
    return json.loads(body.decode("utf-8"))


def _error_message_from_body(body: bytes) -> str | None:
    try:
        data = _decode_json(body)
    except (UnicodeDecodeError, ValueError):
        return None
    if isinstance(data, dict) and isinstance(data.get("error_message"), str):
        return data["error_message"]
    return None


def _first_face(payload: dict) -> dict | None:
    faces = payload.get("faces")
    if isinstance(faces, list) and faces and isinstance(faces[0], dict):
        return faces[0]
    return None


def _headpose(payload: dict, face: dict | None) -> object:
    if face is None:
        return payload.get("headpose")
    attributes = face.get("attributes")
    return attributes.get("headpose") if isinstance(attributes, dict) else None


class FacePlusPlusProvider(BaseProvider):
    """Face++ detect / skin-analyze provider."""

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        *,
        client=None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_sec: float | None = None,
        max_image_bytes: int = MAX_IMAGE_BYTES,
    ):
        self.logger = logging.getLogger(__name__)
        self.api_key = api_key
        self.api_secret = api_secret
        self.client = client or UrllibFormClient()
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self.max_image_bytes = max_image_bytes
        self._last_endpoint: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings, *, client=None) -> "FacePlusPlusProvider":
        return cls(
            api_key=settings.api_key,
            api_secret=settings.api_secret,
            client=client,
            base_url=settings.base_url,
            timeout_sec=settings.timeout_sec,
            max_image_bytes=settings.max_image_bytes,
        )

    def _require_credentials(self) -> tuple[str, str]:
        key, secret = self.api_key or "", self.api_secret or ""
        if len(key) < 10 or len(secret) < 10:
            raise AuthenticationError(
                detail="Missing or malformed API credentials. Set FACE_API_KEY and FACE_API_SECRET."
            )
        return key, secret

    def analyze(self, image: bytes, mime: str | None, mode: AnalysisMode) -> dict:
        """Validate the image and run one upstream request for ``mode``.

        Raises:
            ValidationError: If the image fails local type/size checks
            AuthenticationError: If credentials are missing or rejected
            UpstreamError: If the upstream reports an error
            TransportError: If the request fails or the body is not a JSON object
        """
        if mode not in MODE_ENDPOINTS:
            raise ValueError(f"Unsupported analysis mode: {mode}")

        validate_image(image, mime, max_bytes=self.max_image_bytes)
        api_key, api_secret = self._require_credentials()

        path, attributes = MODE_ENDPOINTS[mode]
        fields = {
            "api_key": api_key,
            "api_secret": api_secret,
            "image_base64": base64.b64encode(image).decode("ascii"),
        }
        if attributes:
            fields["return_landmark"] = "0"
            fields["return_attributes"] = attributes

        self._last_endpoint = path
        url = f"{self.base_url}/{path}"
        self.logger.debug("sending %d byte image to %s", len(image), path)

        try:
            response = self.client.post_form(url, fields, timeout=self.timeout_sec)
        except SkinLensError:
            raise
        except Exception as exc:
            raise TransportError(f"Vision API request failed: {exc}") from exc

        if not 200 <= response.status < 300:
            message = _error_message_from_body(response.body)
            category = map_upstream_error(response.status, message)
            self.logger.warning("vision api %s failed: status=%s category=%s", path, response.status, category.value)
            _raise_for_category(category, status=response.status, detail=message)

        try:
            payload = _decode_json(response.body)
        except (UnicodeDecodeError, ValueError) as exc:
            raise TransportError("Vision API returned a malformed response.") from exc
        if not isinstance(payload, dict):
            raise TransportError("Vision API returned a malformed response.")

        message = payload.get("error_message")
        if message:
            category = map_upstream_error(400, str(message))
            self.logger.warning("vision api %s returned error_message category=%s", path, category.value)
            _raise_for_category(category, status=response.status, detail=str(message))

        warnings = upstream_warnings(payload)
        face = _first_face(payload)
        if mode == "basic" and face is None:
            raise UpstreamError(UpstreamErrorCategory.NO_FACE_DETECTED, upstream_status=response.status)

        if exceeds_headpose_limit(_headpose(payload, face)) and HEADPOSE_WARNING not in warnings:
            warnings.append(HEADPOSE_WARNING)
        payload["warning"] = warnings
        return payload

    def get_analysis_metadata(self) -> dict[str, str]:
        metadata = {"provider": "faceplusplus"}
        if self._last_endpoint:
            metadata["endpoint"] = self._last_endpoint
        return metadata
