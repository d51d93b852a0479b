# ensport_backend/services/image_host.py
# Banner storage on Cloudinary through its signed REST upload API

import hashlib
import logging
import time
from typing import Dict, Optional

import requests

from ensport_backend.core.config import (
    CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET, CLOUDINARY_API_BASE_URL,
    HTTP_TIMEOUT_SECONDS, BANNER_FOLDER, BANNER_WIDTH, BANNER_HEIGHT, BANNER_QUALITY,
    MAX_IMAGE_SIZE, ALLOWED_IMAGE_TYPES,
)
from ensport_backend.core.errors import ValidationError, ImageHostError

logger = logging.getLogger(__name__)

BANNER_TRANSFORMATION = f"c_fill,h_{BANNER_HEIGHT},q_{BANNER_QUALITY},w_{BANNER_WIDTH}"


def validate_image(content_type: Optional[str], size: int):
    """Raise ValidationError unless the upload is an allowed image type within the size limit."""
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Invalid image file type. Allowed: JPEG, PNG, GIF, WebP")
    if size == 0:
        raise ValidationError("Please choose a file")
    if size > MAX_IMAGE_SIZE:
        raise ValidationError(f"Image file too large. Maximum size: {MAX_IMAGE_SIZE // (1024 * 1024)}MB")


def sign_params(params: Dict[str, str], api_secret: str) -> str:
    """
    Cloudinary request signature: SHA-1 of the sorted "key=value" pairs joined by "&",
    with the API secret appended.
    """
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] != "")
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryClient:
    """Minimal client for the image upload and destroy endpoints."""

    def __init__(self, cloud_name: str = CLOUDINARY_CLOUD_NAME, api_key: str = CLOUDINARY_API_KEY,
                 api_secret: str = CLOUDINARY_API_SECRET, base_url: str = CLOUDINARY_API_BASE_URL,
                 timeout: float = HTTP_TIMEOUT_SECONDS):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url
        self.timeout = timeout

    def _endpoint(self, action: str) -> str:
        return f"{self.base_url}/{self.cloud_name}/image/{action}"

    def _signed(self, params: Dict[str, str]) -> Dict[str, str]:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise ImageHostError("Image host is not configured")
        params = dict(params, timestamp=str(int(time.time())))
        params["signature"] = sign_params(params, self.api_secret)
        params["api_key"] = self.api_key
        return params

    def upload_image(self, data: bytes, filename: str, content_type: str,
                     folder: str = BANNER_FOLDER) -> Dict[str, str]:
        """
        Upload a banner, cropped to fill 1600x500 and stored as JPEG.
        Returns {"public_id", "url"}. Raises ImageHostError on failure.
        """
        params = self._signed({
            "folder": folder,
            "transformation": BANNER_TRANSFORMATION,
            "format": "jpg",
        })
        try:
            response = requests.post(
                self._endpoint("upload"),
                data=params,
                files={"file": (filename, data, content_type)},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise ImageHostError(f"Image upload failed: {e}") from e

        try:
            result = response.json()
            uploaded = {"public_id": result["public_id"], "url": result["secure_url"]}
        except (ValueError, KeyError) as e:
            raise ImageHostError(f"Image host returned an unreadable upload reply: {e}") from e
        logger.info("Uploaded %s as %s", filename, uploaded["public_id"])
        return uploaded

    def destroy(self, public_id: str) -> bool:
        """Delete an asset. Returns True when the host reports "ok"."""
        params = self._signed({"public_id": public_id})
        try:
            response = requests.post(self._endpoint("destroy"), data=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ImageHostError(f"Failed to delete {public_id}: {e}") from e
        try:
            return response.json().get("result") == "ok"
        except ValueError as e:
            raise ImageHostError(f"Image host returned an unreadable delete reply: {e}") from e


_default_client: Optional[CloudinaryClient] = None


def get_image_host() -> CloudinaryClient:
    """FastAPI dependency (overridden in tests)."""
    global _default_client
    if _default_client is None:
        _default_client = CloudinaryClient()
    return _default_client
