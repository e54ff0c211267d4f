"""
Cloudinary image host adapter.

Content routes only talk to this adapter (via app.extensions["image_host"]),
so tests can swap in a recording fake.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, Optional

import cloudinary
import cloudinary.uploader

logger = logging.getLogger(__name__)

_PUBLIC_ID_RE = re.compile(r"/image/upload/(?:v\d+/)?(.+?)(?:\.\w+)?$")


def public_id_from_url(url: str | None) -> Optional[str]:
    """
    Extract the asset public id from a delivery URL, e.g.
    https://res.cloudinary.com/demo/image/upload/v1712/trekking/abc.jpg -> trekking/abc
    """
    if not url or not isinstance(url, str):
        return None
    match = _PUBLIC_ID_RE.search(url)
    return match.group(1) if match else None


class ImageHostError(Exception):
    pass


class CloudinaryImageHost:
    def __init__(self, cloud_name, api_key, api_secret, folder: str = "trekking"):
        self.folder = folder
        cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)

    @classmethod
    def from_config(cls, config) -> "CloudinaryImageHost":
        return cls(
            cloud_name=config.get("CLOUDINARY_CLOUD_NAME"),
            api_key=config.get("CLOUDINARY_API_KEY"),
            api_secret=config.get("CLOUDINARY_API_SECRET"),
            folder=config.get("UPLOAD_FOLDER", "trekking"),
        )

    def upload(self, file) -> Dict[str, Any]:
        """Upload an image file object; returns {url, publicId, width, height}."""
        try:
            result = cloudinary.uploader.upload(
                file,
                resource_type="image",
                folder=self.folder,
                transformation=[{"width": 1200, "height": 800, "crop": "limit", "quality": "auto"}],
            )
        except Exception as exc:
            raise ImageHostError(str(exc)) from exc
        return {
            "url": result.get("secure_url"),
            "publicId": result.get("public_id"),
            "width": result.get("width"),
            "height": result.get("height"),
        }

    def destroy(self, public_id: str) -> Dict[str, Any]:
        try:
            return cloudinary.uploader.destroy(public_id)
        except Exception as exc:
            raise ImageHostError(str(exc)) from exc


def discard_images(host, urls: Iterable[str | None]) -> None:
    """
    Best-effort removal of hosted images behind the given URLs.
    A failed deletion is logged and does not stop the caller's update.
    """
    for url in urls:
        public_id = public_id_from_url(url)
        if not public_id:
            continue
        try:
            host.destroy(public_id)
            logger.info("Deleted image from host: %s", public_id)
        except ImageHostError as exc:
            logger.warning("Failed to delete image %s from host: %s", public_id, exc)
