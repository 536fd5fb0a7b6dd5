"""
Cloudinary client for course and category thumbnails.

Uploads return the `{public_id, url}` pair stored on documents.
"""

import logging
from typing import Any

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

logger = logging.getLogger(__name__)


class MediaStorageError(Exception):
    """Raised when an upload or delete against the media host fails."""


class MediaStorageClient:
    """Upload and delete images on Cloudinary."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str):
        """
        Configure Cloudinary credentials.

        Raises:
            ValueError: If any credential is empty
        """
        if not cloud_name:
            raise ValueError("cloud_name is required")
        if not api_key:
            raise ValueError("api_key is required")
        if not api_secret:
            raise ValueError("api_secret is required")

        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    def upload(self, source: Any, folder: str) -> dict[str, str]:
        """
        Upload an image.

        Args:
            source: File path, URL, data URI or file-like object
            folder: Destination folder (e.g., 'categories', 'courses')

        Returns:
            Dict with 'public_id' and 'url' (secure HTTPS URL)

        Raises:
            MediaStorageError: On any failure
        """
        try:
            result = cloudinary.uploader.upload(source, folder=folder)
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise MediaStorageError(f"Upload failed: {e}")

        logger.info(f"Uploaded image {result['public_id']} to folder '{folder}'")
        return {"public_id": result["public_id"], "url": result["secure_url"]}

    def destroy(self, public_id: str) -> None:
        """
        Delete an image by public id.

        Raises:
            MediaStorageError: On any failure
        """
        try:
            cloudinary.uploader.destroy(public_id)
        except CloudinaryError as e:
            logger.error(f"Cloudinary delete failed for {public_id}: {e}")
            raise MediaStorageError(f"Delete failed: {e}")
        logger.info(f"Deleted image {public_id}")
