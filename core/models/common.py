"""Shared model pieces."""

from pydantic import BaseModel


class Image(BaseModel):
    """Hosted image reference as returned by the media host."""

    public_id: str | None = None
    url: str


# Inputs may carry a source to upload (path, URL, data URI) or an
# already-hosted image.
ImageInput = str | Image
