"""
Generic resource service over one collection.

Bulk create (with thumbnail upload), single read, list with user/admin
visibility, update, and bulk delete. Parameterized by the stored model,
its create/update schemas, and a display name used in messages.
"""

import logging
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError
from pymongo import DESCENDING, ReturnDocument

from clients.media_client import MediaStorageClient, MediaStorageError
from clients.mongo_client import MongoDBClient
from core.exceptions import NotFoundError, UpstreamError, ValidationError
from utils.object_id import is_valid_object_id, serialize_document, to_object_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

USER_VISIBILITY = "user"
ADMIN_VISIBILITY = "admin"


def schema_error_message(error: SchemaError) -> str:
    """Flatten pydantic errors into one readable line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}" if location else str(item.get("msg")))
    return "; ".join(parts)


def upload_thumbnail(media: MediaStorageClient | None, data: dict, folder: str) -> None:
    """Replace a string thumbnail source in data with its hosted {public_id, url}.

    Already-hosted thumbnails (dicts) are left alone.

    Raises:
        UpstreamError: Upload failed or no media client configured
    """
    source = data.get("thumbnail")
    if not isinstance(source, str) or not source:
        return
    if media is None:
        raise UpstreamError("Image uploads are not configured")
    try:
        data["thumbnail"] = media.upload(source, folder=folder)
    except MediaStorageError as e:
        raise UpstreamError(f"Image upload failed: {e}")


class ResourceService(Generic[ModelT]):
    """Service for a generic resource collection."""

    def __init__(
        self,
        mongo: MongoDBClient,
        collection: str,
        model: type[ModelT],
        create_model: type[BaseModel],
        update_model: type[BaseModel] | None,
        name: str,
        media: MediaStorageClient | None = None,
        upload_folder: str | None = None,
        active_field: str = "is_active",
        plural: str | None = None,
    ):
        self._collection = mongo.collection(collection)
        self._model = model
        self._create_model = create_model
        self._update_model = update_model or create_model
        self.name = name
        self.plural = plural or f"{name}s"
        self._media = media
        self._upload_folder = upload_folder or collection
        self._active_field = active_field

    def _to_model(self, doc: dict) -> ModelT:
        return self._model.model_validate(serialize_document(doc))

    def _validate(self, schema: type[BaseModel], data: Any, partial: bool = True) -> dict:
        """Validate data against schema; partial dumps only the fields given."""
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=partial)
        try:
            return schema.model_validate(data).model_dump(mode="json", exclude_unset=partial)
        except SchemaError as e:
            raise ValidationError(schema_error_message(e))

    def _prepare_document(self, doc: dict) -> None:
        """Hook run on each validated document before insert."""
        upload_thumbnail(self._media, doc, self._upload_folder)

    def _require_id(self, resource_id: Any):
        if not is_valid_object_id(resource_id):
            raise ValidationError(f"Oops! It seems like the {self.name} ID provided is invalid")
        return to_object_id(resource_id)

    def create(self, items: Any) -> list[ModelT]:
        """
        Create resources in bulk.

        Every item is validated and every thumbnail uploaded before
        anything is inserted.

        Raises:
            ValidationError: Not a non-empty list, or an item is invalid
            UpstreamError: Thumbnail upload failed
        """
        if not isinstance(items, list) or not items:
            raise ValidationError(f"Please provide a non-empty list of {self.name} data.")

        # Defaults (e.g. is_active=False) are stored too
        docs = [self._validate(self._create_model, item, partial=False) for item in items]

        for doc in docs:
            self._prepare_document(doc)

        now = now_utc()
        for doc in docs:
            doc["created_at"] = now
            doc["updated_at"] = now

        result = self._collection.insert_many(docs)
        for doc, inserted_id in zip(docs, result.inserted_ids):
            doc["_id"] = inserted_id

        logger.info(f"Created {len(docs)} {self.name} document(s)")
        return [self._to_model(doc) for doc in docs]

    def get_single(self, resource_id: Any) -> ModelT:
        """
        Get resource by ID.

        Raises:
            ValidationError: Malformed id
            NotFoundError: No such resource
        """
        doc = self._collection.find_one({"_id": self._require_id(resource_id)})
        if doc is None:
            raise NotFoundError(f"Oh no! The {self.name} you're looking for doesn't exist.")
        return self._to_model(doc)

    def get_all(self, visibility: str = USER_VISIBILITY) -> list[ModelT]:
        """
        List resources, newest first.

        "user": only active resources, active flag hidden.
        "admin": everything, active flag included.

        Raises:
            ValidationError: Unknown visibility
            NotFoundError: Nothing to list
        """
        if visibility == USER_VISIBILITY:
            cursor = self._collection.find(
                {self._active_field: True},
                {self._active_field: 0},
            )
        elif visibility == ADMIN_VISIBILITY:
            cursor = self._collection.find({})
        else:
            raise ValidationError(f"Unknown visibility '{visibility}'")

        docs = list(cursor.sort("created_at", DESCENDING))
        if not docs:
            raise NotFoundError(
                f"Oops! It seems like there are no {self.plural} available at the moment. "
                "Please check back later or contact support for assistance."
            )
        return [self._to_model(doc) for doc in docs]

    def update(self, resource_id: Any, patch: Any) -> ModelT:
        """
        Update resource fields.

        Id is validated before storage is touched. A new string
        thumbnail is uploaded first.

        Raises:
            ValidationError: Malformed id or patch
            NotFoundError: No such resource
        """
        object_id = self._require_id(resource_id)
        changes = self._validate(self._update_model, patch)
        if not changes:
            raise ValidationError(f"Please provide at least one {self.name} field to update.")

        upload_thumbnail(self._media, changes, self._upload_folder)
        changes["updated_at"] = now_utc()

        doc = self._collection.find_one_and_update(
            {"_id": object_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise NotFoundError(f"No {self.name} document found with the provided ID.")
        return self._to_model(doc)

    def delete_many(self, ids: Any) -> int:
        """
        Delete resources by id.

        Returns:
            Number of documents deleted

        Raises:
            ValidationError: Not a non-empty list, or an id is malformed
            NotFoundError: Nothing matched
        """
        if not isinstance(ids, list) or not ids:
            raise ValidationError(f"Please provide a non-empty list of {self.name} IDs.")

        object_ids = [self._require_id(resource_id) for resource_id in ids]
        result = self._collection.delete_many({"_id": {"$in": object_ids}})

        if result.deleted_count == 0:
            raise NotFoundError(f"No {self.name} documents were deleted.")

        logger.info(f"Deleted {result.deleted_count} {self.name} document(s)")
        return result.deleted_count
