"""Category service."""

from clients.media_client import MediaStorageClient
from clients.mongo_client import MongoDBClient
from core.models import Category, CategoryCreate, CategoryUpdate
from core.services.resource_service import ResourceService


class CategoryService(ResourceService[Category]):
    """Course categories: bulk create, list, update, bulk delete."""

    def __init__(self, mongo: MongoDBClient, media: MediaStorageClient | None = None):
        super().__init__(
            mongo,
            collection="categories",
            model=Category,
            create_model=CategoryCreate,
            update_model=CategoryUpdate,
            name="Category",
            plural="Categories",
            media=media,
            upload_folder="categories",
        )
