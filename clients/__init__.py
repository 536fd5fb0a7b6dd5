# Infrastructure clients
from clients.vault_client import get_vault_secret, reset_vault
from clients.mongo_client import MongoDBClient
from clients.redis_client import RedisClient
from clients.email_client import EmailGatewayClient, EmailGatewayError
from clients.media_client import MediaStorageClient, MediaStorageError
